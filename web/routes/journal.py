"""
Accounting journal API routes

GET /api/comptable/journal  - unified journal (filters, pagination, totals)
GET /api/comptable/synthese - period financial summary
GET /api/comptable/etats-financiers - balance sheet, income statement, ratios
"""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from adapters.interfaces import IJournalSource
from core.journal import JournalQueryError
from web.dependencies import get_journal_source
from web.models.responses import (
    ErrorResponse,
    JournalResponse,
    StatementsResponse,
    SummaryResponse,
)
from web.services.journal_service import JournalService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/comptable", tags=["Comptabilite"])

INVALID_PARAMS_MESSAGE = "Paramètres invalides"
SERVER_ERROR_MESSAGE = "Erreur serveur"

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


def _parse_period(value: str | None) -> int | None:
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


@router.get("/journal", response_model=JournalResponse, responses=ERROR_RESPONSES)
async def get_journal(
    page: int | None = Query(default=None),
    limit: int | None = Query(default=None),
    type_filter: str | None = Query(default=None, alias="type"),
    categorie: str | None = Query(default=None),
    search: str | None = Query(default=None),
    date_debut: str | None = Query(default=None, alias="dateDebut"),
    date_fin: str | None = Query(default=None, alias="dateFin"),
    source: IJournalSource = Depends(get_journal_source),
):
    """Unified accounting journal

    limit is clamped to [10, 50]; the window defaults to the last 30 days.
    """
    service = JournalService(source)
    try:
        return await service.get_journal(
            page=page,
            limit=limit,
            type_filter=type_filter,
            category=categorie,
            search=search,
            date_start=date_debut,
            date_end=date_fin,
        )
    except JournalQueryError as e:
        logger.warning(f"Invalid journal parameters: {e}")
        return _error(400, INVALID_PARAMS_MESSAGE)
    except Exception:
        logger.exception("Journal build failed")
        return _error(500, SERVER_ERROR_MESSAGE)


@router.get("/synthese", response_model=SummaryResponse, responses=ERROR_RESPONSES)
async def get_summary(
    period: str | None = Query(default=None),
    source: IJournalSource = Depends(get_journal_source),
):
    """Financial summary (period: 7, 30, 90 or 365 days, default 30)"""
    service = JournalService(source)
    try:
        return await service.get_summary(_parse_period(period))
    except Exception:
        logger.exception("Summary build failed")
        return _error(500, SERVER_ERROR_MESSAGE)


@router.get("/etats-financiers", response_model=StatementsResponse, responses=ERROR_RESPONSES)
async def get_statements(
    source: IJournalSource = Depends(get_journal_source),
):
    """Balance sheet as of today, income statement since 1 January, ratios"""
    service = JournalService(source)
    try:
        return await service.get_statements()
    except Exception:
        logger.exception("Financial statements build failed")
        return _error(500, SERVER_ERROR_MESSAGE)
