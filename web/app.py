"""
FastAPI application

Router registration and app settings.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adapters.db.sqlite_adapter import SQLiteAdapter, init_schema
from core.config.loader import get_settings
from core.constants import Defaults
from core.logging import setup_logging

# Logging (console + file)
setup_logging("web")

from web.routes import health, journal

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """App lifecycle"""
    settings = get_settings()

    # Startup - create the schema so read-only sessions can open the file
    async with SQLiteAdapter(settings.db_path) as db:
        await init_schema(db)

    logger.info(f"Web started: mode={settings.mode.value} db={settings.db_path}")

    yield

    logger.info("Web stopped")


app = FastAPI(
    title="Tontine Journal API",
    description="Accounting journal of the community finance back office",
    version=Defaults.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS (development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =========================================================================
# API routers
# =========================================================================

app.include_router(health.router)
app.include_router(journal.router)
