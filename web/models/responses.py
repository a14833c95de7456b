"""
API response models

Pydantic models used as FastAPI response_model. Field names are the
wire keys consumed by the accounting front end. Money is serialized as
JSON numbers.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response"""

    status: str = Field(default="ok", description="Service status")
    mode: str = Field(..., description="Application mode (production/demo)")
    version: str = Field(..., description="Application version")


class ErrorResponse(BaseModel):
    """Error body (400/500)"""

    success: bool = Field(default=False)
    message: str = Field(..., description="Generic error message")


# =========================================================================
# Journal
# =========================================================================

class JournalEntryResponse(BaseModel):
    """One journal line"""

    id: str = Field(..., description="Entry id (category prefix + source id)")
    sourceId: int = Field(..., description="Id of the source record")
    date: str = Field(..., description="Event date (ISO-8601 UTC)")
    type: str = Field(..., description="ENCAISSEMENT / DECAISSEMENT / ACTIVITE")
    categorie: str = Field(..., description="Journal category")
    libelle: str = Field(..., description="Human readable label")
    montant: float = Field(..., ge=0, description="Amount (never negative)")
    reference: str = Field(..., description="Accounting reference")


class JournalTotalsResponse(BaseModel):
    """Totals over the whole filtered set"""

    encaissements: float
    decaissements: float
    activite: float
    net: float = Field(..., description="encaissements - decaissements")


class JournalMetaResponse(BaseModel):
    """Pagination and effective date window"""

    total: int
    page: int
    limit: int
    totalPages: int
    dateDebut: str
    dateFin: str


class JournalResponse(BaseModel):
    """Journal page"""

    success: bool = True
    data: list[JournalEntryResponse]
    totaux: JournalTotalsResponse
    meta: JournalMetaResponse


# =========================================================================
# Summary
# =========================================================================

class CategoryTotalResponse(BaseModel):
    montant: float
    count: int


class PeriodResponse(BaseModel):
    debut: str
    fin: str
    jours: int


class InflowSummaryResponse(BaseModel):
    cotisations: CategoryTotalResponse
    contributions_tontines: CategoryTotalResponse
    remboursements_credits: CategoryTotalResponse
    total: float


class ActivitySummaryResponse(BaseModel):
    ventes: CategoryTotalResponse


class OutflowSummaryResponse(BaseModel):
    approvisionnements: CategoryTotalResponse
    credits_decaisses: CategoryTotalResponse
    pots_tontines: CategoryTotalResponse
    total: float


class DailyFlowResponse(BaseModel):
    date: str = Field(..., description="Calendar day (YYYY-MM-DD)")
    encaissements: float
    decaissements: float


class StockSnapshotResponse(BaseModel):
    valeur: float
    nombreProduits: int


class SnapshotResponse(BaseModel):
    stock: StockSnapshotResponse
    membresActifs: int
    tontinesActives: int
    creditsEnCours: int


class SummaryDataResponse(BaseModel):
    """Financial summary of one period"""

    periode: PeriodResponse
    encaissements: InflowSummaryResponse
    activiteProduits: ActivitySummaryResponse
    decaissements: OutflowSummaryResponse
    resultat_net: float
    taux_utilisation: int = Field(..., description="Outflow as a percentage of inflow")
    evolution: list[DailyFlowResponse]
    snapshot: SnapshotResponse


class SummaryResponse(BaseModel):
    success: bool = True
    data: SummaryDataResponse


# =========================================================================
# Financial statements
# =========================================================================

class BalanceLineResponse(BaseModel):
    valeur: float
    count: int


class AssetsResponse(BaseModel):
    stock: StockSnapshotResponse
    creancesCotisations: BalanceLineResponse = Field(..., description="Pending dues")
    creditsAlimentaires: BalanceLineResponse = Field(..., description="Remaining food credit balances")
    creditsFinanciers: BalanceLineResponse = Field(..., description="Unrepaid financial credits")
    total: float


class AllocatedCeilingsResponse(BaseModel):
    valeur: float


class LiabilitiesResponse(BaseModel):
    engagementsTontines: BalanceLineResponse = Field(..., description="Pots of cycles in progress")
    creditsAlimAlloues: AllocatedCeilingsResponse
    capitauxPropres: float = Field(..., ge=0, description="Assets net of commitments, floored at 0")
    total: float


class BalanceSheetResponse(BaseModel):
    actif: AssetsResponse
    passif: LiabilitiesResponse


class IncomeResponse(BaseModel):
    ventes: float
    cotisationsCollectees: float
    contributionsTontines: float
    remboursementsCredits: float
    total: float


class ExpensesResponse(BaseModel):
    approvisionnements: float
    creditsDecaisses: float
    potsTontinesVerses: float
    total: float


class IncomeStatementResponse(BaseModel):
    produits: IncomeResponse
    charges: ExpensesResponse
    resultatNet: float


class RatiosResponse(BaseModel):
    tauxRecouvrement: int
    tauxUtilisationCreditsAlim: int
    margeNette: int
    ratioCharges: int


class StatementsDataResponse(BaseModel):
    """Balance sheet today, income statement since 1 January"""

    annee: int
    bilan: BalanceSheetResponse
    compteResultat: IncomeStatementResponse
    ratios: RatiosResponse


class StatementsResponse(BaseModel):
    success: bool = True
    data: StatementsDataResponse
