# gold_ledger/api/v1/portfolio.py

from fastapi import APIRouter, Depends

from gold_ledger.api.v1.dependencies import get_ledger_service
from gold_ledger.core.models.views import DisplayItem, PortfolioStats, ProfitPoint
from gold_ledger.services.ledger_service import LedgerService

router = APIRouter(prefix="/portfolio")


@router.get("/stats", response_model=PortfolioStats, summary="Total realized profit and weight held")
async def portfolio_stats(service: LedgerService = Depends(get_ledger_service)) -> PortfolioStats:
    return service.portfolio_stats()


@router.get(
    "/items",
    response_model=list[DisplayItem],
    summary="Standalone lots and batches in display order",
    description="Open items first, then fully sold ones; newest first within each group."
)
async def display_items(service: LedgerService = Depends(get_ledger_service)) -> list[DisplayItem]:
    return service.display_items()


@router.get("/profit-series", response_model=list[ProfitPoint], summary="Per-sale profit ordered by sale time")
async def profit_series(service: LedgerService = Depends(get_ledger_service)) -> list[ProfitPoint]:
    return list(service.profit_series())
