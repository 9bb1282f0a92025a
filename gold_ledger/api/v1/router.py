# gold_ledger/api/v1/router.py

from fastapi import APIRouter
from gold_ledger.api.v1.batches import router as batches_router
from gold_ledger.api.v1.lots import router as lots_router
from gold_ledger.api.v1.portfolio import router as portfolio_router
from gold_ledger.api.v1.selection import router as selection_router

# Create a main router for API version 1
router = APIRouter()

router.include_router(lots_router, tags=["Lots"])
router.include_router(batches_router, tags=["Batches"])
router.include_router(portfolio_router, tags=["Portfolio"])
router.include_router(selection_router, tags=["Selection"])
