# gold_ledger/api/v1/selection.py

from fastapi import APIRouter, Depends, status

from gold_ledger.api.v1.dependencies import get_ledger_service
from gold_ledger.core.models.request import BatchSaleTerms
from gold_ledger.core.models.response import BatchSaleResponse, SelectionResponse
from gold_ledger.services.ledger_service import LedgerService

router = APIRouter(prefix="/selection")


@router.get("", response_model=SelectionResponse)
async def get_selection(service: LedgerService = Depends(get_ledger_service)) -> SelectionResponse:
    return service.selection()


@router.delete("", response_model=SelectionResponse, summary="Clear the selection")
async def clear_selection(service: LedgerService = Depends(get_ledger_service)) -> SelectionResponse:
    return service.clear_selection()


@router.post("/lots/{lot_id}", response_model=SelectionResponse, summary="Select or deselect a lot")
async def toggle_lot(lot_id: str, service: LedgerService = Depends(get_ledger_service)) -> SelectionResponse:
    return service.toggle_selection(lot_id)


@router.post(
    "/batch-sell",
    response_model=SelectionResponse,
    summary="Open the batch sell form",
    description="Returns the total remaining weight of the selection as pre-fill quantity."
)
async def begin_batch_sell(service: LedgerService = Depends(get_ledger_service)) -> SelectionResponse:
    return service.begin_batch_sell()


@router.post(
    "/batch-sell/submit",
    response_model=BatchSaleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create the batch sale for the pending selection"
)
async def submit_batch_sell(
    terms: BatchSaleTerms,
    service: LedgerService = Depends(get_ledger_service)
) -> BatchSaleResponse:
    return service.submit_batch_sell(terms)


@router.post("/batch-sell/cancel", response_model=SelectionResponse, summary="Close the batch sell form")
async def cancel_batch_sell(service: LedgerService = Depends(get_ledger_service)) -> SelectionResponse:
    return service.cancel_batch_sell()
