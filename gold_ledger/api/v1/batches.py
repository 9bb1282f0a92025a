# gold_ledger/api/v1/batches.py

from fastapi import APIRouter, Depends, Query, status

from gold_ledger.api.v1.dependencies import get_ledger_service
from gold_ledger.core.models.request import BatchSaleRequest
from gold_ledger.core.models.response import BatchSaleResponse, DeletionResponse
from gold_ledger.core.models.views import BatchView
from gold_ledger.services.ledger_service import LedgerService

router = APIRouter(prefix="/batches")


@router.post(
    "",
    response_model=BatchSaleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sell the remaining balance of several lots in one batch",
    description="Each selected lot is liquidated at the shared price and time; "
                "the total fee is split across the lots by the configured policy. "
                "Fully sold lots are skipped."
)
async def create_batch_sale(
    request: BatchSaleRequest,
    service: LedgerService = Depends(get_ledger_service)
) -> BatchSaleResponse:
    return service.create_batch_sale(request)


@router.get("/{batch_id}", response_model=BatchView, summary="Aggregated view of a batch sell")
async def get_batch(batch_id: str, service: LedgerService = Depends(get_ledger_service)) -> BatchView:
    return service.batch_view(batch_id)


@router.delete(
    "/{batch_id}",
    response_model=DeletionResponse,
    summary="Delete a batch sell",
    description="Removes every sale of the batch; the lots reopen unless cascade_lots deletes them too."
)
async def delete_batch(
    batch_id: str,
    cascade_lots: bool = Query(False, description="Also delete the member lots"),
    service: LedgerService = Depends(get_ledger_service)
) -> DeletionResponse:
    return DeletionResponse(removed=service.delete_batch(batch_id, cascade_lots=cascade_lots))
