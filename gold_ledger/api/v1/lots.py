# gold_ledger/api/v1/lots.py

from fastapi import APIRouter, Depends, status

from gold_ledger.api.v1.dependencies import get_ledger_service
from gold_ledger.core.models.ledger import BuyLot, Sale
from gold_ledger.core.models.request import LotInput, SaleInput
from gold_ledger.core.models.response import DeletionResponse
from gold_ledger.core.models.views import LotBreakdown
from gold_ledger.services.ledger_service import LedgerService

router = APIRouter(prefix="/lots")


@router.get("", response_model=list[BuyLot], summary="List buy lots, newest first")
async def list_lots(service: LedgerService = Depends(get_ledger_service)) -> list[BuyLot]:
    return service.list_lots()


@router.post("", response_model=BuyLot, status_code=status.HTTP_201_CREATED, summary="Record a buy lot")
async def create_lot(
    fields: LotInput,
    service: LedgerService = Depends(get_ledger_service)
) -> BuyLot:
    return service.create_lot(fields)


@router.put(
    "/{lot_id}",
    response_model=BuyLot,
    summary="Replace the fields of a buy lot",
    description="Sales are kept. Rejected with 422 if the new quantity is below what was already sold."
)
async def edit_lot(
    lot_id: str,
    fields: LotInput,
    service: LedgerService = Depends(get_ledger_service)
) -> BuyLot:
    return service.edit_lot(lot_id, fields)


@router.delete("/{lot_id}", response_model=DeletionResponse, summary="Delete a lot and all of its sales")
async def delete_lot(lot_id: str, service: LedgerService = Depends(get_ledger_service)) -> DeletionResponse:
    service.delete_lot(lot_id)
    return DeletionResponse(removed=1)


@router.get("/{lot_id}/breakdown", response_model=LotBreakdown, summary="Lot balances with grouped sales")
async def lot_breakdown(lot_id: str, service: LedgerService = Depends(get_ledger_service)) -> LotBreakdown:
    return service.lot_breakdown(lot_id)


@router.post(
    "/{lot_id}/sales",
    response_model=Sale,
    status_code=status.HTTP_201_CREATED,
    summary="Sell part or all of a lot",
    description="Rejected with 422 when the quantity exceeds the lot's remaining balance."
)
async def create_sale(
    lot_id: str,
    fields: SaleInput,
    service: LedgerService = Depends(get_ledger_service)
) -> Sale:
    return service.create_sale(lot_id, fields)


@router.put(
    "/{lot_id}/sales/{sale_id}",
    response_model=Sale,
    summary="Replace an individual sale",
    description="Batch members cannot be edited on their own (409)."
)
async def edit_sale(
    lot_id: str,
    sale_id: str,
    fields: SaleInput,
    service: LedgerService = Depends(get_ledger_service)
) -> Sale:
    return service.edit_sale(lot_id, sale_id, fields)


@router.delete("/{lot_id}/sales/{sale_id}", response_model=DeletionResponse, summary="Delete one sale")
async def delete_sale(
    lot_id: str,
    sale_id: str,
    service: LedgerService = Depends(get_ledger_service)
) -> DeletionResponse:
    service.delete_sale(lot_id, sale_id)
    return DeletionResponse(removed=1)


@router.delete(
    "/{lot_id}/batches/{batch_id}",
    response_model=DeletionResponse,
    summary="Remove one lot's sales of a batch"
)
async def delete_lot_batch_sales(
    lot_id: str,
    batch_id: str,
    service: LedgerService = Depends(get_ledger_service)
) -> DeletionResponse:
    return DeletionResponse(removed=service.delete_lot_batch_sales(lot_id, batch_id))
