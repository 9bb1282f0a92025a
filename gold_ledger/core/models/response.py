# gold_ledger/core/models/response.py

from decimal import Decimal
from pydantic import BaseModel, Field

from gold_ledger.core.enums.selection_state import SelectionState
from gold_ledger.core.models.ledger import Sale

class ErrorResponse(BaseModel):
    """
    Body returned when an intent is rejected. The ledger is left unchanged.
    """
    error_type: str = Field(..., description="Name of the ledger error, e.g. OverdraftError")
    detail: str = Field(..., description="Human readable reason")


class BatchSaleResponse(BaseModel):
    batch_id: str = Field(..., description="Identifier shared by the created sales")
    sales: list[Sale] = Field(
        default_factory=list,
        description="One sale per liquidated lot; fully sold lots are skipped."
    )


class DeletionResponse(BaseModel):
    removed: int = Field(..., description="Number of records removed")


class SelectionResponse(BaseModel):
    """
    Current state of the batch-sell selection.
    """
    state: SelectionState
    selected_lot_ids: list[str] = Field(default_factory=list)
    prefill_quantity: Decimal = Field(
        default=Decimal(0),
        description="Total remaining weight of the selected lots"
    )
