# gold_ledger/core/models/views.py

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from gold_ledger.core.enums.display_item_type import DisplayItemType
from gold_ledger.core.models.ledger import BuyLot, Sale

# Derived, read-only views. They are rebuilt from the ledger on every read and never persisted.

class SaleLine(BaseModel):
    """A sale together with its realized profit."""
    sale: Sale
    profit: Decimal


class LotBreakdown(BaseModel):
    """
    Expanded view of one lot: balances, profit and its sales grouped by batch.
    """
    lot: BuyLot
    sold_quantity: Decimal
    remaining_quantity: Decimal
    is_fully_sold: bool
    total_profit: Decimal
    batch_groups: dict[str, list[SaleLine]] = Field(default_factory=dict)
    individual_sales: list[SaleLine] = Field(default_factory=list)


class BatchMember(BaseModel):
    lot: BuyLot
    sales: list[SaleLine] = Field(default_factory=list, description="Sales of this lot belonging to the batch")


class BatchView(BaseModel):
    """
    Composite view of a batch sell across all of its member lots.
    total_quantity sums the members' full original quantities; the totals for
    profit and fee only include sales carrying this batch id.
    """
    batch_id: str
    members: list[BatchMember]
    sell_price: Decimal
    sold_at: datetime
    notes: Optional[str] = None
    total_profit: Decimal
    total_fee: Decimal
    total_quantity: Decimal
    weighted_buy_price: Decimal
    is_fully_sold: bool

    @property
    def lot_ids(self) -> list[str]:
        return [member.lot.id for member in self.members]


class DisplayItem(BaseModel):
    """One entry of the portfolio list: either a standalone lot or a batch."""
    item_type: DisplayItemType
    item_id: str
    timestamp: datetime
    is_fully_sold: bool
    lot: Optional[LotBreakdown] = None
    batch: Optional[BatchView] = None


class PortfolioStats(BaseModel):
    total_profit: Decimal = Field(..., description="Realized profit over every sale of every lot")
    active_weight: Decimal = Field(..., description="Weight still held across all lots")


class ProfitPoint(BaseModel):
    timestamp: datetime
    profit: Decimal
    lot_id: str
    sale_id: str
    batch_id: Optional[str] = None
