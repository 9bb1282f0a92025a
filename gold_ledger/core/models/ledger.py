# gold_ledger/core/models/ledger.py

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, condecimal, field_validator


def coerce_identifier(value: Any) -> Any:
    """Legacy payloads carry numeric ids (epoch millis, sometimes with a random fraction)."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class Sale(BaseModel):
    """
    Represents a single sell transaction recorded against exactly one buy lot.
    Sales that belong to a batch sell share unit_price, sold_at and notes,
    and carry the same batch_id.
    """
    id: str = Field(..., description="Unique identifier for the sale")
    lot_id: str = Field(
        ...,
        validation_alias=AliasChoices("lot_id", "trade_id"),
        description="Identifier of the buy lot this sale is recorded against"
    )
    unit_price: condecimal(ge=0) = Field(
        ...,
        validation_alias=AliasChoices("unit_price", "sell_price"),
        description="Sale price per unit of weight"
    )
    quantity: condecimal(gt=0) = Field(..., description="Weight sold from the lot")
    sold_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("sold_at", "sell_date"),
        description="When the sale happened (ISO format)"
    )
    fee: condecimal(ge=0) = Field(default=Decimal(0), description="Flat transaction cost of this sale")
    notes: Optional[str] = Field(None, description="Free text")
    batch_id: Optional[str] = Field(None, description="Shared identifier of a batch sell, if any")

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True
    )

    @field_validator("id", "lot_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        return coerce_identifier(value)

    @field_validator("notes", "batch_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return blank_to_none(value)

    @field_validator("sold_at")
    @classmethod
    def _normalise_sold_at(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    @property
    def is_batch_member(self) -> bool:
        return self.batch_id is not None


class BuyLot(BaseModel):
    """
    Represents one purchase of gold: the unit of cost basis.
    The lot owns its sales; deleting the lot deletes them too.
    """
    id: str = Field(..., description="Unique identifier for the lot")
    quantity: condecimal(gt=0) = Field(..., description="Original weight bought")
    unit_cost: condecimal(gt=0) = Field(
        ...,
        validation_alias=AliasChoices("unit_cost", "buy_price"),
        description="Price per unit of weight at acquisition"
    )
    acquired_at: datetime = Field(
        ...,
        validation_alias=AliasChoices("acquired_at", "buy_date"),
        description="When the lot was bought (ISO format)"
    )
    notes: Optional[str] = Field(None, description="Free text")
    sales: list[Sale] = Field(
        default_factory=list,
        validation_alias=AliasChoices("sales", "sells"),
        description="Sales recorded against this lot, most recent first"
    )

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return coerce_identifier(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return blank_to_none(value)

    @field_validator("acquired_at")
    @classmethod
    def _normalise_acquired_at(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    def find_sale(self, sale_id: str) -> Optional[Sale]:
        return next((sale for sale in self.sales if sale.id == sale_id), None)

    def first_batch_sale(self) -> Optional[Sale]:
        """The first sale carrying a batch id decides which batch the lot is grouped under."""
        return next((sale for sale in self.sales if sale.batch_id), None)
