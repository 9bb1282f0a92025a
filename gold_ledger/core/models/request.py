# gold_ledger/core/models/request.py

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, condecimal, field_validator

from gold_ledger.core.models.ledger import blank_to_none


class LotInput(BaseModel):
    """
    Fields of a buy lot as entered by the user, for create-lot and edit-lot.
    """
    quantity: condecimal(gt=0) = Field(..., description="Weight bought")
    unit_cost: condecimal(gt=0) = Field(..., description="Price per unit of weight")
    acquired_at: datetime = Field(..., description="When the lot was bought")
    notes: Optional[str] = Field(None, description="Free text")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "quantity": "10",
                "unit_cost": "500",
                "acquired_at": "2024-03-01T10:30",
                "notes": "Bank bar"
            }
        },
        extra='ignore'
    )

    @field_validator("notes", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return blank_to_none(value)


class SaleInput(BaseModel):
    """
    Fields of an individual sale, for create-sale and edit-sale.
    """
    unit_price: condecimal(ge=0) = Field(..., description="Sale price per unit of weight")
    quantity: condecimal(gt=0) = Field(..., description="Weight sold")
    sold_at: datetime = Field(..., description="When the sale happened")
    fee: condecimal(ge=0) = Field(default=Decimal(0), description="Flat transaction cost")
    notes: Optional[str] = Field(None, description="Free text")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "unit_price": "550",
                "quantity": "4",
                "sold_at": "2024-04-02T15:00",
                "fee": "20",
                "notes": None
            }
        },
        extra='ignore'
    )

    @field_validator("notes", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return blank_to_none(value)


class BatchSaleTerms(BaseModel):
    """
    Terms shared by every sale of a batch sell. The total fee is split across lots.
    """
    unit_price: condecimal(ge=0) = Field(..., description="Shared sale price per unit of weight")
    sold_at: datetime = Field(..., description="Shared sale time")
    total_fee: condecimal(ge=0) = Field(default=Decimal(0), description="Fee for the whole batch")
    notes: Optional[str] = Field(None, description="Shared free text")

    model_config = ConfigDict(extra='ignore')

    @field_validator("notes", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        return blank_to_none(value)


class BatchSaleRequest(BatchSaleTerms):
    """
    Represents the payload of a create-batch-sale intent.
    """
    lot_ids: list[str] = Field(..., min_length=1, description="Lots to liquidate in one batch")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "lot_ids": ["a1b2c3", "d4e5f6"],
                "unit_price": "600",
                "sold_at": "2024-05-10T09:00",
                "total_fee": "10",
                "notes": "Sold at the counter"
            }
        },
        extra='ignore'
    )
