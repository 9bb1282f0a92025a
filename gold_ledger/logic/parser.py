# gold_ledger/logic/parser.py

import logging
from decimal import Decimal
from typing import Union
from pydantic import ValidationError, TypeAdapter

from gold_ledger.core.constants import OVERDRAFT_TOLERANCE
from gold_ledger.core.exceptions import MalformedRecordError
from gold_ledger.core.models.ledger import BuyLot

logger = logging.getLogger(__name__)

class LedgerParser:
    """
    Converts between the persisted ledger payload (a JSON array of lots, each
    embedding its sales) and validated BuyLot objects.
    Accepts the legacy field names (buy_price, sells, sell_price, ...) and
    numeric ids on input; always writes the current field names.
    """
    def __init__(self):
        self._ledger_adapter = TypeAdapter(list[BuyLot])

    def parse(self, payload: Union[str, bytes]) -> list[BuyLot]:
        """
        Parses the persisted payload.

        Raises:
            MalformedRecordError: the payload is not valid JSON or any record
                fails validation. The whole payload is rejected.
        """
        try:
            lots = self._ledger_adapter.validate_json(payload)
        except ValidationError as e:
            error_messages = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise MalformedRecordError(f"Validation error: {error_messages}") from e

        lot_ids = [lot.id for lot in lots]
        if len(set(lot_ids)) != len(lot_ids):
            raise MalformedRecordError("Validation error: duplicate lot ids in ledger payload")
        for lot in lots:
            self._check_lot_integrity(lot)

        logger.info(f"LedgerParser: Parsed {len(lots)} lots with {sum(len(lot.sales) for lot in lots)} sales.")
        return lots

    def _check_lot_integrity(self, lot: BuyLot):
        """
        Every sale must point back at the lot that holds it, and the lot must
        cover what was sold from it.
        """
        for sale in lot.sales:
            if sale.lot_id != lot.id:
                raise MalformedRecordError(
                    f"Validation error: sale '{sale.id}' is stored under lot '{lot.id}' but references lot '{sale.lot_id}'"
                )
        sold = sum((sale.quantity for sale in lot.sales), Decimal(0))
        if sold > lot.quantity + OVERDRAFT_TOLERANCE:
            raise MalformedRecordError(
                f"Validation error: lot '{lot.id}' has {sold} sold, more than its quantity ({lot.quantity})"
            )

    def serialize(self, lots: list[BuyLot]) -> str:
        return self._ledger_adapter.dump_json(lots).decode("utf-8")
