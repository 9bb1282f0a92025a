# gold_ledger/logic/ledger_store.py

import logging
from typing import Optional

from gold_ledger.core.exceptions import NotFoundError
from gold_ledger.core.models.ledger import BuyLot, Sale

logger = logging.getLogger(__name__)

class LedgerStore:
    """
    In-memory holder of the buy lots and the sales they own.
    Pure storage: business rules are checked by the AccountingEngine before
    any mutation reaches this class.
    """
    def __init__(self, lots: Optional[list[BuyLot]] = None):
        self._lots: list[BuyLot] = list(lots) if lots else []

    def list_lots(self) -> list[BuyLot]:
        """
        Returns the lots in insertion order, newest first.
        """
        return list(self._lots)

    def replace_all(self, lots: list[BuyLot]):
        self._lots = list(lots)
        logger.debug(f"LedgerStore: Replaced ledger with {len(self._lots)} lots.")

    def get_lot(self, lot_id: str) -> BuyLot:
        for lot in self._lots:
            if lot.id == lot_id:
                return lot
        raise NotFoundError("lot", lot_id)

    def get_sale(self, lot_id: str, sale_id: str) -> Sale:
        sale = self.get_lot(lot_id).find_sale(sale_id)
        if sale is None:
            raise NotFoundError("sale", sale_id, parent_id=lot_id)
        return sale

    def upsert_lot(self, lot: BuyLot):
        """
        Replaces the lot with the same id in place, or prepends a new one.
        """
        for index, existing in enumerate(self._lots):
            if existing.id == lot.id:
                self._lots[index] = lot
                logger.debug(f"LedgerStore: Replaced lot {lot.id}.")
                return
        self._lots.insert(0, lot)
        logger.debug(f"LedgerStore: Added lot {lot.id}.")

    def delete_lot(self, lot_id: str):
        """
        Deletes a lot together with all of its sales.
        """
        lot = self.get_lot(lot_id)
        self._lots = [existing for existing in self._lots if existing.id != lot_id]
        logger.debug(f"LedgerStore: Deleted lot {lot_id} and its {len(lot.sales)} sales.")

    def upsert_sale(self, lot_id: str, sale: Sale):
        lot = self.get_lot(lot_id)
        for index, existing in enumerate(lot.sales):
            if existing.id == sale.id:
                lot.sales[index] = sale
                logger.debug(f"LedgerStore: Replaced sale {sale.id} of lot {lot_id}.")
                return
        lot.sales.insert(0, sale)
        logger.debug(f"LedgerStore: Added sale {sale.id} to lot {lot_id}.")

    def delete_sale(self, lot_id: str, sale_id: str):
        lot = self.get_lot(lot_id)
        self.get_sale(lot_id, sale_id)
        lot.sales = [sale for sale in lot.sales if sale.id != sale_id]
        logger.debug(f"LedgerStore: Deleted sale {sale_id} of lot {lot_id}.")

    def delete_sales_by_batch(self, batch_id: str, lot_id: Optional[str] = None) -> int:
        """
        Removes every sale carrying batch_id, optionally only from one lot.
        The lots themselves are kept. Returns the number of sales removed.
        """
        lots = [self.get_lot(lot_id)] if lot_id is not None else self._lots
        removed = 0
        for lot in lots:
            kept = [sale for sale in lot.sales if sale.batch_id != batch_id]
            removed += len(lot.sales) - len(kept)
            lot.sales = kept
        logger.debug(f"LedgerStore: Removed {removed} sales of batch {batch_id}.")
        return removed
