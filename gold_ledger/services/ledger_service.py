# gold_ledger/services/ledger_service.py

import logging
from decimal import Decimal
from typing import Optional

from gold_ledger.core.constants import DEFAULT_STORAGE_KEY
from gold_ledger.core.enums.selection_state import SelectionState
from gold_ledger.core.exceptions import BatchMemberError, MalformedRecordError, NotFoundError, SelectionStateError
from gold_ledger.core.models.ledger import BuyLot, Sale
from gold_ledger.core.models.request import BatchSaleRequest, BatchSaleTerms, LotInput, SaleInput
from gold_ledger.core.models.response import BatchSaleResponse, SelectionResponse
from gold_ledger.core.models.views import BatchView, DisplayItem, LotBreakdown, PortfolioStats
from gold_ledger.logic.accounting_engine import AccountingEngine, ProfitSeries
from gold_ledger.logic.batch_aggregator import BatchAggregator
from gold_ledger.logic.identifiers import new_batch_id, new_record_id
from gold_ledger.logic.ledger_store import LedgerStore
from gold_ledger.logic.parser import LedgerParser
from gold_ledger.logic.selection import SelectionStateMachine
from gold_ledger.logic.sorter import DisplaySorter
from gold_ledger.storage.json_store import KeyValueStorage

logger = logging.getLogger(__name__)

class LedgerService:
    """
    Entry point for every user intent on the ledger.

    Mutations are validated by the AccountingEngine against the current state,
    applied to the LedgerStore, then mirrored to storage. Views are rebuilt from
    the store on every call.
    """
    def __init__(
        self,
        store: LedgerStore,
        engine: AccountingEngine,
        aggregator: BatchAggregator,
        sorter: DisplaySorter,
        parser: LedgerParser,
        storage: Optional[KeyValueStorage] = None,
        storage_key: str = DEFAULT_STORAGE_KEY
    ):
        self._store = store
        self._engine = engine
        self._aggregator = aggregator
        self._sorter = sorter
        self._parser = parser
        self._storage = storage
        self._storage_key = storage_key
        self._selection = SelectionStateMachine(engine)

    # --- Persistence ---

    def load(self) -> int:
        """
        Restores the ledger from storage. An unreadable payload is logged and
        discarded, leaving an empty ledger. Returns the number of lots loaded.
        """
        if self._storage is None:
            return 0
        try:
            payload = self._storage.get(self._storage_key)
            lots = self._parser.parse(payload) if payload else []
        except MalformedRecordError as e:
            logger.error(f"Discarding unreadable ledger under '{self._storage_key}': {e}")
            lots = []
        self._store.replace_all(lots)
        self._selection.clear()
        logger.info(f"Loaded {len(lots)} lots from storage key '{self._storage_key}'.")
        return len(lots)

    def _persist(self):
        # Fire-and-forget: a failed write never rolls back the in-memory ledger.
        if self._storage is None:
            return
        try:
            self._storage.set(self._storage_key, self._parser.serialize(self._store.list_lots()))
        except OSError as e:
            logger.error(f"Failed to persist ledger under '{self._storage_key}': {e}")

    # --- Lot intents ---

    def create_lot(self, fields: LotInput) -> BuyLot:
        lot = BuyLot(id=new_record_id(), **fields.model_dump())
        self._store.upsert_lot(lot)
        logger.info(f"Created lot {lot.id}: {lot.quantity} @ {lot.unit_cost}.")
        self._persist()
        return lot

    def edit_lot(self, lot_id: str, fields: LotInput) -> BuyLot:
        """
        Replaces the lot's fields; its sales are kept. The new quantity must
        still cover what has been sold.
        """
        existing = self._store.get_lot(lot_id)
        self._engine.validate_lot_quantity(existing, fields.quantity)
        updated = BuyLot(id=existing.id, sales=existing.sales, **fields.model_dump())
        self._store.upsert_lot(updated)
        logger.info(f"Edited lot {lot_id}.")
        self._persist()
        return updated

    def delete_lot(self, lot_id: str):
        self._store.delete_lot(lot_id)
        self._selection.discard(lot_id)
        logger.info(f"Deleted lot {lot_id} with its sales.")
        self._persist()

    # --- Sale intents ---

    def create_sale(self, lot_id: str, fields: SaleInput) -> Sale:
        lot = self._store.get_lot(lot_id)
        self._engine.validate_sale(lot, fields.quantity)
        sale = Sale(id=new_record_id(), lot_id=lot_id, **fields.model_dump())
        self._store.upsert_sale(lot_id, sale)
        logger.info(f"Recorded sale {sale.id} of {sale.quantity} from lot {lot_id}.")
        self._persist()
        return sale

    def edit_sale(self, lot_id: str, sale_id: str, fields: SaleInput) -> Sale:
        """
        Replaces an individual sale. Batch members can only change as a whole batch.
        """
        lot = self._store.get_lot(lot_id)
        existing = self._store.get_sale(lot_id, sale_id)
        if existing.is_batch_member:
            raise BatchMemberError(
                f"Sale '{sale_id}' belongs to batch '{existing.batch_id}' and cannot be edited on its own."
            )
        self._engine.validate_sale(lot, fields.quantity, excluding_sale_id=sale_id)
        updated = Sale(id=existing.id, lot_id=lot_id, **fields.model_dump())
        self._store.upsert_sale(lot_id, updated)
        logger.info(f"Edited sale {sale_id} of lot {lot_id}.")
        self._persist()
        return updated

    def delete_sale(self, lot_id: str, sale_id: str):
        self._store.delete_sale(lot_id, sale_id)
        logger.info(f"Deleted sale {sale_id} of lot {lot_id}.")
        self._persist()

    # --- Batch intents ---

    def create_batch_sale(self, request: BatchSaleRequest) -> BatchSaleResponse:
        """
        Liquidates the remaining balance of every selected lot in one batch.
        Unknown lot ids reject the whole batch before anything is written.
        """
        selected_lots = [self._store.get_lot(lot_id) for lot_id in dict.fromkeys(request.lot_ids)]
        batch_id = new_batch_id()
        terms = BatchSaleTerms.model_validate(request.model_dump(exclude={"lot_ids"}))
        sales = self._aggregator.plan_batch_sale(selected_lots, terms, batch_id)
        for sale in sales:
            self._store.upsert_sale(sale.lot_id, sale)
        logger.info(f"Created batch {batch_id} with {len(sales)} sales over {len(selected_lots)} selected lots.")
        if sales:
            self._persist()
        return BatchSaleResponse(batch_id=batch_id, sales=sales)

    def delete_batch(self, batch_id: str, cascade_lots: bool = False) -> int:
        """
        Deletes every sale of the batch across all lots. The lots reopen as
        standalone items unless cascade_lots also deletes them.
        Returns the number of sales (or lots, when cascading) removed.
        """
        member_ids = [
            lot.id for lot in self._store.list_lots()
            if any(sale.batch_id == batch_id for sale in lot.sales)
        ]
        if not member_ids:
            raise NotFoundError("batch", batch_id)

        if cascade_lots:
            for lot_id in member_ids:
                self._store.delete_lot(lot_id)
                self._selection.discard(lot_id)
            removed = len(member_ids)
            logger.info(f"Deleted batch {batch_id} together with its {removed} lots.")
        else:
            removed = self._store.delete_sales_by_batch(batch_id)
            logger.info(f"Deleted {removed} sales of batch {batch_id}; {len(member_ids)} lots reopened.")
        self._persist()
        return removed

    def delete_lot_batch_sales(self, lot_id: str, batch_id: str) -> int:
        """
        Removes the sales of one batch from a single lot, leaving the other members untouched.
        """
        removed = self._store.delete_sales_by_batch(batch_id, lot_id=lot_id)
        if removed == 0:
            raise NotFoundError("batch", batch_id)
        logger.info(f"Deleted {removed} sales of batch {batch_id} from lot {lot_id}.")
        self._persist()
        return removed

    # --- Selection intents ---

    def selection(self) -> SelectionResponse:
        return SelectionResponse(
            state=self._selection.state,
            selected_lot_ids=self._selection.selected_lot_ids,
            prefill_quantity=self._selection.selected_weight(self._store.list_lots()),
        )

    def toggle_selection(self, lot_id: str) -> SelectionResponse:
        self._selection.toggle(self._store.get_lot(lot_id))
        return self.selection()

    def begin_batch_sell(self) -> SelectionResponse:
        prefill = self._selection.begin_batch_sell(self._store.list_lots())
        logger.debug(f"Batch sell pending for {self._selection.selected_lot_ids}, prefill {prefill}.")
        return self.selection()

    def submit_batch_sell(self, terms: BatchSaleTerms) -> BatchSaleResponse:
        """
        Creates the batch sale for the pending selection, then clears the selection.
        On failure the selection stays pending so the user can correct and resubmit.
        """
        if self._selection.state != SelectionState.BATCH_SELL_PENDING:
            raise SelectionStateError(f"No batch sell is pending (state {self._selection.state.value}).")
        request = BatchSaleRequest(lot_ids=self._selection.selected_lot_ids, **terms.model_dump())
        response = self.create_batch_sale(request)
        self._selection.complete()
        return response

    def cancel_batch_sell(self) -> SelectionResponse:
        self._selection.cancel()
        return self.selection()

    def clear_selection(self) -> SelectionResponse:
        self._selection.clear()
        return self.selection()

    # --- Views ---

    def list_lots(self) -> list[BuyLot]:
        return self._store.list_lots()

    def get_lot(self, lot_id: str) -> BuyLot:
        return self._store.get_lot(lot_id)

    def portfolio_stats(self) -> PortfolioStats:
        return self._engine.portfolio_stats(self._store.list_lots())

    def display_items(self) -> list[DisplayItem]:
        items = self._aggregator.build_display_items(self._store.list_lots())
        return self._sorter.sort_display_items(items)

    def profit_series(self) -> ProfitSeries:
        return self._engine.profit_time_series(self._store.list_lots())

    def lot_breakdown(self, lot_id: str) -> LotBreakdown:
        return self._engine.lot_breakdown(self._store.get_lot(lot_id))

    def batch_view(self, batch_id: str) -> BatchView:
        return self._aggregator.get_batch_view(self._store.list_lots(), batch_id)

    def remaining_quantity(self, lot_id: str) -> Decimal:
        return self._engine.remaining_quantity(self._store.get_lot(lot_id))
