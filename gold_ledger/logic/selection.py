# gold_ledger/logic/selection.py

import logging
from decimal import Decimal
from typing import Iterable

from gold_ledger.core.enums.selection_state import SelectionState
from gold_ledger.core.exceptions import SelectionStateError
from gold_ledger.core.models.ledger import BuyLot
from gold_ledger.logic.accounting_engine import AccountingEngine

logger = logging.getLogger(__name__)

class SelectionStateMachine:
    """
    Tracks which lots the user picked for a batch sell.

    IDLE -> SELECTING_LOTS on the first toggle, SELECTING_LOTS ->
    BATCH_SELL_PENDING when the batch sell form opens, and back to IDLE once
    the batch sale succeeds. Fully sold lots can never be selected. The
    selection lives in memory only.
    """
    def __init__(self, engine: AccountingEngine):
        self._engine = engine
        self._state = SelectionState.IDLE
        self._selected: list[str] = []

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def selected_lot_ids(self) -> list[str]:
        return list(self._selected)

    def toggle(self, lot: BuyLot) -> bool:
        """
        Adds the lot to the selection, or removes it if already selected.
        Returns True when the lot is selected afterwards.
        """
        if self._state == SelectionState.BATCH_SELL_PENDING:
            raise SelectionStateError("Cannot change the selection while a batch sell is pending.")

        if lot.id in self._selected:
            self._selected.remove(lot.id)
            if not self._selected:
                self._state = SelectionState.IDLE
            logger.debug(f"Selection: Deselected lot {lot.id}. Now {self._selected}.")
            return False

        if self._engine.is_fully_sold(lot):
            raise SelectionStateError(f"Lot '{lot.id}' is fully sold and cannot be selected.")

        self._selected.append(lot.id)
        self._state = SelectionState.SELECTING_LOTS
        logger.debug(f"Selection: Selected lot {lot.id}. Now {self._selected}.")
        return True

    def selected_weight(self, lots: Iterable[BuyLot]) -> Decimal:
        """Total remaining weight of the selected lots."""
        selected = set(self._selected)
        return sum(
            (self._engine.remaining_quantity(lot) for lot in lots if lot.id in selected),
            Decimal(0)
        )

    def begin_batch_sell(self, lots: Iterable[BuyLot]) -> Decimal:
        """
        Opens the batch sell form and returns the quantity to pre-fill it with.
        """
        if self._state != SelectionState.SELECTING_LOTS:
            raise SelectionStateError(f"Cannot start a batch sell from state {self._state.value}.")
        self._state = SelectionState.BATCH_SELL_PENDING
        return self.selected_weight(lots)

    def complete(self):
        """
        Called after the batch sale was created: clears the selection.
        """
        if self._state != SelectionState.BATCH_SELL_PENDING:
            raise SelectionStateError(f"No batch sell is pending (state {self._state.value}).")
        self.clear()

    def cancel(self):
        if self._state != SelectionState.BATCH_SELL_PENDING:
            raise SelectionStateError(f"No batch sell is pending (state {self._state.value}).")
        self._state = SelectionState.SELECTING_LOTS if self._selected else SelectionState.IDLE

    def clear(self):
        self._selected = []
        self._state = SelectionState.IDLE

    def discard(self, lot_id: str):
        """
        Drops a lot that no longer exists from the selection.
        """
        if lot_id not in self._selected:
            return
        self._selected.remove(lot_id)
        if not self._selected:
            self._state = SelectionState.IDLE
