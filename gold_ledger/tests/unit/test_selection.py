# gold_ledger/tests/unit/test_selection.py

import pytest
from datetime import datetime
from decimal import Decimal

from gold_ledger.core.enums.selection_state import SelectionState
from gold_ledger.core.exceptions import SelectionStateError
from gold_ledger.core.models.ledger import BuyLot, Sale
from gold_ledger.logic.accounting_engine import AccountingEngine
from gold_ledger.logic.selection import SelectionStateMachine

def make_lot(lot_id, quantity="10", sold=None):
    sales = []
    if sold is not None:
        sales.append(Sale(
            id=f"{lot_id}-S", lot_id=lot_id, quantity=Decimal(sold), unit_price=Decimal("550"),
            sold_at=datetime(2024, 2, 1)
        ))
    return BuyLot(
        id=lot_id, quantity=Decimal(quantity), unit_cost=Decimal("500"),
        acquired_at=datetime(2024, 1, 1), sales=sales
    )

@pytest.fixture
def machine():
    return SelectionStateMachine(AccountingEngine())

@pytest.fixture
def lots():
    return [make_lot("A", "3"), make_lot("B", "7", sold="2"), make_lot("C", "1", sold="1")]

def test_starts_idle(machine):
    assert machine.state == SelectionState.IDLE
    assert machine.selected_lot_ids == []

def test_toggle_selects_and_deselects(machine, lots):
    assert machine.toggle(lots[0]) is True
    assert machine.state == SelectionState.SELECTING_LOTS
    assert machine.toggle(lots[1]) is True
    assert machine.selected_lot_ids == ["A", "B"]

    assert machine.toggle(lots[0]) is False
    assert machine.state == SelectionState.SELECTING_LOTS
    assert machine.toggle(lots[1]) is False
    assert machine.state == SelectionState.IDLE

def test_fully_sold_lot_cannot_be_selected(machine, lots):
    with pytest.raises(SelectionStateError):
        machine.toggle(lots[2])
    assert machine.state == SelectionState.IDLE
    assert machine.selected_lot_ids == []

def test_begin_batch_sell_prefills_remaining_weight(machine, lots):
    machine.toggle(lots[0])
    machine.toggle(lots[1])

    prefill = machine.begin_batch_sell(lots)

    assert prefill == Decimal("8") # 3 + (7 - 2)
    assert machine.state == SelectionState.BATCH_SELL_PENDING

def test_begin_batch_sell_requires_selection(machine, lots):
    with pytest.raises(SelectionStateError):
        machine.begin_batch_sell(lots)

def test_selection_frozen_while_pending(machine, lots):
    machine.toggle(lots[0])
    machine.begin_batch_sell(lots)

    with pytest.raises(SelectionStateError):
        machine.toggle(lots[1])
    with pytest.raises(SelectionStateError):
        machine.begin_batch_sell(lots)

def test_cancel_returns_to_selecting(machine, lots):
    machine.toggle(lots[0])
    machine.begin_batch_sell(lots)

    machine.cancel()

    assert machine.state == SelectionState.SELECTING_LOTS
    assert machine.selected_lot_ids == ["A"]

def test_complete_clears(machine, lots):
    machine.toggle(lots[0])
    machine.begin_batch_sell(lots)

    machine.complete()

    assert machine.state == SelectionState.IDLE
    assert machine.selected_lot_ids == []

def test_complete_and_cancel_require_pending(machine):
    with pytest.raises(SelectionStateError):
        machine.complete()
    with pytest.raises(SelectionStateError):
        machine.cancel()

def test_discard_deleted_lot(machine, lots):
    machine.toggle(lots[0])
    machine.toggle(lots[1])

    machine.discard("A")
    assert machine.selected_lot_ids == ["B"]
    machine.discard("unknown")
    machine.discard("B")
    assert machine.state == SelectionState.IDLE

def test_clear(machine, lots):
    machine.toggle(lots[0])
    machine.clear()
    assert machine.state == SelectionState.IDLE
    assert machine.selected_lot_ids == []
