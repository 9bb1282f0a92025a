# gold_ledger/tests/unit/test_parser.py

import json
import pytest
from datetime import datetime
from decimal import Decimal

from gold_ledger.core.exceptions import MalformedRecordError
from gold_ledger.core.models.ledger import BuyLot, Sale
from gold_ledger.logic.parser import LedgerParser

@pytest.fixture
def parser():
    return LedgerParser()

def test_parse_current_payload(parser):
    payload = json.dumps([{
        "id": "L1", "quantity": "10", "unit_cost": "500", "acquired_at": "2024-01-01T09:00:00",
        "notes": "bar", "sales": [{
            "id": "S1", "lot_id": "L1", "unit_price": "550", "quantity": "4",
            "sold_at": "2024-02-01T09:00:00", "fee": "2.5", "batch_id": "batch-1"
        }]
    }])

    lots = parser.parse(payload)

    assert len(lots) == 1
    lot = lots[0]
    assert lot.quantity == Decimal("10")
    assert lot.acquired_at == datetime(2024, 1, 1, 9, 0)
    assert lot.sales[0].fee == Decimal("2.5")
    assert lot.sales[0].batch_id == "batch-1"

def test_parse_legacy_payload(parser):
    """Old records use buy_price/sells/sell_price names, numeric ids and Z timestamps."""
    payload = json.dumps([{
        "id": 1704100000000, "quantity": 3.5, "buy_price": 520, "buy_date": "2024-01-01T09:00:00.000Z",
        "notes": "", "sells": [{
            "id": 1706000000000.4217, "trade_id": 1704100000000, "sell_price": 610, "quantity": 1,
            "sell_date": "2024-02-01T10:30:00+02:00"
        }]
    }])

    lot = parser.parse(payload)[0]
    sale = lot.sales[0]

    assert lot.id == "1704100000000"
    assert lot.unit_cost == Decimal("520")
    assert lot.quantity == Decimal("3.5")
    assert lot.notes is None
    assert lot.acquired_at == datetime(2024, 1, 1, 9, 0)
    assert sale.lot_id == "1704100000000"
    assert sale.unit_price == Decimal("610")
    assert sale.fee == Decimal("0")
    assert sale.batch_id is None
    assert sale.sold_at == datetime(2024, 2, 1, 8, 30)

def test_parse_empty_array(parser):
    assert parser.parse("[]") == []

@pytest.mark.parametrize("payload, fragment", [
    ("not json", "Validation error"),
    ('{"id": "L1"}', "Validation error"),
    ('[{"id": "L1", "quantity": "-1", "unit_cost": "500", "acquired_at": "2024-01-01T00:00:00"}]', "0.quantity"),
    ('[{"id": "L1", "quantity": "1", "acquired_at": "2024-01-01T00:00:00"}]', "0.unit_cost"),
])
def test_parse_rejects_malformed(parser, payload, fragment):
    with pytest.raises(MalformedRecordError) as excinfo:
        parser.parse(payload)
    assert fragment in str(excinfo.value)

def test_parse_rejects_bad_sale(parser):
    payload = json.dumps([{
        "id": "L1", "quantity": "1", "unit_cost": "500", "acquired_at": "2024-01-01T00:00:00",
        "sales": [{"id": "S1", "lot_id": "L1", "unit_price": "550", "quantity": "0", "sold_at": "2024-02-01T00:00:00"}]
    }])
    with pytest.raises(MalformedRecordError) as excinfo:
        parser.parse(payload)
    assert "0.sales.0.quantity" in str(excinfo.value)

def test_parse_rejects_duplicate_lot_ids(parser):
    lot = {"id": "L1", "quantity": "1", "unit_cost": "500", "acquired_at": "2024-01-01T00:00:00"}
    with pytest.raises(MalformedRecordError) as excinfo:
        parser.parse(json.dumps([lot, lot]))
    assert "duplicate lot ids" in str(excinfo.value)

def test_serialize_writes_current_names(parser):
    lots = [BuyLot(
        id="L1", quantity=Decimal("2"), unit_cost=Decimal("500"), acquired_at=datetime(2024, 1, 1),
        sales=[Sale(id="S1", lot_id="L1", unit_price=Decimal("550"), quantity=Decimal("1"),
                    sold_at=datetime(2024, 2, 1))]
    )]

    data = json.loads(parser.serialize(lots))

    assert data[0]["unit_cost"] == "500"
    assert "buy_price" not in data[0]
    assert data[0]["sales"][0]["lot_id"] == "L1"
    assert parser.parse(parser.serialize(lots)) == lots

def test_parse_rejects_oversold_lot(parser):
    """A lot whose sales add up to more than its quantity is not loaded."""
    payload = json.dumps([{
        "id": "A", "quantity": "1", "unit_cost": "500", "acquired_at": "2024-01-01T00:00:00",
        "sales": [{"id": "S1", "lot_id": "A", "unit_price": "550", "quantity": "5", "sold_at": "2024-02-01T00:00:00"}]
    }])
    with pytest.raises(MalformedRecordError) as excinfo:
        parser.parse(payload)
    assert "lot 'A' has 5 sold" in str(excinfo.value)

def test_parse_accepts_sold_within_tolerance(parser):
    payload = json.dumps([{
        "id": "A", "quantity": "1", "unit_cost": "500", "acquired_at": "2024-01-01T00:00:00",
        "sales": [{"id": "S1", "lot_id": "A", "unit_price": "550", "quantity": "1.000005", "sold_at": "2024-02-01T00:00:00"}]
    }])
    assert len(parser.parse(payload)[0].sales) == 1

def test_parse_rejects_sale_under_wrong_lot(parser):
    payload = json.dumps([{
        "id": "A", "quantity": "10", "unit_cost": "500", "acquired_at": "2024-01-01T00:00:00",
        "sales": [{"id": "S1", "lot_id": "B", "unit_price": "550", "quantity": "1", "sold_at": "2024-02-01T00:00:00"}]
    }])
    with pytest.raises(MalformedRecordError) as excinfo:
        parser.parse(payload)
    assert "references lot 'B'" in str(excinfo.value)
