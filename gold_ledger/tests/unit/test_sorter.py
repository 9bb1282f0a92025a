# gold_ledger/tests/unit/test_sorter.py

import pytest
from datetime import datetime

from gold_ledger.core.enums.display_item_type import DisplayItemType
from gold_ledger.core.models.views import DisplayItem
from gold_ledger.logic.sorter import DisplaySorter

@pytest.fixture
def sorter():
    return DisplaySorter()

def item(item_id, timestamp, is_fully_sold=False, item_type=DisplayItemType.LOT):
    return DisplayItem(item_type=item_type, item_id=item_id, timestamp=timestamp, is_fully_sold=is_fully_sold)

def test_open_items_before_closed(sorter):
    """A fully sold item always sinks below open ones, however recent."""
    items = [
        item("closed_new", datetime(2024, 6, 1), is_fully_sold=True),
        item("open_old", datetime(2023, 1, 1)),
    ]
    assert [i.item_id for i in sorter.sort_display_items(items)] == ["open_old", "closed_new"]

def test_newest_first_within_partition(sorter):
    items = [
        item("lot_march", datetime(2024, 3, 1)),
        item("closed_jan", datetime(2024, 1, 1), is_fully_sold=True),
        item("batch_may", datetime(2024, 5, 1), item_type=DisplayItemType.BATCH),
        item("closed_apr", datetime(2024, 4, 1), is_fully_sold=True, item_type=DisplayItemType.BATCH),
        item("lot_feb", datetime(2024, 2, 1)),
    ]

    sorted_items = sorter.sort_display_items(items)

    assert [i.item_id for i in sorted_items] == [
        "batch_may", "lot_march", "lot_feb", "closed_apr", "closed_jan"
    ]

def test_equal_timestamps_keep_input_order(sorter):
    same_time = datetime(2024, 1, 1)
    items = [item("first", same_time), item("second", same_time), item("third", same_time)]
    assert [i.item_id for i in sorter.sort_display_items(items)] == ["first", "second", "third"]

def test_does_not_mutate_input(sorter):
    items = [item("old", datetime(2023, 1, 1)), item("new", datetime(2024, 1, 1))]
    sorter.sort_display_items(items)
    assert [i.item_id for i in items] == ["old", "new"]

def test_empty(sorter):
    assert sorter.sort_display_items([]) == []
