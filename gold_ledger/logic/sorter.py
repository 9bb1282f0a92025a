# gold_ledger/logic/sorter.py

from typing import List
from gold_ledger.core.models.views import DisplayItem

class DisplaySorter:
    """
    Responsible for ordering the portfolio display list.
    """

    def sort_display_items(self, items: List[DisplayItem]) -> List[DisplayItem]:
        """
        Sorts standalone lots and batch views for display.

        Sorting Rules:
        1. Open items (not fully sold) before closed items.
        2. Within each group, most recent timestamp first (a lot's acquisition
           time, a batch's sale time).

        Args:
            items: Unsorted display items.

        Returns:
            A new, sorted list.
        """
        ordered = sorted(items, key=lambda item: item.timestamp, reverse=True)
        # Stable sort keeps the newest-first order inside each partition
        ordered.sort(key=lambda item: item.is_fully_sold)
        return ordered
