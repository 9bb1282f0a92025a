# gold_ledger/core/enums/display_item_type.py

from enum import Enum

class DisplayItemType(str, Enum):
    """Kinds of entries in the portfolio display list."""
    LOT = "LOT"
    BATCH = "BATCH"
