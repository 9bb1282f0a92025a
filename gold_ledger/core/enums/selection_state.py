# gold_ledger/core/enums/selection_state.py

from enum import Enum

class SelectionState(str, Enum):
    """
    States of the lot selection used to prepare a batch sell.
    """
    IDLE = "IDLE"
    SELECTING_LOTS = "SELECTING_LOTS"
    BATCH_SELL_PENDING = "BATCH_SELL_PENDING"
