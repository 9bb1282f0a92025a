# gold_ledger/core/enums/fee_split_policy.py

from enum import Enum

class FeeSplitPolicy(str, Enum):
    """
    Defines how the single fee of a batch sell is allocated across its lots.
    """
    EVEN = "EVEN"
    PROPORTIONAL = "PROPORTIONAL"
