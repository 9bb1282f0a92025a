# gold_ledger/core/constants.py

from decimal import Decimal

# Remaining quantity below this is treated as zero (fully sold).
ZERO_TOLERANCE = Decimal("0.0001")

# Slack allowed when checking a sale against a lot's remaining balance.
OVERDRAFT_TOLERANCE = Decimal("0.00001")

DEFAULT_STORAGE_KEY = "gold_trades_v2"
