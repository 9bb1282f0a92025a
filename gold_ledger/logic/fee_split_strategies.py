# gold_ledger/logic/fee_split_strategies.py
import logging
from typing import Protocol
from decimal import Decimal

from gold_ledger.core.enums.fee_split_policy import FeeSplitPolicy

logger = logging.getLogger(__name__)

# --- Fee Split Strategy Protocol ---

class FeeSplitStrategy(Protocol):
    """
    Protocol (interface) for allocating the single fee of a batch sell.
    """
    def allocate(
        self,
        total_fee: Decimal,
        selected_count: int,
        remaining_by_lot: dict[str, Decimal]
    ) -> dict[str, Decimal]:
        """
        Returns the fee charged to each lot that is actually sold.
        selected_count is the number of lots the user selected, including
        fully sold ones that will be skipped; remaining_by_lot only holds the
        lots being liquidated, keyed by lot id.
        """
        ...

# --- Even Split (default policy) ---

class EvenFeeSplitStrategy:
    """
    Splits the fee evenly by the number of selected lots, regardless of
    quantity or value.
    """
    def allocate(
        self,
        total_fee: Decimal,
        selected_count: int,
        remaining_by_lot: dict[str, Decimal]
    ) -> dict[str, Decimal]:
        if selected_count <= 0 or not remaining_by_lot:
            return {}
        fee_per_lot = total_fee / selected_count
        logger.debug(f"EvenFeeSplit: {total_fee} over {selected_count} selected lots -> {fee_per_lot} each.")
        return {lot_id: fee_per_lot for lot_id in remaining_by_lot}

# --- Proportional Split ---

class ProportionalFeeSplitStrategy:
    """
    Splits the fee in proportion to the weight each lot contributes to the batch.
    The last lot absorbs the rounding remainder so the shares add up to the total.
    """
    def allocate(
        self,
        total_fee: Decimal,
        selected_count: int,
        remaining_by_lot: dict[str, Decimal]
    ) -> dict[str, Decimal]:
        total_weight = sum(remaining_by_lot.values(), Decimal(0))
        if total_weight <= 0:
            return {}

        shares: dict[str, Decimal] = {}
        allocated = Decimal(0)
        lot_ids = list(remaining_by_lot)
        for lot_id in lot_ids[:-1]:
            share = total_fee * remaining_by_lot[lot_id] / total_weight
            shares[lot_id] = share
            allocated += share
        shares[lot_ids[-1]] = total_fee - allocated
        logger.debug(f"ProportionalFeeSplit: {total_fee} over weight {total_weight} -> {shares}.")
        return shares


def get_fee_split_strategy(policy: FeeSplitPolicy) -> FeeSplitStrategy:
    if policy == FeeSplitPolicy.EVEN:
        return EvenFeeSplitStrategy()
    elif policy == FeeSplitPolicy.PROPORTIONAL:
        return ProportionalFeeSplitStrategy()
    raise ValueError(f"Unknown FEE_SPLIT_POLICY: {policy}")
