# gold_ledger/logic/accounting_engine.py

import logging
from decimal import Decimal
from typing import Iterable, Iterator, Optional

from gold_ledger.core.constants import OVERDRAFT_TOLERANCE, ZERO_TOLERANCE
from gold_ledger.core.exceptions import OverdraftError
from gold_ledger.core.models.ledger import BuyLot, Sale
from gold_ledger.core.models.views import LotBreakdown, PortfolioStats, ProfitPoint, SaleLine

logger = logging.getLogger(__name__)


class ProfitSeries:
    """
    Lazy, finite and restartable sequence of (timestamp, profit) points, one per
    sale, ordered by sale time. Nothing is computed until iteration starts and
    every new iteration recomputes from the lots.
    """
    def __init__(self, engine: "AccountingEngine", lots: Iterable[BuyLot]):
        self._engine = engine
        self._lots = list(lots)

    def __iter__(self) -> Iterator[ProfitPoint]:
        points = [
            ProfitPoint(
                timestamp=sale.sold_at,
                profit=self._engine.sale_profit(lot, sale),
                lot_id=lot.id,
                sale_id=sale.id,
                batch_id=sale.batch_id,
            )
            for lot in self._lots
            for sale in lot.sales
        ]
        # Stable: sales at the same instant keep ledger order.
        points.sort(key=lambda point: point.timestamp)
        yield from points


class AccountingEngine:
    """
    Computes derived, read-only facts from ledger state and validates proposed
    mutations before they are committed. Every method is a pure function of
    its arguments; nothing is cached between calls.
    """
    def __init__(
        self,
        zero_tolerance: Decimal = ZERO_TOLERANCE,
        overdraft_tolerance: Decimal = OVERDRAFT_TOLERANCE
    ):
        self._zero_tolerance = zero_tolerance
        self._overdraft_tolerance = overdraft_tolerance

    def sold_quantity(self, lot: BuyLot, excluding_sale_id: Optional[str] = None) -> Decimal:
        return sum(
            (sale.quantity for sale in lot.sales if sale.id != excluding_sale_id),
            Decimal(0)
        )

    def remaining_quantity(self, lot: BuyLot) -> Decimal:
        """
        Lot quantity minus everything already sold from it. Also the default
        quantity of a sell-all.
        """
        return lot.quantity - self.sold_quantity(lot)

    def is_fully_sold(self, lot: BuyLot) -> bool:
        return self.remaining_quantity(lot) < self._zero_tolerance

    def validate_sale(
        self,
        lot: BuyLot,
        proposed_quantity: Decimal,
        excluding_sale_id: Optional[str] = None
    ) -> None:
        """
        Raises OverdraftError when the proposed quantity exceeds what is left in
        the lot. When editing, excluding_sale_id names the sale being replaced so
        it is not counted against itself.
        """
        available = lot.quantity - self.sold_quantity(lot, excluding_sale_id)
        if proposed_quantity > available + self._overdraft_tolerance:
            logger.warning(
                f"AccountingEngine: Rejected sale of {proposed_quantity} from lot {lot.id}. Available: {available}."
            )
            raise OverdraftError(lot.id, proposed_quantity, available)
        logger.debug(f"AccountingEngine: Sale of {proposed_quantity} from lot {lot.id} fits (available {available}).")

    def validate_lot_quantity(self, lot: BuyLot, new_quantity: Decimal) -> None:
        """
        Re-validates an edited lot quantity against the sales already recorded.
        """
        sold = self.sold_quantity(lot)
        if sold > new_quantity + self._overdraft_tolerance:
            logger.warning(
                f"AccountingEngine: Rejected quantity {new_quantity} for lot {lot.id}. Already sold: {sold}."
            )
            raise OverdraftError(
                lot.id,
                sold,
                new_quantity,
                message=f"Lot '{lot.id}' already has {sold} sold, more than the new quantity ({new_quantity})."
            )

    def sale_profit(self, lot: BuyLot, sale: Sale) -> Decimal:
        """(sale price - lot cost) * sold quantity - fee"""
        return (sale.unit_price - lot.unit_cost) * sale.quantity - sale.fee

    def lot_profit(self, lot: BuyLot) -> Decimal:
        return sum((self.sale_profit(lot, sale) for sale in lot.sales), Decimal(0))

    def portfolio_stats(self, lots: Iterable[BuyLot]) -> PortfolioStats:
        """
        Total realized profit and weight still held, recomputed from scratch.
        """
        total_profit = Decimal(0)
        active_weight = Decimal(0)
        for lot in lots:
            total_profit += self.lot_profit(lot)
            active_weight += self.remaining_quantity(lot)
        return PortfolioStats(total_profit=total_profit, active_weight=active_weight)

    def profit_time_series(self, lots: Iterable[BuyLot]) -> ProfitSeries:
        return ProfitSeries(self, lots)

    def sale_lines(self, lot: BuyLot, sales: Iterable[Sale]) -> list[SaleLine]:
        return [SaleLine(sale=sale, profit=self.sale_profit(lot, sale)) for sale in sales]

    def lot_breakdown(self, lot: BuyLot) -> LotBreakdown:
        """
        Expanded view of a lot with its sales split into batch groups and
        individual sales.
        """
        batch_groups: dict[str, list[SaleLine]] = {}
        individual_sales: list[SaleLine] = []
        for line in self.sale_lines(lot, lot.sales):
            if line.sale.batch_id:
                batch_groups.setdefault(line.sale.batch_id, []).append(line)
            else:
                individual_sales.append(line)

        sold = self.sold_quantity(lot)
        remaining = lot.quantity - sold
        return LotBreakdown(
            lot=lot,
            sold_quantity=sold,
            remaining_quantity=remaining,
            is_fully_sold=remaining < self._zero_tolerance,
            total_profit=self.lot_profit(lot),
            batch_groups=batch_groups,
            individual_sales=individual_sales,
        )
