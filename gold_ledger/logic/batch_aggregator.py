# gold_ledger/logic/batch_aggregator.py

import logging
from decimal import Decimal
from typing import Iterable, Optional

from gold_ledger.core.enums.display_item_type import DisplayItemType
from gold_ledger.core.exceptions import NotFoundError
from gold_ledger.core.models.ledger import BuyLot, Sale
from gold_ledger.core.models.request import BatchSaleTerms
from gold_ledger.core.models.views import BatchMember, BatchView, DisplayItem
from gold_ledger.logic.accounting_engine import AccountingEngine
from gold_ledger.logic.fee_split_strategies import FeeSplitStrategy
from gold_ledger.logic.identifiers import new_record_id

logger = logging.getLogger(__name__)

class BatchAggregator:
    """
    Groups lots sold together in a batch sell into composite views and plans
    the sales of a new batch sell. Fee allocation is delegated to a
    FeeSplitStrategy.
    """
    def __init__(self, engine: AccountingEngine, fee_split_strategy: FeeSplitStrategy):
        self._engine = engine
        self._fee_split_strategy = fee_split_strategy

    def detect_batches(self, lots: Iterable[BuyLot]) -> tuple[dict[str, list[BuyLot]], list[BuyLot]]:
        """
        Splits lots into batch members and standalone lots.

        A lot is grouped under the batch of its first sale carrying a batch id.
        Lots with sales from several batches therefore show up under one batch
        only; their other sales still count in lot and portfolio profit.

        Returns:
            A mapping of batch id to member lots (in ledger order) and the list
            of standalone lots.
        """
        batches: dict[str, list[BuyLot]] = {}
        standalone: list[BuyLot] = []
        for lot in lots:
            batch_sale = lot.first_batch_sale()
            if batch_sale is None:
                standalone.append(lot)
            else:
                batches.setdefault(batch_sale.batch_id, []).append(lot)
        return batches, standalone

    def build_batch_views(self, lots: Iterable[BuyLot]) -> tuple[list[BatchView], list[BuyLot]]:
        batches, standalone = self.detect_batches(lots)
        views = [self._build_view(batch_id, members) for batch_id, members in batches.items()]
        logger.debug(f"BatchAggregator: Built {len(views)} batch views, {len(standalone)} standalone lots.")
        return views, standalone

    def get_batch_view(self, lots: Iterable[BuyLot], batch_id: str) -> BatchView:
        """
        Looks a batch up by id. Every lot holding a sale of the batch is a member,
        including lots the display grouping files under another batch.
        """
        members = [lot for lot in lots if any(sale.batch_id == batch_id for sale in lot.sales)]
        if not members:
            raise NotFoundError("batch", batch_id)
        return self._build_view(batch_id, members)

    def build_display_items(self, lots: Iterable[BuyLot]) -> list[DisplayItem]:
        """
        Standalone lots and batch views as display entries, unsorted.
        """
        views, standalone = self.build_batch_views(lots)
        items = [
            DisplayItem(
                item_type=DisplayItemType.LOT,
                item_id=lot.id,
                timestamp=lot.acquired_at,
                is_fully_sold=self._engine.is_fully_sold(lot),
                lot=self._engine.lot_breakdown(lot),
            )
            for lot in standalone
        ]
        items.extend(
            DisplayItem(
                item_type=DisplayItemType.BATCH,
                item_id=view.batch_id,
                timestamp=view.sold_at,
                is_fully_sold=view.is_fully_sold,
                batch=view,
            )
            for view in views
        )
        return items

    def plan_batch_sale(
        self,
        selected_lots: list[BuyLot],
        terms: BatchSaleTerms,
        batch_id: str
    ) -> list[Sale]:
        """
        Plans one sell-all sale per selected lot that still holds weight.

        Each sale liquidates the lot's entire remaining quantity at the shared
        price, time and notes. Fully sold lots are skipped without error. The
        total fee is allocated by the configured fee split strategy.
        """
        remaining_by_lot: dict[str, Decimal] = {}
        for lot in selected_lots:
            if self._engine.is_fully_sold(lot):
                logger.debug(f"BatchAggregator: Skipping fully sold lot {lot.id} in batch {batch_id}.")
                continue
            remaining_by_lot[lot.id] = self._engine.remaining_quantity(lot)

        fees = self._fee_split_strategy.allocate(terms.total_fee, len(selected_lots), remaining_by_lot)

        sales = [
            Sale(
                id=new_record_id(),
                lot_id=lot_id,
                unit_price=terms.unit_price,
                quantity=remaining,
                sold_at=terms.sold_at,
                fee=fees.get(lot_id, Decimal(0)),
                notes=terms.notes,
                batch_id=batch_id,
            )
            for lot_id, remaining in remaining_by_lot.items()
        ]
        logger.debug(f"BatchAggregator: Planned {len(sales)} sales for batch {batch_id}.")
        return sales

    def _build_view(self, batch_id: str, member_lots: list[BuyLot]) -> BatchView:
        members: list[BatchMember] = []
        total_profit = Decimal(0)
        total_fee = Decimal(0)
        total_quantity = Decimal(0)
        total_cost = Decimal(0)
        anchor: Optional[Sale] = None

        for lot in member_lots:
            batch_sales = [sale for sale in lot.sales if sale.batch_id == batch_id]
            if anchor is None and batch_sales:
                anchor = batch_sales[0]
            lines = self._engine.sale_lines(lot, batch_sales)
            members.append(BatchMember(lot=lot, sales=lines))

            total_quantity += lot.quantity
            total_cost += lot.unit_cost * lot.quantity
            total_profit += sum((line.profit for line in lines), Decimal(0))
            total_fee += sum((sale.fee for sale in batch_sales), Decimal(0))

        # Price, time and notes are identical across members, any sale will do.
        return BatchView(
            batch_id=batch_id,
            members=members,
            sell_price=anchor.unit_price,
            sold_at=anchor.sold_at,
            notes=anchor.notes,
            total_profit=total_profit,
            total_fee=total_fee,
            total_quantity=total_quantity,
            weighted_buy_price=total_cost / total_quantity,
            is_fully_sold=all(self._engine.is_fully_sold(lot) for lot in member_lots),
        )
