# gold_ledger/api/v1/dependencies.py

from functools import lru_cache

from gold_ledger.core.config.settings import Settings, settings
from gold_ledger.logic.accounting_engine import AccountingEngine
from gold_ledger.logic.batch_aggregator import BatchAggregator
from gold_ledger.logic.fee_split_strategies import get_fee_split_strategy
from gold_ledger.logic.ledger_store import LedgerStore
from gold_ledger.logic.parser import LedgerParser
from gold_ledger.logic.sorter import DisplaySorter
from gold_ledger.services.ledger_service import LedgerService
from gold_ledger.storage.json_store import JsonFileStorage, KeyValueStorage


def build_ledger_service(app_settings: Settings, storage: KeyValueStorage) -> LedgerService:
    """
    Wires a LedgerService with its collaborators, using the configured fee split
    policy, and loads the persisted ledger.
    """
    engine = AccountingEngine()
    aggregator = BatchAggregator(
        engine=engine,
        fee_split_strategy=get_fee_split_strategy(app_settings.FEE_SPLIT_POLICY)
    )
    service = LedgerService(
        store=LedgerStore(),
        engine=engine,
        aggregator=aggregator,
        sorter=DisplaySorter(),
        parser=LedgerParser(),
        storage=storage,
        storage_key=app_settings.STORAGE_KEY
    )
    service.load()
    return service


@lru_cache
def get_ledger_service() -> LedgerService:
    """
    Provides the single ledger owned by this process.
    """
    return build_ledger_service(settings, JsonFileStorage(settings.LEDGER_FILE))
