# gold_ledger/logic/identifiers.py

from uuid import uuid4

# Uniqueness is the only requirement for ids.

def new_record_id() -> str:
    return uuid4().hex


def new_batch_id() -> str:
    return f"batch-{uuid4().hex}"
