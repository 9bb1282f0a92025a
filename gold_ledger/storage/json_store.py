# gold_ledger/storage/json_store.py

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol

from gold_ledger.core.exceptions import MalformedRecordError

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """String key-value storage the ledger is mirrored to."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryStorage:
    """Volatile storage, used when nothing should touch the disk."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class JsonFileStorage:
    """
    Key-value storage backed by a single JSON object file: {key: string value}.
    Writes go through a temporary file and an atomic rename.
    """

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedRecordError(f"Storage file {self._path} is not valid UTF-8 JSON: {e}") from e
        if not isinstance(data, dict):
            raise MalformedRecordError(f"Storage file {self._path} does not hold a JSON object.")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise MalformedRecordError(f"Value under '{key}' in {self._path} is not a string.")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except MalformedRecordError:
            logger.warning(f"JsonFileStorage: Overwriting unreadable storage file {self._path}.")
            data = {}
        data[key] = value

        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug(f"JsonFileStorage: Wrote {len(value)} characters under '{key}' to {self._path}.")
