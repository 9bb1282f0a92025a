# gold_ledger/tests/unit/test_json_store.py

import json
import pytest

from gold_ledger.core.exceptions import MalformedRecordError
from gold_ledger.storage.json_store import InMemoryStorage, JsonFileStorage

def test_in_memory_storage():
    storage = InMemoryStorage({"a": "1"})
    assert storage.get("a") == "1"
    assert storage.get("b") is None
    storage.set("b", "2")
    assert storage.get("b") == "2"

def test_missing_file_reads_empty(tmp_path):
    storage = JsonFileStorage(tmp_path / "ledger.json")
    assert storage.get("gold_trades_v2") is None

def test_set_then_get(tmp_path):
    path = tmp_path / "nested" / "ledger.json"
    storage = JsonFileStorage(path)

    storage.set("gold_trades_v2", "[]")
    storage.set("other", "x")

    assert storage.get("gold_trades_v2") == "[]"
    assert json.loads(path.read_text(encoding="utf-8")) == {"gold_trades_v2": "[]", "other": "x"}
    assert not (tmp_path / "nested" / "ledger.json.tmp").exists()

@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_unreadable_file_raises(tmp_path, content):
    path = tmp_path / "ledger.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(MalformedRecordError):
        JsonFileStorage(path).get("gold_trades_v2")

def test_non_string_value_raises(tmp_path):
    path = tmp_path / "ledger.json"
    path.write_text(json.dumps({"gold_trades_v2": [1, 2]}), encoding="utf-8")
    with pytest.raises(MalformedRecordError):
        JsonFileStorage(path).get("gold_trades_v2")

def test_set_overwrites_unreadable_file(tmp_path):
    path = tmp_path / "ledger.json"
    path.write_text("{not json", encoding="utf-8")
    storage = JsonFileStorage(path)

    storage.set("gold_trades_v2", "[]")

    assert storage.get("gold_trades_v2") == "[]"

@pytest.mark.parametrize("content", [b"\xff\xfe garbage", b'{"gold_trades_v2": "\xff\xfe"}'])
def test_non_utf8_file_raises(tmp_path, content):
    path = tmp_path / "ledger.json"
    path.write_bytes(content)
    with pytest.raises(MalformedRecordError):
        JsonFileStorage(path).get("gold_trades_v2")

def test_set_overwrites_non_utf8_file(tmp_path):
    path = tmp_path / "ledger.json"
    path.write_bytes(b"\xff\xfe")
    storage = JsonFileStorage(path)

    storage.set("gold_trades_v2", "[]")

    assert storage.get("gold_trades_v2") == "[]"

def test_failed_write_removes_temp_file(tmp_path, mocker):
    path = tmp_path / "ledger.json"
    mocker.patch("gold_ledger.storage.json_store.os.replace", side_effect=OSError("Read-only file system"))

    with pytest.raises(OSError):
        JsonFileStorage(path).set("gold_trades_v2", "[]")

    assert not (tmp_path / "ledger.json.tmp").exists()
    assert not path.exists()
