from __future__ import annotations

import importlib
import json
import os
import sys

import pytest

from career_core.errors import StorageError
from career_core.types import SectionRecord, TestRecord


def _reload_storage(tmp_path):
    os.environ["DATA_DIR"] = str(tmp_path)
    if "api.storage" in sys.modules:
        importlib.reload(sys.modules["api.storage"])
    else:
        import api.storage  # noqa: F401
    return sys.modules["api.storage"]


def _record(user_id="u1", completed=True):
    return TestRecord(
        user_id=user_id,
        sections={"riasec": SectionRecord(answers=[], completed=completed, submitted_at="t0")},
        created_at="t0",
        updated_at="t0",
    )


def test_save_then_get_round_trips_through_disk(tmp_path):
    storage = _reload_storage(tmp_path)
    store = storage.JsonTestRecordStore(tmp_path / "records")
    store.save(_record())

    on_disk = json.loads((tmp_path / "records" / "u1.json").read_text(encoding="utf-8"))
    assert on_disk["sections"]["riasec"]["completed"] is True

    fresh = storage.JsonTestRecordStore(tmp_path / "records")
    assert fresh.get("u1").sections["riasec"].completed is True
    assert fresh.get("nobody") is None


def test_cache_is_refreshed_on_write_and_returns_copies(tmp_path):
    storage = _reload_storage(tmp_path)
    store = storage.JsonTestRecordStore(tmp_path / "records")
    store.save(_record(completed=False))
    assert "u1" in store.cache

    rec = store.get("u1")
    rec.sections["riasec"].completed = True
    assert store.get("u1").sections["riasec"].completed is False, "mutating a read must not touch the cache"

    store.save(rec)
    assert store.get("u1").sections["riasec"].completed is True


def test_failed_write_drops_cache_entry(tmp_path, monkeypatch):
    storage = _reload_storage(tmp_path)
    store = storage.JsonTestRecordStore(tmp_path / "records")
    store.save(_record(completed=False))

    def _boom(path, payload):
        raise StorageError("disk full")

    monkeypatch.setattr(storage, "_write_json", _boom)
    with pytest.raises(StorageError):
        store.save(_record(completed=True))
    assert "u1" not in store.cache
    assert store.get("u1").sections["riasec"].completed is False, "disk stays the source of truth"


def test_user_store_and_unsafe_ids(tmp_path):
    storage = _reload_storage(tmp_path)
    users = storage.JsonUserStore(tmp_path / "users")
    users.save({"_id": "u1", "name": "Asha"})
    assert users.get("u1")["name"] == "Asha"
    assert (tmp_path / "users" / "u1.json").exists()

    users.save({"_id": "../escape", "name": "x"})
    assert not (tmp_path / "escape.json").exists()
    assert users.get("../escape")["name"] == "x"
    with pytest.raises(StorageError):
        users.save({"name": "no id"})


def test_corrupt_document_raises_storage_error(tmp_path):
    storage = _reload_storage(tmp_path)
    root = tmp_path / "records"
    root.mkdir()
    (root / "u1.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError):
        storage.JsonTestRecordStore(root).get("u1")


def test_distinct_ids_never_share_a_file(tmp_path):
    storage = _reload_storage(tmp_path)
    store = storage.JsonTestRecordStore(tmp_path / "records")
    store.save(_record("a/b", completed=True))
    store.save(_record("a_b", completed=False))
    store.save(_record("a%2Fb", completed=False))

    fresh = storage.JsonTestRecordStore(tmp_path / "records")
    assert fresh.get("a/b").sections["riasec"].completed is True
    assert fresh.get("a_b").sections["riasec"].completed is False
    assert fresh.get("a%2Fb").user_id == "a%2Fb"
    assert len(list((tmp_path / "records").glob("*.json"))) == 3
