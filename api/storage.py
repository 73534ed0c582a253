"""JSON-document persistence for users and test records.

Each document lives in its own file under ``DATA_DIR`` (``users/<id>.json``,
``test_records/<id>.json``). The files are the source of truth; the
``RecordCache`` in front of the test records is a best-effort read
accelerator that is refreshed on a successful write and dropped on a failed
one.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote

from career_core.errors import StorageError
from career_core.types import TestRecord


DATA_ROOT = Path(os.getenv("DATA_DIR", "data")).resolve()
USERS_DIR = DATA_ROOT / "users"
RECORDS_DIR = DATA_ROOT / "test_records"

_LOCK = threading.Lock()

log = logging.getLogger(__name__)


def _doc_path(root: Path, doc_id: str) -> Path:
    # Percent-encoding is injective, so distinct ids never share a file.
    name = quote(str(doc_id), safe="@")
    if not name:
        raise StorageError(f"invalid document id: {doc_id!r}")
    return root / f"{name}.json"


def _read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise StorageError(f"cannot read {path.name}: {e}") from e


def _write_json(path: Path, payload: Any) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload, indent=2, sort_keys=True, default=str), encoding="utf-8")
        tmp.replace(path)
    except OSError as e:
        raise StorageError(f"cannot write {path.name}: {e}") from e


class RecordCache:
    """Thread-safe map of user id -> serialized test record."""

    def __init__(self) -> None:
        self._items: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            doc = self._items.get(user_id)
        return json.loads(json.dumps(doc)) if doc is not None else None

    def put(self, user_id: str, doc: Dict[str, Any]) -> None:
        with self._lock:
            self._items[user_id] = json.loads(json.dumps(doc, default=str))

    def invalidate(self, user_id: str) -> None:
        with self._lock:
            self._items.pop(user_id, None)

    def __contains__(self, user_id: object) -> bool:
        with self._lock:
            return user_id in self._items


class JsonUserStore:
    def __init__(self, root: Path = USERS_DIR) -> None:
        self.root = Path(root)

    def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        doc = _read_json(_doc_path(self.root, user_id), None)
        return doc if isinstance(doc, dict) else None

    def save(self, user: Dict[str, Any]) -> Dict[str, Any]:
        user_id = user.get("_id") or user.get("id")
        if not user_id:
            raise StorageError("user document needs an '_id'")
        doc = dict(user)
        doc["_id"] = str(user_id)
        with _LOCK:
            _write_json(_doc_path(self.root, doc["_id"]), doc)
        return doc


class JsonTestRecordStore:
    def __init__(self, root: Path = RECORDS_DIR, cache: Optional[RecordCache] = None) -> None:
        self.root = Path(root)
        self.cache = cache if cache is not None else RecordCache()

    def get(self, user_id: str) -> Optional[TestRecord]:
        doc = self.cache.get(user_id)
        if doc is None:
            doc = _read_json(_doc_path(self.root, user_id), None)
            if not isinstance(doc, dict):
                return None
            self.cache.put(user_id, doc)
        return TestRecord.from_dict(doc)

    def save(self, record: TestRecord) -> None:
        doc = record.to_dict()
        try:
            with _LOCK:
                _write_json(_doc_path(self.root, record.user_id), doc)
        except StorageError:
            self.cache.invalidate(record.user_id)
            log.error("persisting test record for user=%s failed", record.user_id)
            raise
        self.cache.put(record.user_id, doc)


USERS = JsonUserStore()
RECORDS = JsonTestRecordStore()
