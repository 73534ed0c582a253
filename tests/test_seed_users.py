from __future__ import annotations

import json

from tools.seed_users import read_users, seed

from tests.conftest import build_user


class _Users:
    def __init__(self):
        self.docs = {}

    def get(self, user_id):
        return self.docs.get(user_id)

    def save(self, user):
        self.docs[str(user.get("_id") or user.get("id"))] = user
        return user


def test_seed_writes_skips_and_counts_invalid(tmp_path):
    path = tmp_path / "users.json"
    path.write_text(json.dumps([build_user("a"), build_user("b"), {"name": "nobody"}]), encoding="utf-8")
    store = _Users()
    store.save(build_user("a", goal="kept"))

    counts = seed(read_users(path), store, keep=True)
    assert counts == {"written": 1, "skipped": 1, "invalid": 1}
    assert store.get("a")["profile"] == {"goal": "kept"}


def test_read_users_accepts_single_object(tmp_path):
    path = tmp_path / "one.json"
    path.write_text(json.dumps(build_user("solo")), encoding="utf-8")
    assert [u["_id"] for u in read_users(path)] == ["solo"]
