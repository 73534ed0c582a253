"""Load user documents from a JSON file into the user store.

The file holds either a list of user objects or a single object. Each user
needs an ``_id`` (or ``id``). Existing documents are overwritten unless
``--keep`` is given.
"""
from __future__ import annotations
import argparse, json, sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from career_core.errors import StorageError


def read_users(path: Path) -> List[Dict[str, Any]]:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        raise ValueError("expected a JSON list of user objects")
    return [u for u in raw if isinstance(u, dict)]


def seed(users: Sequence[Dict[str, Any]], store, *, keep: bool = False) -> Dict[str, int]:
    counts = {"written": 0, "skipped": 0, "invalid": 0}
    for user in users:
        uid = user.get("_id") or user.get("id")
        if not uid:
            counts["invalid"] += 1
            continue
        if keep and store.get(str(uid)) is not None:
            counts["skipped"] += 1
            continue
        store.save(user)
        counts["written"] += 1
    return counts


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("path", type=Path)
    ap.add_argument("--keep", action="store_true", help="do not overwrite existing users")
    args = ap.parse_args(argv)

    from api.storage import USERS

    try:
        counts = seed(read_users(args.path), USERS, keep=args.keep)
    except (OSError, ValueError, StorageError) as e:
        print(f"seed failed: {e}", file=sys.stderr)
        return 1
    print(f"written={counts['written']} skipped={counts['skipped']} invalid={counts['invalid']}")
    return 0 if not counts["invalid"] else 2


if __name__ == "__main__":
    sys.exit(main())
