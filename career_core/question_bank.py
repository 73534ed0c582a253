from __future__ import annotations
import json, importlib.resources as ir
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple
from .types import Question

# Section membership is the id range, nothing else.
SECTION_RANGES: Dict[str, Tuple[int, int]] = {
    "riasec": (101, 106),
    "intelligence": (201, 208),
    "emotional": (301, 305),
    "personality": (401, 405),
    "behavioral": (501, 505),
    "workstyle": (601, 605),
    "learning": (701, 705),
    "leadership": (801, 805),
    "stress": (901, 905),
    "creativity": (1001, 1005),
}
SECTIONS: List[str] = list(SECTION_RANGES)


def load_bank() -> List[Question]:
    data = ir.files(__package__).joinpath("data/questions.json").read_text(encoding="utf-8")
    raw = json.loads(data)
    return [Question(id=int(r["id"]), text=r["text"], category=r["category"]) for r in raw]


@lru_cache(maxsize=1)
def _bank() -> Tuple[Question, ...]:
    return tuple(load_bank())


@lru_cache(maxsize=1)
def _by_id() -> Dict[int, Question]:
    return {q.id: q for q in _bank()}


def all_questions() -> List[Question]:
    return list(_bank())


def _as_id(question_id: Any) -> Optional[int]:
    if isinstance(question_id, bool):
        return None
    try:
        return int(str(question_id).strip())
    except (TypeError, ValueError):
        return None


def lookup(question_id: Any) -> Optional[Question]:
    qid = _as_id(question_id)
    if qid is None:
        return None
    return _by_id().get(qid)


def section_of(question_id: Any) -> Optional[str]:
    qid = _as_id(question_id)
    if qid is None:
        return None
    for name, (lo, hi) in SECTION_RANGES.items():
        if lo <= qid <= hi:
            return name
    return None


def filter_by_type(section: Optional[str]) -> List[Question]:
    """Questions of one section; no type or an unknown type returns the whole bank."""
    rng = SECTION_RANGES.get(section or "")
    if rng is None:
        return all_questions()
    lo, hi = rng
    return [q for q in _bank() if lo <= q.id <= hi]
