from __future__ import annotations
import math
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from .config import LIKERT_MAX, LIKERT_NEUTRAL, SCORE_SCALE
from .question_bank import lookup
from .types import Answer, SectionRecord


def _parse_int(raw: Any) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return int(raw) if math.isfinite(raw) else None
    s = str(raw).strip()
    try:
        return int(s)
    except ValueError:
        pass
    try:
        f = float(s)
    except ValueError:
        return None
    return int(f) if math.isfinite(f) else None


def answer_value(ans: Answer) -> float:
    """Likert value of an answer: ``value``, else ``answer`` as an int, else neutral.

    NaN and infinities count as missing.
    """
    if ans.value is not None and not isinstance(ans.value, bool):
        try:
            v = float(ans.value)
        except (TypeError, ValueError, OverflowError):
            v = math.nan
        if math.isfinite(v):
            return v
    parsed = _parse_int(ans.answer)
    return float(parsed) if parsed is not None else float(LIKERT_NEUTRAL)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def section_score(answers: Sequence[Answer]) -> int:
    """Mean Likert value mapped to 0..10. No clamping: out-of-scale input can exceed 10."""
    if not answers:
        return 0
    total = sum(answer_value(a) for a in answers)
    avg = total / len(answers)
    return _round_half_up(avg / LIKERT_MAX * SCORE_SCALE)


def aggregate_sections(sections: Mapping[str, SectionRecord], names: Iterable[str]) -> Dict[str, int]:
    out: Dict[str, int] = {}
    for name in names:
        sec = sections.get(name)
        out[name] = section_score(sec.answers if sec else [])
    return out


def enrich_answer(ans: Answer) -> Dict[str, Any]:
    q = lookup(ans.question_id)
    return {
        "question": q.text if q else f"Question {ans.question_id}",
        "category": q.category if q else "General",
        "answer": ans.answer,
    }


def enrich_answers(sections: Mapping[str, SectionRecord], names: Iterable[str]) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for name in names:
        sec = sections.get(name)
        if not sec:
            continue
        out.extend(enrich_answer(a) for a in sec.answers)
    return out
