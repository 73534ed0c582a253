from __future__ import annotations
import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Protocol

from .errors import InvalidSubmissionError, UnknownUserError, UnverifiedUserError
from .profile import compile_profile
from .scoring import aggregate_sections, enrich_answers
from .suggestions import generate_suggestion
from .tiers import completed_sections, progress, required_sections, resolve_tier
from .types import Answer, SectionRecord, Submission, Suggestion, TestRecord

log = logging.getLogger(__name__)


class RecordStore(Protocol):
    def get(self, user_id: str) -> Optional[TestRecord]: ...
    def save(self, record: TestRecord) -> None: ...


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def is_verified(user: Mapping[str, Any] | None) -> bool:
    if not user:
        return False
    profile = user.get("profile") if isinstance(user.get("profile"), Mapping) else {}
    return bool(user.get("verified") or profile.get("verified"))


def _as_answers(raw: Iterable[Any] | None) -> list[Answer]:
    out: list[Answer] = []
    for a in raw or []:
        if isinstance(a, Answer):
            out.append(a)
        elif isinstance(a, Mapping):
            ans = Answer.from_dict(dict(a))
            # JSON responses cannot carry NaN or infinities.
            if isinstance(ans.value, float) and not math.isfinite(ans.value):
                ans.value = None
            out.append(ans)
        else:
            raise InvalidSubmissionError(f"answer must be an object, got {type(a).__name__}")
    return out


def new_record(user_id: str, user: Mapping[str, Any], now: str) -> TestRecord:
    # The profile is snapshotted here and not recompiled on later submissions.
    return TestRecord(
        user_id=user_id,
        sections={},
        profile=compile_profile(user, {}),
        created_at=now,
        updated_at=now,
    )


def suggest_for_tier(
    record: TestRecord,
    tier: str,
    suggest: Callable[..., Suggestion] = generate_suggestion,
) -> Suggestion:
    names = required_sections(tier)
    aggregates = aggregate_sections(record.sections, names)
    answers = enrich_answers(record.sections, names)
    log.info("generating suggestion for plan=%s user=%s (%d answers)", tier, record.user_id, len(answers))
    return suggest(record.profile, answers, aggregates, tier)


def upsert_section(
    records: RecordStore,
    user: Mapping[str, Any] | None,
    user_id: str,
    section: str,
    answers: Iterable[Any] | None,
    completed: bool,
    *,
    suggest: Callable[..., Suggestion] = generate_suggestion,
    now: Callable[[], str] = utcnow_iso,
) -> Submission:
    """Replace one section of the user's test record, re-derive the tier and persist.

    Last write wins per (user, section). Provider failures degrade the
    suggestion; store failures propagate as ``StorageError``.
    """
    if not user_id:
        raise InvalidSubmissionError("userId is required")
    if not section:
        raise InvalidSubmissionError("section is required")
    if user is None:
        raise UnknownUserError(user_id)
    if not is_verified(user):
        raise UnverifiedUserError(user_id)

    parsed = _as_answers(answers)
    ts = now()
    record = records.get(user_id) or new_record(user_id, user, ts)
    record.sections[section] = SectionRecord(answers=parsed, completed=bool(completed), submitted_at=ts)
    record.updated_at = ts

    tier = resolve_tier(completed_sections(record.sections))
    if tier:
        record.career_suggestion = suggest_for_tier(record, tier, suggest)
    log.info("user=%s section=%s completed=%s plan=%s", user_id, section, bool(completed), tier)

    records.save(record)
    return Submission(record=record, plan_level=tier)


def progress_for(record: Optional[TestRecord]) -> Dict[str, bool]:
    return progress(record.sections if record else None)


def refresh_suggestion(
    records: RecordStore,
    user_id: str,
    *,
    suggest: Callable[..., Suggestion] = generate_suggestion,
    now: Callable[[], str] = utcnow_iso,
) -> Optional[Submission]:
    """Regenerate the suggestion from the stored answers. ``None`` when there is no record."""
    record = records.get(user_id)
    if record is None:
        return None
    tier = resolve_tier(completed_sections(record.sections))
    if tier:
        record.career_suggestion = suggest_for_tier(record, tier, suggest)
        record.updated_at = now()
        records.save(record)
    log.info("refreshed suggestion for user=%s plan=%s", user_id, tier)
    return Submission(record=record, plan_level=tier)
