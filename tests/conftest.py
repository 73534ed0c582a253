from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from career_core.question_bank import filter_by_type
from career_core.types import TestRecord


def build_answers(section: str, value: int | None = 4, *, answer: Any = None) -> List[Dict[str, Any]]:
    """One answer per question of ``section``, all with the same rating."""

    out: List[Dict[str, Any]] = []
    for q in filter_by_type(section):
        item: Dict[str, Any] = {"questionId": q.id, "answer": str(value) if answer is None else answer}
        if value is not None:
            item["value"] = value
        out.append(item)
    return out


def build_user(user_id: str = "u1", *, verified: bool = True, **profile: Any) -> Dict[str, Any]:
    return {
        "_id": user_id,
        "name": "Asha Rao",
        "email": "asha@example.com",
        "class_status": "12th",
        "verified": verified,
        "profile": dict(profile),
        "purchasedBundles": [],
    }


class MemoryRecords:
    """In-memory stand-in for the JSON test record store."""

    def __init__(self) -> None:
        self.docs: Dict[str, Dict[str, Any]] = {}
        self.saves = 0

    def get(self, user_id: str) -> Optional[TestRecord]:
        doc = self.docs.get(user_id)
        return TestRecord.from_dict(doc) if doc else None

    def save(self, record: TestRecord) -> None:
        self.saves += 1
        self.docs[record.user_id] = record.to_dict()


class StubProvider:
    def __init__(self, reply: Any = None, error: Exception | None = None) -> None:
        self.reply = reply if reply is not None else sample_reply()
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, profile, answers, aggregates, plan_level, cfg=None):
        self.calls.append({"profile": profile, "answers": answers, "aggregates": aggregates, "plan": plan_level})
        if self.error is not None:
            raise self.error
        return self.reply


def sample_reply() -> Dict[str, Any]:
    return {
        "domain": "Data Science",
        "roles": ["Data Analyst", "ML Engineer", "Data Engineer", "BI Developer", "Research Scientist"],
        "courses": [{"name": "B.Sc Data Science", "duration": "3 Years", "details": "Stats and ML"}],
        "description": "Strong investigative profile.",
        "skills": ["Python", "SQL", "Statistics", "ML", "Storytelling"],
        "nextSteps": ["Take an intro stats course"],
        "colleges": ["University of Toronto", {"name": "UBC", "course": "B.Sc CS"}],
        "projects": [{"title": "Kaggle starter", "link": ""}],
    }


@pytest.fixture
def records() -> MemoryRecords:
    return MemoryRecords()


@pytest.fixture
def provider() -> StubProvider:
    return StubProvider()
