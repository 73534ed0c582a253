from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

SUGGESTION_FIELDS = ("domain", "roles", "courses", "description", "skills",
                     "nextSteps", "colleges", "projects")


@dataclass(frozen=True)
class Question:
    id: int; text: str; category: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "question": self.text, "category": self.category}


@dataclass
class Answer:
    question_id: Any; answer: Any = None; value: Optional[float] = None

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Answer":
        return Answer(question_id=d.get("questionId"), answer=d.get("answer"), value=d.get("value"))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"questionId": self.question_id, "answer": self.answer}
        if self.value is not None:
            out["value"] = self.value
        return out


@dataclass
class SectionRecord:
    answers: List[Answer] = field(default_factory=list)
    completed: bool = False
    submitted_at: Optional[str] = None

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "SectionRecord":
        return SectionRecord(
            answers=[Answer.from_dict(a) for a in (d.get("answers") or []) if isinstance(a, dict)],
            completed=bool(d.get("completed")),
            submitted_at=d.get("submittedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answers": [a.to_dict() for a in self.answers],
            "completed": self.completed,
            "submittedAt": self.submitted_at,
        }


@dataclass
class FallbackSuggestion:
    """Aggregates-only result, used when the provider gave us nothing usable."""
    aggregates: Dict[str, int]
    plan_level: str

    def to_dict(self) -> Dict[str, Any]:
        return {"aggregates": dict(self.aggregates), "planLevel": self.plan_level}


@dataclass
class FullSuggestion:
    fields: Dict[str, Any]
    aggregates: Dict[str, int]
    plan_level: str

    @property
    def domain(self) -> Optional[str]:
        return self.fields.get("domain")

    @property
    def colleges(self) -> List[Any]:
        return list(self.fields.get("colleges") or [])

    def to_dict(self) -> Dict[str, Any]:
        out = dict(self.fields)
        out["aggregates"] = dict(self.aggregates)
        out["planLevel"] = self.plan_level
        return out


Suggestion = Union[FullSuggestion, FallbackSuggestion]


def suggestion_from_dict(d: Optional[Dict[str, Any]]) -> Optional[Suggestion]:
    if not isinstance(d, dict):
        return None
    aggregates = {str(k): v for k, v in (d.get("aggregates") or {}).items()}
    plan = d.get("planLevel") or ""
    fields = {k: v for k, v in d.items() if k not in ("aggregates", "planLevel")}
    if any(k in fields for k in SUGGESTION_FIELDS):
        return FullSuggestion(fields=fields, aggregates=aggregates, plan_level=plan)
    return FallbackSuggestion(aggregates=aggregates, plan_level=plan)


@dataclass
class TestRecord:
    __test__ = False  # keep pytest from collecting this as a test class

    user_id: str
    sections: Dict[str, SectionRecord] = field(default_factory=dict)
    profile: Dict[str, Any] = field(default_factory=dict)
    career_suggestion: Optional[Suggestion] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TestRecord":
        sections = {
            str(name): SectionRecord.from_dict(sec)
            for name, sec in (d.get("sections") or {}).items()
            if isinstance(sec, dict)
        }
        return TestRecord(
            user_id=str(d.get("userId")),
            sections=sections,
            profile=dict(d.get("profile") or {}),
            career_suggestion=suggestion_from_dict(d.get("careerSuggestion")),
            created_at=d.get("createdAt"),
            updated_at=d.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "sections": {k: v.to_dict() for k, v in self.sections.items()},
            "profile": self.profile,
            "careerSuggestion": self.career_suggestion.to_dict() if self.career_suggestion else None,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Submission:
    record: TestRecord
    plan_level: Optional[str]

    @property
    def all_complete(self) -> bool:
        return self.plan_level == "compass"
