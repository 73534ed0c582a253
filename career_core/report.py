from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional

from .profile import compile_profile
from .tiers import completed_sections, purchased_plan
from .types import FullSuggestion, TestRecord

_NO_COUNTRY = "—"
_DEFAULT_COURSE = "Recommended Course"


def _user_field(user: Mapping[str, Any], name: str) -> Any:
    profile = user.get("profile") if isinstance(user.get("profile"), Mapping) else {}
    return user.get(name) or profile.get(name) or None


def user_summary(user_id: str, user: Mapping[str, Any], profile: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": user_id,
        "name": _user_field(user, "name"),
        "email": _user_field(user, "email"),
        "class_status": _user_field(user, "class_status"),
        "profile": profile,
    }


def normalize_colleges(
    raw: List[Any],
    domain: Optional[str],
    target_country: Optional[str],
    study_country: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Providers return colleges as bare names or objects; the client wants objects."""
    course = domain or _DEFAULT_COURSE
    country = target_country or study_country or _NO_COUNTRY
    out: List[Dict[str, Any]] = []
    for c in raw:
        if isinstance(c, str):
            out.append({"college": c, "course": course, "country": country})
        elif isinstance(c, Mapping):
            out.append({
                "college": c.get("name") or c.get("college") or "University",
                "course": c.get("course") or course,
                "country": c.get("country") or country,
            })
    return out


def career_guidance(user_id: str, user: Mapping[str, Any] | None, record: Optional[TestRecord]) -> Dict[str, Any]:
    user = user or {}
    record_dict = record.to_dict() if record else {}
    profile = compile_profile(user, record_dict)
    suggestion = record.career_suggestion if record else None

    report: Dict[str, Any] = {
        "user": user_summary(user_id, user, profile),
        "completedSections": sorted(completed_sections(record.sections)) if record else [],
        "planLevel": suggestion.plan_level if suggestion else None,
        "aggregates": dict(suggestion.aggregates) if suggestion else {},
        "careerSuggestion": suggestion.to_dict() if suggestion else None,
        "generatedAt": record.updated_at if record else None,
    }
    colleges: List[Dict[str, Any]] = []
    if isinstance(suggestion, FullSuggestion):
        colleges = normalize_colleges(
            suggestion.colleges, suggestion.domain, profile.get("targetCountry"), user.get("studyCountry"),
        )
    return {
        "message": "Career guidance report generated successfully",
        "report": report,
        "colleges": colleges,
        "plan": purchased_plan(user.get("purchasedBundles")),
    }
