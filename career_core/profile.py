"""Canonical view of a user's self-reported profile.

Profile data arrives from several places (top-level user fields, the user's
``profile`` object, the profile attached to their test record) and under a
number of historical names. ``compile_profile`` folds all of that into one
dict. It is pure: same inputs, same output, for every caller.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Sequence, Tuple

CANONICAL_FIELDS: Tuple[str, ...] = (
    "goal",
    "targetCountry",
    # 12th
    "desiredCourse",
    "preferredBranch",
    "studyCountry",
    # UG
    "bachelorStream",
    "ugCourseCategory",
    "ugBranch",
    "department",
    "collegeName",
    "completionYear",
)

# canonical field -> historical names, in lookup order
PROFILE_ALIASES: Dict[str, Sequence[str]] = {
    "targetCountry": ("12thTargetCountry", "UGTargetCountry", "MasterTargetCountry", "workTargetCountry"),
    "goal": ("careerGoal", "12thGoal", "UGGoal", "MasterGoal", "childGoals"),
}


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _mapping(obj: Any, key: str) -> Mapping[str, Any]:
    if not isinstance(obj, Mapping):
        return {}
    inner = obj.get(key)
    return inner if isinstance(inner, Mapping) else {}


def resolve_field(
    name: str,
    user: Mapping[str, Any],
    user_profile: Mapping[str, Any],
    test_profile: Mapping[str, Any],
) -> Any:
    for source in (user, user_profile, test_profile):
        value = source.get(name)
        if _present(value):
            return value
    for alias in PROFILE_ALIASES.get(name, ()):
        for source in (user_profile, test_profile):
            value = source.get(alias)
            if _present(value):
                return value
    return None


def compile_profile(user: Mapping[str, Any] | None, test_record: Mapping[str, Any] | None) -> Dict[str, Any]:
    user = user if isinstance(user, Mapping) else {}
    u_profile = _mapping(user, "profile")
    t_profile = _mapping(test_record, "profile")

    profile: Dict[str, Any] = {
        name: resolve_field(name, user, u_profile, t_profile) for name in CANONICAL_FIELDS
    }
    # test-record fields win on collision
    profile["otherProfileFields"] = {**u_profile, **t_profile}
    return profile


def resolved_goal(profile: Mapping[str, Any]) -> Any:
    return resolve_field("goal", profile, profile, _mapping(profile, "otherProfileFields"))


def resolved_target_country(profile: Mapping[str, Any]) -> Any:
    return resolve_field("targetCountry", profile, profile, _mapping(profile, "otherProfileFields"))
