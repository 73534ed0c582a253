from __future__ import annotations
from typing import Dict, Iterable, List, Mapping, Optional

from .types import SectionRecord

_FREE = ["riasec", "intelligence", "personality"]
_CLARITY = _FREE + ["workstyle", "learning"]
_COMPASS = _CLARITY + ["emotional", "behavioral", "leadership", "stress", "creativity"]

# Checked top-down; the first fully satisfied bundle wins.
BUNDLES: Dict[str, List[str]] = {
    "compass": _COMPASS,
    "clarity": _CLARITY,
    "free": _FREE,
}

# The progress view predates the bundles and still reports this fixed set.
LEGACY_PROGRESS_SECTIONS: List[str] = ["riasec", "intelligence", "emotional", "personality", "behavioral"]

PURCHASED_PLANS = (("compass_bundle", "compass"), ("clarity_bundle", "clarity"))


def completed_sections(sections: Mapping[str, SectionRecord]) -> set[str]:
    return {name for name, sec in sections.items() if sec.completed}


def resolve_tier(done: Iterable[str]) -> Optional[str]:
    done = set(done)
    for tier, required in BUNDLES.items():
        if done.issuperset(required):
            return tier
    return None


def required_sections(tier: str) -> List[str]:
    return list(BUNDLES[tier])


def progress(sections: Mapping[str, SectionRecord] | None) -> Dict[str, bool]:
    sections = sections or {}
    out = {name: bool(sections.get(name) and sections[name].completed) for name in LEGACY_PROGRESS_SECTIONS}
    out["allComplete"] = all(out[name] for name in LEGACY_PROGRESS_SECTIONS)
    return out


def purchased_plan(bundles: Iterable[str] | None) -> str:
    owned = set(bundles or [])
    for bundle, plan in PURCHASED_PLANS:
        if bundle in owned:
            return plan
    return "free"
