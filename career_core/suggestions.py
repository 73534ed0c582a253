from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Mapping, Sequence

from .types import SUGGESTION_FIELDS, FallbackSuggestion, FullSuggestion, Suggestion
from . import llm_bridge

log = logging.getLogger(__name__)

Requester = Callable[..., Dict[str, Any]]


def generate_suggestion(
    profile: Mapping[str, Any],
    enriched_answers: Sequence[Mapping[str, Any]],
    aggregates: Mapping[str, int],
    plan_level: str,
    *,
    request: Requester | None = None,
) -> Suggestion:
    """Ask the provider for a career suggestion and attach our aggregates.

    Never raises. Anything short of a usable JSON object from the provider
    (error, timeout, disabled backend, junk reply) comes back as a
    ``FallbackSuggestion`` carrying only ``aggregates`` and ``planLevel``.
    """
    aggregates = dict(aggregates)
    request = request or llm_bridge.request_career_suggestion
    try:
        reply = request(profile, list(enriched_answers), aggregates, plan_level)
    except Exception as e:
        log.warning("suggestion fallback for plan=%s: %s", plan_level, e)
        return FallbackSuggestion(aggregates=aggregates, plan_level=plan_level)

    fields = {k: v for k, v in (reply or {}).items() if k not in ("aggregates", "planLevel")} \
        if isinstance(reply, dict) else {}
    if not any(k in fields for k in SUGGESTION_FIELDS):
        log.warning("suggestion fallback for plan=%s: reply had no suggestion fields", plan_level)
        return FallbackSuggestion(aggregates=aggregates, plan_level=plan_level)
    return FullSuggestion(fields=fields, aggregates=aggregates, plan_level=plan_level)
