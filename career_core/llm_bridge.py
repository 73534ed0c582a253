from __future__ import annotations
import json, logging, time
from typing import Any, Dict, List, Mapping, Sequence

from .config import load_config, get_backend
from .errors import ProviderError
from .profile import resolved_goal, resolved_target_country
from . import provider_cfg

log = logging.getLogger(__name__)

PLAN_CONTEXT: Dict[str, str] = {
    "compass": (
        "USER IS A PREMIUM 'COMPASS' SUBSCRIBER.\n"
        "- Provide extremely detailed and personalized insights.\n"
        "- Focus deeply on Leadership potential, Stress management, and Creative conceptualization based on their answers.\n"
        '- The "description" should be 4-5 sentences, very specific to their psychometric profile.\n'
        '- Suggest 5 "nextSteps" instead of 3-4.'
    ),
    "clarity": (
        "USER IS A 'CLARITY' BUNDLE SUBSCRIBER.\n"
        "- Provide enhanced detailed insights.\n"
        "- Focus on Work Style and Learning Style fit.\n"
        '- The "description" should be 3-4 sentences.'
    ),
    "free": (
        "USER IS A FREE TIER USER.\n"
        "- Provide standard, concise, high-quality guidance."
    ),
}

_SYSTEM_TEMPLATE = """You are an expert Career Counsellor AI.
Analyze the user's psychometric test results and profile.
{plan_context}

Generate a detailed career recommendation JSON containing:
1. domain: The most suitable career field (e.g., "Data Science", "Digital Marketing").
2. roles: Array of exactly 5 specific job titles.
3. courses: Array of objects [{{"name": "Course Name", "duration": "Duration (e.g. 3-4 Years)", "details": "Brief description of the course scope and value"}}] based on their "Target Country".
4. description: A personalized explanation of why this fits them.
5. skills: Array of top 5 skills they should learn.
6. nextSteps: Array of actionable next steps.
7. colleges: Array of exactly 15 top colleges/universities [{{"name": "University Name", "course": "Specific Degree/Program", "country": "Country Name"}}] located in the user's "targetCountry" (or globally if not specified).
8. projects: Array of 3 relevant real-world projects [{{"title": "Project Title", "link": ""}}] that would strengthen their portfolio.

Rules:
- Prioritize the user's "goal" (e.g., Job, Research, Entrepreneurship) when suggesting roles and courses.
- Recommend colleges/courses strictly in the user's "targetCountry". If it is "Any" or not specified, suggest top global options.
- Use the provided "Test Aggregates" (scores out of 10) to refine the personality analysis.
- Output JSON ONLY. No markdown, no conversational text."""


def backend_in_use(cfg: Mapping[str, Any] | None = None) -> str:
    return get_backend(dict(cfg) if cfg is not None else load_config()) or "none"


def system_prompt(plan_level: str) -> str:
    return _SYSTEM_TEMPLATE.format(plan_context=PLAN_CONTEXT.get(plan_level, PLAN_CONTEXT["free"]))


def _first(profile: Mapping[str, Any], *keys: str) -> Any:
    other = profile.get("otherProfileFields") or {}
    for k in keys:
        v = profile.get(k) or other.get(k)
        if v:
            return v
    return None


def user_message(
    profile: Mapping[str, Any],
    answers: Sequence[Mapping[str, Any]],
    aggregates: Mapping[str, int] | None,
) -> str:
    answers_summary = "\n".join(
        f"[{a.get('category') or 'General'}] Q: {a.get('question')} -> A: {a.get('answer')}" for a in answers
    )
    lines = [
        f"User Profile: {json.dumps(profile, ensure_ascii=False, default=str)}",
        f"Goal: {resolved_goal(profile) or 'Not specified'}",
        f"Target Country: {resolved_target_country(profile) or 'Not specified'}",
        "",
        f"Education Level: {_first(profile, 'educationLevel') or 'Not specified'}",
        f"Current Course/Major: {_first(profile, 'educationCourse', 'ugCourse', 'course') or 'Not specified'}",
        f"Current College/School: {_first(profile, 'college', 'ugCollege', 'collegeName', 'childCollege', 'childSchool') or 'Not specified'}",
        "",
        "Test Aggregates (Scores / 10):",
        json.dumps(dict(aggregates)) if aggregates else "Not available",
        "",
        "Test Responses:",
        answers_summary,
        "",
        "Based on this, what is the best career path?",
    ]
    return "\n".join(lines)


def parse_reply(raw: str | None) -> Dict[str, Any]:
    text = (raw or "").strip()
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    try:
        data = json.loads(text)
    except ValueError as e:
        raise ProviderError(f"unparseable provider reply: {e}") from e
    if not isinstance(data, dict):
        raise ProviderError(f"provider reply is {type(data).__name__}, expected an object")
    return data


def request_career_suggestion(
    profile: Mapping[str, Any],
    answers: Sequence[Mapping[str, Any]],
    aggregates: Mapping[str, int],
    plan_level: str,
    cfg: Mapping[str, Any] | None = None,
) -> Dict[str, Any]:
    """One chat-completion round trip. Raises ``ProviderError`` on any failure."""
    cfg = dict(cfg) if cfg is not None else load_config()
    backend = get_backend(cfg)
    if backend is None:
        raise ProviderError("suggestion provider disabled")
    s = provider_cfg.settings(backend)
    cli = provider_cfg.client(
        s,
        timeout=float(cfg.get("AI_TIMEOUT_SEC", 20.0)),
        max_retries=int(cfg.get("AI_MAX_RETRIES", 0)),
    )
    t0 = time.time()
    try:
        resp = cli.chat.completions.create(
            model=provider_cfg.model_name(s, str(cfg.get("AI_MODEL"))),
            messages=[
                {"role": "system", "content": system_prompt(plan_level)},
                {"role": "user", "content": user_message(profile, answers, aggregates)},
            ],
            temperature=float(cfg.get("AI_TEMPERATURE", 0.5)),
            response_format={"type": "json_object"},
        )
    except Exception as e:
        raise ProviderError(f"{backend} call failed: {type(e).__name__}") from e
    log.info("provider %s answered in %d ms (plan=%s)", backend, int((time.time() - t0) * 1000), plan_level)
    content = resp.choices[0].message.content if resp.choices else None
    return parse_reply(content)
