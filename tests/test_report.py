from __future__ import annotations

import importlib
import os
import sys

from fastapi.testclient import TestClient

from career_core.report import career_guidance, normalize_colleges
from career_core.types import FallbackSuggestion, FullSuggestion, SectionRecord, TestRecord

from tests.conftest import build_user, sample_reply


def test_normalize_colleges_accepts_strings_and_objects():
    out = normalize_colleges(
        ["MIT", {"name": "UBC", "course": "B.Sc CS"}, {"college": "NUS", "country": "Singapore"}, 42],
        "Data Science",
        "Canada",
    )
    assert out == [
        {"college": "MIT", "course": "Data Science", "country": "Canada"},
        {"college": "UBC", "course": "B.Sc CS", "country": "Canada"},
        {"college": "NUS", "course": "Data Science", "country": "Singapore"},
    ]
    assert normalize_colleges(["X"], None, None)[0] == {"college": "X", "course": "Recommended Course", "country": "—"}


def test_career_guidance_with_full_suggestion():
    user = build_user(targetCountry="Canada")
    user["purchasedBundles"] = ["clarity_bundle"]
    record = TestRecord(
        user_id="u1",
        sections={"riasec": SectionRecord(completed=True)},
        career_suggestion=FullSuggestion(fields=sample_reply(), aggregates={"riasec": 8}, plan_level="free"),
        updated_at="t1",
    )
    out = career_guidance("u1", user, record)
    assert out["plan"] == "clarity"
    assert out["report"]["planLevel"] == "free"
    assert out["report"]["completedSections"] == ["riasec"]
    assert out["colleges"][0] == {"college": "University of Toronto", "course": "Data Science", "country": "Canada"}


def test_career_guidance_fallback_has_no_colleges():
    record = TestRecord(user_id="u1", career_suggestion=FallbackSuggestion({"riasec": 4}, "free"))
    out = career_guidance("u1", None, record)
    assert out["colleges"] == [] and out["plan"] == "free"
    assert out["report"]["aggregates"] == {"riasec": 4}


def test_report_endpoint(tmp_path):
    os.environ["DATA_DIR"] = str(tmp_path)
    for name in ("api.storage", "api.app"):
        if name in sys.modules:
            importlib.reload(sys.modules[name])
        else:
            __import__(name)
    storage, app_module = sys.modules["api.storage"], sys.modules["api.app"]
    client = TestClient(app_module.app)

    assert client.get("/api/report/career-guidance/ghost").status_code == 404
    storage.USERS.save(build_user())
    body = client.get("/api/report/career-guidance/u1").json()
    assert body["message"] == "Career guidance report generated successfully"
    assert body["report"]["careerSuggestion"] is None
