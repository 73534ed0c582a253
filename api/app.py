from __future__ import annotations
from fastapi import FastAPI, HTTPException, Body, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import BaseModel
import logging, typing as t

# ---- Engine imports ----
from career_core import config
from career_core.config import configure_logging, load_config
from career_core.errors import InvalidSubmissionError, StorageError, UnknownUserError, UnverifiedUserError
from career_core.llm_bridge import backend_in_use
from career_core.pipeline import progress_for, refresh_suggestion, upsert_section
from career_core.profile import compile_profile
from career_core.question_bank import filter_by_type
from career_core.report import career_guidance, user_summary
from .storage import RECORDS, USERS

configure_logging()
log = logging.getLogger(__name__)

app = FastAPI(title="Career Compass Assessment API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

# ---- Schemas ----
class SubmitReq(BaseModel):
    userId: str | None = None
    answers: list[dict[str, t.Any]] | None = None
    section: str | None = None
    completed: bool = False

# ---- Helpers ----
def _error_body(message: str, exc: Exception | str | None = None) -> dict[str, t.Any]:
    body: dict[str, t.Any] = {"message": message}
    if exc is not None and config.EXPOSE_ERROR_DETAIL:
        body["error"] = str(exc)
    return body


@app.exception_handler(StarletteHTTPException)
def _http_error(request: Request, exc: StarletteHTTPException):
    detail = exc.detail if isinstance(exc.detail, dict) else {"message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=detail, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
def _validation_error(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=422, content=_error_body("Invalid request", exc))


@app.exception_handler(Exception)
def _unhandled_error(request: Request, exc: Exception):
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=_error_body("Internal server error", exc))

# ---- Health ----
@app.get("/")
def root():
    return {"status": "ok", "service": "career-compass-api"}


@app.get("/api/health")
def health():
    return {
        "message": "Career Counselling API is running!",
        "status": "OK",
        "llm_backend": backend_in_use(load_config()),
    }

# ---- Assessment ----
@app.get("/api/test/questions")
def questions(type: str | None = Query(None, description="Section name, e.g. riasec")):
    return [q.to_dict() for q in filter_by_type(type)]


@app.post("/api/test/submit")
def submit(payload: SubmitReq = Body(...)):
    if not payload.userId or not payload.section:
        missing = [k for k in ("userId", "section") if not getattr(payload, k)]
        raise HTTPException(400, _error_body("userId and section are required", f"missing: {', '.join(missing)}"))
    try:
        user = USERS.get(payload.userId)
        result = upsert_section(
            RECORDS,
            user,
            payload.userId,
            payload.section,
            payload.answers or [],
            payload.completed,
        )
    except (UnknownUserError, UnverifiedUserError):
        raise HTTPException(401, "User not found or not verified")
    except InvalidSubmissionError as e:
        raise HTTPException(400, _error_body("Invalid submission", e))
    except StorageError as e:
        log.error("test submission failed for user=%s: %s", payload.userId, e)
        return JSONResponse(status_code=500, content=_error_body("Test submission failed", e))

    suggestion = result.record.career_suggestion
    return {
        "message": f"{payload.section} section submitted successfully",
        "careerSuggestion": suggestion.to_dict() if suggestion else None,
        "allComplete": result.all_complete,
    }


@app.get("/api/test/results/{user_id}")
def results(user_id: str):
    try:
        user = USERS.get(user_id)
        record = RECORDS.get(user_id)
    except StorageError as e:
        return JSONResponse(status_code=500, content=_error_body("Failed to fetch results", e))
    if not user:
        raise HTTPException(404, "User not found")
    if not record:
        raise HTTPException(404, "Test results not found")
    doc = record.to_dict()
    profile = compile_profile(user, doc)
    return {"user": user_summary(user_id, user, profile), "results": doc}


@app.get("/api/test/progress/{user_id}")
def test_progress(user_id: str):
    try:
        record = RECORDS.get(user_id)
    except StorageError as e:
        return JSONResponse(status_code=500, content=_error_body("Failed to fetch progress", e))
    return progress_for(record)


@app.post("/api/test/refresh/{user_id}")
def refresh(user_id: str):
    try:
        result = refresh_suggestion(RECORDS, user_id)
    except StorageError as e:
        log.error("suggestion refresh failed for user=%s: %s", user_id, e)
        return JSONResponse(status_code=500, content=_error_body("Failed to refresh suggestion", e))
    if result is None:
        raise HTTPException(404, "Test results not found")
    suggestion = result.record.career_suggestion
    return {
        "message": "Career suggestion refreshed" if result.plan_level else "No bundle completed yet",
        "careerSuggestion": suggestion.to_dict() if suggestion else None,
        "allComplete": result.all_complete,
    }

# ---- Report ----
@app.get("/api/report/career-guidance/{user_id}")
def guidance_report(user_id: str):
    try:
        user = USERS.get(user_id)
        record = RECORDS.get(user_id)
    except StorageError as e:
        return JSONResponse(status_code=500, content=_error_body("Failed to generate report", e))
    if not user and not record:
        raise HTTPException(404, "User not found")
    return career_guidance(user_id, user, record)
