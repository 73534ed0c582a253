from __future__ import annotations
import os, json, logging, pathlib


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


LIKERT_MAX: int = 5
LIKERT_NEUTRAL: int = 3
SCORE_SCALE: int = 10

LLM_BACKEND: str = "none"
AI_MODEL: str = "llama-3.3-70b-versatile"
AI_TEMPERATURE: float = 0.5
AI_TIMEOUT_SEC: float = 20.0
AI_MAX_RETRIES: int = 0
SUGGESTIONS_ENABLED: bool = True

APP_ENV: str = "development"
LOG_LEVEL: str = "INFO"
EXPOSE_ERROR_DETAIL: bool = True

ALLOWED_ORIGINS: list[str] = [
    "http://localhost:3000",
    "http://localhost:5173",
]

# // env overrides for staging/ops
LLM_BACKEND = (os.getenv("LLM_BACKEND") or LLM_BACKEND).strip().lower()
AI_MODEL = os.getenv("AI_MODEL") or AI_MODEL
AI_TEMPERATURE = _env_float("AI_TEMPERATURE", AI_TEMPERATURE)
AI_TIMEOUT_SEC = _env_float("AI_TIMEOUT_SEC", AI_TIMEOUT_SEC)
AI_MAX_RETRIES = _env_int("AI_MAX_RETRIES", AI_MAX_RETRIES)
SUGGESTIONS_ENABLED = _env_bool("SUGGESTIONS_ENABLED", SUGGESTIONS_ENABLED)
APP_ENV = (os.getenv("APP_ENV") or APP_ENV).strip().lower()
LOG_LEVEL = (os.getenv("LOG_LEVEL") or LOG_LEVEL).strip().upper()
EXPOSE_ERROR_DETAIL = _env_bool("EXPOSE_ERROR_DETAIL", APP_ENV != "production")
if os.getenv("ALLOWED_ORIGINS"):
    ALLOWED_ORIGINS = [o.strip() for o in os.environ["ALLOWED_ORIGINS"].split(",") if o.strip()]


def data_dir() -> pathlib.Path:
    return pathlib.Path(os.getenv("DATA_DIR", "data")).resolve()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def load_config() -> dict:
    """Merge ``config.json`` (if present) with environment overrides.

    Read on every call so the provider can be switched without a restart.
    """
    cfg: dict = {}
    p = pathlib.Path("config.json")
    if p.exists():
        try: cfg = json.loads(p.read_text(encoding="utf-8"))
        except ValueError: cfg = {}
    cfg.setdefault("LLM_BACKEND", LLM_BACKEND)
    cfg.setdefault("AI_MODEL", AI_MODEL)
    cfg.setdefault("AI_TEMPERATURE", AI_TEMPERATURE)
    cfg.setdefault("AI_TIMEOUT_SEC", AI_TIMEOUT_SEC)
    cfg.setdefault("AI_MAX_RETRIES", AI_MAX_RETRIES)
    cfg.setdefault("SUGGESTIONS_ENABLED", SUGGESTIONS_ENABLED)
    e = os.environ
    if e.get("LLM_BACKEND"): cfg["LLM_BACKEND"] = e["LLM_BACKEND"].strip().lower()
    if e.get("AI_MODEL"): cfg["AI_MODEL"] = e["AI_MODEL"]
    if e.get("AI_TEMPERATURE"): cfg["AI_TEMPERATURE"] = _env_float("AI_TEMPERATURE", AI_TEMPERATURE)
    if e.get("AI_TIMEOUT_SEC"): cfg["AI_TIMEOUT_SEC"] = _env_float("AI_TIMEOUT_SEC", AI_TIMEOUT_SEC)
    if e.get("AI_MAX_RETRIES"): cfg["AI_MAX_RETRIES"] = _env_int("AI_MAX_RETRIES", AI_MAX_RETRIES)
    if e.get("SUGGESTIONS_ENABLED"): cfg["SUGGESTIONS_ENABLED"] = _env_bool("SUGGESTIONS_ENABLED", True)
    return cfg


def get_backend(cfg: dict) -> str | None:
    if not cfg.get("SUGGESTIONS_ENABLED", True): return None
    b = str(cfg.get("LLM_BACKEND") or "").lower().strip()
    return b if b in ("azure", "groq", "openai") else None
