# career_core/provider_cfg.py
from __future__ import annotations
import os, json, pathlib
from dataclasses import dataclass
from openai import AzureOpenAI, OpenAI

from .errors import ProviderError

GROQ_BASE_URL = "https://api.groq.com/openai/v1"

_ENV_KEYS = {
    "azure": {
        "endpoint":   "AZURE_OPENAI_ENDPOINT",
        "api_key":    "AZURE_OPENAI_API_KEY",
        "api_version":"AZURE_OPENAI_API_VERSION",
        "deployment": "AZURE_OPENAI_DEPLOYMENT",
    },
    "groq": {"api_key": "GROQ_API_KEY"},
    "openai": {"api_key": "OPENAI_API_KEY", "endpoint": "OPENAI_BASE_URL"},
}
_REQUIRED = {
    "azure": ("endpoint", "api_key", "api_version", "deployment"),
    "groq": ("api_key",),
    "openai": ("api_key",),
}

@dataclass(frozen=True)
class ProviderSettings:
    backend: str
    api_key: str
    endpoint: str = ""
    deployment: str = ""
    api_version: str = ""

def _from_env(backend: str) -> dict[str, str]:
    return {k: os.getenv(env, "") for k, env in _ENV_KEYS[backend].items()}

def _from_json(backend: str, path: str = ".llm_config.json") -> dict[str, str]:
    p = pathlib.Path(path)
    if not p.exists(): return {}
    try:
        j = json.loads(p.read_text(encoding="utf-8")).get(backend) or {}
    except ValueError:
        return {}
    return {k: str(j.get(k, "")) for k in _ENV_KEYS[backend]}

def settings(backend: str) -> ProviderSettings:
    if backend not in _ENV_KEYS:
        raise ProviderError(f"Unknown LLM backend: {backend!r}")
    cfg = _from_env(backend)
    if backend == "groq" and not cfg.get("api_key"):
        cfg["api_key"] = os.getenv("groq_api_key", "")
    if not all(cfg.get(k) for k in _REQUIRED[backend]):
        for k, v in _from_json(backend).items():
            if not cfg.get(k): cfg[k] = v
    missing = [k for k in _REQUIRED[backend] if not cfg.get(k)]
    if missing:
        raise ProviderError(f"{backend} provider not configured. Missing: {', '.join(missing)}")
    return ProviderSettings(backend=backend, **cfg)

def client(s: ProviderSettings, *, timeout: float, max_retries: int = 0) -> OpenAI:
    if s.backend == "azure":
        return AzureOpenAI(
            azure_endpoint=s.endpoint,
            api_key=s.api_key,
            api_version=s.api_version,
            timeout=timeout,
            max_retries=max_retries,
        )
    base_url = GROQ_BASE_URL if s.backend == "groq" else (s.endpoint or None)
    return OpenAI(api_key=s.api_key, base_url=base_url, timeout=timeout, max_retries=max_retries)

def model_name(s: ProviderSettings, default_model: str) -> str:
    # Azure routes by deployment name, not model family.
    return s.deployment if s.backend == "azure" else default_model
