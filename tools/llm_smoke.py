# tools/llm_smoke.py
from __future__ import annotations
import sys
from openai import NotFoundError
from career_core import provider_cfg
from career_core.config import load_config, get_backend

def main() -> int:
    cfg = load_config()
    backend = get_backend(cfg)
    if backend is None:
        print("LLM_BACKEND is 'none' (or suggestions are disabled); nothing to ping.")
        return 1
    s = provider_cfg.settings(backend)
    model = provider_cfg.model_name(s, str(cfg.get("AI_MODEL")))
    print("Backend  :", backend)
    print("Endpoint :", s.endpoint or (provider_cfg.GROQ_BASE_URL if backend == "groq" else "default"))
    print("Model    :", model)
    cli = provider_cfg.client(s, timeout=float(cfg.get("AI_TIMEOUT_SEC", 20.0)))
    try:
        r = cli.chat.completions.create(
            model=model,
            messages=[{"role":"user","content":"Say 'pong' only."}],
            temperature=0.0,
            max_tokens=5,
        )
        print("Reply    :", r.choices[0].message.content)
    except NotFoundError:
        print("ERROR 404: the provider cannot find this model/deployment.")
        print("→ Check AI_MODEL (or AZURE_OPENAI_DEPLOYMENT and the api_version for Azure).")
        raise
    except Exception as e:
        print("Provider call failed:", e)
        raise
    return 0

if __name__ == "__main__":
    sys.exit(main())
