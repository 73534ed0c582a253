from __future__ import annotations
import argparse, os

def main():
    ap = argparse.ArgumentParser(description="Run the assessment API with uvicorn.")
    ap.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    ap.add_argument("--port", type=int, default=int(os.getenv("PORT", "5000")))
    ap.add_argument("--reload", action="store_true")
    args = ap.parse_args()
    import uvicorn
    uvicorn.run("api.app:app", host=args.host, port=args.port, reload=args.reload)

if __name__ == "__main__": main()
