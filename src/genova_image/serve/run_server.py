"""Launch the image proxy with uvicorn."""
from __future__ import annotations
import argparse
import os

import uvicorn


def main() -> None:
    ap = argparse.ArgumentParser(description="Serve the GenovaAI image proxy")
    ap.add_argument("--host", default=os.getenv("GENOVA_HOST", "0.0.0.0"))
    ap.add_argument("--port", type=int, default=int(os.getenv("GENOVA_PORT", "8000")))
    ap.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = ap.parse_args()

    uvicorn.run(
        "genova_image.serve.fastapi_app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )

if __name__ == "__main__":
    main()
