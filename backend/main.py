"""Entry point for running the FastAPI application."""

import logging
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()


def reload_enabled() -> bool:
    """Auto-reload is a development convenience, off unless RELOAD is set."""
    return os.getenv("RELOAD", "false").strip().lower() in ("1", "true", "yes")


if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Can be overridden: PORT=7860 RELOAD=1 python main.py
    port = int(os.getenv("PORT", "8000"))

    uvicorn.run(
        "src.api.main:app",
        host="0.0.0.0",
        port=port,
        reload=reload_enabled(),
    )
