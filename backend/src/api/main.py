"""FastAPI application main entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from .middleware import register_error_handlers
from .routes import auth, logs, notes
from ..services.config import get_config
from ..services.container import get_services

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize the database on startup and flush activity events on shutdown."""
    logger.info("Running startup: initializing database...")
    services = get_services()
    logger.info("Startup complete: database ready at %s", services.db.db_path)
    try:
        yield
    finally:
        services.close()
        get_services.cache_clear()


app = FastAPI(
    title="Workspace Notes API",
    description="Collaborative workspace notes with presence and an activity log",
    version="0.1.0",
    lifespan=lifespan,
)

config = get_config()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(auth.router, tags=["auth"])
app.include_router(notes.router, tags=["notes"])
app.include_router(logs.router, tags=["logs"])


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


__all__ = ["app"]
