"""
CogniCanvas FastAPI Application Entry Point.

Run with: uvicorn cognicanvas.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cognicanvas.config import get_settings
from cognicanvas.api.errors import register_exception_handlers
from cognicanvas.api.routes import (
    achievements,
    auth,
    chat,
    navigation,
    notebooks,
    notes,
    notifications,
    revisions,
    snippets,
    subjects,
)

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown."""
    logger.info("Starting %s (%s)", settings.app_name, settings.environment)
    yield


app = FastAPI(
    title=settings.app_name,
    description="Subjects, notebooks and rich notes with highlights, revisions and a study assistant",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers
for module in (
    auth,
    subjects,
    notebooks,
    notes,
    snippets,
    revisions,
    chat,
    navigation,
    achievements,
    notifications,
):
    app.include_router(module.router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
