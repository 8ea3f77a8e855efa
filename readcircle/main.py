"""FastAPI application factory — entry point for ReadCircle."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from readcircle.api.routes.recommendations import router as recommendations_router
from readcircle.api.routes.reviews import router as reviews_router
from readcircle.config import settings
from readcircle.database import engine

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown events."""
    logger.info("%s starting up...", settings.app_name)
    logger.info(
        "Recommendation page size: default=%d, max=%d",
        settings.recommendation_default_limit,
        settings.recommendation_max_limit,
    )
    yield
    await engine.dispose()
    logger.info("%s shutting down...", settings.app_name)


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title=settings.app_name,
        description="Book catalogue and reading circles with experience-aware recommendations",
        version="1.0.0",
        lifespan=lifespan,
    )

    # ── Middleware ──────────────────────────────────
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routes ─────────────────────────────────────
    application.include_router(reviews_router)
    application.include_router(recommendations_router)

    # ── Health Check ───────────────────────────────
    @application.get("/health", tags=["System"])
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "readcircle"}

    return application


app = create_app()
