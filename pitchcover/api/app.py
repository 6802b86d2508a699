"""
PitchCover — FastAPI Application.

Run: uvicorn pitchcover.api.app:app --host 0.0.0.0 --port 8010 --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pitchcover.api.routers.catalog import router as catalog_router
from pitchcover.api.routers.policy import router as policy_router
from pitchcover.api.routers.session import router as session_router
from pitchcover.config import settings
from pitchcover.logging_setup import configure_logging
from pitchcover.middleware.error_handler import ErrorHandlerMiddleware, register_exception_handlers
from pitchcover.middleware.request_context import RequestContextMiddleware

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown."""
    configure_logging(settings.log_level, settings.log_format)
    logger.info("pitchcover_starting", version=settings.app_version, environment=settings.environment)
    yield
    logger.info("pitchcover_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description=(
            "Parametric weather insurance for T20 cricket matches.\n\n"
            "Forecast → Rain Risk → Premium → Purchase → Match Simulation → DLS Settlement"
        ),
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_tags=[
            {"name": "health", "description": "Liveness probe"},
            {"name": "catalog", "description": "Stadiums and insurance tiers"},
            {"name": "session", "description": "Forecast, quotes and recommendation"},
            {"name": "policy", "description": "Purchase and settlement"},
        ],
    )

    # ── Middleware (last added = outermost) ──────────────────────────
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    # ── Routes ────────────────────────────────────────────────────────
    app.include_router(catalog_router)
    app.include_router(session_router)
    app.include_router(policy_router)

    @app.get("/health", tags=["health"])
    async def health():
        return {
            "status": "ok",
            "version": settings.app_version,
            "service": "pitchcover",
        }

    return app


app = create_app()
