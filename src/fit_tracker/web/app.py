"""FastAPI application for the fit-tracker API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings
from ..db.engine import init_db
from ..errors import FitTrackerError
from .routers import auth, challenges, exercise_records, routines, shares

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    # Startup: Initialize database (idempotent)
    await init_db(app.state.settings.db_path)
    app.state.settings.image_dir.mkdir(parents=True, exist_ok=True)
    yield


async def handle_domain_error(request: Request, exc: FitTrackerError) -> JSONResponse:
    """Map domain errors to their HTTP status."""
    if exc.status_code in (401, 403):
        logger.warning("%s %s denied: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and parameters are plain bad requests."""
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": errors})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings.from_env()

    app = FastAPI(
        title="fit-tracker",
        description="Fitness records, routines and shareable challenges",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FitTrackerError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # Include routers
    app.include_router(auth.router)
    app.include_router(exercise_records.router)
    app.include_router(challenges.router)
    app.include_router(shares.router)
    app.include_router(routines.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
