"""FastAPI application entrypoint — lifespan, routers, middleware."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from asistencia.config import ConfigurationError, get_settings
from asistencia.middleware.logging import RequestLoggingMiddleware, configure_structured_logging
from asistencia.routes import registration, voice

logger = logging.getLogger("asistencia")

VERSION = "0.1.0"


async def _run_readiness_checks(_app: FastAPI) -> dict[str, dict[str, Any]]:
    """Report whether every deployment value the upstream calls need is present."""
    settings = get_settings()
    missing = settings.missing_values()
    return {
        "config": {
            "ok": not missing,
            "message": "ok" if not missing else f"{len(missing)} value(s) missing",
        },
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application startup / shutdown lifecycle.

    Startup:
      1. Initialize structured logging
      2. Validate configuration eagerly (credentials, column identifiers, secret)
    """
    configure_structured_logging()
    settings = get_settings()
    try:
        settings.require_complete()
        settings.column_map()
    except ConfigurationError as exc:
        logger.error("startup failure", extra={"error": str(exc)})
        raise

    logger.info(
        "Asistencia Evento starting",
        extra={"log_level": settings.log_level, "openai_model": settings.openai_model},
    )

    yield

    logger.info("Asistencia Evento shutting down")


app = FastAPI(
    title="Asistencia Evento API",
    description=(
        "Event registration for agricultural producers — voice-assisted field "
        "extraction and signed registrations stored in a hosted table."
    ),
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS ────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)


# ── Error shape ─────────────────────────────────────────────────────────────
@app.exception_handler(RequestValidationError)
async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Solicitud inválida",
            "details": jsonable_encoder(
                [{key: error[key] for key in ("type", "loc", "msg") if key in error} for error in exc.errors()]
            ),
        },
    )


# ── Health check ────────────────────────────────────────────────────────────
@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Basic health check — verifies the API process is alive."""
    return {
        "status": "ok",
        "service": "asistencia-evento",
        "version": VERSION,
    }


@app.get("/health/ready", tags=["system"])
async def readiness_check() -> JSONResponse:
    checks = await _run_readiness_checks(app)
    ready = all(check["ok"] for check in checks.values())
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "ok" if ready else "degraded", "checks": checks},
    )


# ── Router registration ────────────────────────────────────────────────────
app.include_router(voice.router, prefix="/api")
app.include_router(registration.router, prefix="/api")
