#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
FastAPI Web Server - REST API for the segment Translation Memory.

Thin orchestration shell: app creation, error mapping, router includes,
startup/shutdown events.

Usage:
    uvicorn api.main:app --host 0.0.0.0 --port 3050
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.logging_config import get_logger, setup_logging
from config.settings import settings

setup_logging(settings.log_level)
logger = get_logger(__name__)

from core.tm.errors import TMError

from api.tm_router import router as tm_router
from api.routes.health import router as health_router

# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Segment Translation Memory API",
    description="Store sentence translations and reuse them, with machine translation fallback",
    version="1.0.0"
)


@app.exception_handler(TMError)
async def tm_error_handler(request: Request, exc: TMError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed ({exc.kind}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(tm_router)
app.include_router(health_router)


# =============================================================================
# Startup / Shutdown Events
# =============================================================================

@app.on_event("startup")
async def startup_check_settings():
    """Fail fast when required configuration is missing."""
    settings.validate_runtime()
    logger.info(f"Translation memory API started (store backend: {settings.store_backend})")


@app.on_event("shutdown")
async def shutdown_service():
    """Close store and engine connections."""
    from core.tm import service as tm_service
    if tm_service._service is not None:
        await tm_service._service.close()
        tm_service._service = None


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.main:app", host=settings.host, port=settings.port)
