#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
FastAPI Web Server - profile API with background bio translation.

Thin orchestration shell: app creation, middleware, router includes,
startup/shutdown.

Usage:
    uvicorn api.main:app --host 0.0.0.0 --port 8000
"""

from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from config.logging_config import get_logger
from config.settings import settings

logger = get_logger(__name__)

from api.deps import shutdown_translation_service
from api.rate_limiter import limiter, rate_limit_exceeded_handler
from api.routes.health import router as health_router
from api.routes.profiles import router as profiles_router
from api.routes.translate import router as translate_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info("%s v%s starting", settings.app_name, settings.app_version)
    yield
    await shutdown_translation_service()
    logger.info("Shut down")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Marketplace profiles with asynchronously translated bios",
    version=settings.app_version,
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# CORS origins from settings, dev defaults when unset
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health_router)
app.include_router(profiles_router)
app.include_router(translate_router)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": str(exc),
            "type": type(exc).__name__,
            "path": str(request.url.path)
        }
    )


# For running with python -m
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
