"""
Health check and monitoring endpoints.
"""

import time

from fastapi import APIRouter, Depends

from api.deps import get_translation_service, start_time
from config.settings import settings
from core.bio_translation import BioTranslationService

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "timestamp": time.time()
    }


@router.get("/api/health/translation")
async def translation_health(
    service: BioTranslationService = Depends(get_translation_service),
):
    """
    Bio translation pipeline state.

    Returns running jobs with their start time, cache statistics and the
    configured providers and target languages.
    """
    chain = service.scheduler.chain
    registry = service.scheduler.registry
    jobs = []
    for key in registry.keys():
        started = registry.started_at(key)
        jobs.append({"key": key, "started_at": started.isoformat() if started else None})
    return {
        "status": "healthy",
        "uptime_seconds": round(time.time() - start_time, 1),
        "jobs_running": len(jobs),
        "jobs": jobs,
        "cache": chain.cache.stats(),
        "providers": [provider.name for provider in chain.providers],
        "targets": list(service.config.targets),
    }
