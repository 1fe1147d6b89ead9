"""
Shared state and dependency getters for API route modules.

The translation service is built lazily from settings; tests replace it
through ``app.dependency_overrides[get_translation_service]``.
"""

import time
from typing import Optional

from config.logging_config import get_logger
from config.settings import settings
from core.bio_translation import (
    BioTranslationConfig,
    BioTranslationScheduler,
    BioTranslationService,
    JobRegistry,
    ProviderChain,
)
from core.profiles import SQLProfileRepository

logger = get_logger(__name__)

start_time = time.time()

# --- Translation service (lazy) ---

_service: Optional[BioTranslationService] = None


def build_translation_service() -> BioTranslationService:
    """Wire repository, provider chain and scheduler from settings."""
    config = BioTranslationConfig.from_settings(settings)
    repository = SQLProfileRepository(settings.get_database_url())
    chain = ProviderChain.from_config(config)
    scheduler = BioTranslationScheduler(repository, chain, config, registry=JobRegistry())
    logger.info(
        "Bio translation ready: targets=%s, %d primary providers",
        ",".join(config.targets), len(config.primary_urls),
    )
    return BioTranslationService(repository, scheduler, config)


def get_translation_service() -> BioTranslationService:
    global _service
    if _service is None:
        _service = build_translation_service()
    return _service


async def shutdown_translation_service() -> None:
    """Let running jobs finish, then close provider connections."""
    global _service
    if _service is None:
        return
    pending = len(_service.scheduler.registry)
    if pending:
        logger.info("Waiting for %d bio translation jobs", pending)
    await _service.scheduler.drain()
    await _service.scheduler.chain.aclose()
    _service = None
