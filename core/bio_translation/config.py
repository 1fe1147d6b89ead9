"""
Bio Translation Configuration

Runtime settings injected into the pipeline components.
"""

from dataclasses import dataclass, field
from typing import List, Optional


DEFAULT_TARGETS = ["pt", "en", "es", "it", "de", "fr"]

DEFAULT_PRIMARY_URLS = [
    "https://libretranslate.de",
    "https://translate.astian.org",
    "https://libretranslate.com",
    "https://translate.argosopentech.com",
]


@dataclass(frozen=True)
class BioTranslationConfig:
    """
    Configuration for the bio translation pipeline.

    Build it from application settings with ``from_settings()``; tests
    construct it directly with a zero delay and fake providers.
    """

    # === LANGUAGES ===

    targets: List[str] = field(default_factory=lambda: list(DEFAULT_TARGETS))
    """Supported target languages, processed in this order"""

    # === PROVIDERS ===

    primary_urls: List[str] = field(default_factory=lambda: list(DEFAULT_PRIMARY_URLS))
    """LibreTranslate-compatible base URLs, tried in order"""

    api_key: Optional[str] = None
    """Optional key sent as ``api_key`` to primary providers"""

    mymemory_url: str = "https://api.mymemory.translated.net/get"
    """Secondary provider endpoint"""

    mymemory_default_source: str = "pt"
    """Source language used by the secondary provider when source is auto"""

    user_agent: str = "PuntoModel/1.0 (+https://puntomodel.com)"

    provider_timeout: float = 8.0
    """Seconds allowed for a single provider call"""

    # === CACHE ===

    cache_max_entries: int = 300

    # === RETRIES ===

    max_attempts: int = 3
    """Attempts allowed per target and fingerprint"""

    retry_bonus: int = 2
    """Extra attempts when the last failure was a provider outage"""

    # === SCHEDULING ===

    inter_target_delay: float = 0.15
    """Pause between targets to avoid bursting rate-limited providers"""

    @classmethod
    def from_settings(cls, settings) -> "BioTranslationConfig":
        """Build runtime config from ``config.settings.Settings``."""
        return cls(
            targets=settings.get_translation_targets(),
            primary_urls=settings.get_translate_base_urls(),
            api_key=settings.translate_api_key or None,
            mymemory_url=settings.mymemory_url,
            mymemory_default_source=settings.mymemory_default_source,
            user_agent=settings.user_agent,
            provider_timeout=settings.provider_timeout_seconds,
            cache_max_entries=settings.translation_cache_max,
            max_attempts=settings.max_bio_translation_attempts,
            retry_bonus=settings.bio_translation_retry_bonus,
            inter_target_delay=settings.inter_target_delay_seconds,
        )
