#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management
"""

from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # ========== Service ==========
    app_name: str = "Profile Bio Translation Service"
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    # ========== Translation Providers ==========
    # Primary providers speak the LibreTranslate protocol (POST /translate)
    translate_api_base_url: str = "https://libretranslate.de"
    translate_api_fallback_urls: str = (
        "https://translate.astian.org,"
        "https://libretranslate.com,"
        "https://translate.argosopentech.com"
    )
    translate_api_key: str = ""

    # Secondary provider (MyMemory-compatible GET API)
    mymemory_url: str = "https://api.mymemory.translated.net/get"
    mymemory_default_source: str = "pt"  # MyMemory cannot auto-detect

    user_agent: str = "PuntoModel/1.0 (+https://puntomodel.com)"

    # ========== Bio Translation ==========
    bio_translation_targets: str = "pt,en,es,it,de,fr"
    provider_timeout_seconds: float = 8.0
    translation_cache_max: int = 300
    max_bio_translation_attempts: int = 3
    bio_translation_retry_bonus: int = 2  # extra attempts after provider outages
    inter_target_delay_seconds: float = 0.15

    # ========== Ad-hoc translate endpoint ==========
    translate_max_chars: int = 5000
    translate_rate_limit: str = "30/minute"

    # ========== Security ==========
    # CORS origins (comma-separated in env, parsed to list)
    cors_origins: str = ""  # Empty = use default dev origins

    # ========== Database ==========
    database_url: Optional[str] = None
    database_dir: Path = BASE_DIR / "data"

    class Config:
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from .env that aren't defined in model

    def get_cors_origins(self) -> list:
        """Get CORS origins as a list. Falls back to dev defaults if empty."""
        if self.cors_origins:
            return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
        # Dev defaults
        return [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]

    def get_translate_base_urls(self) -> List[str]:
        """Ordered, de-duplicated list of primary provider base URLs."""
        urls: List[str] = []
        candidates = [self.translate_api_base_url] + self.translate_api_fallback_urls.split(",")
        for raw in candidates:
            url = raw.strip().rstrip("/")
            if url and url not in urls:
                urls.append(url)
        return urls

    def get_translation_targets(self) -> List[str]:
        """Supported bio target languages, in processing order."""
        targets: List[str] = []
        for raw in self.bio_translation_targets.split(","):
            code = raw.strip().lower()
            if code and code not in targets:
                targets.append(code)
        return targets

    def get_database_url(self) -> str:
        """SQLAlchemy URL for the profile store."""
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.database_dir / 'profiles.db'}"


# Global settings instance
settings = Settings()
