#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Rate limiting for the profile API.

The ad-hoc translate endpoint forwards text to free remote providers, so
it gets the tightest budget. Limits are "count/period" strings and can be
overridden per category with RATE_LIMIT_<CATEGORY> (RATE_LIMIT sets the
fallback).

Usage:
    from api.rate_limiter import limiter, rate_limit_config

    @router.post("/api/translate")
    @limiter.limit(rate_limit_config.get_limit("translate"))
    async def endpoint(request: Request):
        ...
"""

import os
from dataclasses import dataclass, field
from typing import Dict

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from config.logging_config import get_logger
from config.settings import settings

logger = get_logger(__name__)

DEFAULT_LIMIT = "60/minute"


@dataclass
class RateLimitConfig:
    """Per-category limits with environment overrides."""

    defaults: Dict[str, str] = field(default_factory=lambda: {
        "health": "120/minute",
        "profiles": "120/minute",
        "translate": settings.translate_rate_limit,
        "admin": "30/minute",
    })
    env_overrides: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        for key in list(self.defaults) + ["default"]:
            if env_value := os.getenv(f"RATE_LIMIT_{key.upper()}"):
                self.env_overrides[key] = env_value
        if global_limit := os.getenv("RATE_LIMIT"):
            self.env_overrides.setdefault("default", global_limit)

    def get_limit(self, category: str) -> str:
        """Limit for a category; unknown categories get the fallback."""
        if category in self.env_overrides:
            return self.env_overrides[category]
        if category in self.defaults:
            return self.defaults[category]
        return self.env_overrides.get("default", DEFAULT_LIMIT)


rate_limit_config = RateLimitConfig()


def get_client_identifier(request: Request) -> str:
    """Forwarded client address behind a proxy, socket address otherwise."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_client_identifier,
    default_limits=[rate_limit_config.get_limit("default")],
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """JSON 429 with Retry-After set to the window of the exceeded limit."""
    limit_value = str(exc.detail)
    try:
        retry_after = int(exc.limit.limit.get_expiry())
    except AttributeError:
        retry_after = 60

    logger.info("Rate limit %s exceeded by %s on %s", limit_value, get_client_identifier(request), request.url.path)
    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "detail": limit_value,
            "retry_after_seconds": retry_after,
        },
        headers={"Retry-After": str(retry_after)},
    )
