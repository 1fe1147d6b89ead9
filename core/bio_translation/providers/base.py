"""
Base Translation Provider Abstract Class
All remote translation backends must inherit from this class
"""

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from ..exceptions import ProviderError
from ..models import ErrorKind

AUTO_DETECT = "auto"

# Statuses that mean "try again later" rather than "bad request"
RETRYABLE_STATUS_CODES = {408, 425, 429}


def classify_status(status_code: int) -> ErrorKind:
    """Map a non-2xx HTTP status to an error kind."""
    if status_code >= 500 or status_code in RETRYABLE_STATUS_CODES:
        return ErrorKind.PROVIDER_UNAVAILABLE
    return ErrorKind.REJECTED


def error_detail(response: httpx.Response, limit: int = 160) -> str:
    """Extract the provider's JSON ``error`` message, if any."""
    try:
        payload = response.json()
    except ValueError:
        return ""
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"].strip()[:limit]
    return ""


class TranslationProvider(ABC):
    """
    Abstract base class for remote translation providers.

    Implementations return non-empty translated text or raise
    ``ProviderError``. They never swallow failures; the provider chain
    decides what to do with them.
    """

    def __init__(self, client: httpx.AsyncClient, user_agent: Optional[str] = None):
        self.client = client
        self.user_agent = user_agent

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider identifier used in logs and error records"""
        pass

    @abstractmethod
    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """
        Translate text from source to target language.

        Args:
            text: Text to translate
            source_lang: Source language code or ``"auto"``
            target_lang: Target language code

        Returns:
            Translated text (never empty)

        Raises:
            ProviderError: on network failure, bad status or unusable payload
        """
        pass

    def _headers(self) -> dict:
        if self.user_agent:
            return {"User-Agent": self.user_agent}
        return {}

    def _network_error(self, exc: Exception) -> ProviderError:
        message = str(exc) or type(exc).__name__
        return ProviderError(ErrorKind.PROVIDER_UNAVAILABLE, f"{self.name}: {message}", self.name)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
