"""
Translation Provider Chain
Ordered fallback across remote translation providers
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

import httpx

from .cache import TranslationCache
from .config import BioTranslationConfig
from .exceptions import ProviderError
from .models import ErrorKind, TranslationError
from .providers import AUTO_DETECT, LibreTranslateProvider, MyMemoryProvider, TranslationProvider

logger = logging.getLogger(__name__)


@dataclass
class ChainResult:
    """Outcome of one chain run"""
    text: Optional[str]
    error: Optional[TranslationError] = None
    provider: Optional[str] = None
    cached: bool = False

    @property
    def success(self) -> bool:
        return bool(self.text)


class ProviderChain:
    """
    Tries primary providers in order, then one secondary provider.

    The first non-empty translation wins and is cached per source and
    target language. Failures never
    escape ``translate()``; the most recent one is returned instead.

    Usage:
        chain = ProviderChain.from_config(config)
        result = await chain.translate("Hello", "en", "pt")
        await chain.aclose()
    """

    def __init__(
        self,
        primaries: List[TranslationProvider],
        secondary: Optional[TranslationProvider] = None,
        cache: Optional[TranslationCache] = None,
        timeout: float = 8.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.primaries = list(primaries)
        self.secondary = secondary
        self.cache = cache if cache is not None else TranslationCache()
        self.timeout = timeout
        self._client = client  # owned client, closed by aclose()

    @classmethod
    def from_config(
        cls,
        config: BioTranslationConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        cache: Optional[TranslationCache] = None,
    ) -> "ProviderChain":
        """Build the default LibreTranslate + MyMemory chain."""
        client = httpx.AsyncClient(timeout=httpx.Timeout(config.provider_timeout), transport=transport)
        primaries: List[TranslationProvider] = [
            LibreTranslateProvider(url, client, api_key=config.api_key, user_agent=config.user_agent)
            for url in config.primary_urls
        ]
        secondary = MyMemoryProvider(
            config.mymemory_url,
            client,
            default_source=config.mymemory_default_source,
            user_agent=config.user_agent,
        )
        return cls(
            primaries,
            secondary,
            cache=cache if cache is not None else TranslationCache(config.cache_max_entries),
            timeout=config.provider_timeout,
            client=client,
        )

    @property
    def providers(self) -> List[TranslationProvider]:
        chain = list(self.primaries)
        if self.secondary is not None:
            chain.append(self.secondary)
        return chain

    async def translate(self, text: str, source_lang: Optional[str], target_lang: str) -> ChainResult:
        """
        Translate text through the chain.

        Args:
            text: Text to translate
            source_lang: Source language code, or None/"auto" to auto-detect
            target_lang: Target language code

        Returns:
            ChainResult with text on success, or None text plus the last error
        """
        text = (text or "").strip()
        if not text:
            return ChainResult(
                text=None,
                error=TranslationError(ErrorKind.INVALID_RESPONSE, "empty_source_text"),
            )

        source = source_lang or AUTO_DETECT
        cache_source = None if source == AUTO_DETECT else source
        cached = self.cache.get(text, target_lang, cache_source)
        if cached:
            return ChainResult(text=cached, cached=True)

        last_error: Optional[TranslationError] = None

        for provider in self.providers:
            try:
                translated = await self._call(provider, text, source, target_lang)
            except ProviderError as e:
                last_error = TranslationError(e.kind, e.message, e.provider or provider.name)
                logger.warning("%s failed (%s -> %s): %s", provider.name, source, target_lang, e.message)
                continue

            self.cache.set(text, target_lang, translated, cache_source)
            return ChainResult(text=translated, provider=provider.name)

        return ChainResult(
            text=None,
            error=last_error or TranslationError(ErrorKind.PROVIDER_UNAVAILABLE, "translate_failed"),
        )

    async def _call(self, provider: TranslationProvider, text: str, source: str, target: str) -> str:
        """One bounded provider call; every failure becomes ProviderError."""
        try:
            translated = await asyncio.wait_for(
                provider.translate(text, source, target), timeout=self.timeout
            )
        except ProviderError:
            raise
        except asyncio.TimeoutError as e:
            raise ProviderError(
                ErrorKind.PROVIDER_UNAVAILABLE,
                f"translate_failed_timeout:{self.timeout:g}s",
                provider.name,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(ErrorKind.PROVIDER_UNAVAILABLE, str(e) or type(e).__name__, provider.name) from e

        if not isinstance(translated, str) or not translated.strip():
            raise ProviderError(ErrorKind.INVALID_RESPONSE, "translate_empty_result", provider.name)
        return translated.strip()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
