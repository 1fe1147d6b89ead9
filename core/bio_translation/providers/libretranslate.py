"""
LibreTranslate-compatible provider.

POST {base_url}/translate
    {"q": text, "source": "en", "target": "pt", "format": "text", "api_key": "..."}
-> {"translatedText": "..."}
"""

from typing import Optional

import httpx

from .base import TranslationProvider, classify_status, error_detail
from ..exceptions import ProviderError
from ..models import ErrorKind


class LibreTranslateProvider(TranslationProvider):
    """Primary provider speaking the LibreTranslate JSON protocol."""

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient,
        api_key: Optional[str] = None,
        user_agent: Optional[str] = None,
    ):
        super().__init__(client, user_agent)
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key

    @property
    def name(self) -> str:
        return self.base_url

    def build_payload(self, text: str, source_lang: str, target_lang: str) -> dict:
        payload = {"q": text, "source": source_lang, "target": target_lang, "format": "text"}
        if self.api_key:
            payload["api_key"] = self.api_key
        return payload

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        try:
            response = await self.client.post(
                f"{self.base_url}/translate",
                json=self.build_payload(text, source_lang, target_lang),
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            raise self._network_error(e) from e

        if not response.is_success:
            detail = error_detail(response)
            message = f"translate_failed_{response.status_code}"
            if detail:
                message = f"{message}:{detail}"
            raise ProviderError(classify_status(response.status_code), message, self.name)

        try:
            data = response.json() if response.content else None
        except ValueError:
            data = None
        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not isinstance(translated, str) or not translated.strip():
            raise ProviderError(ErrorKind.INVALID_RESPONSE, "translate_empty_result", self.name)
        return translated.strip()
