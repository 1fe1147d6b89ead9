"""
MyMemory-compatible secondary provider.

GET {url}?q=<text>&langpair=<source>|<target>
-> {"responseStatus": 200, "responseData": {"translatedText": "..."}, "responseDetails": "..."}

Quota exhaustion comes back as HTTP 200 with a "MYMEMORY WARNING" text in
place of the translation.
"""

from typing import Optional

import httpx

from .base import AUTO_DETECT, TranslationProvider, classify_status
from ..exceptions import ProviderError
from ..models import ErrorKind

QUOTA_MARKER = "MYMEMORY WARNING"


class MyMemoryProvider(TranslationProvider):
    """Secondary provider used after every primary has failed."""

    def __init__(
        self,
        url: str,
        client: httpx.AsyncClient,
        default_source: str = "pt",
        user_agent: Optional[str] = None,
    ):
        super().__init__(client, user_agent)
        self.url = url
        self.default_source = default_source

    @property
    def name(self) -> str:
        return "mymemory"

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        source = source_lang if source_lang and source_lang != AUTO_DETECT else self.default_source
        try:
            response = await self.client.get(
                self.url,
                params={"q": text, "langpair": f"{source}|{target_lang}"},
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            raise self._network_error(e) from e

        if not response.is_success:
            raise ProviderError(
                classify_status(response.status_code),
                f"mymemory_{response.status_code}",
                self.name,
            )

        try:
            data = response.json()
        except ValueError:
            raise ProviderError(ErrorKind.INVALID_RESPONSE, "mymemory_failed:invalid json", self.name)

        if not isinstance(data, dict) or data.get("responseStatus") not in (200, "200"):
            details = data.get("responseDetails") if isinstance(data, dict) else None
            message = "mymemory_failed"
            if isinstance(details, str) and details.strip():
                message = f"{message}:{details.strip()[:160]}"
            kind = ErrorKind.QUOTA_EXCEEDED if QUOTA_MARKER in message.upper() else ErrorKind.INVALID_RESPONSE
            raise ProviderError(kind, message, self.name)

        response_data = data.get("responseData") or {}
        translated = response_data.get("translatedText") if isinstance(response_data, dict) else None
        if not isinstance(translated, str) or not translated.strip():
            raise ProviderError(ErrorKind.INVALID_RESPONSE, "mymemory_empty_result", self.name)
        translated = translated.strip()
        if translated.upper().startswith(QUOTA_MARKER):
            raise ProviderError(ErrorKind.QUOTA_EXCEEDED, "mymemory_quota", self.name)
        return translated
