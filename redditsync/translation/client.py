"""
Translation endpoint client.

    POST {base_url}/translate
    Authorization: Bearer <api key>
    {"text": ..., "source": "en", "target": "ja"}
    -> {"translatedText": ..., "sourceLanguage": ..., "confidence": ...}

Raises on every failure; the gateway decides what a failure means.
"""

from typing import Optional

import httpx

from redditsync.config.constants import Timeouts
from redditsync.config.settings import settings
from redditsync.errors import NetworkError, UpstreamError


class TranslationApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = (base_url or settings.TRANSLATION_API_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.TRANSLATION_API_KEY
        self._client = http_client

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=Timeouts.TRANSLATION_CALL)
        return self._client

    async def translate(self, text: str, source: str, target: str) -> str:
        """
        Returns the translated text, which may be empty.

        Raises:
            NetworkError: transport failure or timeout
            UpstreamError: non-2xx status or malformed body
        """
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = await self._http().post(
                f"{self.base_url}/translate",
                json={"text": text, "source": source, "target": target},
                headers=headers,
            )
        except httpx.HTTPError as e:
            raise NetworkError(f"Translation endpoint unreachable: {e}") from e

        if not response.is_success:
            raise UpstreamError(
                f"Translation endpoint returned HTTP {response.status_code}",
                response.status_code,
            )

        try:
            translated = response.json()["translatedText"]
        except (ValueError, KeyError, TypeError) as e:
            raise UpstreamError("Malformed translation response", response.status_code) from e
        if translated is not None and not isinstance(translated, str):
            raise UpstreamError("Malformed translation response", response.status_code)
        return translated or ""

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
