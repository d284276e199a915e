# Bible Text Service
"""
Resolve canonical verse text from external scripture APIs.

Providers are tried in a fixed order and the first one returning usable text
wins. Network errors, non-2xx responses and empty or malformed payloads all
mean "try the next provider"; running out of providers returns ``None``.

Providers:
    1. RapidApiBibleProvider - keyed "holy bible" API, book/chapter/verse query params
    2. BibleApiComProvider - keyless bible-api.com, translation aware
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from fellowship_api.config import Settings
from fellowship_api.services.reference_parser import first_verse

logger = logging.getLogger("fellowship.services.bible_text")

# bible-api.com only serves a couple of public-domain translations
TRANSLATION_MAP: Dict[str, str] = {
    "ESV": "web",
    "NIV": "web",
    "NLT": "web",
    "NKJV": "kjv",
    "KJV": "kjv",
}
DEFAULT_TRANSLATION = "web"


class ScriptureProviderError(Exception):
    """A single provider could not produce text."""


def map_translation(version_hint: Optional[str]) -> str:
    if not version_hint:
        return DEFAULT_TRANSLATION
    return TRANSLATION_MAP.get(version_hint.strip().upper(), DEFAULT_TRANSLATION)


class ScriptureTextProvider(ABC):
    """Base class for one scripture text source."""

    name = "provider"

    @abstractmethod
    async def fetch(
        self,
        client: httpx.AsyncClient,
        book: str,
        chapter: int,
        verse: str,
        version_hint: Optional[str] = None,
    ) -> str:
        """Return verse text or raise ScriptureProviderError / httpx.HTTPError."""

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        if not response.is_success:
            raise ScriptureProviderError(f"HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as e:
            raise ScriptureProviderError(f"invalid JSON: {e}")


class RapidApiBibleProvider(ScriptureTextProvider):
    """Keyed provider; accepts book/chapter/verse as query parameters."""

    name = "rapidapi"

    # The API has shipped the verse under several field names over time
    TEXT_FIELDS = ("Output", "output", "text", "verse", "Verse", "message")

    def __init__(self, base_url: str, api_key: Optional[str] = None, api_host: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.api_host = api_host

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        headers = {"X-RapidAPI-Key": self.api_key}
        if self.api_host:
            headers["X-RapidAPI-Host"] = self.api_host
        return headers

    @classmethod
    def extract_text(cls, payload: Any) -> Optional[str]:
        """First non-empty string among the known text fields."""
        candidates = []
        if isinstance(payload, dict):
            candidates.extend(payload.get(field) for field in cls.TEXT_FIELDS)
        elif isinstance(payload, str):
            candidates.append(payload)

        for candidate in candidates:
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
        return None

    async def fetch(self, client, book, chapter, verse, version_hint=None) -> str:
        response = await client.get(
            f"{self.base_url}/GetVerse",
            params={"Book": book, "chapter": str(chapter), "Verse": verse},
            headers=self._headers(),
        )
        text = self.extract_text(self._json(response))
        if not text:
            raise ScriptureProviderError("no verse text in response")
        return text


class BibleApiComProvider(ScriptureTextProvider):
    """Keyless provider; takes a composed ``Book C:V`` path and a translation."""

    name = "bible-api.com"

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    async def fetch(self, client, book, chapter, verse, version_hint=None) -> str:
        ref = f"{book} {chapter}:{verse}"
        response = await client.get(
            f"{self.base_url}/{quote(ref)}",
            params={"translation": map_translation(version_hint)},
        )
        payload = self._json(response)
        text = payload.get("text") if isinstance(payload, dict) else None
        if not isinstance(text, str) or not text.strip():
            raise ScriptureProviderError("no verse text in response")
        return text.strip()


class BibleTextService:
    """Fallback chain over the configured scripture providers."""

    def __init__(
        self,
        settings: Settings,
        providers: Optional[List[ScriptureTextProvider]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = settings.bible_api_timeout
        self.providers = providers if providers is not None else [
            RapidApiBibleProvider(
                settings.bible_api_base,
                api_key=settings.rapidapi_key,
                api_host=settings.bible_api_host,
            ),
            BibleApiComProvider(settings.bible_fallback_api_base),
        ]
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def resolve(
        self,
        book: str,
        chapter: int,
        verse_spec: str,
        version_hint: Optional[str] = None,
    ) -> Optional[str]:
        """
        Look up verse text, falling back through the providers.

        Only the first verse of a range or list is fetched.

        Args:
            book: Normalized book name
            chapter: Chapter number
            verse_spec: Verse, range or list as written in the reference
            version_hint: Requested translation code, e.g. "NIV"

        Returns:
            The verse text, or None when every provider failed
        """
        client = await self._get_client()
        verse = first_verse(verse_spec)

        for provider in self.providers:
            try:
                text = await provider.fetch(client, book, chapter, verse, version_hint)
            except (httpx.HTTPError, ScriptureProviderError) as e:
                logger.warning(f"Provider {provider.name} failed for {book} {chapter}:{verse}: {e}")
                continue

            logger.info(f"Resolved {book} {chapter}:{verse} via {provider.name}")
            return text

        logger.warning(f"All scripture providers failed for {book} {chapter}:{verse}")
        return None
