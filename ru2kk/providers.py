"""Translation provider abstractions."""

from __future__ import annotations

import asyncio
import json
import sys
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import aiohttp

from .errors import (
    TranslationProviderConfigurationError,
    TranslationProviderError,
)
from .structures import PipelineOptions, TranslationResult


class TranslationProvider(ABC):
    """Abstract adapter for translation providers.

    ``translate`` must always return a result. Failures are reported as
    fallback results carrying the original text, never as exceptions.
    """

    name = "abstract"

    async def __aenter__(self) -> "TranslationProvider":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release any resources held by the provider."""

    @abstractmethod
    async def translate(self, text: str) -> TranslationResult:
        """Translate ``text`` or fall back to it unchanged."""


class EchoTranslationProvider(TranslationProvider):
    """A provider that returns the original text (useful for testing)."""

    name = "echo"

    async def translate(self, text: str) -> TranslationResult:
        return TranslationResult.success(text)


def extract_translation(payload: Any) -> str:
    """Unwrap the nested-array response of the web translate endpoint.

    The first element is a list of segment entries; the translated text of
    each entry is its first item. Entries with any other shape contribute an
    empty string.
    """

    if not isinstance(payload, list) or not payload:
        raise TranslationProviderError(
            "Translation provider response malformed: expected a non-empty array."
        )
    segments = payload[0]
    if not isinstance(segments, list):
        raise TranslationProviderError(
            "Translation provider response malformed: missing segment list."
        )
    parts = []
    for segment in segments:
        if isinstance(segment, list) and segment and isinstance(segment[0], str):
            parts.append(segment[0])
        else:
            parts.append("")
    return "".join(parts)


class GoogleWebTranslationProvider(TranslationProvider):
    """Translation provider backed by the keyless Google web endpoint."""

    name = "google"
    CLIENT_ID = "gtx"
    DATA_TYPE = "t"

    def __init__(
        self,
        options: PipelineOptions | None = None,
        *,
        debug: bool = False,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.options = options or PipelineOptions()
        self.debug = debug
        self._session = session
        self._owns_session = session is None
        self._timeout = aiohttp.ClientTimeout(total=self.options.timeout_seconds)

    async def __aenter__(self) -> "GoogleWebTranslationProvider":
        self._ensure_session()
        return self

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": self.options.user_agent},
            )
            self._owns_session = True
        return self._session

    def build_params(self, text: str) -> Dict[str, str]:
        return {
            "client": self.CLIENT_ID,
            "sl": self.options.source_language,
            "tl": self.options.target_language,
            "dt": self.DATA_TYPE,
            "q": text,
        }

    async def translate(self, text: str) -> TranslationResult:
        if not text:
            return TranslationResult.success(text)
        try:
            payload = await self._fetch(text)
            translated = extract_translation(payload)
        except TranslationProviderError as exc:
            self._log_debug("provider.fallback", f"{exc} (query: {text!r})")
            return TranslationResult.fallback(text, str(exc))
        self._log_debug("provider.response.text", translated)
        return TranslationResult.success(translated)

    async def _fetch(self, text: str) -> Any:
        """Perform one GET request and return the decoded JSON payload."""

        params = self.build_params(text)
        self._log_debug("provider.request.params", params)
        session = self._ensure_session()
        try:
            async with session.get(
                self.options.endpoint,
                params=params,
                timeout=self._timeout,
                headers={"User-Agent": self.options.user_agent},
            ) as response:
                if not 200 <= response.status < 300:
                    raise TranslationProviderError(f"HTTP {response.status}")
                payload = await response.json(content_type=None)
        except asyncio.TimeoutError as exc:
            raise TranslationProviderError(
                f"timed out after {self.options.timeout_seconds:g} seconds"
            ) from exc
        except aiohttp.ClientError as exc:
            raise TranslationProviderError(f"network error: {exc}") from exc
        except ValueError as exc:
            raise TranslationProviderError(f"invalid JSON: {exc}") from exc
        self._log_debug("provider.response.raw", payload)
        return payload

    def _log_debug(self, label: str, payload: Any) -> None:
        """Emit structured debug information when enabled."""

        if not self.debug:
            return
        if isinstance(payload, (dict, list)):
            message = json.dumps(payload, ensure_ascii=False, indent=2)
        else:
            message = str(payload)
        print(f"[ru2kk][provider-debug] {label}:\n{message}", file=sys.stderr)


def build_provider(
    name: str | None,
    options: PipelineOptions | None = None,
    *,
    debug: bool = False,
) -> TranslationProvider:
    """Factory to create providers by name."""

    normalized = (name or "google").strip().lower()
    if normalized in {"google", "gtx", "google-web", "default"}:
        return GoogleWebTranslationProvider(options, debug=debug)
    if normalized in {"echo", "noop", "mock"}:
        return EchoTranslationProvider()
    raise TranslationProviderConfigurationError(
        f"Unknown translation provider '{name}'."
    )
