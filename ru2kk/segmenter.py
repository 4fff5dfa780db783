"""Whitespace-preserving wrapper around a translation provider."""

from __future__ import annotations

import re
from typing import Tuple

from .providers import TranslationProvider
from .structures import TranslationResult

ENVELOPE_PATTERN = re.compile(r"(\s*)(.*?)(\s*)", re.DOTALL)


def split_whitespace(text: str) -> Tuple[str, str, str]:
    """Split text into leading whitespace, core content and trailing whitespace.

    Leading whitespace is matched greedily, so an all-whitespace string ends
    up entirely in the leading part with an empty core.
    """

    match = ENVELOPE_PATTERN.fullmatch(text)
    if match is None:  # pragma: no cover - the pattern accepts any string
        return "", text, ""
    return match.group(1), match.group(2), match.group(3)


async def translate_preserving_whitespace(
    original: str,
    provider: TranslationProvider,
) -> TranslationResult:
    """Translate only the core span and restore the whitespace envelope."""

    leading, core, trailing = split_whitespace(original)
    try:
        result = await provider.translate(core)
    except Exception as exc:
        # Providers should never raise; keep the document whole if one does.
        result = TranslationResult.fallback(core, f"provider raised: {exc!r}")
    return TranslationResult(
        text=f"{leading}{result.text}{trailing}",
        outcome=result.outcome,
        reason=result.reason,
    )
