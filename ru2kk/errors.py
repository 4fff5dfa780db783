"""Error definitions for the ru2kk translator."""

from __future__ import annotations


class Ru2kkError(Exception):
    """Base exception for all custom errors."""


class DocumentIOError(Ru2kkError):
    """Raised when the input cannot be read or the output cannot be written."""


class OverwriteRefusedError(Ru2kkError):
    """Raised when the output path would overwrite the source document."""


class TranslationProviderConfigurationError(Ru2kkError):
    """Raised when the translation provider or settings are misconfigured."""


class TranslationProviderError(Ru2kkError):
    """Raised inside a provider when a single call fails.

    Providers convert this into a fallback result; it never leaves the
    provider layer.
    """
