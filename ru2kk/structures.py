"""Core data structures for the ru2kk translator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

GOOGLE_WEB_ENDPOINT = "https://translate.googleapis.com/translate_a/single"
DEFAULT_USER_AGENT = "Mozilla/5.0"


class Outcome(Enum):
    """How the text for one position was produced."""

    TRANSLATED = auto()
    FALLBACK = auto()
    PASSTHROUGH = auto()


@dataclass(frozen=True)
class TextUnit:
    """A single line of the document, addressed by its position."""

    index: int
    text: str


@dataclass(frozen=True)
class TranslationResult:
    """Text to substitute for one unit, plus how it was obtained."""

    text: str
    outcome: Outcome
    reason: Optional[str] = None

    @property
    def translated(self) -> bool:
        return self.outcome is Outcome.TRANSLATED

    @property
    def fell_back(self) -> bool:
        return self.outcome is Outcome.FALLBACK

    @classmethod
    def success(cls, text: str) -> "TranslationResult":
        return cls(text=text, outcome=Outcome.TRANSLATED)

    @classmethod
    def fallback(cls, original: str, reason: str) -> "TranslationResult":
        return cls(text=original, outcome=Outcome.FALLBACK, reason=reason)

    @classmethod
    def passthrough(cls, original: str) -> "TranslationResult":
        return cls(text=original, outcome=Outcome.PASSTHROUGH)


@dataclass(frozen=True)
class PipelineOptions:
    """Tunable parameters for one translation run."""

    concurrency: int = 4
    timeout_seconds: float = 20.0
    source_language: str = "ru"
    target_language: str = "kk"
    endpoint: str = GOOGLE_WEB_ENDPOINT
    user_agent: str = DEFAULT_USER_AGENT
