"""Heuristics deciding which lines are worth sending for translation."""

from __future__ import annotations

import re

RUSSIAN_LETTER_PATTERN = re.compile(r"[А-Яа-яЁё]")
URL_PATTERN = re.compile(r"https?://", re.IGNORECASE)
NUMERIC_PATTERN = re.compile(r"[0-9\s.,:;!?()\-+/]+")
EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
LATIN_PATTERN = re.compile(r"[A-Za-z0-9\s.,:;!?()\-+/]+")


def is_candidate_script(text: str) -> bool:
    """Return True when the text contains at least one Russian letter."""

    return RUSSIAN_LETTER_PATTERN.search(text) is not None


def should_translate(text: str) -> bool:
    """Reject machine-readable or non-Russian content.

    The checks run in a fixed order: blank, URL, numbers and punctuation,
    e-mail address, then Latin-only text without Russian letters.
    """

    if not text:
        return False
    trimmed = text.strip()
    if not trimmed:
        return False
    if URL_PATTERN.match(trimmed):
        return False
    if NUMERIC_PATTERN.fullmatch(trimmed):
        return False
    if EMAIL_PATTERN.fullmatch(trimmed):
        return False
    if LATIN_PATTERN.fullmatch(trimmed) and not is_candidate_script(trimmed):
        return False
    return True


def needs_translation(text: str) -> bool:
    return is_candidate_script(text) and should_translate(text)
