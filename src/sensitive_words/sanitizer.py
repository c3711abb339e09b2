"""Sanitizer — masks whole-word occurrences of sensitive words.

Usage:
    from sensitive_words import sanitize

    result = sanitize("SELECT * FROM users", ["SELECT * FROM", "SELECT"])
    print(result.sanitized)      # "************* users"
    print(result.replaced)       # 1

Longer candidates are masked first so a phrase wins over the words inside
it.  Each match becomes a run of ``*`` of the same length, so the output is
always as long as the input.
"""

from __future__ import annotations
import re
from typing import Iterable, Protocol

from .types import MASK_CHAR, SanitizeResult, SensitiveWord


class WordSource(Protocol):
    def get_active_words(self) -> list[SensitiveWord]: ...


def _candidates(words: Iterable[str | None] | None) -> list[str]:
    """Drop empty or mask-only entries and duplicates, then order longest first.

    ``sorted`` is stable, so equal-length words keep their input order.
    """
    if not words:
        return []
    unique = list(dict.fromkeys(w for w in words if w and w.strip(MASK_CHAR)))
    return sorted(unique, key=len, reverse=True)


def _mask(match: re.Match) -> str:
    return MASK_CHAR * len(match.group())


def sanitize(message: str | None, words: Iterable[str | None] | None) -> SanitizeResult:
    """Mask every case-insensitive whole-word match of ``words`` in ``message``.

    Never raises: a missing message yields an empty result and a missing
    word list leaves the message untouched.
    """
    if not message:
        return SanitizeResult(original="", sanitized="", replaced=0)

    candidates = _candidates(words)
    if not candidates:
        return SanitizeResult(original=message, sanitized=message, replaced=0)

    text = message
    replaced = 0
    for word in candidates:
        pattern = re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)
        text, count = pattern.subn(_mask, text)
        replaced += count

    return SanitizeResult(original=message, sanitized=text, replaced=replaced)


class SanitizationService:
    """Binds the sanitizer to a word source.

    Fetches one snapshot of active words per call.  Errors raised by the
    source propagate unchanged.
    """

    def __init__(self, source: WordSource) -> None:
        self.source = source

    def sanitize_message(self, message: str | None) -> SanitizeResult:
        if not message:
            return SanitizeResult(original="", sanitized="", replaced=0)
        words = [w.word for w in self.source.get_active_words()]
        return sanitize(message, words)
