"""In-memory stores for sensitive words and operation statistics.

Design goals:
  - Copies in, copies out: callers never hold a reference into the store
  - Word text is unique (case-insensitive) across all records
  - Safe to share between request threads
"""

from __future__ import annotations
import threading
import uuid
from datetime import datetime, timezone
from typing import Iterable

from .errors import DuplicateWordError
from .types import OperationStat, SensitiveWord


class WordStore:
    """Sensitive-word repository held in a dict, keyed by id."""

    __slots__ = ("_words", "_lock")

    def __init__(self) -> None:
        self._words: dict[uuid.UUID, SensitiveWord] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_by_id(self, word_id: uuid.UUID) -> SensitiveWord | None:
        with self._lock:
            word = self._words.get(word_id)
            return word.copy() if word else None

    def get_all(self) -> list[SensitiveWord]:
        with self._lock:
            return [w.copy() for w in sorted(self._words.values(), key=lambda w: w.word)]

    def get_active_words(self) -> list[SensitiveWord]:
        return [w for w in self.get_all() if w.is_active]

    def get_by_word(self, text: str) -> SensitiveWord | None:
        with self._lock:
            word = self._find(text)
            return word.copy() if word else None

    def exists(self, text: str) -> bool:
        return self.get_by_word(text) is not None

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create(self, word: SensitiveWord) -> uuid.UUID:
        with self._lock:
            if self._find(word.word) is not None:
                raise DuplicateWordError(word.word)
            self._words[word.id] = word.copy()
        return word.id

    def update(self, word: SensitiveWord) -> bool:
        with self._lock:
            if word.id not in self._words:
                return False
            other = self._find(word.word)
            if other is not None and other.id != word.id:
                raise DuplicateWordError(word.word)
            self._words[word.id] = word.copy()
        return True

    def delete(self, word_id: uuid.UUID) -> bool:
        with self._lock:
            return self._words.pop(word_id, None) is not None

    def bulk_insert(self, words: Iterable[SensitiveWord]) -> int:
        inserted = 0
        with self._lock:
            for word in words:
                if self._find(word.word) is None:
                    self._words[word.id] = word.copy()
                    inserted += 1
        return inserted

    def ping(self) -> None:
        pass

    def close(self) -> None:
        pass

    def _find(self, text: str) -> SensitiveWord | None:
        key = text.strip().upper()
        for word in self._words.values():
            if word.word == key:
                return word
        return None


class StatsStore:
    """Keyed operation counters."""

    __slots__ = ("_stats", "_lock")

    def __init__(self) -> None:
        self._stats: dict[tuple[str, str], OperationStat] = {}
        self._lock = threading.Lock()

    def increment(self, operation_type: str, resource_type: str) -> None:
        key = (operation_type, resource_type)
        with self._lock:
            stat = self._stats.get(key)
            if stat is None:
                stat = self._stats[key] = OperationStat(operation_type, resource_type)
            stat.count += 1
            stat.last_updated = datetime.now(timezone.utc)

    def get_all(self) -> list[OperationStat]:
        with self._lock:
            return [
                OperationStat(s.operation_type, s.resource_type, s.count, s.last_updated)
                for _, s in sorted(self._stats.items())
            ]

    def get_by_type(self, operation_type: str) -> list[OperationStat]:
        wanted = operation_type.upper()
        return [s for s in self.get_all() if s.operation_type == wanted]

    def reset(self) -> None:
        now = datetime.now(timezone.utc)
        with self._lock:
            for stat in self._stats.values():
                stat.count = 0
                stat.last_updated = now

    def close(self) -> None:
        pass
