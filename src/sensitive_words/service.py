"""Request handlers for the sensitive-words API.

Sits between a transport (HTTP server, CLI) and the stores:

    service = SensitiveWordsService(words=WordStore(), stats=StatsStore())
    word_id = service.create_word("select")
    result = service.sanitize("select * from users")

Each handler bumps the operation counter only after it succeeds.
"""

from __future__ import annotations
import logging
import uuid
from dataclasses import dataclass
from typing import Iterable

from .errors import ValidationError, WordNotFoundError, DuplicateWordError
from .sanitizer import SanitizationService
from .store import StatsStore, WordStore
from .store_sqlite import SqliteStatsStore, SqliteWordStore
from .types import (
    OperationStat, OperationType, ResourceType, SanitizeResult, SensitiveWord,
    normalize_word,
)

logger = logging.getLogger(__name__)


def parse_word_id(value: str | uuid.UUID) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid word id '{value}'") from e


@dataclass
class SensitiveWordsService:
    """CRUD, sanitize and statistics handlers over a word store and stats store."""

    words: WordStore | SqliteWordStore
    stats: StatsStore | SqliteStatsStore

    def __post_init__(self) -> None:
        self.sanitizer = SanitizationService(self.words)

    # ------------------------------------------------------------------
    # Sanitize
    # ------------------------------------------------------------------

    def sanitize(self, message: str | None) -> SanitizeResult:
        result = self.sanitizer.sanitize_message(message)
        self.stats.increment(OperationType.SANITIZE, ResourceType.MESSAGE)
        if result.replaced:
            logger.info("Sanitized message: %d word(s) replaced", result.replaced)
        return result

    # ------------------------------------------------------------------
    # Words
    # ------------------------------------------------------------------

    def list_words(self, *, active_only: bool = False) -> list[SensitiveWord]:
        words = self.words.get_active_words() if active_only else self.words.get_all()
        self._count(OperationType.READ)
        return words

    def get_word(self, word_id: str | uuid.UUID) -> SensitiveWord:
        word_id = parse_word_id(word_id)
        word = self.words.get_by_id(word_id)
        if word is None:
            raise WordNotFoundError(word_id)
        self._count(OperationType.READ)
        return word

    def create_word(self, text: str | None) -> uuid.UUID:
        word = SensitiveWord.create(text)
        if self.words.exists(word.word):
            raise DuplicateWordError(word.word)
        word_id = self.words.create(word)
        self._count(OperationType.CREATE)
        logger.info("Created sensitive word %s (%s)", word.word, word_id)
        return word_id

    def update_word(
        self,
        word_id: str | uuid.UUID,
        *,
        text: str | None = None,
        is_active: bool | None = None,
    ) -> SensitiveWord:
        word_id = parse_word_id(word_id)
        word = self.words.get_by_id(word_id)
        if word is None:
            raise WordNotFoundError(word_id)

        if text is not None:
            new_text = normalize_word(text)
            other = self.words.get_by_word(new_text)
            if other is not None and other.id != word_id:
                raise DuplicateWordError(new_text)
            word.update_word(new_text)
        if is_active is True:
            word.activate()
        elif is_active is False:
            word.deactivate()

        if not self.words.update(word):
            raise WordNotFoundError(word_id)
        self._count(OperationType.UPDATE)
        logger.info("Updated sensitive word %s (%s, active=%s)", word.word, word_id, word.is_active)
        return word

    def activate_word(self, word_id: str | uuid.UUID) -> SensitiveWord:
        return self.update_word(word_id, is_active=True)

    def deactivate_word(self, word_id: str | uuid.UUID) -> SensitiveWord:
        return self.update_word(word_id, is_active=False)

    def delete_word(self, word_id: str | uuid.UUID) -> None:
        word_id = parse_word_id(word_id)
        if not self.words.delete(word_id):
            raise WordNotFoundError(word_id)
        self._count(OperationType.DELETE)
        logger.info("Deleted sensitive word %s", word_id)

    def import_words(self, texts: Iterable[str]) -> int:
        """Bulk insert; blank lines and existing words are skipped."""
        words = [SensitiveWord.create(t) for t in texts if t is not None and str(t).strip()]
        inserted = self.words.bulk_insert(words)
        if inserted:
            self._count(OperationType.CREATE)
        logger.info("Imported %d of %d sensitive word(s)", inserted, len(words))
        return inserted

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_statistics(self, operation_type: str | None = None) -> list[OperationStat]:
        if operation_type is None:
            return self.stats.get_all()
        if not operation_type.strip():
            raise ValidationError("Operation type cannot be empty")
        return self.stats.get_by_type(operation_type.strip())

    def reset_statistics(self) -> None:
        self.stats.reset()
        logger.warning("Operation statistics have been reset")

    def check_ready(self) -> None:
        """Raise if the word store cannot serve requests."""
        self.words.ping()

    def close(self) -> None:
        self.words.close()
        self.stats.close()

    def _count(self, operation_type: str) -> None:
        self.stats.increment(operation_type, ResourceType.SENSITIVE_WORD)
