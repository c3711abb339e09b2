"""Core types."""

from __future__ import annotations
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from .errors import ValidationError

MAX_WORD_LENGTH = 100
MASK_CHAR = "*"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_word(text: str | None) -> str:
    """Trim and uppercase a word, rejecting blank or oversized input."""
    if text is None or not str(text).strip():
        raise ValidationError("Word cannot be null or empty")
    word = str(text).strip().upper()
    if len(word) > MAX_WORD_LENGTH:
        raise ValidationError(f"Word must be between 1 and {MAX_WORD_LENGTH} characters")
    if not word.strip(MASK_CHAR):
        raise ValidationError(f"Word cannot consist only of '{MASK_CHAR}' characters")
    return word


@dataclass(frozen=True, slots=True)
class SanitizeResult:
    """Result of sanitizing a message."""
    original: str
    sanitized: str
    replaced: int

    def to_dict(self) -> dict:
        return {
            "originalMessage": self.original,
            "sanitizedMessage": self.sanitized,
            "wordsReplaced": self.replaced,
        }


@dataclass(slots=True)
class SensitiveWord:
    """A registered sensitive word or phrase."""
    id: uuid.UUID
    word: str                 # normalized: trimmed, uppercased
    is_active: bool = True
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def create(cls, text: str | None) -> "SensitiveWord":
        now = _utcnow()
        return cls(id=uuid.uuid4(), word=normalize_word(text),
                   is_active=True, created_at=now, updated_at=now)

    def update_word(self, text: str | None) -> None:
        self.word = normalize_word(text)
        self.updated_at = _utcnow()

    def activate(self) -> None:
        self.is_active = True
        self.updated_at = _utcnow()

    def deactivate(self) -> None:
        self.is_active = False
        self.updated_at = _utcnow()

    def copy(self) -> "SensitiveWord":
        return replace(self)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "word": self.word,
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


class OperationType:
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    SANITIZE = "SANITIZE"


class ResourceType:
    SENSITIVE_WORD = "SensitiveWord"
    MESSAGE = "Message"


@dataclass(slots=True)
class OperationStat:
    """Usage counter for one (operation, resource) pair."""
    operation_type: str
    resource_type: str
    count: int = 0
    last_updated: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict:
        return {
            "operationType": self.operation_type,
            "resourceType": self.resource_type,
            "count": self.count,
            "lastUpdated": self.last_updated.isoformat(),
        }
