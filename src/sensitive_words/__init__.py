"""Sensitive Words — register sensitive words and scrub them from messages."""

from .sanitizer import sanitize, SanitizationService
from .types import SanitizeResult, SensitiveWord, OperationStat, OperationType, ResourceType
from .errors import (
    SensitiveWordsError, ValidationError, WordNotFoundError, DuplicateWordError, ConfigError,
)
from .store import WordStore, StatsStore
from .store_sqlite import SqliteWordStore, SqliteStatsStore
from .service import SensitiveWordsService
from .config import create_service, load_config, load_from_yaml

__all__ = [
    "sanitize", "SanitizationService",
    "SanitizeResult", "SensitiveWord", "OperationStat", "OperationType", "ResourceType",
    "SensitiveWordsError", "ValidationError", "WordNotFoundError", "DuplicateWordError",
    "ConfigError",
    "WordStore", "StatsStore",
    "SqliteWordStore", "SqliteStatsStore",
    "SensitiveWordsService",
    "create_service", "load_config", "load_from_yaml",
]
__version__ = "0.1.0"
