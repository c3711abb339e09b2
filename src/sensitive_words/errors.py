"""Exception hierarchy for sensitive-words."""


class SensitiveWordsError(Exception):
    """Base class for all service errors."""


class ValidationError(SensitiveWordsError, ValueError):
    """Input failed validation (blank word, bad id, missing field)."""


class WordNotFoundError(SensitiveWordsError, LookupError):
    """No word exists with the requested id."""

    def __init__(self, word_id) -> None:
        super().__init__(f"Word with ID '{word_id}' not found")
        self.word_id = word_id


class DuplicateWordError(SensitiveWordsError):
    """Another word already uses this text."""

    def __init__(self, word: str) -> None:
        super().__init__(f"Word '{word}' already exists")
        self.word = word


class ConfigError(SensitiveWordsError):
    """Configuration is invalid."""
