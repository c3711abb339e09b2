"""Persistent stores backed by SQLite — survive process restarts.

Drop-in replacements for WordStore / StatsStore when you need durability.

Usage:
    words = SqliteWordStore(db_path="~/.sensitive-words/words.db")
    stats = SqliteStatsStore(db_path="~/.sensitive-words/words.db")
    # Same API as the in-memory stores
"""

from __future__ import annotations
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from .errors import DuplicateWordError
from .types import OperationStat, SensitiveWord


_SCHEMA = """
CREATE TABLE IF NOT EXISTS sensitive_words (
    id TEXT PRIMARY KEY,
    word TEXT NOT NULL UNIQUE,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_sensitive_words_active
    ON sensitive_words(is_active);
CREATE TABLE IF NOT EXISTS operation_stats (
    operation_type TEXT NOT NULL,
    resource_type TEXT NOT NULL,
    count INTEGER NOT NULL DEFAULT 0,
    last_updated TEXT NOT NULL,
    PRIMARY KEY (operation_type, resource_type)
);
"""

_WORD_COLUMNS = "id, word, is_active, created_at, updated_at"


def _connect(db_path: str | Path) -> sqlite3.Connection:
    if str(db_path) != ":memory:":
        db_path = Path(db_path).expanduser()
        db_path.parent.mkdir(parents=True, exist_ok=True)
    db = sqlite3.connect(str(db_path), check_same_thread=False)
    db.executescript(_SCHEMA)
    return db


def _row_to_word(row: tuple) -> SensitiveWord:
    word_id, word, is_active, created_at, updated_at = row
    return SensitiveWord(
        id=uuid.UUID(word_id),
        word=word,
        is_active=bool(is_active),
        created_at=datetime.fromisoformat(created_at),
        updated_at=datetime.fromisoformat(updated_at),
    )


class SqliteWordStore:
    """Persistent sensitive-word repository."""

    __slots__ = ("_db", "_lock")

    def __init__(self, *, db_path: str | Path = "words.db") -> None:
        self._db = _connect(db_path)
        self._lock = threading.Lock()

    def _query(self, sql: str, params: tuple = ()) -> list[tuple]:
        with self._lock:
            return self._db.execute(sql, params).fetchall()

    def get_by_id(self, word_id: uuid.UUID) -> SensitiveWord | None:
        rows = self._query(
            f"SELECT {_WORD_COLUMNS} FROM sensitive_words WHERE id = ?", (str(word_id),)
        )
        return _row_to_word(rows[0]) if rows else None

    def get_all(self) -> list[SensitiveWord]:
        rows = self._query(f"SELECT {_WORD_COLUMNS} FROM sensitive_words ORDER BY word")
        return [_row_to_word(r) for r in rows]

    def get_active_words(self) -> list[SensitiveWord]:
        rows = self._query(
            f"SELECT {_WORD_COLUMNS} FROM sensitive_words WHERE is_active = 1 ORDER BY word"
        )
        return [_row_to_word(r) for r in rows]

    def get_by_word(self, text: str) -> SensitiveWord | None:
        rows = self._query(
            f"SELECT {_WORD_COLUMNS} FROM sensitive_words WHERE word = ?",
            (text.strip().upper(),),
        )
        return _row_to_word(rows[0]) if rows else None

    def exists(self, text: str) -> bool:
        return self.get_by_word(text) is not None

    def create(self, word: SensitiveWord) -> uuid.UUID:
        try:
            with self._lock, self._db:
                self._db.execute(
                    f"INSERT INTO sensitive_words ({_WORD_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                    (str(word.id), word.word, int(word.is_active),
                     word.created_at.isoformat(), word.updated_at.isoformat()),
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateWordError(word.word) from e
        return word.id

    def update(self, word: SensitiveWord) -> bool:
        try:
            with self._lock, self._db:
                cur = self._db.execute(
                    "UPDATE sensitive_words SET word = ?, is_active = ?, updated_at = ? WHERE id = ?",
                    (word.word, int(word.is_active), word.updated_at.isoformat(), str(word.id)),
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateWordError(word.word) from e
        return cur.rowcount > 0

    def delete(self, word_id: uuid.UUID) -> bool:
        with self._lock, self._db:
            cur = self._db.execute("DELETE FROM sensitive_words WHERE id = ?", (str(word_id),))
        return cur.rowcount > 0

    def bulk_insert(self, words: Iterable[SensitiveWord]) -> int:
        rows = [
            (str(w.id), w.word, int(w.is_active), w.created_at.isoformat(), w.updated_at.isoformat())
            for w in words
        ]
        if not rows:
            return 0
        with self._lock, self._db:
            before = self._db.total_changes
            self._db.executemany(
                f"INSERT OR IGNORE INTO sensitive_words ({_WORD_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                rows,
            )
            return self._db.total_changes - before

    def ping(self) -> None:
        """Raise sqlite3.Error if the database is unusable."""
        self._query("SELECT 1")

    def close(self) -> None:
        self._db.close()


class SqliteStatsStore:
    """Persistent operation counters."""

    __slots__ = ("_db", "_lock")

    def __init__(self, *, db_path: str | Path = "words.db") -> None:
        self._db = _connect(db_path)
        self._lock = threading.Lock()

    def increment(self, operation_type: str, resource_type: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._lock, self._db:
            self._db.execute(
                "INSERT INTO operation_stats (operation_type, resource_type, count, last_updated) "
                "VALUES (?, ?, 1, ?) "
                "ON CONFLICT(operation_type, resource_type) "
                "DO UPDATE SET count = count + 1, last_updated = excluded.last_updated",
                (operation_type, resource_type, now),
            )

    def _select(self, where: str = "", params: tuple = ()) -> list[OperationStat]:
        with self._lock:
            rows = self._db.execute(
                "SELECT operation_type, resource_type, count, last_updated FROM operation_stats "
                f"{where} ORDER BY operation_type, resource_type",
                params,
            ).fetchall()
        return [
            OperationStat(op, res, count, datetime.fromisoformat(ts))
            for op, res, count, ts in rows
        ]

    def get_all(self) -> list[OperationStat]:
        return self._select()

    def get_by_type(self, operation_type: str) -> list[OperationStat]:
        return self._select("WHERE operation_type = ?", (operation_type.upper(),))

    def reset(self) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._lock, self._db:
            self._db.execute("UPDATE operation_stats SET count = 0, last_updated = ?", (now,))

    def close(self) -> None:
        self._db.close()
