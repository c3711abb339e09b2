"""YAML/dict config loader for sensitive-words.

Supports loading from a YAML file or a plain dict (for embedding
in a larger service config).  Environment variables win over both.

Example YAML:

    sensitive_words:
      log_level: INFO
      server:
        host: 127.0.0.1
        port: 18792
      store:
        backend: sqlite          # "memory" (default) or "sqlite"
        path: ~/.sensitive-words/words.db
      seed_words:
        - SELECT
        - DROP TABLE
"""

from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Any, Mapping

from .errors import ConfigError
from .service import SensitiveWordsService
from .store import StatsStore, WordStore
from .store_sqlite import SqliteStatsStore, SqliteWordStore

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 18792
DEFAULT_DB = str(Path.home() / ".sensitive-words" / "words.db")

BACKENDS = ("memory", "sqlite")


def load_config(
    data: dict[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline) and apply env overrides."""
    data = dict(data or {})
    env = os.environ if environ is None else environ
    # Support nested under "sensitive_words" key or flat
    if "sensitive_words" in data:
        data = data["sensitive_words"] or {}

    store = data.get("store") or {}
    server = data.get("server") or {}

    cfg = {
        "log_level": str(env.get("SENSITIVE_WORDS_LOG_LEVEL", data.get("log_level", "INFO"))).upper(),
        "host": env.get("SENSITIVE_WORDS_HOST", server.get("host", DEFAULT_HOST)),
        "port": env.get("SENSITIVE_WORDS_PORT", server.get("port", DEFAULT_PORT)),
        "store_backend": str(env.get("SENSITIVE_WORDS_STORE", store.get("backend", "memory"))).lower(),
        "store_path": env.get("SENSITIVE_WORDS_DB", store.get("path", DEFAULT_DB)),
        "seed_words": list(data.get("seed_words") or []),
    }

    bad = [w for w in cfg["seed_words"] if not isinstance(w, str)]
    if bad:
        raise ConfigError(f"seed_words entries must be strings (quote them in YAML): {bad!r}")

    try:
        cfg["port"] = int(cfg["port"])
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid port: {cfg['port']!r}") from e
    if cfg["store_backend"] not in BACKENDS:
        raise ConfigError(
            f"Unknown store backend {cfg['store_backend']!r} (expected one of {', '.join(BACKENDS)})"
        )
    return cfg


def load_from_yaml(path: str | Path, environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml
    try:
        with open(Path(path).expanduser()) as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return load_config(raw, environ)


def create_service(config: dict[str, Any]) -> SensitiveWordsService:
    """Create a fully wired service from a config dict."""
    cfg = config if "store_backend" in config else load_config(config)

    if cfg["store_backend"] == "sqlite":
        words = SqliteWordStore(db_path=cfg["store_path"])
        stats = SqliteStatsStore(db_path=cfg["store_path"])
        logger.info("Using SQLite store at %s", cfg["store_path"])
    else:
        words, stats = WordStore(), StatsStore()
        logger.info("Using in-memory store")

    service = SensitiveWordsService(words=words, stats=stats)
    if cfg["seed_words"]:
        service.import_words(cfg["seed_words"])
    return service
