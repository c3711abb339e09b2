"""CLI interface for sensitive-words.

Usage:
    # Run the HTTP API
    sensitive-words serve --port 18792

    # Manage words
    sensitive-words add "select * from"
    sensitive-words list --active-only
    sensitive-words update 5f0c... --inactive
    sensitive-words import words.txt

    # Sanitize text (stdin: message, stdout: JSON result)
    echo 'SELECT name FROM users' | sensitive-words sanitize

Words and statistics are persisted in SQLite unless --memory is given.
"""

from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path

from .config import load_config, load_from_yaml, create_service
from .errors import SensitiveWordsError
from .log import setup_logging
from .service import SensitiveWordsService


def _build_config(args: argparse.Namespace) -> dict:
    # Without a config file the CLI persists to SQLite by default
    cfg = load_from_yaml(args.config) if args.config else load_config({"store": {"backend": "sqlite"}})
    if args.db:
        cfg["store_path"] = args.db
        cfg["store_backend"] = "sqlite"
    if args.memory:
        cfg["store_backend"] = "memory"
    if args.log_level:
        cfg["log_level"] = args.log_level.upper()
    return cfg


def _dump(data) -> None:
    json.dump(data, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_serve(args: argparse.Namespace, service: SensitiveWordsService, cfg: dict) -> None:
    """Run the HTTP API."""
    from .server import serve
    serve(service, host=args.host or cfg["host"], port=args.port or cfg["port"])


def cmd_sanitize(args: argparse.Namespace, service: SensitiveWordsService, cfg: dict) -> None:
    """Sanitize a message read from stdin."""
    message = sys.stdin.read()
    if message.endswith("\n"):
        message = message[:-1]
    json.dump(service.sanitize(message).to_dict(), sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_list(args: argparse.Namespace, service: SensitiveWordsService, cfg: dict) -> None:
    _dump([w.to_dict() for w in service.list_words(active_only=args.active_only)])


def cmd_add(args: argparse.Namespace, service: SensitiveWordsService, cfg: dict) -> None:
    word_id = service.create_word(args.word)
    _dump({"id": str(word_id)})


def cmd_update(args: argparse.Namespace, service: SensitiveWordsService, cfg: dict) -> None:
    word = service.update_word(args.id, text=args.word, is_active=args.active)
    _dump(word.to_dict())


def cmd_delete(args: argparse.Namespace, service: SensitiveWordsService, cfg: dict) -> None:
    service.delete_word(args.id)
    sys.stderr.write(f"Deleted word {args.id}\n")


def cmd_import(args: argparse.Namespace, service: SensitiveWordsService, cfg: dict) -> None:
    """Import words from a file, one per line."""
    lines = Path(args.file).read_text(encoding="utf-8").splitlines()
    inserted = service.import_words(lines)
    _dump({"inserted": inserted})


def cmd_stats(args: argparse.Namespace, service: SensitiveWordsService, cfg: dict) -> None:
    _dump([s.to_dict() for s in service.get_statistics(args.type)])


def cmd_reset_stats(args: argparse.Namespace, service: SensitiveWordsService, cfg: dict) -> None:
    service.reset_statistics()
    sys.stderr.write("Operation statistics reset\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sensitive-words",
        description="Register sensitive words and scrub them from messages",
    )
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--db", help="SQLite database path")
    parser.add_argument("--memory", action="store_true", help="Use the in-memory store")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host")
    p.add_argument("--port", type=int)

    sub.add_parser("sanitize", help="Sanitize a message (stdin)")

    p = sub.add_parser("list", help="List words")
    p.add_argument("--active-only", action="store_true")

    p = sub.add_parser("add", help="Add a word")
    p.add_argument("word")

    p = sub.add_parser("update", help="Update a word")
    p.add_argument("id")
    p.add_argument("--word")
    state = p.add_mutually_exclusive_group()
    state.add_argument("--active", dest="active", action="store_true", default=None)
    state.add_argument("--inactive", dest="active", action="store_false", default=None)

    p = sub.add_parser("delete", help="Delete a word")
    p.add_argument("id")

    p = sub.add_parser("import", help="Bulk import words (one per line)")
    p.add_argument("file")

    p = sub.add_parser("stats", help="Show operation statistics")
    p.add_argument("type", nargs="?")

    sub.add_parser("reset-stats", help="Reset operation statistics")
    return parser


_COMMANDS = {
    "serve": cmd_serve,
    "sanitize": cmd_sanitize,
    "list": cmd_list,
    "add": cmd_add,
    "update": cmd_update,
    "delete": cmd_delete,
    "import": cmd_import,
    "stats": cmd_stats,
    "reset-stats": cmd_reset_stats,
}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        cfg = _build_config(args)
        setup_logging(cfg["log_level"])
        service = create_service(cfg)
    except SensitiveWordsError as e:
        sys.stderr.write(f"error: {e}\n")
        return 1

    if args.command == "serve":
        # serve() owns the service from here and closes it on shutdown
        cmd_serve(args, service, cfg)
        return 0
    try:
        _COMMANDS[args.command](args, service, cfg)
    except SensitiveWordsError as e:
        sys.stderr.write(f"error: {e}\n")
        return 1
    finally:
        service.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
