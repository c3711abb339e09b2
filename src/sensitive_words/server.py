"""HTTP server for sensitive-words.

Runs as a lightweight stdlib HTTP server (one thread per request).

Endpoints:
    POST   /api/sanitize                        — Sanitize a message
    GET    /api/sensitivewords[?activeOnly=true] — List words
    POST   /api/sensitivewords                  — Create a word
    GET    /api/sensitivewords/{id}             — Get a word
    PUT    /api/sensitivewords/{id}             — Update word text and/or active flag
    DELETE /api/sensitivewords/{id}             — Delete a word
    POST   /api/sensitivewords/{id}/activate    — Activate a word
    POST   /api/sensitivewords/{id}/deactivate  — Deactivate a word
    GET    /api/statistics[/{operationType}]    — Operation counts
    POST   /api/statistics/reset                — Reset operation counts
    GET    /health, /health/live, /health/ready — Health checks
    GET    /metrics                             — Process metrics

All endpoints expect/return JSON.
"""

from __future__ import annotations
import json
import logging
import re
import resource
import sys
import threading
import time
from datetime import datetime, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable
from urllib.parse import parse_qs, urlsplit

from .errors import (
    DuplicateWordError, SensitiveWordsError, ValidationError, WordNotFoundError,
)
from .service import SensitiveWordsService

logger = logging.getLogger(__name__)

SLOW_REQUEST_MS = 1000

_STARTED = time.monotonic()

_ERROR_STATUS: list[tuple[type[Exception], int]] = [
    (ValidationError, 400),
    (WordNotFoundError, 404),
    (DuplicateWordError, 409),
]


class BadRequest(Exception):
    """Malformed request body."""


class SensitiveWordsServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int], service: SensitiveWordsService) -> None:
        super().__init__(address, SensitiveWordsHandler)
        self.service = service


class SensitiveWordsHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the sensitive-words API."""

    server: SensitiveWordsServer

    @property
    def service(self) -> SensitiveWordsService:
        return self.server.service

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _read_json(self) -> dict[str, Any]:
        try:
            length = int(self.headers.get("Content-Length", 0))
            if length < 0:
                raise ValueError(length)
        except ValueError as e:
            raise BadRequest("invalid Content-Length header") from e
        body = self.rfile.read(length).decode("utf-8") if length else ""
        if not body:
            return {}
        try:
            data = json.loads(body)
        except json.JSONDecodeError as e:
            raise BadRequest(f"invalid JSON: {e.msg}") from e
        if not isinstance(data, dict):
            raise BadRequest("request body must be a JSON object")
        return data

    def _respond(self, status: int, data: Any = None) -> None:
        self._status = status
        body = b"" if data is None else json.dumps(data, ensure_ascii=False).encode("utf-8")
        self.send_response(status)
        self._cors_headers()
        if data is not None:
            self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if body:
            self.wfile.write(body)

    def _cors_headers(self) -> None:
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Access-Control-Allow-Methods", "GET, POST, PUT, DELETE, OPTIONS")
        self.send_header("Access-Control-Allow-Headers", "Content-Type")

    def log_message(self, format: str, *args: Any) -> None:
        # Requests are logged by _dispatch with timing instead
        pass

    def _dispatch(self, method: str) -> None:
        started = time.perf_counter()
        self._status = 500
        parts = urlsplit(self.path)
        path = parts.path.rstrip("/") or "/"
        query = parse_qs(parts.query)
        try:
            for route_method, pattern, handler in _ROUTES:
                if route_method != method:
                    continue
                m = pattern.fullmatch(path)
                if m:
                    handler(self, query, *m.groups())
                    break
            else:
                self._respond(404, {"error": "not found"})
        except BadRequest as e:
            self._respond(400, {"error": str(e)})
        except SensitiveWordsError as e:
            status = next((s for cls, s in _ERROR_STATUS if isinstance(e, cls)), 500)
            if status == 500:
                logger.error("Unhandled service error on %s %s: %s", method, path, e)
            self._respond(status, {"error": str(e)})
        except Exception:
            logger.exception("Error handling %s %s", method, path)
            self._respond(500, {"error": "internal error"})
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info("HTTP %s %s responded %d in %.1fms", method, path, self._status, elapsed_ms)
            if elapsed_ms > SLOW_REQUEST_MS:
                logger.warning("SLOW REQUEST: %s %s took %.0fms (status: %d)",
                               method, path, elapsed_ms, self._status)

    def do_GET(self) -> None:
        self._dispatch("GET")

    def do_POST(self) -> None:
        self._dispatch("POST")

    def do_PUT(self) -> None:
        self._dispatch("PUT")

    def do_DELETE(self) -> None:
        self._dispatch("DELETE")

    def do_OPTIONS(self) -> None:
        self._status = 204
        self.send_response(204)
        self._cors_headers()
        self.send_header("Content-Length", "0")
        self.end_headers()

    # ------------------------------------------------------------------
    # Sanitize
    # ------------------------------------------------------------------

    def sanitize(self, query: dict) -> None:
        body = self._read_json()
        message = body.get("message")
        if message is None:
            raise ValidationError("Message is required")
        if not isinstance(message, str):
            raise ValidationError("Message must be a string")
        self._respond(200, self.service.sanitize(message).to_dict())

    # ------------------------------------------------------------------
    # Words
    # ------------------------------------------------------------------

    def list_words(self, query: dict) -> None:
        active_only = query.get("activeOnly", ["false"])[-1].lower() in ("1", "true", "yes")
        words = self.service.list_words(active_only=active_only)
        self._respond(200, [w.to_dict() for w in words])

    def get_word(self, query: dict, word_id: str) -> None:
        self._respond(200, self.service.get_word(word_id).to_dict())

    def create_word(self, query: dict) -> None:
        body = self._read_json()
        word = body.get("word")
        if not isinstance(word, str):
            raise ValidationError("Word is required")
        word_id = self.service.create_word(word)
        self._respond(201, {"id": str(word_id)})

    def update_word(self, query: dict, word_id: str) -> None:
        body = self._read_json()
        text = body.get("word")
        is_active = body.get("isActive")
        if text is not None and not isinstance(text, str):
            raise ValidationError("Word must be a string")
        if is_active is not None and not isinstance(is_active, bool):
            raise ValidationError("isActive must be a boolean")
        self.service.update_word(word_id, text=text, is_active=is_active)
        self._respond(204)

    def activate_word(self, query: dict, word_id: str) -> None:
        self.service.activate_word(word_id)
        self._respond(204)

    def deactivate_word(self, query: dict, word_id: str) -> None:
        self.service.deactivate_word(word_id)
        self._respond(204)

    def delete_word(self, query: dict, word_id: str) -> None:
        self.service.delete_word(word_id)
        self._respond(204)

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_statistics(self, query: dict, operation_type: str | None = None) -> None:
        stats = self.service.get_statistics(operation_type)
        self._respond(200, [s.to_dict() for s in stats])

    def reset_statistics(self, query: dict) -> None:
        self.service.reset_statistics()
        self._respond(200, {"message": "All operation statistics have been reset to zero"})

    # ------------------------------------------------------------------
    # Monitoring
    # ------------------------------------------------------------------

    def health(self, query: dict) -> None:
        checks = {"api": "Healthy", "store": _probe(self.service)}
        healthy = all(v == "Healthy" for v in checks.values())
        self._respond(200 if healthy else 503,
                      {"status": "Healthy" if healthy else "Unhealthy", "checks": checks})

    def health_live(self, query: dict) -> None:
        self._respond(200, {"status": "Healthy", "checks": {"api": "Healthy"}})

    def health_ready(self, query: dict) -> None:
        store = _probe(self.service)
        healthy = store == "Healthy"
        self._respond(200 if healthy else 503,
                      {"status": "Healthy" if healthy else "Unhealthy", "checks": {"store": store}})

    def metrics(self, query: dict) -> None:
        self._respond(200, process_metrics())


def _probe(service: SensitiveWordsService) -> str:
    try:
        service.check_ready()
    except Exception as e:
        logger.warning("Readiness probe failed: %s", e)
        return f"Unhealthy: {e}"
    return "Healthy"


def process_metrics() -> dict[str, Any]:
    usage = resource.getrusage(resource.RUSAGE_SELF)
    # ru_maxrss is bytes on macOS, kilobytes elsewhere
    rss_bytes = usage.ru_maxrss if sys.platform == "darwin" else usage.ru_maxrss * 1024
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptimeSeconds": round(time.monotonic() - _STARTED, 3),
        "memoryUsageMB": rss_bytes // (1024 * 1024),
        "cpuTimeSeconds": round(usage.ru_utime + usage.ru_stime, 3),
        "threadCount": threading.active_count(),
    }


_ID = r"([^/]+)"

_ROUTES: list[tuple[str, re.Pattern, Callable]] = [
    ("POST", re.compile(r"/api/sanitize"), SensitiveWordsHandler.sanitize),
    ("GET", re.compile(r"/api/sensitivewords"), SensitiveWordsHandler.list_words),
    ("POST", re.compile(r"/api/sensitivewords"), SensitiveWordsHandler.create_word),
    ("GET", re.compile(rf"/api/sensitivewords/{_ID}"), SensitiveWordsHandler.get_word),
    ("PUT", re.compile(rf"/api/sensitivewords/{_ID}"), SensitiveWordsHandler.update_word),
    ("DELETE", re.compile(rf"/api/sensitivewords/{_ID}"), SensitiveWordsHandler.delete_word),
    ("POST", re.compile(rf"/api/sensitivewords/{_ID}/activate"), SensitiveWordsHandler.activate_word),
    ("POST", re.compile(rf"/api/sensitivewords/{_ID}/deactivate"), SensitiveWordsHandler.deactivate_word),
    ("POST", re.compile(r"/api/statistics/reset"), SensitiveWordsHandler.reset_statistics),
    ("GET", re.compile(r"/api/statistics"), SensitiveWordsHandler.get_statistics),
    ("GET", re.compile(rf"/api/statistics/{_ID}"), SensitiveWordsHandler.get_statistics),
    ("GET", re.compile(r"/health"), SensitiveWordsHandler.health),
    ("GET", re.compile(r"/health/live"), SensitiveWordsHandler.health_live),
    ("GET", re.compile(r"/health/ready"), SensitiveWordsHandler.health_ready),
    ("GET", re.compile(r"/metrics"), SensitiveWordsHandler.metrics),
]


def make_server(service: SensitiveWordsService, host: str = "127.0.0.1", port: int = 18792) -> SensitiveWordsServer:
    """Bind a server; port 0 picks a free port."""
    return SensitiveWordsServer((host, port), service)


def serve(service: SensitiveWordsService, host: str = "127.0.0.1", port: int = 18792) -> None:
    """Start the sensitive-words HTTP server and block until interrupted."""
    server = make_server(service, host, port)
    logger.info("sensitive-words listening on http://%s:%d", *server.server_address[:2])
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        server.server_close()
        service.close()
