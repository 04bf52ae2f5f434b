"""JSON logging for the session API.

Every record carries the ``request_id`` of the HTTP request that produced it,
so a login, its refresh-store writes and any rendered problem response can be
correlated. Only whitelisted ``extra=`` keys reach the output: credentials and
full token values are never copied into a log line.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
INBOUND_ID_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")
MAX_INBOUND_ID_LENGTH = 128

# ``extra=`` keys copied into the JSON payload when present.
EXTRA_KEYS = (
    "endpoint",
    "elapsed_ms",
    "event",
    "reason",
    "code",
    "user_id",
    "token_prefix",
    "total_tokens",
    "required_roles",
    "role",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, request id and whitelisted extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update({key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    """Stamp ``request_id`` on records; ``None`` outside a request (CLI, startup)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def _inbound_request_id() -> str | None:
    for header in INBOUND_ID_HEADERS:
        value = request.headers.get(header, "").strip()
        if value and len(value) <= MAX_INBOUND_ID_LENGTH and value.isprintable():
            return value
    return None


def ensure_request_id() -> str:
    """Return the id of the current request, adopting a sane inbound header or minting a UUID.

    Outside a request context a fresh UUID is returned on every call.
    """

    if not has_request_context():
        return str(uuid4())
    if "request_id" not in g:
        g.request_id = _inbound_request_id() or str(uuid4())
    return g.request_id


def _resolve_level(level: str | int) -> int | str:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else level.upper()


def configure_logging(level: str | int = "INFO") -> None:
    """Replace root handlers with a single JSON stdout handler."""

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_resolve_level(level))


def init_app(app: Flask) -> None:
    """Assign a request id before each request and echo it on every response."""

    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _assign_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["configure_logging", "init_app", "ensure_request_id", "JSONFormatter"]
