"""JSON logging for the auth service, correlated by request id.

Every record leaves the process as one JSON object per line. Credentials
never reach the output: :class:`SecretsFilter` drops well-known secret
attributes that callers might pass through ``extra``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import IO, Any
from uuid import uuid4

from flask import Flask, Response, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

# ``extra`` attributes promoted into the JSON payload.
EXTRA_KEYS = ("event", "user_id", "revoked", "endpoint", "elapsed_ms")

# ``extra`` attributes that are removed from records before formatting.
SECRET_KEYS = frozenset(
    {"password", "password_hash", "token", "access_token", "refresh_token", "token_value"}
)


class JSONFormatter(logging.Formatter):
    """Render a record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, tz=UTC).isoformat(
                timespec="milliseconds"
            ),
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
    """Stamp ``request_id`` on every record (``None`` outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


class SecretsFilter(logging.Filter):
    """Strip credential-bearing attributes from records."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key in SECRET_KEYS.intersection(vars(record)):
            delattr(record, key)
        return True


def ensure_request_id() -> str:
    """
    Return the id correlating the current request.

    Reuses ``X-Request-ID`` or ``X-Correlation-ID`` from the client when
    present, otherwise mints a UUID4; the value is cached on ``flask.g``.
    Outside a request a fresh id is returned every call.
    """
    if not has_request_context():
        return str(uuid4())
    if "request_id" not in g:
        incoming = next(
            (request.headers[h] for h in CORRELATION_HEADERS if request.headers.get(h)), None
        )
        g.request_id = incoming or str(uuid4())
    return str(g.request_id)


def configure_logging(level: str | int = "INFO", *, stream: IO[str] | None = None) -> None:
    """
    Install a single JSON handler on the root logger.

    Repeated calls replace the previous handler instead of stacking them.

    :param level: Level name or number for the root logger.
    :param stream: Output stream; ``sys.stdout`` by default.
    """
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(SecretsFilter())
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Seed a request id for each request and echo it in the response."""

    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _seed_request_id() -> None:
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response: Response) -> Response:
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = [
    "JSONFormatter",
    "RequestIdFilter",
    "SecretsFilter",
    "configure_logging",
    "ensure_request_id",
    "init_app",
]
