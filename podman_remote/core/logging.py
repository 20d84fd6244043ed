"""Logging setup for the gateway.

Every log line carries the id of the request that produced it, so a 401, a
failed engine call and the request summary can be tied together. Console
output is plain text or JSON lines (``LOG_FORMAT``); a rotating file copy is
written when ``LOG_FILE_PATH`` is set.

Backend error text passes through ``sanitize_error`` before it is logged:
engine and bus errors can echo request headers or host paths back to us, and
the bearer token must never reach a log sink.
"""

import logging
import re
import sys
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

from podman_remote.core.config import Settings, get_settings

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(request_id)s | %(name)s | %(message)s"
JSON_FIELDS = "%(levelname)s %(name)s %(request_id)s %(message)s"

# Placeholder written when a record is logged outside any request
NO_REQUEST_ID = "-"

# Chatty third-party loggers and the level they are held at
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "urllib3": logging.WARNING,
    "docker": logging.WARNING,
}

_AUTH_HEADER_PATTERN = re.compile(
    r"(authorization[\"']?\s*[:=]\s*[\"']?)(?:(?:bearer|basic)\s+)?[^\s,\"'}]+", re.I
)
_BEARER_PATTERN = re.compile(r"\bBearer\s+\S+", re.I)
_SECRET_ASSIGNMENT_PATTERN = re.compile(
    r"\b(token|secret|password|api[_-]?key)\s*[=:]\s*\S+", re.I
)
_PATH_PATTERN = re.compile(r"(?:/[\w.@+-]+){2,}")

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    """Get the current request ID from context."""
    return _request_id.get()


def set_request_id(request_id: str | None) -> None:
    """Set the request ID in context."""
    _request_id.set(request_id)


class RequestIdFilter(logging.Filter):
    """Stamp each record with the current request id (or ``-``)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or NO_REQUEST_ID  # type: ignore[attr-defined]
        return True


def json_formatter() -> JsonFormatter:
    """JSON lines with ``timestamp``, ``level``, ``logger``, ``request_id`` and extras."""
    return JsonFormatter(
        JSON_FIELDS,
        rename_fields={"levelname": "level", "name": "logger"},
        timestamp=True,
    )


def _console_handler(settings: Settings, request_filter: logging.Filter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(request_filter)
    if settings.log_format == "json":
        handler.setFormatter(json_formatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    return handler


def _file_handler(settings: Settings, request_filter: logging.Filter) -> logging.Handler | None:
    """Rotating text log, or None when file logging is off or the path is unusable."""
    if not settings.log_file_path:
        return None

    log_path = Path(settings.log_file_path)
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            filename=log_path,
            maxBytes=settings.log_file_max_bytes,
            backupCount=settings.log_file_backup_count,
            encoding="utf-8",
        )
    except OSError as e:
        logging.getLogger(__name__).warning(f"File logging disabled for {log_path}: {e}")
        return None

    handler.addFilter(request_filter)
    handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    return handler


def setup_logging() -> None:
    """Install the gateway's handlers on the root logger.

    Replaces any handlers already present, so calling it again (e.g. once
    per ``create_app()``) does not duplicate output.
    """
    settings = get_settings()
    level = logging.getLevelName(settings.log_level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)

    request_filter = RequestIdFilter()
    root_logger.addHandler(_console_handler(settings, request_filter))
    file_handler = _file_handler(settings, request_filter)
    if file_handler is not None:
        root_logger.addHandler(file_handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    root_logger.debug(
        "Logging ready",
        extra={
            "log_level": settings.log_level,
            "log_format": settings.log_format,
            "log_file": settings.log_file_path,
        },
    )


def sanitize_error(error: Exception, max_length: int = 500) -> str:
    """Render a backend error for logging without credentials or full paths.

    >>> sanitize_error(ValueError("header Authorization: Bearer abc123 rejected"))
    'header Authorization: [REDACTED] rejected'
    >>> sanitize_error(OSError("No such file: /run/user/1000/podman/podman.sock"))
    'No such file: .../podman.sock'
    """
    msg = str(error)
    msg = _AUTH_HEADER_PATTERN.sub(r"\1[REDACTED]", msg)
    msg = _BEARER_PATTERN.sub("[REDACTED]", msg)
    msg = _SECRET_ASSIGNMENT_PATTERN.sub(r"\1=[REDACTED]", msg)
    msg = _PATH_PATTERN.sub(lambda m: ".../" + m.group(0).rsplit("/", 1)[1], msg)

    if len(msg) > max_length:
        msg = msg[:max_length] + "...[truncated]"
    return msg


def get_logger(name: str) -> logging.Logger:
    """Return the module logger; configuration lives on the root logger."""
    return logging.getLogger(name)
