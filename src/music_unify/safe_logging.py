"""Credential-safe logging utilities for music-unify.

Provider payloads and request parameters can carry API keys and tokens
(Last.fm ``api_key``, YouTube ``key``, Spotify bearer tokens). These helpers
keep them out of logs:
- Sensitive field redaction for payload dumps
- Message sanitization for keys embedded in URLs and e-mail addresses
- A Rich-backed logging setup for the CLI
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

# Fields that should be redacted in logs
REDACT_FIELDS = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "key",
        "auth",
        "authorization",
        "credential",
        "access_token",
        "refresh_token",
        "client_secret",
    }
)

PATTERNS = {
    "email": re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b"),
    "query_key": re.compile(r"([?&](?:api_key|key|access_token)=)[^&\s]+", re.I),
    "bearer": re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+", re.I),
}


def redact_value(value: str, visible_chars: int = 4) -> str:
    """Redact a sensitive value, showing only the first few characters.

    Args:
        value: Value to redact
        visible_chars: Number of characters to show

    Returns:
        Redacted string (e.g., "AIza***")
    """
    if len(value) <= visible_chars:
        return "***"
    return f"{value[:visible_chars]}***"


def _is_sensitive(key: str, redact_fields: frozenset[str]) -> bool:
    key_lower = key.lower()
    if key_lower in redact_fields:
        return True
    # "key" alone would match "monkey"; substring checks skip it
    return any(field in key_lower for field in redact_fields if field != "key")


def redact_dict(
    data: Mapping[str, Any],
    redact_fields: frozenset[str] | None = None,
) -> dict[str, Any]:
    """Recursively redact sensitive fields in a payload.

    Args:
        data: Mapping to redact
        redact_fields: Field names to redact (case-insensitive)

    Returns:
        New dictionary with sensitive fields redacted
    """
    if redact_fields is None:
        redact_fields = REDACT_FIELDS

    result: dict[str, Any] = {}
    for key, value in data.items():
        if _is_sensitive(str(key), redact_fields) and isinstance(value, str):
            result[key] = redact_value(value)
        elif isinstance(value, Mapping):
            result[key] = redact_dict(value, redact_fields)
        elif isinstance(value, list):
            result[key] = [
                redact_dict(item, redact_fields) if isinstance(item, Mapping) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def sanitize_message(message: str) -> str:
    """Remove credentials and e-mail addresses from a log message."""
    result = PATTERNS["email"].sub("[EMAIL]", message)
    result = PATTERNS["query_key"].sub(r"\1***", result)
    result = PATTERNS["bearer"].sub(r"\1***", result)
    return result


class SafeLogFormatter(logging.Formatter):
    """Log formatter that sanitizes messages and redacts mapping arguments."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        sanitize_messages: bool = True,
    ):
        super().__init__(fmt, datefmt)
        self.sanitize_messages = sanitize_messages

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy; other handlers may share the record
        record = logging.makeLogRecord(record.__dict__)

        if self.sanitize_messages:
            record.msg = sanitize_message(str(record.msg))

        if record.args:
            record.args = self._sanitize_args(record.args)

        return super().format(record)

    def _sanitize_args(self, args: tuple[Any, ...] | Mapping[str, Any]) -> tuple[Any, ...]:
        if isinstance(args, Mapping):
            return tuple(self._sanitize_value(v) for v in args.values())
        return tuple(self._sanitize_value(arg) for arg in args)

    def _sanitize_value(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            return redact_dict(value)
        if isinstance(value, str) and self.sanitize_messages:
            return sanitize_message(value)
        return value


def configure_rich_logging(
    level: int = logging.WARNING,
    format_string: str = "%(message)s",
    show_time: bool = True,
    show_path: bool = False,
) -> Console:
    """Configure root logging through a Rich handler on stderr.

    Args:
        level: Logging level
        format_string: Format applied by the SafeLogFormatter
        show_time: Show timestamps
        show_path: Show the emitting module path

    Returns:
        The Console used for log output, for reuse by the CLI
    """
    console = Console(stderr=True)
    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(SafeLogFormatter(fmt=format_string))

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if isinstance(existing, RichHandler):
            root_logger.removeHandler(existing)
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    return console


## Tests


def test_redact_value():
    assert redact_value("AIzaSyD-secret-12345") == "AIza***"
    assert redact_value("abc") == "***"
    assert redact_value("abcdef", 3) == "abc***"


def test_redact_dict():
    """Credentials are redacted at any depth; ordinary fields are kept."""
    data = {
        "api_key": "0123456789abcdef",
        "artist": "Radiohead",
        "params": {"key": "AIzaSyD-secret", "q": "creep"},
        "tokens": [{"access_token": "BQD-token", "token_type": "Bearer"}],
        "monkey": "not a credential",
    }

    redacted = redact_dict(data)

    assert redacted["api_key"] == "0123***"
    assert redacted["artist"] == "Radiohead"
    assert redacted["params"]["key"] == "AIza***"
    assert redacted["params"]["q"] == "creep"
    assert redacted["tokens"][0]["access_token"] == "BQD-***"
    assert redacted["monkey"] == "not a credential"


def test_sanitize_message():
    msg = (
        "GET https://ws.audioscrobbler.com/2.0/?method=track.getInfo&api_key=abc123&format=json "
        "for user@example.com with Bearer BQDtoken"
    )
    sanitized = sanitize_message(msg)

    assert "abc123" not in sanitized
    assert "api_key=***" in sanitized
    assert "[EMAIL]" in sanitized
    assert "BQDtoken" not in sanitized
    assert "method=track.getInfo" in sanitized


def test_safe_log_formatter():
    formatter = SafeLogFormatter(fmt="%(message)s")

    record = logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg="Search %s",
        args=("https://www.googleapis.com/youtube/v3/search?q=creep&key=AIzaSecret",),
        exc_info=None,
    )

    formatted = formatter.format(record)
    assert "AIzaSecret" not in formatted
    assert "q=creep" in formatted
