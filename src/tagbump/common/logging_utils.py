"""Logging helpers shared by the registry client, adapter and resolver.

Structured fields are attached through ``extra=extra_context(...)`` so a
formatter can pick them up; the default formatter only prints the message.
"""
from __future__ import annotations

import logging
import os
import re
import time
import urllib.parse
from typing import Any, Dict, Optional

from ..constants import Constants

_SENSITIVE_PARAMS = {"token", "access_token", "password", "secret", "key", "auth"}
_BEARER_RE = re.compile(r"(Bearer|Basic)\s+[A-Za-z0-9._~+/=-]+", re.IGNORECASE)

REDACTED = "[REDACTED]"


def configure_logging(level: Optional[str] = None) -> None:
    """Install a single stream handler on the root logger.

    The level comes from ``level`` or the TAGBUMP_LOG_LEVEL environment
    variable, falling back to INFO. Calling this twice does not add a
    second handler.
    """
    level_name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    if not any(getattr(h, "_tagbump", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        handler._tagbump = True  # type: ignore[attr-defined]
        root.addHandler(handler)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from ``logger`` would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records, dropping None values."""
    return {k: v for k, v in fields.items() if v is not None}


def redact(text: str) -> str:
    """Mask bearer/basic credentials embedded in free text."""
    if not text:
        return text
    return _BEARER_RE.sub(lambda m: f"{m.group(1)} {REDACTED}", text)


def safe_url(url: str) -> str:
    """Return ``url`` with userinfo and sensitive query parameters masked."""
    try:
        parts = urllib.parse.urlsplit(url)
    except ValueError:
        return redact(url)
    netloc = parts.netloc
    if "@" in netloc:
        netloc = f"{REDACTED}@{netloc.rsplit('@', 1)[1]}"
    query = parts.query
    if query:
        pairs = urllib.parse.parse_qsl(query, keep_blank_values=True)
        query = urllib.parse.urlencode(
            [(k, REDACTED if k.lower() in _SENSITIVE_PARAMS else v) for k, v in pairs],
            safe=":/[]",
        )
    return urllib.parse.urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))


class Timer:
    """Context manager measuring wall-clock duration."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._end = time.perf_counter()
        return False

    def duration_ms(self) -> float:
        """Elapsed milliseconds, measured up to now while still inside the block."""
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000, 2)
