"""Error kinds raised by the registry HTTP client."""

from __future__ import annotations

from typing import Optional


class RegistryError(Exception):
    """A registry request failed."""

    def __init__(self, message: str, *, hostname: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.hostname = hostname
        self.status_code = status_code


class RegistryTimeoutError(RegistryError):
    """Connect or read timeout."""


class RegistryConnectionError(RegistryError):
    """Connection refused, reset or dropped mid-response."""


class RegistryServerError(RegistryError):
    """500, 502 or 503 from the registry."""


class RegistryNotFoundError(RegistryError):
    """404 for a repository or manifest."""


class RegistryAuthenticationError(RegistryError):
    """401: credentials missing or rejected."""


class RegistryForbiddenError(RegistryError):
    """403: authenticated but not allowed."""


SERVER_ERROR_STATUSES = (500, 502, 503)
