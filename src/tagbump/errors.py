"""Fatal, user-facing errors raised while checking a dependency for updates."""

from __future__ import annotations

from typing import Optional


class TagbumpError(Exception):
    """Base class for fatal update-check errors."""


class PrivateSourceAuthenticationFailure(TagbumpError):
    """The registry rejected our credentials or denied access."""

    def __init__(self, hostname: str):
        self.hostname = hostname
        super().__init__(f"Authentication failed for registry {hostname}")


class PrivateSourceTimedOut(TagbumpError):
    """A private (non-default) registry did not answer in time."""

    def __init__(self, hostname: str):
        self.hostname = hostname
        super().__init__(f"Timed out contacting registry {hostname}")


class AllVersionsIgnored(TagbumpError):
    """Every viable update candidate was suppressed by an ignore rule."""

    def __init__(self, dependency_name: Optional[str] = None):
        self.dependency_name = dependency_name
        target = f" for {dependency_name}" if dependency_name else ""
        super().__init__(f"All updates{target} were ignored")


class NotComparable(ValueError):
    """Raised when a string has no numeric version content to order by."""
