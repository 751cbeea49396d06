"""Registry adapter used by the resolver.

Wraps ``RegistryClient`` calls in the bounded retry policy, normalizes
repository names per registry host and turns authentication failures and
private-registry timeouts into fatal, user-facing errors.
"""
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional

from ...common.logging_utils import extra_context
from ...common.retry import call_with_retry
from ...constants import Constants
from ...errors import PrivateSourceAuthenticationFailure, PrivateSourceTimedOut
from ..errors import (
    RegistryAuthenticationError,
    RegistryConnectionError,
    RegistryForbiddenError,
    RegistryNotFoundError,
    RegistryServerError,
    RegistryTimeoutError,
)
from .client import RegistryClient

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (RegistryTimeoutError, RegistryConnectionError, RegistryServerError)


def is_transient_error(exc: BaseException) -> bool:
    return isinstance(exc, TRANSIENT_ERRORS)


def is_transient_digest_error(exc: BaseException) -> bool:
    """Manifest lookups also retry 404s; registries sometimes 404 a manifest briefly."""
    return isinstance(exc, TRANSIENT_ERRORS + (RegistryNotFoundError,))


def normalize_repository(hostname: str, name: str, namespaces: Optional[Dict[str, str]] = None) -> str:
    """Apply the host's namespace rule to a bare repository name.

    ``nginx`` becomes ``library/nginx`` on Docker Hub; names on hosts
    without a rule, and names that already have a namespace, are unchanged.
    """
    rules = Constants.REPOSITORY_NAMESPACES if namespaces is None else namespaces
    namespace = rules.get(hostname)
    if namespace and "/" not in name:
        return f"{namespace}/{name}"
    return name


def strip_digest_prefix(digest: Optional[str]) -> Optional[str]:
    if digest and digest.startswith(Constants.DIGEST_PREFIX):
        return digest[len(Constants.DIGEST_PREFIX):]
    return digest


class RegistryAdapter:
    """``list_tags`` / ``digest_of`` against one registry host."""

    def __init__(
        self,
        hostname: Optional[str] = None,
        *,
        client: Optional[RegistryClient] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.hostname = hostname or Constants.DEFAULT_REGISTRY
        self.client = client or RegistryClient(self.hostname, username=username, password=password)
        self._sleep = sleep

    @property
    def using_default_registry(self) -> bool:
        return self.hostname in Constants.DOCKER_HUB_HOSTS

    def list_tags(self, repository: str) -> List[str]:
        repo = normalize_repository(self.hostname, repository)
        with self._fatal_errors():
            return call_with_retry(
                lambda: self.client.tags(repo),
                is_retryable=is_transient_error,
                sleep=self._sleep,
                context=f"list tags {self.hostname}/{repo}",
            )

    def digest_of(self, repository: str, tag: str) -> Optional[str]:
        """Manifest digest without the ``sha256:`` prefix; None when unavailable."""
        repo = normalize_repository(self.hostname, repository)
        try:
            with self._fatal_errors():
                digest = call_with_retry(
                    lambda: self.client.manifest_digest(repo, tag),
                    is_retryable=is_transient_digest_error,
                    sleep=self._sleep,
                    context=f"digest {self.hostname}/{repo}:{tag}",
                )
        except RegistryNotFoundError:
            logger.info(
                "No manifest found for %s:%s, treating digest as unavailable",
                repo,
                tag,
                extra=extra_context(event="digest_unavailable", component="registry_adapter", outcome="not_found"),
            )
            return None
        return strip_digest_prefix(digest)

    @contextmanager
    def _fatal_errors(self) -> Iterator[None]:
        try:
            yield
        except (RegistryAuthenticationError, RegistryForbiddenError) as exc:
            logger.error("Registry %s rejected access: %s", self.hostname, exc)
            raise PrivateSourceAuthenticationFailure(self.hostname) from exc
        except RegistryTimeoutError as exc:
            if self.using_default_registry:
                raise
            logger.error("Registry %s timed out: %s", self.hostname, exc)
            raise PrivateSourceTimedOut(self.hostname) from exc
