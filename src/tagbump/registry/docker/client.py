"""Docker Registry HTTP API v2 client: tag listing and manifest digests.

Handles the bearer-token dance (``WWW-Authenticate: Bearer realm=...``),
basic-auth challenges, ``Link`` header pagination and the optional HTTPS
proxy. HTTP failures are mapped onto ``registry.errors`` kinds; retrying is
left to the caller.
"""
from __future__ import annotations

import logging
import os
import re
import urllib.parse
from typing import Any, Dict, List, Optional, Tuple

import requests

from ...common.logging_utils import Timer, extra_context, is_debug_enabled, safe_url
from ...constants import Constants
from ..errors import (
    SERVER_ERROR_STATUSES,
    RegistryAuthenticationError,
    RegistryConnectionError,
    RegistryError,
    RegistryForbiddenError,
    RegistryNotFoundError,
    RegistryServerError,
    RegistryTimeoutError,
)

logger = logging.getLogger(__name__)

MANIFEST_ACCEPT = ", ".join(
    [
        "application/vnd.docker.distribution.manifest.list.v2+json",
        "application/vnd.oci.image.index.v1+json",
        "application/vnd.docker.distribution.manifest.v2+json",
        "application/vnd.oci.image.manifest.v1+json",
    ]
)
DIGEST_HEADER = "Docker-Content-Digest"

_CHALLENGE_PARAM = re.compile(r'(\w+)="([^"]*)"')


def parse_challenge(header: str) -> Tuple[str, Dict[str, str]]:
    """Split a WWW-Authenticate header into (lowercased scheme, params)."""
    if not header:
        return "", {}
    scheme, _, rest = header.strip().partition(" ")
    return scheme.lower(), dict(_CHALLENGE_PARAM.findall(rest))


class RegistryClient:
    """Thin, non-retrying client for one registry host."""

    def __init__(
        self,
        hostname: str,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
        read_timeout: Optional[float] = None,
        connect_timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.hostname = hostname
        self.base_url = hostname.rstrip("/") if "://" in hostname else f"https://{hostname}"
        self._auth = (username, password or "") if username else None
        self._timeout = (
            connect_timeout if connect_timeout is not None else Constants.CONNECT_TIMEOUT,
            read_timeout if read_timeout is not None else Constants.READ_TIMEOUT,
        )
        self._tokens: Dict[str, str] = {}
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = Constants.USER_AGENT
        proxy = os.environ.get("HTTPS_PROXY") or os.environ.get("https_proxy")
        if proxy:
            self._session.proxies["https"] = proxy

    def tags(self, repository: str) -> List[str]:
        """All tag names for ``repository``, following pagination to the end."""
        url: Optional[str] = f"{self.base_url}/v2/{repository}/tags/list?n={Constants.TAGS_PAGE_SIZE}"
        names: List[str] = []
        while url:
            res = self._request("GET", url, repository)
            try:
                payload = res.json()
            except ValueError as exc:
                raise RegistryError(
                    f"Invalid tag list from {self.hostname}", hostname=self.hostname, status_code=res.status_code
                ) from exc
            names.extend((payload or {}).get("tags") or [])
            next_link = (res.links or {}).get("next", {}).get("url")
            url = urllib.parse.urljoin(url, next_link) if next_link else None
        return names

    def manifest_digest(self, repository: str, reference: str) -> Optional[str]:
        """``Docker-Content-Digest`` of the manifest for ``reference``; None when not sent."""
        url = f"{self.base_url}/v2/{repository}/manifests/{reference}"
        res = self._request("HEAD", url, repository, headers={"Accept": MANIFEST_ACCEPT})
        return res.headers.get(DIGEST_HEADER)

    # ---------- internals ----------

    def _request(
        self,
        method: str,
        url: str,
        repository: str,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        scope = f"repository:{repository}:pull"
        request_headers = dict(headers or {})
        token = self._tokens.get(scope)
        if token:
            request_headers["Authorization"] = f"Bearer {token}"

        res = self._send(method, url, headers=request_headers)
        if res.status_code == 401:
            scheme, params = parse_challenge(res.headers.get("WWW-Authenticate", ""))
            if scheme == "bearer" and params.get("realm"):
                request_headers["Authorization"] = f"Bearer {self._bearer_token(params, scope)}"
                res = self._send(method, url, headers=request_headers)
            elif scheme == "basic" and self._auth:
                res = self._send(method, url, headers=request_headers, auth=self._auth)
        self._raise_for_status(res, url)
        return res

    def _bearer_token(self, params: Dict[str, str], scope: str) -> str:
        query = {"scope": params.get("scope") or scope}
        if params.get("service"):
            query["service"] = params["service"]
        res = self._send("GET", params["realm"], params=query, auth=self._auth)
        if res.status_code in (401, 403):
            raise RegistryAuthenticationError(
                f"Token request rejected by {self.hostname}", hostname=self.hostname, status_code=res.status_code
            )
        self._raise_for_status(res, params["realm"])
        try:
            data = res.json()
        except ValueError as exc:
            raise RegistryError(f"Invalid token response from {self.hostname}", hostname=self.hostname) from exc
        token = data.get("token") or data.get("access_token")
        if not token:
            raise RegistryAuthenticationError(f"No token issued by {self.hostname}", hostname=self.hostname)
        self._tokens[scope] = token
        return token

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        safe_target = safe_url(url)
        with Timer() as t:
            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP request",
                    extra=extra_context(
                        event="http_request", component="registry_client", action=method, target=safe_target
                    ),
                )
            try:
                res = self._session.request(method, url, timeout=self._timeout, **kwargs)
            except requests.Timeout as exc:
                raise RegistryTimeoutError(
                    f"{self.hostname} timed out: {exc}", hostname=self.hostname
                ) from exc
            except (requests.ConnectionError, requests.exceptions.ChunkedEncodingError) as exc:
                raise RegistryConnectionError(
                    f"{self.hostname} connection error: {exc}", hostname=self.hostname
                ) from exc
            except requests.RequestException as exc:
                raise RegistryError(f"{self.hostname} request failed: {exc}", hostname=self.hostname) from exc
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP response",
                extra=extra_context(
                    event="http_response",
                    component="registry_client",
                    action=method,
                    status_code=res.status_code,
                    duration_ms=t.duration_ms(),
                    target=safe_target,
                ),
            )
        return res

    def _raise_for_status(self, res: requests.Response, url: str) -> None:
        status = res.status_code
        if 200 <= status < 300:
            return
        message = f"{self.hostname} returned HTTP {status} for {safe_url(url)}"
        if status == 401:
            raise RegistryAuthenticationError(message, hostname=self.hostname, status_code=status)
        if status == 403:
            raise RegistryForbiddenError(message, hostname=self.hostname, status_code=status)
        if status == 404:
            raise RegistryNotFoundError(message, hostname=self.hostname, status_code=status)
        if status in SERVER_ERROR_STATUSES:
            raise RegistryServerError(message, hostname=self.hostname, status_code=status)
        raise RegistryError(message, hostname=self.hostname, status_code=status)
