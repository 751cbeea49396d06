"""Image reference parsing for CLI tokens."""

from typing import Optional, Tuple

from .models import Dependency, Requirement, Source


def tokenize_rightmost_colon(s: str) -> Tuple[str, Optional[str]]:
    """Return (name, tag or None) splitting on the rightmost colon after the last slash.

    Colons before the last slash belong to a registry port (``host:5000/app``).
    """
    s = s.strip()
    slash = s.rfind('/')
    colon = s.rfind(':')
    if colon <= slash:
        return s, None
    name = s[:colon].strip()
    tag = s[colon + 1:].strip()
    return name, tag or None


def _split_registry(name: str) -> Tuple[Optional[str], str]:
    """Split a leading registry host off a repository path, if there is one."""
    if '/' not in name:
        return None, name
    first, rest = name.split('/', 1)
    if '.' in first or ':' in first or first == 'localhost':
        return first, rest
    return None, name


def parse_image_reference(token: str) -> Tuple[Optional[str], str, Optional[str], Optional[str]]:
    """Parse ``[registry/]name[:tag][@digest]`` into (registry, name, tag, digest)."""
    token = token.strip()
    digest = None
    if '@' in token:
        token, digest = token.split('@', 1)
        digest = digest.strip() or None
    name, tag = tokenize_rightmost_colon(token)
    registry, name = _split_registry(name)
    return registry, name, tag, digest


def dependency_from_reference(token: str, registry: Optional[str] = None) -> Dependency:
    """Build a single-requirement Dependency from an image reference.

    A reference with neither tag nor digest is treated as ``latest``. The
    dependency version is the tag, or the digest for digest-only pins.
    """
    ref_registry, name, tag, digest = parse_image_reference(token)
    if tag is None and digest is None:
        tag = "latest"
    source = Source(registry=registry or ref_registry, tag=tag, digest=digest)
    return Dependency(
        name=name,
        version=tag or digest,
        requirements=[Requirement(source=source, file="cli", requirement=None)],
    )
