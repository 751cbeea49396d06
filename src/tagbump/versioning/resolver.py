"""Tag resolution engine: picks the best update for a pinned image tag.

The pipeline for a comparable tag is:

1. keep registry tags with the same decoration and format,
2. drop downgrades,
3. drop prereleases (explicit, or implied by sorting above ``latest``)
   unless the current tag is itself a prerelease,
4. drop ignored versions,
5. sort by version; among equals, releases after prereleases, then
   same-precision tags last, then a natural sort of the tag name,
6. prefer the newest same-precision tag when the absolute newest tag is
   only a more precise alias of the same image.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Protocol, Tuple, Union

from ..common.logging_utils import extra_context, is_debug_enabled
from ..constants import Constants
from .context import ResolutionContext
from .ignore import filter_ignored
from .tag import Tag

logger = logging.getLogger(__name__)

_DIGIT_RUNS = re.compile(r"(\d+)")


class TagRegistry(Protocol):
    """What the resolver needs from a registry adapter."""

    def list_tags(self, repository: str) -> List[str]:
        ...

    def digest_of(self, repository: str, tag: str) -> Optional[str]:
        ...


def sorts_above_latest(tag: Tag, latest: Optional[Tag]) -> bool:
    """True when ``tag`` is numerically newer than the tag ``latest`` points at."""
    if latest is None or not tag.comparable or not latest.comparable:
        return False
    return tag.version > latest.version


def _natural_key(text: str) -> Tuple[Tuple[int, Union[int, str]], ...]:
    """Digit runs compare numerically, everything else as text (``beta2`` < ``beta10``)."""
    return tuple((0, int(chunk)) if chunk.isdigit() else (1, chunk) for chunk in _DIGIT_RUNS.split(text) if chunk)


def sort_tags(candidates: List[Tag], version_tag: Tag) -> List[Tag]:
    """Ascending by version, with a total order among numerically equal tags.

    Equal versions rank prerelease-looking tags first, then tags whose
    precision differs from ``version_tag``, then by natural order of the
    numeric version and finally the raw name, so the result never depends
    on the order the registry listed its tags.
    """
    return sorted(
        candidates,
        key=lambda t: (
            t.version,
            not t.looks_like_prerelease(),
            t.same_precision(version_tag),
            _natural_key(t.numeric_version or ""),
            t.raw,
        ),
    )


class TagResolver:
    """Resolve tags for one dependency against one registry."""

    def __init__(self, registry: TagRegistry, context: ResolutionContext):
        self.registry = registry
        self.context = context

    @property
    def repository(self) -> str:
        return self.context.dependency_name

    # ---------- registry lookups (memoized on the context) ----------

    def tags_from_registry(self) -> List[Tag]:
        if self.context.registry_tags is None:
            names = self.registry.list_tags(self.repository)
            self.context.registry_tags = [Tag.parse(name) for name in names]
            logger.debug(
                "Fetched %d tags for %s",
                len(self.context.registry_tags),
                self.repository,
                extra=extra_context(event="tags_loaded", component="resolver", count=len(names)),
            )
        return self.context.registry_tags

    def digest_of(self, tag_name: str) -> Optional[str]:
        if tag_name not in self.context.digests:
            self.context.digests[tag_name] = self.registry.digest_of(self.repository, tag_name)
        return self.context.digests[tag_name]

    def latest_digest(self) -> Optional[str]:
        """Digest of the registry's floating ``latest`` marker, if it publishes one."""
        published = {t.raw.lower(): t for t in self.tags_from_registry() if t.is_canonical}
        for marker in Constants.CANONICAL_TAGS:
            tag = published.get(marker.lower())
            if tag is not None:
                return self.digest_of(tag.raw)
        return None

    def latest_tag(self) -> Optional[Tag]:
        """The newest plain version tag sharing its digest with ``latest``."""
        if not self.context.latest_anchor_loaded:
            self.context.latest_anchor = self._find_latest_tag()
            self.context.latest_anchor_loaded = True
        return self.context.latest_anchor

    def _find_latest_tag(self) -> Optional[Tag]:
        latest_digest = self.latest_digest()
        if not latest_digest:
            return None
        plain_tags = sorted(
            (t for t in self.tags_from_registry() if t.is_plain),
            key=lambda t: t.version,
            reverse=True,
        )
        for tag in plain_tags:
            if self.digest_of(tag.raw) == latest_digest:
                return tag
        return None

    # ---------- prerelease detection ----------

    def is_prerelease(self, tag: Tag) -> bool:
        if tag.looks_like_prerelease():
            if is_debug_enabled(logger):
                logger.debug("Tag %s looks like a prerelease", tag.raw)
            return True
        latest = self.latest_tag()
        if sorts_above_latest(tag, latest):
            logger.info(
                "Tag with non-prerelease version name %s detected as prerelease, "
                "because it sorts higher than %s.",
                tag.raw,
                latest.raw,
                extra=extra_context(event="implied_prerelease", component="resolver", target=tag.raw),
            )
            return True
        return False

    # ---------- resolution ----------

    def resolve(self, current_tag: Tag) -> Tag:
        """Best replacement for ``current_tag``; ``current_tag`` itself when nothing better exists."""
        resolved = self.context.resolved.get(current_tag.raw)
        if resolved is None:
            resolved = self._fetch_latest_tag(current_tag)
            self.context.resolved[current_tag.raw] = resolved
            logger.debug(
                "Resolved %s:%s -> %s",
                self.repository,
                current_tag.raw,
                resolved.raw,
                extra=extra_context(event="resolved", component="resolver", outcome=resolved.raw),
            )
        return resolved

    def _fetch_latest_tag(self, version_tag: Tag) -> Tag:
        if version_tag.is_digest:
            latest_digest = self.latest_digest()
            return Tag.parse(latest_digest) if latest_digest else version_tag
        if not version_tag.comparable:
            return version_tag

        # Downgrades are pruned before prerelease detection, which may need
        # one digest lookup per tag.
        candidates = [t for t in self.tags_from_registry() if t.comparable_to(version_tag)]
        candidates = self._remove_version_downgrades(candidates, version_tag)
        candidates = self._remove_prereleases(candidates, version_tag)
        candidates = filter_ignored(
            candidates,
            version_tag.version,
            self.context.ignore_rules,
            raise_on_ignored=self.context.raise_on_ignored,
            has_digest_requirement=self.context.has_digest_requirement,
            dependency_name=self.context.dependency_name,
        )
        candidates = sort_tags(candidates, version_tag)

        if not candidates:
            return version_tag
        latest = candidates[-1]
        if latest.same_precision(version_tag):
            return latest

        same_precision = [t for t in candidates if t.same_precision(version_tag)]
        if not same_precision:
            return latest
        latest_same_precision = same_precision[-1]

        # Registries may omit digests entirely; when both are missing the
        # version-prefix check alone decides.
        if (
            self.digest_of(latest_same_precision.raw) == self.digest_of(latest.raw)
            and latest_same_precision.same_but_less_precise(latest)
        ):
            return latest_same_precision
        return latest

    def _remove_version_downgrades(self, candidates: List[Tag], version_tag: Tag) -> List[Tag]:
        current = version_tag.version
        return [t for t in candidates if t.version >= current]

    def _remove_prereleases(self, candidates: List[Tag], version_tag: Tag) -> List[Tag]:
        if self.is_prerelease(version_tag):
            return candidates
        return [t for t in candidates if not self.is_prerelease(t)]
