"""Container image tag classification.

A tag is split into an optional alphabetic prefix, a numeric version and an
optional alphabetic suffix (``alpine-3.18``, ``1.25.3-bookworm``). Only tags
sharing the same decoration and numeric format can be ordered against each
other.
"""

from __future__ import annotations

import re
from typing import List, Optional

from ..constants import Constants
from ..errors import NotComparable
from .models import TagFormat
from .version import Version

_WORDS_WITH_BUILD = r"(?:(?:-[a-z]+)+-[0-9]+)+"
_VERSION = (
    r"v?(?P<version>[0-9]+(?:\.[0-9]+)*"
    rf"(?:_[0-9]+|\.[a-z0-9]+|{_WORDS_WITH_BUILD}|-(?:kb)?[0-9]+)*)"
)

# Tried in order; the first full match wins.
_NAME_WITH_VERSION = (
    re.compile(rf"(?P<prefix>[a-z][a-z0-9.\-_]*-)?{_VERSION}", re.IGNORECASE),
    re.compile(rf"{_VERSION}(?P<suffix>-[a-z][a-z0-9.\-]*)?", re.IGNORECASE),
    re.compile(rf"(?P<prefix>[a-z\-_]+-)?{_VERSION}(?P<suffix>-[a-z\-]+)?", re.IGNORECASE),
)

DIGEST_RE = re.compile(r"(?:[a-z0-9]+(?:[+._-][a-z0-9]+)*:)?[0-9a-f]{64}")

_YEAR_MONTH = re.compile(r"^[12]\d{3}(?:[.\-]|$)")
_YEAR_MONTH_DAY = re.compile(
    r"^[12]\d{3}[.\-]?(?:0[1-9]|1[0-2])[.\-]?(?:0[1-9]|[12]\d|3[01])$"
)
_SHA_SUFFIX = re.compile(r"-[0-9a-f]{7}$")
_BUILD_NUM = re.compile(r"^\d+$")
_LETTERS = re.compile(r"[a-z]", re.IGNORECASE)


def _prerelease_pattern() -> "re.Pattern[str]":
    words = "|".join(re.escape(w) for w in Constants.PRERELEASE_KEYWORDS)
    return re.compile(rf"(?<![a-z])(?:{words})(?![a-z])", re.IGNORECASE)


class Tag:
    """Immutable view of a raw tag string. Construction never fails."""

    __slots__ = ("raw", "prefix", "suffix", "numeric_version")

    def __init__(self, raw: str):
        self.raw = raw
        self.prefix: Optional[str] = None
        self.suffix: Optional[str] = None
        self.numeric_version: Optional[str] = None
        for pattern in _NAME_WITH_VERSION:
            match = pattern.fullmatch(raw or "")
            if match:
                groups = match.groupdict()
                self.prefix = groups.get("prefix")
                self.suffix = groups.get("suffix")
                self.numeric_version = groups["version"].lower()
                break

    @classmethod
    def parse(cls, raw: str) -> "Tag":
        return cls(raw)

    @property
    def comparable(self) -> bool:
        return self.numeric_version is not None

    @property
    def is_digest(self) -> bool:
        return bool(self.raw) and DIGEST_RE.fullmatch(self.raw) is not None

    @property
    def is_canonical(self) -> bool:
        """True for floating release markers such as ``latest``."""
        markers = {m.lower() for m in Constants.CANONICAL_TAGS}
        return bool(self.raw) and self.raw.lower() in markers

    @property
    def is_plain(self) -> bool:
        """True when the whole tag is its numeric version (``1.25.3``, ``8.0-sdk``)."""
        if self.numeric_version is None:
            return False
        name = self.raw.lower()
        return name in (self.numeric_version, f"v{self.numeric_version}", f"{self.numeric_version}-sdk")

    @property
    def segments(self) -> List[str]:
        if self.numeric_version is None:
            return []
        return re.split(r"[.\-]", self.numeric_version)

    @property
    def precision(self) -> int:
        return len(self.segments)

    @property
    def format(self) -> Optional[TagFormat]:
        version = self.numeric_version
        if version is None:
            return None
        if _YEAR_MONTH.match(version):
            return TagFormat.YEAR_MONTH
        if _YEAR_MONTH_DAY.match(version):
            return TagFormat.YEAR_MONTH_DAY
        if _SHA_SUFFIX.search(version):
            return TagFormat.SHA_SUFFIXED
        if _BUILD_NUM.match(version):
            return TagFormat.BUILD_NUM
        return TagFormat.NORMAL

    @property
    def version(self) -> Version:
        """Orderable version of this tag.

        Raises:
            NotComparable: when the tag has no numeric version.
        """
        if self.numeric_version is None:
            raise NotComparable(f"tag {self.raw!r} has no numeric version")
        return Version.parse(self.numeric_version)

    def comparable_to(self, other: "Tag") -> bool:
        """Both tags are orderable and share prefix, suffix and format."""
        if not self.comparable or not other.comparable:
            return False
        if self.prefix != other.prefix or self.format != other.format:
            return False
        if other.format == TagFormat.SHA_SUFFIXED:
            return True
        return self.suffix == other.suffix

    def same_precision(self, other: "Tag") -> bool:
        return self.precision == other.precision

    def same_but_less_precise(self, other: "Tag") -> bool:
        """This tag's segments are a strict prefix of ``other``'s (``1.2`` vs ``1.2.3``)."""
        mine, theirs = self.segments, other.segments
        return 0 < len(mine) < len(theirs) and theirs[: len(mine)] == mine

    def looks_like_prerelease(self) -> bool:
        if self.numeric_version is None:
            return False
        if _LETTERS.search(self.numeric_version):
            return True
        decoration = f"{self.prefix or ''}{self.suffix or ''}"
        return bool(decoration) and _prerelease_pattern().search(decoration) is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        return self.raw == other.raw

    def __hash__(self) -> int:
        return hash(self.raw)

    def __str__(self) -> str:
        return self.raw or ""

    def __repr__(self) -> str:
        return f"Tag({self.raw!r})"
