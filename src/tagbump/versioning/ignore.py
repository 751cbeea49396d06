"""Ignore rules: caller-supplied version ranges that suppress update candidates."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Union

from packaging.specifiers import InvalidSpecifier, SpecifierSet

from ..errors import AllVersionsIgnored
from .tag import Tag
from .version import Version

logger = logging.getLogger(__name__)


class IgnoreRule:
    """A stateless version-range predicate.

    Built either from a specifier string understood by
    ``packaging.specifiers.SpecifierSet`` (``">=1.1,<2"``, ``"==1.1.*"``) or
    from any callable taking a Version.
    """

    def __init__(self, rule: Union[str, Callable[[Version], bool]]):
        if callable(rule):
            self._predicate = rule
            self.raw = getattr(rule, "__name__", repr(rule))
            return
        self.raw = rule.strip()
        try:
            specifiers = SpecifierSet(self.raw)
        except InvalidSpecifier as exc:
            raise ValueError(f"Invalid ignore rule {rule!r}: {exc}") from exc
        self._predicate = lambda version: specifiers.contains(str(version), prereleases=True)

    def satisfied_by(self, version: Version) -> bool:
        return bool(self._predicate(version))

    def __repr__(self) -> str:
        return f"IgnoreRule({self.raw!r})"


def build_rules(rules: Optional[Iterable[Union[str, IgnoreRule, Callable[[Version], bool]]]]) -> List[IgnoreRule]:
    """Normalize a mixed iterable of strings, callables and rules."""
    return [r if isinstance(r, IgnoreRule) else IgnoreRule(r) for r in (rules or [])]


def _newer_than(tags: Iterable[Tag], current: Version) -> List[Tag]:
    return [t for t in tags if t.version > current]


def filter_ignored(
    candidates: Sequence[Tag],
    current_version: Version,
    rules: Sequence[IgnoreRule],
    *,
    raise_on_ignored: bool = False,
    has_digest_requirement: bool = False,
    dependency_name: Optional[str] = None,
) -> List[Tag]:
    """Drop candidates whose version satisfies any ignore rule.

    Raises:
        AllVersionsIgnored: when ``raise_on_ignored`` is set, there were
            candidates newer than ``current_version`` before filtering, none
            survive it, and the dependency carries no digest requirement.
    """
    filtered = [
        tag for tag in candidates
        if not any(rule.satisfied_by(tag.version) for rule in rules)
    ]
    dropped = len(candidates) - len(filtered)
    if dropped:
        logger.debug("Ignore rules removed %d candidate(s) for %s", dropped, dependency_name or "dependency")

    if (
        raise_on_ignored
        and not has_digest_requirement
        and not _newer_than(filtered, current_version)
        and _newer_than(candidates, current_version)
    ):
        raise AllVersionsIgnored(dependency_name)

    return filtered
