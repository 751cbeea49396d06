"""Numeric version ordering for container image tags."""

from __future__ import annotations

import functools
import re
from typing import Tuple

from ..errors import NotComparable

_SEPARATORS = re.compile(r"[-_]")


@functools.total_ordering
class Version:
    """Immutable, component-wise comparable numeric version.

    Missing trailing components compare as zero, so ``1.2 == 1.2.0``.
    """

    __slots__ = ("_components",)

    def __init__(self, components: Tuple[int, ...]):
        if not components:
            raise NotComparable("version has no numeric components")
        self._components = tuple(int(c) for c in components)

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Extract the leading run of dot-separated integers from ``text``.

        A leading ``v`` is skipped and ``-``/``_`` are read as separators, so
        ``v1.2.3-4`` yields ``1.2.3.4`` and ``1.2.3.rc1`` yields ``1.2.3``.

        Raises:
            NotComparable: when ``text`` does not start with a number.
        """
        if text is None:
            raise NotComparable("no version")
        normalized = _SEPARATORS.sub(".", text.strip().lower())
        if normalized.startswith("v"):
            normalized = normalized[1:]
        components = []
        for part in normalized.split("."):
            if not part.isdigit():
                break
            components.append(int(part))
        if not components:
            raise NotComparable(f"{text!r} has no numeric version")
        return cls(tuple(components))

    @property
    def components(self) -> Tuple[int, ...]:
        return self._components

    def _padded(self, other: "Version") -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
        width = max(len(self._components), len(other._components))
        return (
            self._components + (0,) * (width - len(self._components)),
            other._components + (0,) * (width - len(other._components)),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        mine, theirs = self._padded(other)
        return mine == theirs

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        mine, theirs = self._padded(other)
        return mine < theirs

    def __hash__(self) -> int:
        trimmed = list(self._components)
        while len(trimmed) > 1 and trimmed[-1] == 0:
            trimmed.pop()
        return hash(tuple(trimmed))

    def __str__(self) -> str:
        return ".".join(str(c) for c in self._components)

    def __repr__(self) -> str:
        return f"Version('{self}')"
