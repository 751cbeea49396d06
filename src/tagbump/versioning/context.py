"""Per-check scratch state for tag resolution."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .ignore import IgnoreRule
from .tag import Tag


@dataclass
class ResolutionContext:
    """Memoized registry answers for one update check.

    Created at the start of a check and discarded at the end; never shared
    between checks, so every registry answer costs one round trip at most.
    """
    dependency_name: str
    ignore_rules: List[IgnoreRule] = field(default_factory=list)
    raise_on_ignored: bool = False
    has_digest_requirement: bool = False

    registry_tags: Optional[List[Tag]] = None
    digests: Dict[str, Optional[str]] = field(default_factory=dict)
    resolved: Dict[str, Tag] = field(default_factory=dict)  # raw tag -> resolution
    latest_anchor_loaded: bool = False
    latest_anchor: Optional[Tag] = None
