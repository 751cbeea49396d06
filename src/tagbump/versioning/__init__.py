"""Tag/version model and the resolution engine."""

from .ignore import IgnoreRule
from .resolver import TagResolver
from .tag import Tag
from .version import Version

__all__ = ["IgnoreRule", "Tag", "TagResolver", "Version"]
