"""Data models for container image dependencies and update results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class TagFormat(Enum):
    """Numeric shapes a tag version can take; only equal formats are comparable."""
    YEAR_MONTH = "year_month"
    YEAR_MONTH_DAY = "year_month_day"
    SHA_SUFFIXED = "sha_suffixed"
    BUILD_NUM = "build_num"
    NORMAL = "normal"


@dataclass
class Source:
    """Where one pin of an image lives: registry host, tag and/or digest."""
    registry: Optional[str] = None
    tag: Optional[str] = None
    digest: Optional[str] = None


@dataclass
class Requirement:
    """A single declared pin site for a dependency."""
    source: Source
    file: Optional[str] = None
    requirement: Optional[str] = None
    groups: List[str] = field(default_factory=list)


@dataclass
class Dependency:
    """Manifest tuple produced by the file parser."""
    name: str  # repository path, e.g. "nginx" or "myorg/app"
    version: Optional[str]  # currently recorded tag (or digest for digest-only pins)
    requirements: List[Requirement] = field(default_factory=list)


@dataclass
class UpdateResult:
    """Outcome of one update check, fed to the manifest writer and exports."""
    name: str
    previous_version: Optional[str]
    latest_version: Optional[str]
    latest_digest: Optional[str]
    update_available: bool
    updated_requirements: List[Requirement]
