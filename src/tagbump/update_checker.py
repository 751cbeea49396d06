"""Dependency-level update check for container images.

Derives one new tag (and digest, when pinned) for a dependency and applies
it to every declared requirement. Digests always follow the resolved tag;
a digest-only pin follows the registry's ``latest`` marker.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable, List, Optional, Union

from .constants import Constants
from .registry.docker.adapter import RegistryAdapter, strip_digest_prefix
from .versioning.context import ResolutionContext
from .versioning.ignore import IgnoreRule, build_rules
from .versioning.models import Dependency, Requirement, UpdateResult
from .versioning.resolver import TagRegistry, TagResolver
from .versioning.tag import Tag
from .versioning.version import Version

logger = logging.getLogger(__name__)

_UNSET = object()


class UpdateChecker:
    """Answer "is there a newer image?" for one dependency."""

    def __init__(
        self,
        dependency: Dependency,
        registry: Optional[TagRegistry] = None,
        *,
        ignore_rules: Optional[Iterable[Union[str, IgnoreRule, Callable[[Version], bool]]]] = None,
        raise_on_ignored: bool = False,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ):
        self.dependency = dependency
        self.registry = registry or RegistryAdapter(
            self.registry_hostname, username=username, password=password
        )
        self.context = ResolutionContext(
            dependency_name=dependency.name,
            ignore_rules=build_rules(ignore_rules),
            raise_on_ignored=raise_on_ignored,
            has_digest_requirement=bool(self.digest_requirements),
        )
        self.resolver = TagResolver(self.registry, self.context)
        self._updated_digest = _UNSET

    @property
    def registry_hostname(self) -> str:
        requirements = self.dependency.requirements
        if requirements and requirements[0].source.registry:
            return requirements[0].source.registry
        return Constants.DEFAULT_REGISTRY

    @property
    def digest_requirements(self) -> List[Requirement]:
        return [r for r in self.dependency.requirements if r.source.digest]

    def latest_version(self) -> Optional[str]:
        if not self.dependency.version:
            return None
        return self._latest_tag_from(self.dependency.version).raw

    def latest_resolvable_version(self) -> Optional[str]:
        # Images have no dependency graph, so anything published is resolvable.
        return self.latest_version()

    def latest_resolvable_version_with_no_unlock(self) -> Optional[str]:
        return self.dependency.version

    def updated_requirements(self) -> List[Requirement]:
        updated = []
        for req in self.dependency.requirements:
            source = replace(req.source)
            if req.source.tag:
                new_tag = self._latest_tag_from(req.source.tag).raw
                source.tag = new_tag
                if req.source.digest:
                    source.digest = _carry_digest(req.source.digest, self.resolver.digest_of(new_tag))
            elif req.source.digest:
                source.digest = _carry_digest(req.source.digest, self.resolver.latest_digest())
            updated.append(replace(req, source=source, groups=list(req.groups)))
        return updated

    def updated_digest(self) -> Optional[str]:
        if self._updated_digest is _UNSET:
            version = self.dependency.version
            latest = self._latest_tag_from(version) if version else None
            if latest is None or latest.is_digest:
                self._updated_digest = self.resolver.latest_digest()
            else:
                self._updated_digest = self.resolver.digest_of(latest.raw)
        return self._updated_digest  # type: ignore[return-value]

    def version_tag_up_to_date(self) -> bool:
        version = self.dependency.version
        if not version:
            return False
        current = Tag.parse(version)
        if current.is_digest or not current.comparable:
            return True
        latest = self._latest_tag_from(version)
        return latest.version <= current.version

    def digest_up_to_date(self) -> bool:
        updated = self.updated_digest()
        if not updated:
            # Registries may not report digests; never force an update on missing data.
            return True
        return all(strip_digest_prefix(r.source.digest) == updated for r in self.digest_requirements)

    def up_to_date(self) -> bool:
        if self.digest_requirements:
            return self.version_tag_up_to_date() and self.digest_up_to_date()
        return self.version_tag_up_to_date()

    def can_update(self) -> bool:
        if self.digest_requirements:
            return not self.digest_up_to_date()
        return not self.version_tag_up_to_date()

    def check(self) -> UpdateResult:
        """Run the full check and collect everything the manifest writer needs."""
        update_available = self.can_update()
        result = UpdateResult(
            name=self.dependency.name,
            previous_version=self.dependency.version,
            latest_version=self.latest_version(),
            latest_digest=self.updated_digest() if self.digest_requirements else None,
            update_available=update_available,
            updated_requirements=self.updated_requirements(),
        )
        if update_available:
            logger.info("Update available for %s: %s -> %s", result.name, result.previous_version, result.latest_version)
        else:
            logger.info("No update available for %s (%s)", result.name, result.previous_version)
        return result

    def _latest_tag_from(self, version: str) -> Tag:
        return self.resolver.resolve(Tag.parse(version))


def _carry_digest(original: str, fresh: Optional[str]) -> str:
    """New digest in the notation of the original pin; the original when none was fetched."""
    if not fresh:
        return original
    if original.startswith(Constants.DIGEST_PREFIX):
        return f"{Constants.DIGEST_PREFIX}{fresh}"
    return fresh
