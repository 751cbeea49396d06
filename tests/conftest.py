"""Shared fixtures: an in-memory registry and Constants isolation."""

import copy
from typing import Dict, List, Optional

import pytest

from tagbump.constants import Constants


class FakeRegistry:
    """In-memory stand-in for RegistryAdapter that records every call."""

    def __init__(self, tags: List[str], digests: Optional[Dict[str, str]] = None):
        self.tags = list(tags)
        self.digests = dict(digests or {})
        self.list_calls = 0
        self.digest_calls: List[str] = []

    def list_tags(self, repository: str) -> List[str]:
        self.list_calls += 1
        return list(self.tags)

    def digest_of(self, repository: str, tag: str) -> Optional[str]:
        self.digest_calls.append(tag)
        return self.digests.get(tag)


@pytest.fixture(autouse=True)
def restore_constants():
    """Undo any Constants mutation made by config/CLI code under test."""
    saved = {k: copy.deepcopy(v) for k, v in vars(Constants).items() if k.isupper()}
    yield
    for key, value in saved.items():
        setattr(Constants, key, value)


@pytest.fixture
def fake_registry_factory():
    return FakeRegistry
