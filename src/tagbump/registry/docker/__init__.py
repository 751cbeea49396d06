"""Docker Registry HTTP API v2 access: raw client and retrying adapter."""

from .adapter import RegistryAdapter, normalize_repository
from .client import RegistryClient

__all__ = ["RegistryAdapter", "RegistryClient", "normalize_repository"]
