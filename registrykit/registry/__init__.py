"""Registry documents, retrieval, and dependency resolution."""

from .client import DEFAULT_BASE_URL, RegistryClient
from .document import PROVIDER_PREFIX, UTIL_PREFIX, Registry, load_registry
from .resolver import resolve

__all__ = [
    "DEFAULT_BASE_URL",
    "PROVIDER_PREFIX",
    "Registry",
    "RegistryClient",
    "UTIL_PREFIX",
    "load_registry",
    "resolve",
]
