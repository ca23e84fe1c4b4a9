"""npm registry access."""

from .client import FetchError, NpmRegistryClient, extract_version

__all__ = ["FetchError", "NpmRegistryClient", "extract_version"]
