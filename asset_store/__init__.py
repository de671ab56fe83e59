"""
Static asset stores consumed by the edge fallback router.

The default for the running app is `LocalAssetStore` pointed at the site build output;
`InMemoryAssetStore` is a deterministic stand-in for tests and demos.
"""

from .base import AssetStore, NOT_FOUND_STATUS, not_found_response
from .local_store import LocalAssetStore
from .memory_store import InMemoryAssetStore

__all__ = [
    "AssetStore",
    "NOT_FOUND_STATUS",
    "not_found_response",
    "LocalAssetStore",
    "InMemoryAssetStore",
]
