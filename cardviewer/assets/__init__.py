"""Content stores and asset path resolution."""

from cardviewer.assets.store import (
    ContentStore,
    MappingStore,
    StoreEntry,
    StoreError,
    VaultStore,
)
from cardviewer.assets.resolver import AssetPathResolver, decode_path, is_passthrough

__all__ = [
    # store.py
    "ContentStore",
    "MappingStore",
    "StoreEntry",
    "StoreError",
    "VaultStore",
    # resolver.py
    "AssetPathResolver",
    "decode_path",
    "is_passthrough",
]
