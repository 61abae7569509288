"""Asset path classification and resolution.

Supported path forms:
    ./path/to/image.jpg    relative to the document's directory
    ../path/to/image.jpg   from the store root (the prefix is dropped, no
                           parent traversal takes place)
    /folder/image.jpg      leading slash dropped, from the store root
    folder/image.jpg       from the store root
    http(s)://, data:, blob:, file:, //absolute/path
                           returned unchanged

Resolution never fails: any miss returns the original path.
"""

import logging
import posixpath
import re
from typing import Optional
from urllib.parse import unquote

from cardviewer.assets.store import ContentStore, MappingStore

logger = logging.getLogger(__name__)

PASSTHROUGH_SCHEMES = ("http://", "https://", "data:", "blob:", "file:")

# A "%" not followed by two hex digits makes the whole path undecodable
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode_path(path: str) -> str:
    """Percent-decode ``path``; keep it as-is if the encoding is malformed."""
    if _BAD_ESCAPE.search(path):
        return path
    try:
        return unquote(path, errors="strict")
    except UnicodeDecodeError:
        return path


def is_passthrough(path: str) -> bool:
    """True for URLs and absolute forms that are never looked up."""
    if path.startswith("//"):
        return True
    return path.lower().startswith(PASSTHROUGH_SCHEMES)


class AssetPathResolver:
    """Resolves asset references against a content store.

    Args:
        store: Store to look paths up in (None means every lookup misses)
        source_dir: Store-relative directory of the document being rendered
    """

    def __init__(self, store: Optional[ContentStore] = None, source_dir: str = ""):
        self.store = store if store is not None else MappingStore()
        self.source_dir = source_dir.strip("/")

    def classify(self, path: str) -> Optional[str]:
        """Return the store path to look up for ``path``, or None to pass it through."""
        decoded = decode_path(path)

        if decoded.startswith("./"):
            return posixpath.join(self.source_dir, decoded[2:]) if self.source_dir else decoded[2:]
        if decoded.startswith("../"):
            return decoded[3:]
        if decoded.startswith("/") and not decoded.startswith("//"):
            return decoded[1:]
        if not decoded.startswith("/") and not is_passthrough(decoded):
            return decoded
        return None

    def resolve(self, path: str) -> str:
        """Resolve ``path`` to a locator.

        Args:
            path: Asset reference as written in the source text

        Returns:
            The store locator if the path names a file in the store,
            otherwise ``path`` unchanged
        """
        store_path = self.classify(path)
        if store_path is None:
            return path

        locator = self._locate(store_path)
        if locator is None:
            logger.debug(f"Asset not found in store, keeping original path: {path}")
            return path
        return locator

    def _locate(self, store_path: str) -> Optional[str]:
        try:
            entry = self.store.lookup(store_path)
            if entry is not None and entry.is_file:
                return self.store.locator_for(entry)
        except Exception as e:
            logger.debug(f"Failed to get resource path for: {store_path}: {e}")
        return None
