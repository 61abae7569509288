"""Content stores backing asset lookups.

A store answers two questions: is there a file at this store-relative path,
and what locator should a page use to fetch it. The core only ever reads
from a store.
"""

import logging
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import quote

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Lookup failed for a reason other than the file being absent."""
    pass


@dataclass(frozen=True)
class StoreEntry:
    """Handle for an existing store path."""
    path: str  # store-relative, forward slashes
    is_file: bool


class ContentStore(Protocol):
    def lookup(self, path: str) -> Optional[StoreEntry]:
        ...

    def locator_for(self, entry: StoreEntry) -> str:
        ...


def normalize_store_path(path: str) -> str:
    """Normalize a store-relative path to forward-slash form."""
    normalized = posixpath.normpath(path.replace("\\", "/"))
    return "" if normalized == "." else normalized.lstrip("/")


class VaultStore:
    """A directory on disk used as the content store.

    Locators are ``file://`` URIs unless ``base_url`` is given, in which case
    they are ``base_url`` joined with the quoted store path (``base_url`` may
    be relative, e.g. ``".."`` for pages one level deep).
    """

    def __init__(self, root: Path, base_url: Optional[str] = None):
        self.root = Path(root).resolve()
        self.base_url = base_url

    def lookup(self, path: str) -> Optional[StoreEntry]:
        """Find ``path`` in the vault.

        Args:
            path: Store-relative path

        Returns:
            StoreEntry, or None if nothing exists there or the path leaves the vault

        Raises:
            StoreError: If the path cannot be examined
        """
        if "\x00" in path:
            raise StoreError(f"Invalid path: {path!r}")

        relative = normalize_store_path(path)
        if relative == ".." or relative.startswith("../"):
            return None

        full_path = self.root / relative
        try:
            if not full_path.exists():
                return None
            full_path.resolve().relative_to(self.root)
            return StoreEntry(relative, full_path.is_file())
        except ValueError:
            logger.debug(f"Path escapes vault: {path}")
            return None
        except OSError as e:
            raise StoreError(f"Cannot read {full_path}: {e}") from e

    def locator_for(self, entry: StoreEntry) -> str:
        if self.base_url is not None:
            return f"{self.base_url.rstrip('/')}/{quote(entry.path)}"
        return (self.root / entry.path).as_uri()


class MappingStore:
    """In-memory store mapping paths to ready-made locators."""

    def __init__(self, files: Optional[dict[str, str]] = None, folders: tuple[str, ...] = ()):
        self.files = {normalize_store_path(k): v for k, v in (files or {}).items()}
        self.folders = {normalize_store_path(f) for f in folders}

    def lookup(self, path: str) -> Optional[StoreEntry]:
        relative = normalize_store_path(path)
        if relative in self.files:
            return StoreEntry(relative, True)
        if relative in self.folders:
            return StoreEntry(relative, False)
        return None

    def locator_for(self, entry: StoreEntry) -> str:
        return self.files[entry.path]
