"""Shared fixtures.

The project root is put on ``sys.path`` so the tests also run from a plain
checkout without installing the package.
"""

import os
import sys

import pytest

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from cardviewer.assets.store import MappingStore, StoreEntry  # noqa: E402


class RecordingStore(MappingStore):
    """MappingStore that remembers every lookup."""

    def __init__(self, files=None, folders=()):
        super().__init__(files, folders)
        self.lookups: list[str] = []

    def lookup(self, path: str):
        self.lookups.append(path)
        return super().lookup(path)


class BrokenStore:
    def lookup(self, path: str):
        raise RuntimeError("store offline")

    def locator_for(self, entry: StoreEntry) -> str:
        raise AssertionError("never reached")


def parent_of(root, target):
    for node, parent in root.walk():
        if node is target:
            return parent
    return None


@pytest.fixture
def recording_store():
    return RecordingStore()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("CARDVIEWER_VAULT", "CARDVIEWER_BASE_URL", "CARDVIEWER_LOCALE"):
        monkeypatch.delenv(name, raising=False)
