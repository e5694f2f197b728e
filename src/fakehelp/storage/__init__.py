"""Persistent document storage for mirrored game data."""

from fakehelp.storage.files import FileStore
from fakehelp.storage.healing import SelfHealingStore

__all__ = ["FileStore", "SelfHealingStore"]
