"""Persistent storage for offline snapshots."""

from clientmap.storage.snapshot import SnapshotStore

__all__ = ["SnapshotStore"]
