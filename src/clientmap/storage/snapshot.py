"""
Offline snapshot storage.

One named slot per key, stored as a JSON file. Writes go through a temp
file in the same directory followed by an atomic replace, so readers see
either the previous snapshot or the new one, never a partial file.
"""

import os
import re
import tempfile
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from pydantic import ValidationError

from clientmap.errors import CacheCorruptError
from clientmap.records import ClientRecord, Snapshot
from clientmap.utils.logging import get_logger

log = get_logger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class SnapshotStore:
    """
    File-backed snapshot slot.

    Args:
        directory: Directory holding snapshot files.
        key: Slot name; becomes the file stem.
    """

    def __init__(self, directory: Path, key: str = "clients") -> None:
        self.directory = Path(directory)
        self.key = key

    @property
    def path(self) -> Path:
        """Path to the snapshot file for this key."""
        stem = _UNSAFE_KEY_CHARS.sub("_", self.key) or "snapshot"
        return self.directory / f"{stem}.json"

    def exists(self) -> bool:
        return self.path.exists()

    def save(self, records: Sequence[ClientRecord], taken_at: datetime) -> Snapshot:
        """
        Overwrite the slot with a new snapshot.

        Args:
            records: Records of a successful ingestion.
            taken_at: Timezone-aware ingestion timestamp.

        Returns:
            The snapshot that was written.
        """
        snapshot = Snapshot(taken_at=taken_at, records=tuple(records))
        payload = snapshot.model_dump_json(indent=2)

        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.directory, prefix=f".{self.path.stem}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        log.info(
            "Snapshot written",
            path=str(self.path),
            records=len(snapshot.records),
            taken_at=taken_at.isoformat(),
        )
        return snapshot

    def load(self) -> Snapshot | None:
        """
        Read the slot.

        Returns:
            The stored snapshot, or None if nothing was ever written.

        Raises:
            CacheCorruptError: If the file exists but cannot be deserialized.
        """
        if not self.path.exists():
            log.debug("No snapshot found", path=str(self.path))
            return None

        try:
            raw = self.path.read_text(encoding="utf-8")
            snapshot = Snapshot.model_validate_json(raw)
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            log.warning("Snapshot unreadable", path=str(self.path), error=str(e))
            msg = f"Snapshot at {self.path} could not be read: {e}"
            raise CacheCorruptError(msg) from e

        log.debug("Snapshot loaded", path=str(self.path), records=len(snapshot.records))
        return snapshot

    def clear(self) -> bool:
        """
        Remove the slot.

        Returns:
            True if a snapshot was removed.
        """
        if self.path.exists():
            self.path.unlink()
            log.info("Snapshot cleared", path=str(self.path))
            return True
        return False
