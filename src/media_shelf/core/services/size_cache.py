"""Disk size cache."""

import json
import threading
from pathlib import Path
from typing import Dict

from ...infrastructure.logging import LoggerMixin
from ...utils import atomic_write_text, get_directory_size, load_json_dict

SIZE_CACHE_FILE = "sizes.json"


class DiskSizeCache(LoggerMixin):
    """Caches recursive disk sizes in memory and in ``sizes.json`` per entry.

    The persisted file maps disk directory names to byte counts and lives in
    the entry directory, so it moves with the entry. A missing or malformed
    file is treated as an empty cache.
    """

    def __init__(self, persist: bool = True) -> None:
        self._persist = persist
        self._sizes: Dict[Path, int] = {}
        self._lock = threading.Lock()

    def get(self, disk_path: Path) -> int:
        """Get the size of a disk directory, computing it on a miss.

        Args:
            disk_path: Disk directory inside an entry.

        Returns:
            Size in bytes.
        """
        with self._lock:
            cached = self._sizes.get(disk_path)
        if cached is not None:
            return cached

        if self._persist:
            persisted = load_json_dict(disk_path.parent / SIZE_CACHE_FILE).get(disk_path.name)
            if isinstance(persisted, int) and persisted >= 0:
                with self._lock:
                    self._sizes[disk_path] = persisted
                return persisted

        self.logger.debug(f"Size cache miss for {disk_path}")
        size = get_directory_size(disk_path)
        with self._lock:
            self._sizes[disk_path] = size
            if self._persist:
                self._store(disk_path, size)
        return size

    def invalidate_entry(self, entry_path: Path) -> None:
        """Drop every cached size of one entry.

        Args:
            entry_path: Entry directory.
        """
        with self._lock:
            for path in [p for p in self._sizes if p.parent == entry_path]:
                del self._sizes[path]
            if self._persist:
                try:
                    (entry_path / SIZE_CACHE_FILE).unlink(missing_ok=True)
                except OSError as e:
                    self.logger.warning(f"Failed to remove size cache in {entry_path}: {e}")

    def clear(self) -> None:
        """Drop the in-memory cache."""
        with self._lock:
            self._sizes.clear()

    def _store(self, disk_path: Path, size: int) -> None:
        """Persist one size. Must be called with the lock held."""
        cache_path = disk_path.parent / SIZE_CACHE_FILE
        data = load_json_dict(cache_path)
        data[disk_path.name] = size
        try:
            atomic_write_text(cache_path, json.dumps(data, indent=2, sort_keys=True))
        except OSError as e:
            self.logger.warning(f"Failed to save size cache for {disk_path.parent}: {e}")
