"""Disk classifier service implementation."""

from pathlib import Path
from typing import Iterable, Optional

from ...infrastructure.logging import LoggerMixin
from ..interfaces import IDiskClassifier
from ..models import DiskFormat

BLU_RAY_DIR = "BDMV"
BLU_RAY_MARKERS = ("index.bdmv", "MovieObject.bdmv")
DVD_DIR = "VIDEO_TS"
DVD_MARKER_SUFFIX = ".ifo"


class DiskClassifier(IDiskClassifier, LoggerMixin):
    """Detects Blu-Ray and DVD backups from their directory layout.

    Only reads the directory tree. Names are matched case-insensitively since
    rips made on Windows often end up lower-cased.
    """

    def classify(self, path: Path) -> DiskFormat:
        """Detect the physical format of a disk backup.

        Args:
            path: Root directory of the disk backup.

        Returns:
            Detected format, ``DiskFormat.UNKNOWN`` if no marker matches.
        """
        bdmv = self._find_child(path, BLU_RAY_DIR, want_dir=True)
        if bdmv is not None and self._has_child(bdmv, BLU_RAY_MARKERS):
            self.logger.debug(f"Detected Blu-Ray layout in {path}")
            return DiskFormat.BLU_RAY

        video_ts = self._find_child(path, DVD_DIR, want_dir=True)
        if video_ts is not None and self._has_suffix(video_ts, DVD_MARKER_SUFFIX):
            self.logger.debug(f"Detected DVD layout in {path}")
            return DiskFormat.DVD

        self.logger.debug(f"No disk layout recognised in {path}")
        return DiskFormat.UNKNOWN

    def _find_child(self, parent: Path, name: str, want_dir: bool) -> Optional[Path]:
        """Find a child entry by case-insensitive name."""
        wanted = name.lower()
        try:
            for child in parent.iterdir():
                if child.name.lower() != wanted:
                    continue
                if want_dir and not child.is_dir():
                    continue
                if not want_dir and not child.is_file():
                    continue
                return child
        except OSError as e:
            self.logger.debug(f"Cannot read {parent}: {e}")
        return None

    def _has_child(self, parent: Path, names: Iterable[str]) -> bool:
        return any(self._find_child(parent, name, want_dir=False) is not None for name in names)

    def _has_suffix(self, parent: Path, suffix: str) -> bool:
        try:
            return any(
                child.is_file() and child.suffix.lower() == suffix for child in parent.iterdir()
            )
        except OSError as e:
            self.logger.debug(f"Cannot read {parent}: {e}")
            return False
