"""Disk classifier interface."""

from abc import ABC, abstractmethod
from pathlib import Path

from ..models import DiskFormat


class IDiskClassifier(ABC):
    """Interface for disk format detection."""

    @abstractmethod
    def classify(self, path: Path) -> DiskFormat:
        """Detect the physical format of a disk backup.

        Args:
            path: Root directory of the disk backup.

        Returns:
            Detected format, ``DiskFormat.UNKNOWN`` if no marker matches.
        """
        pass
