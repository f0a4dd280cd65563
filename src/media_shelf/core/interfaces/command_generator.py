"""Command generator interface."""

from abc import ABC, abstractmethod

from ..models import Disk, PlaybackCommands


class ICommandGenerator(ABC):
    """Interface for player command generation."""

    @abstractmethod
    def generate(self, disk: Disk) -> PlaybackCommands:
        """Build VLC and MPV invocations for a disk.

        Args:
            disk: Catalog disk.

        Returns:
            Shell-safe commands.
        """
        pass
