"""Catalog repository interface."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from ..models import Disk, MediaEntry, MediaKind


class ICatalogRepository(ABC):
    """Interface for the filesystem-backed media catalog."""

    @property
    @abstractmethod
    def root(self) -> Path:
        """Catalog root directory."""
        pass

    @abstractmethod
    def list_entries(self) -> List[MediaEntry]:
        """List all canonical entries under the catalog root.

        Returns:
            Entries sorted by name. Non-canonical directories are skipped.

        Raises:
            SlugCollisionError: If two entries share a slug.
        """
        pass

    @abstractmethod
    def get(self, slug: str) -> MediaEntry:
        """Get an entry by slug.

        Args:
            slug: URL-safe entry key.

        Returns:
            Matching entry.

        Raises:
            NotFoundError: If no entry has this slug.
            SlugCollisionError: If the catalog holds colliding slugs.
        """
        pass

    @abstractmethod
    def create_entry(self, kind: MediaKind, title: str, year: Optional[int] = None) -> MediaEntry:
        """Create a new, empty canonical entry directory.

        Args:
            kind: Film or TV.
            title: Media title.
            year: Release year (required for films).

        Returns:
            Created entry.

        Raises:
            AlreadyExistsError: If the canonical name is taken.
            ValidationFailedError: If title or year is invalid.
        """
        pass

    @abstractmethod
    def add_disk(
        self,
        entry: MediaEntry,
        source_path: Path,
        disk_format: str,
        label: Optional[str] = None,
        season: Optional[int] = None,
        disk_number: Optional[int] = None,
    ) -> Disk:
        """Relocate a source directory into an entry as a new disk.

        Args:
            entry: Target entry.
            source_path: Directory to relocate.
            disk_format: Format tag; ``Unknown`` is rejected.
            label: Disk label (films only).
            season: Season number (TV only).
            disk_number: Disk number within the season (TV only).

        Returns:
            The new disk.

        Raises:
            DuplicateDiskError: If the placement is already taken.
            RelocationFailedError: If the move could not complete.
            ValidationFailedError: If the format or placement is invalid.
        """
        pass

    @abstractmethod
    def abandon_entry(self, entry: MediaEntry) -> bool:
        """Remove an entry directory only if it is still empty.

        Args:
            entry: Entry created during a failed import.

        Returns:
            True if the directory was removed.
        """
        pass

    @abstractmethod
    def disk_size(self, disk_path: Path) -> int:
        """Get the cached recursive size of a disk directory.

        Args:
            disk_path: Disk directory.

        Returns:
            Size in bytes.
        """
        pass

    @abstractmethod
    def staging_leftovers(self) -> List[Path]:
        """Find staging directories left behind by an interrupted ``add_disk``.

        Returns:
            Paths of staging directories inside entry directories, sorted.
        """
        pass
