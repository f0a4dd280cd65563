"""Metadata store interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import FetchedMetadata, MediaEntry, Metadata


class IMetadataStore(ABC):
    """Interface for per-entry sidecar metadata files."""

    @abstractmethod
    def read(self, entry: MediaEntry) -> Metadata:
        """Read all sidecar files of an entry.

        Args:
            entry: Catalog entry.

        Returns:
            Metadata with absent fields for missing files.
        """
        pass

    @abstractmethod
    def read_poster(self, entry: MediaEntry) -> Optional[bytes]:
        """Read poster image bytes.

        Args:
            entry: Catalog entry.

        Returns:
            Image bytes or None if there is no poster.
        """
        pass

    @abstractmethod
    def set_title_override(self, entry: MediaEntry, title: Optional[str]) -> None:
        """Write the title override; an empty value removes it."""
        pass

    @abstractmethod
    def set_description(self, entry: MediaEntry, description: Optional[str]) -> None:
        """Write the description; an empty value removes it."""
        pass

    @abstractmethod
    def set_genres(self, entry: MediaEntry, genres: List[str]) -> None:
        """Write the genre list; an empty list removes it."""
        pass

    @abstractmethod
    def set_tmdb_link(self, entry: MediaEntry, tmdb_id: str, metadata: FetchedMetadata) -> Metadata:
        """Replace the TMDb id and every field derived from it.

        Args:
            entry: Catalog entry.
            tmdb_id: Numeric TMDb id.
            metadata: Bundle fetched for ``tmdb_id``.

        Returns:
            Metadata as stored after the replace.

        Raises:
            InvalidMetadataLinkError: If the id is malformed or does not match the bundle.
        """
        pass
