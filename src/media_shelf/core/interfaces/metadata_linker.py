"""Metadata linker interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import MediaEntry, MediaKind, Metadata, TitleCandidate


class IMetadataLinker(ABC):
    """Interface for linking catalog entries to TMDb."""

    @abstractmethod
    async def search(
        self, query: str, kind: MediaKind, year: Optional[int] = None
    ) -> List[TitleCandidate]:
        """Search TMDb for candidates."""
        pass

    @abstractmethod
    async def link(self, entry: MediaEntry, tmdb_id: str) -> Metadata:
        """Set or change the TMDb id of an entry.

        Args:
            entry: Catalog entry.
            tmdb_id: New TMDb id.

        Returns:
            Stored metadata.

        Raises:
            InvalidMetadataLinkError: If the id is rejected; stored metadata is untouched.
        """
        pass
