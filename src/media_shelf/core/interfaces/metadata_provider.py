"""Metadata provider interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import FetchedMetadata, MediaKind, TitleCandidate


class IMetadataProvider(ABC):
    """Interface for remote metadata lookup (TMDb)."""

    @abstractmethod
    async def search_titles(
        self, query: str, kind: MediaKind, year: Optional[int] = None
    ) -> List[TitleCandidate]:
        """Search for titles.

        Args:
            query: Free-text title query.
            kind: Film or TV.
            year: Optional release year filter (films only).

        Returns:
            Candidates in provider order.

        Raises:
            MetadataProviderError: If the search fails.
        """
        pass

    @abstractmethod
    async def fetch_metadata(self, kind: MediaKind, tmdb_id: str) -> FetchedMetadata:
        """Fetch the full metadata bundle for an id.

        Args:
            kind: Film or TV.
            tmdb_id: TMDb id.

        Returns:
            Metadata bundle including poster bytes when available.

        Raises:
            InvalidMetadataLinkError: If the id does not exist.
            MetadataProviderError: If the request fails.
        """
        pass
