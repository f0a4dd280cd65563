"""Metadata linker service implementation."""

from typing import List, Optional

from ...infrastructure.logging import LoggerMixin
from ...utils import InvalidMetadataLinkError, ValidationFailedError
from ..interfaces import IMetadataLinker, IMetadataProvider, IMetadataStore
from ..models import MediaEntry, MediaKind, Metadata, TitleCandidate
from .metadata_store import is_valid_tmdb_id


class MetadataLinker(IMetadataLinker, LoggerMixin):
    """Links catalog entries to TMDb through an injected provider."""

    def __init__(self, provider: IMetadataProvider, store: IMetadataStore) -> None:
        """Initialize metadata linker.

        Args:
            provider: Remote metadata provider.
            store: Sidecar metadata store.
        """
        self._provider = provider
        self._store = store

    async def search(
        self, query: str, kind: MediaKind, year: Optional[int] = None
    ) -> List[TitleCandidate]:
        """Search TMDb for candidates."""
        if not query or not query.strip():
            raise ValidationFailedError("Search query is required")
        return await self._provider.search_titles(query.strip(), kind, year)

    async def link(self, entry: MediaEntry, tmdb_id: str) -> Metadata:
        """Set or change the TMDb id of an entry.

        The provider is asked for the complete bundle before anything is
        written, so a rejected id leaves the stored metadata as it was.

        Args:
            entry: Catalog entry.
            tmdb_id: New TMDb id.

        Returns:
            Stored metadata.

        Raises:
            InvalidMetadataLinkError: If the id is rejected; stored metadata is untouched.
            MetadataProviderError: If the provider could not be reached.
        """
        tmdb_id = str(tmdb_id or "").strip()
        if not is_valid_tmdb_id(tmdb_id):
            raise InvalidMetadataLinkError(f"TMDb id must be numeric, got {tmdb_id!r}")

        try:
            fetched = await self._provider.fetch_metadata(entry.kind, tmdb_id)
        except InvalidMetadataLinkError as e:
            self.logger.warning(f"TMDb id {tmdb_id} rejected for {entry.name}: {e}")
            raise

        return self._store.set_tmdb_link(entry, tmdb_id, fetched)
