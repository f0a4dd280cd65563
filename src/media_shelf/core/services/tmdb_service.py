"""TMDb metadata provider implementation."""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import InvalidMetadataLinkError, MetadataProviderError
from ..interfaces import IMetadataProvider
from ..models import FetchedMetadata, MediaKind, TitleCandidate
from .metadata_store import is_valid_tmdb_id

_TRANSIENT_STATUSES = {429, 500, 502, 503, 504}


class TransientTMDbError(MetadataProviderError):
    """A TMDb request failed in a way worth retrying."""

    pass


class TMDbService(IMetadataProvider, LoggerMixin):
    """TMDb service implementation."""

    def __init__(self, config: Config) -> None:
        """Initialize TMDb service.

        Args:
            config: Application configuration.
        """
        self._config = config
        self._tmdb_config = config.tmdb
        self._session: Optional[aiohttp.ClientSession] = None

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
        kind = MediaKind(kind)
        endpoint = "/search/movie" if kind == MediaKind.FILM else "/search/tv"
        params = {"query": query}
        if year and kind == MediaKind.FILM:
            params["year"] = str(year)

        data = await self._get_json(endpoint, params)
        results = [self.parse_search_result(item, kind) for item in data.get("results", [])]

        self.logger.info(f"Found {len(results)} TMDb results for '{query}'")
        return results

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
        if not is_valid_tmdb_id(tmdb_id):
            raise InvalidMetadataLinkError(f"TMDb id must be numeric, got {tmdb_id!r}")
        tmdb_id = str(tmdb_id).strip()

        kind = MediaKind(kind)
        endpoint = f"/movie/{tmdb_id}" if kind == MediaKind.FILM else f"/tv/{tmdb_id}"
        data = await self._get_json(endpoint, {})
        metadata = self.parse_details(data, kind, tmdb_id)

        poster_path = data.get("poster_path")
        if poster_path:
            try:
                metadata.poster = await self._download_poster(poster_path)
            except MetadataProviderError as e:
                self.logger.warning(f"Failed to download poster for TMDb id {tmdb_id}: {e}")
        else:
            self.logger.warning(f"No poster available for TMDb id {tmdb_id}")

        return metadata

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    @staticmethod
    def parse_search_result(data: Dict[str, Any], kind: MediaKind) -> TitleCandidate:
        """Parse one search hit.

        Args:
            data: Raw search result.
            kind: Film or TV.

        Returns:
            Title candidate.
        """
        if kind == MediaKind.FILM:
            title, date = data.get("title", ""), data.get("release_date", "")
        else:
            title, date = data.get("name", ""), data.get("first_air_date", "")

        return TitleCandidate(
            tmdb_id=str(data["id"]),
            kind=kind,
            title=title,
            year=_parse_year(date),
            overview=data.get("overview") or None,
            poster_path=data.get("poster_path"),
            popularity=data.get("popularity"),
        )

    @staticmethod
    def parse_details(data: Dict[str, Any], kind: MediaKind, tmdb_id: str) -> FetchedMetadata:
        """Parse a movie or TV details response, without the poster.

        Args:
            data: Raw details response.
            kind: Film or TV.
            tmdb_id: Requested id.

        Returns:
            Metadata bundle.
        """
        if kind == MediaKind.FILM:
            title, date = data.get("title"), data.get("release_date", "")
        else:
            title, date = data.get("name"), data.get("first_air_date", "")

        return FetchedMetadata(
            tmdb_id=tmdb_id,
            title=title or None,
            year=_parse_year(date),
            description=data.get("overview") or None,
            genres=[g["name"] for g in data.get("genres", []) if g.get("name")],
        )

    async def _get_json(self, endpoint: str, params: Dict[str, str]) -> Dict[str, Any]:
        """GET a TMDb API endpoint, retrying transient failures.

        Raises:
            InvalidMetadataLinkError: On 404.
            MetadataProviderError: On any other failure.
        """
        url = f"{self._tmdb_config.base_url}{endpoint}"
        query = {
            "api_key": self._tmdb_config.api_key,
            "language": self._tmdb_config.language,
            **params,
        }

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._tmdb_config.retry_attempts),
            wait=wait_exponential(multiplier=0.5, max=4),
            retry=retry_if_exception_type(TransientTMDbError),
            reraise=True,
        ):
            with attempt:
                return await self._request_json(url, query)

        raise MetadataProviderError(f"TMDb request failed: {endpoint}")

    async def _request_json(self, url: str, params: Dict[str, str]) -> Dict[str, Any]:
        try:
            async with self._get_session().get(url, params=params) as response:
                if response.status == 404:
                    raise InvalidMetadataLinkError(f"TMDb has no record at {response.url.path}")
                if response.status in _TRANSIENT_STATUSES:
                    raise TransientTMDbError(f"TMDb returned status {response.status}")
                if response.status == 401:
                    raise MetadataProviderError("TMDb rejected the API key")
                response.raise_for_status()
                return await response.json()
        except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as e:
            raise TransientTMDbError(f"TMDb request failed: {e}") from e
        except aiohttp.ClientError as e:
            raise MetadataProviderError(f"TMDb request failed: {e}") from e

    async def _download_poster(self, poster_path: str) -> bytes:
        url = f"{self._tmdb_config.image_base_url}/{poster_path.lstrip('/')}"
        try:
            async with self._get_session().get(url) as response:
                response.raise_for_status()
                return await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise MetadataProviderError(f"Poster download failed: {e}") from e

    def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._tmdb_config.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session


def _parse_year(date: Optional[str]) -> Optional[int]:
    if date and len(date) >= 4 and date[:4].isdigit():
        return int(date[:4])
    return None
