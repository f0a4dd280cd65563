"""Test linking catalog entries to TMDb."""

import pytest

from media_shelf.core.models import MediaKind, TitleCandidate
from media_shelf.core.services import MetadataLinker
from media_shelf.utils import InvalidMetadataLinkError, ValidationFailedError


@pytest.fixture
def linker(fake_provider, metadata_store):
    """Linker backed by the in-memory provider."""
    return MetadataLinker(fake_provider, metadata_store)


@pytest.mark.asyncio
async def test_link_stores_fetched_metadata(linker, fake_provider, metadata_store, film_entry):
    """Linking fetches the bundle and writes it."""
    fake_provider.add("603", "The Matrix", 1999, genres=["Action"], poster=b"jpeg")

    metadata = await linker.link(film_entry, " 603 ")

    assert metadata.tmdb_id == "603"
    assert metadata.genres == ["Action"]
    assert metadata_store.read_poster(film_entry) == b"jpeg"


@pytest.mark.asyncio
async def test_change_link(linker, fake_provider, metadata_store, film_entry):
    """Changing the id replaces the previous bundle."""
    fake_provider.add("603", "The Matrix", 1999, description="First")
    fake_provider.add("604", "The Matrix Reloaded", 2003)
    await linker.link(film_entry, "603")

    metadata = await linker.link(film_entry, "604")

    assert metadata.title == "The Matrix Reloaded"
    assert metadata.description is None


@pytest.mark.asyncio
async def test_rejected_id_keeps_previous_metadata(
    linker, fake_provider, metadata_store, film_entry
):
    """An id the provider rejects leaves stored metadata as it was."""
    fake_provider.add("603", "The Matrix", 1999)
    await linker.link(film_entry, "603")

    with pytest.raises(InvalidMetadataLinkError):
        await linker.link(film_entry, "999")
    with pytest.raises(InvalidMetadataLinkError):
        await linker.link(film_entry, "tt0133093")

    assert metadata_store.read(film_entry).tmdb_id == "603"
    assert fake_provider.fetch_calls == ["603", "999"]


@pytest.mark.asyncio
async def test_search(linker, fake_provider):
    """Searches go to the provider filtered by kind."""
    fake_provider.search_results = [
        TitleCandidate(tmdb_id="603", kind=MediaKind.FILM, title="The Matrix", year=1999),
        TitleCandidate(tmdb_id="1437", kind=MediaKind.TV, title="Firefly", year=2002),
    ]

    results = await linker.search("the matrix", MediaKind.FILM)

    assert [r.tmdb_id for r in results] == ["603"]
    with pytest.raises(ValidationFailedError):
        await linker.search("  ", MediaKind.FILM)
