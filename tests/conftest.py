"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Dict, List, Optional

import pytest

from media_shelf.config import ConfigManager
from media_shelf.core.models import FetchedMetadata, MediaKind, TitleCandidate
from media_shelf.core.services import (
    CatalogRepository,
    DiskClassifier,
    ImportScanner,
    ImportSession,
    MetadataStore,
)
from media_shelf.infrastructure import Container
from media_shelf.utils import InvalidMetadataLinkError


def make_blu_ray(path: Path, payload: int = 2048) -> Path:
    """Create a minimal Blu-Ray backup layout."""
    (path / "BDMV" / "STREAM").mkdir(parents=True)
    (path / "BDMV" / "index.bdmv").write_bytes(b"INDX0200")
    (path / "BDMV" / "MovieObject.bdmv").write_bytes(b"MOBJ0200")
    (path / "BDMV" / "STREAM" / "00000.m2ts").write_bytes(b"\0" * payload)
    return path


def make_dvd(path: Path, payload: int = 1024) -> Path:
    """Create a minimal DVD backup layout."""
    (path / "VIDEO_TS").mkdir(parents=True)
    (path / "VIDEO_TS" / "VIDEO_TS.IFO").write_bytes(b"DVDVIDEO-VMG")
    (path / "VIDEO_TS" / "VTS_01_1.VOB").write_bytes(b"\0" * payload)
    return path


def make_unknown(path: Path) -> Path:
    """Create a directory with no recognisable disk layout."""
    path.mkdir(parents=True)
    (path / "movie.mkv").write_bytes(b"\0" * 512)
    return path


class FakeMetadataProvider:
    """In-memory metadata provider."""

    def __init__(self) -> None:
        self.records: Dict[str, FetchedMetadata] = {}
        self.search_results: List[TitleCandidate] = []
        self.fetch_calls: List[str] = []

    def add(self, tmdb_id: str, title: str, year: Optional[int] = None, **fields):
        record = FetchedMetadata(tmdb_id=tmdb_id, title=title, year=year, **fields)
        self.records[tmdb_id] = record
        return record

    async def search_titles(self, query, kind, year=None):
        return [c for c in self.search_results if c.kind == kind]

    async def fetch_metadata(self, kind, tmdb_id):
        self.fetch_calls.append(tmdb_id)
        if tmdb_id not in self.records:
            raise InvalidMetadataLinkError(f"TMDb has no record for {tmdb_id}")
        return self.records[tmdb_id]


@pytest.fixture
def make_disk():
    """Factory creating disk layouts: ``make_disk(path, "blu-ray" | "dvd" | "unknown")``."""
    layouts = {"blu-ray": make_blu_ray, "dvd": make_dvd, "unknown": make_unknown}

    def _make(path: Path, layout: str = "blu-ray") -> Path:
        return layouts[layout](path)

    return _make


@pytest.fixture
def media_dir(tmp_path):
    """Create an empty catalog root."""
    path = tmp_path / "media"
    path.mkdir()
    return path


@pytest.fixture
def import_dir(tmp_path):
    """Create an empty import root."""
    path = tmp_path / "import"
    path.mkdir()
    return path


@pytest.fixture
def temp_config_file(tmp_path, media_dir, import_dir):
    """Create a temporary configuration file."""
    config_content = f"""
catalog:
  media_dir: "{media_dir}"
  import_dir: "{import_dir}"

tmdb:
  api_key: "test-tmdb-key"

playback:
  url_prefix: ""

logging:
  level: "DEBUG"
"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(config_content)
    return config_file


@pytest.fixture
def config_manager(temp_config_file):
    """Create a configuration manager with test config."""
    return ConfigManager(temp_config_file, load_env_file=False)


@pytest.fixture
def config(config_manager):
    """Load test configuration."""
    return config_manager.load_config()


@pytest.fixture
def container(config_manager):
    """Create a test container with default services."""
    container = Container(config_manager)
    container.configure_default_services()
    return container


@pytest.fixture
def repository(config):
    """Catalog repository on the temporary catalog root."""
    return CatalogRepository(config)


@pytest.fixture
def metadata_store():
    """Sidecar metadata store."""
    return MetadataStore()


@pytest.fixture
def scanner(config):
    """Import scanner on the temporary import root."""
    return ImportScanner(config, DiskClassifier())


@pytest.fixture
def fake_provider():
    """In-memory metadata provider."""
    return FakeMetadataProvider()


@pytest.fixture
def session(repository, scanner, metadata_store):
    """Fresh import session."""
    return ImportSession(repository, scanner, metadata_store)


@pytest.fixture
def blu_ray_source(import_dir):
    """Blu-Ray backup waiting to be imported."""
    return make_blu_ray(import_dir / "THE_MATRIX_1999")


@pytest.fixture
def dvd_source(import_dir):
    """DVD backup waiting to be imported."""
    return make_dvd(import_dir / "FIREFLY_S1_D1")


@pytest.fixture
def unknown_source(import_dir):
    """Backup whose format cannot be detected."""
    return make_unknown(import_dir / "mystery.rip")


@pytest.fixture
def film_entry(repository):
    """Empty film entry in the catalog."""
    return repository.create_entry(MediaKind.FILM, "The Matrix", 1999)


@pytest.fixture
def tv_entry(repository):
    """Empty TV entry in the catalog."""
    return repository.create_entry(MediaKind.TV, "Firefly")
