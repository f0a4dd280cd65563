"""Test import candidate discovery."""

import pytest

from media_shelf.core.models import DiskFormat
from media_shelf.core.services import DiskClassifier, ImportScanner
from media_shelf.utils import SourceNotFoundError


def test_list_candidates(scanner, import_dir, blu_ray_source, dvd_source, unknown_source):
    """Every visible subdirectory is a candidate with format and guesses."""
    (import_dir / ".partial").mkdir()
    (import_dir / "readme.txt").write_text("not a disk")

    candidates = {c.name: c for c in scanner.list_candidates()}

    assert sorted(candidates) == ["FIREFLY_S1_D1", "THE_MATRIX_1999", "mystery.rip"]
    matrix = candidates["THE_MATRIX_1999"]
    assert matrix.detected_format == DiskFormat.BLU_RAY
    assert matrix.title_guess == "THE MATRIX"
    assert matrix.year_guess == 1999
    assert matrix.size_bytes > 0
    assert matrix.size_gb == matrix.size_bytes / 1024**3
    assert candidates["FIREFLY_S1_D1"].detected_format == DiskFormat.DVD
    assert candidates["mystery.rip"].detected_format == DiskFormat.UNKNOWN


def test_get_candidate_by_name_and_path(scanner, blu_ray_source):
    """Candidates resolve by directory name or absolute path."""
    assert scanner.get_candidate("THE_MATRIX_1999").path == blu_ray_source
    assert scanner.get_candidate(blu_ray_source).name == "THE_MATRIX_1999"


def test_get_candidate_missing(scanner, import_dir, tmp_path, blu_ray_source):
    """Missing or out-of-root sources are rejected."""
    with pytest.raises(SourceNotFoundError):
        scanner.get_candidate("gone")
    with pytest.raises(SourceNotFoundError):
        scanner.get_candidate(tmp_path / "media")
    with pytest.raises(SourceNotFoundError):
        scanner.get_candidate("THE_MATRIX_1999/BDMV")
    with pytest.raises(SourceNotFoundError):
        scanner.get_candidate("../media")


def test_scanner_without_import_dir(config):
    """An unconfigured import root disables the scanner."""
    config.catalog.import_dir = None
    scanner = ImportScanner(config, DiskClassifier())

    assert not scanner.enabled
    with pytest.raises(SourceNotFoundError):
        scanner.list_candidates()
