"""Test disk format detection."""

from media_shelf.core.models import DiskFormat
from media_shelf.core.services import DiskClassifier


def test_classify_blu_ray(tmp_path, make_disk):
    """A BDMV directory with an index marks a Blu-Ray."""
    disk = make_disk(tmp_path / "disk", "blu-ray")

    assert DiskClassifier().classify(disk) == DiskFormat.BLU_RAY


def test_classify_dvd(tmp_path, make_disk):
    """A VIDEO_TS directory with IFO files marks a DVD."""
    disk = make_disk(tmp_path / "disk", "dvd")

    assert DiskClassifier().classify(disk) == DiskFormat.DVD


def test_classify_unknown(tmp_path, make_disk):
    """Anything else is unknown."""
    disk = make_disk(tmp_path / "disk", "unknown")

    assert DiskClassifier().classify(disk) == DiskFormat.UNKNOWN


def test_classify_is_case_insensitive(tmp_path):
    """Lower-cased rips are still recognised."""
    (tmp_path / "bdmv").mkdir()
    (tmp_path / "bdmv" / "INDEX.BDMV").write_bytes(b"INDX")

    assert DiskClassifier().classify(tmp_path) == DiskFormat.BLU_RAY


def test_marker_directories_need_marker_files(tmp_path):
    """An empty BDMV or VIDEO_TS directory is not enough."""
    (tmp_path / "BDMV").mkdir()
    (tmp_path / "VIDEO_TS").mkdir()
    (tmp_path / "VIDEO_TS" / "notes.txt").write_text("x")

    assert DiskClassifier().classify(tmp_path) == DiskFormat.UNKNOWN


def test_marker_must_be_directory(tmp_path):
    """A file named BDMV does not count."""
    (tmp_path / "BDMV").write_text("not a directory")

    assert DiskClassifier().classify(tmp_path) == DiskFormat.UNKNOWN


def test_classify_missing_path(tmp_path):
    """A missing directory classifies as unknown without raising."""
    assert DiskClassifier().classify(tmp_path / "missing") == DiskFormat.UNKNOWN


def test_classify_does_not_modify(tmp_path, make_disk):
    """Classification only reads the tree."""
    disk = make_disk(tmp_path / "disk", "blu-ray")
    before = sorted(p.relative_to(disk) for p in disk.rglob("*"))

    DiskClassifier().classify(disk)

    assert sorted(p.relative_to(disk) for p in disk.rglob("*")) == before
