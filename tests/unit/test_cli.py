"""Test the command line interface."""

import logging

import pytest
from click.testing import CliRunner

from media_shelf.cli import cli
from media_shelf.core.models import FetchedMetadata, MediaKind
from media_shelf.core.services import MetadataStore, TMDbService


@pytest.fixture(autouse=True)
def restore_logging():
    """Drop the handlers each CLI run installs on the root logger."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def runner():
    """Click test runner."""
    return CliRunner()


@pytest.fixture
def invoke(runner, temp_config_file):
    """Invoke the CLI against the temporary configuration."""

    def _invoke(*args, **kwargs):
        return runner.invoke(cli, ["--config", str(temp_config_file), *args], **kwargs)

    return _invoke


@pytest.fixture
def matrix(repository, make_disk, tmp_path):
    """Film entry with one Blu-Ray disk."""
    entry = repository.create_entry(MediaKind.FILM, "The Matrix", 1999)
    source = make_disk(tmp_path / "rip", "blu-ray")
    repository.add_disk(entry, source, "Blu-Ray")
    return repository.get(entry.slug)


def test_init_creates_config(runner, tmp_path):
    """init writes a config file without loading one."""
    output = tmp_path / "config" / "config.yaml"

    result = runner.invoke(
        cli, ["init", "--output", str(output), "--media-dir", str(tmp_path / "media")]
    )

    assert result.exit_code == 0
    assert output.exists()
    content = output.read_text()
    assert "catalog:" in content
    assert "tmdb:" in content


def test_init_without_media_dir_hints(runner, tmp_path):
    """The starter config still needs a catalog root."""
    output = tmp_path / "config.yaml"

    result = runner.invoke(cli, ["init", "--output", str(output)])

    assert result.exit_code == 0
    assert "Set catalog.media_dir" in result.output


def test_validate(invoke, blu_ray_source, matrix):
    """validate reports the catalog, import folder and TMDb state."""
    result = invoke("validate")

    assert result.exit_code == 0
    assert "(1 entries)" in result.output
    assert "(1 candidates)" in result.output
    assert "TMDb: configured" in result.output


def test_validate_reports_staging_leftovers(invoke, matrix):
    """Staging directories from an interrupted import are listed."""
    (matrix.path / ".staging-0123abcd").mkdir()

    result = invoke("validate")

    assert result.exit_code == 0
    assert "Warning: interrupted import left" in result.output
    assert ".staging-0123abcd" in result.output


def test_missing_config_file(runner, tmp_path):
    """A nonexistent --config path is rejected by click."""
    result = runner.invoke(cli, ["--config", str(tmp_path / "nope.yaml"), "list"])

    assert result.exit_code != 0


def test_list_empty_catalog(invoke):
    """An empty catalog says so."""
    result = invoke("list")

    assert result.exit_code == 0
    assert "The catalog is empty." in result.output


def test_list_and_show(invoke, matrix):
    """Entries are listed with slug and shown with their disks."""
    listed = invoke("list")
    shown = invoke("show", matrix.slug)

    assert listed.exit_code == 0
    assert "the-matrix-1999-film" in listed.output
    assert "1 disk(s)" in listed.output
    assert shown.exit_code == 0
    assert "The Matrix (1999)" in shown.output
    assert "Disk (Blu-Ray)" in shown.output
    assert "GB" in listed.output
    assert "GB" in shown.output


def test_play_prints_commands(invoke, matrix):
    """play prints one VLC and one MPV command per disk."""
    result = invoke("play", matrix.slug)

    assert result.exit_code == 0
    assert "vlc 'bluray://" in result.output
    assert "mpv bd:// --bluray-device=" in result.output


def test_unknown_slug(invoke):
    """Unknown slugs exit with an error."""
    result = invoke("show", "no-such-film")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_classify(invoke, make_disk, tmp_path):
    """classify prints the detected format."""
    dvd = make_disk(tmp_path / "dvd", "dvd")

    result = invoke("classify", str(dvd))

    assert result.exit_code == 0
    assert "DVD" in result.output


def test_candidates(invoke, blu_ray_source, unknown_source):
    """candidates lists the import folder."""
    result = invoke("candidates")

    assert result.exit_code == 0
    assert "THE_MATRIX_1999" in result.output
    assert "mystery.rip" in result.output
    assert "GB" in result.output


def test_set_meta(invoke, matrix):
    """set-meta writes the sidecar files."""
    result = invoke(
        "set-meta", matrix.slug, "--title", "Matrix", "--genres", "Action, Sci-Fi"
    )

    assert result.exit_code == 0
    metadata = MetadataStore().read(matrix)
    assert metadata.title == "Matrix"
    assert metadata.genres == ["Action", "Sci-Fi"]


def test_set_meta_requires_a_field(invoke, matrix):
    """set-meta without options changes nothing."""
    result = invoke("set-meta", matrix.slug)

    assert result.exit_code == 1
    assert "Nothing to change." in result.output


def test_link(invoke, matrix, monkeypatch):
    """link fetches metadata for the entry."""

    async def fake_fetch(self, kind, tmdb_id):
        return FetchedMetadata(tmdb_id=tmdb_id, title="The Matrix", year=1999, genres=["Action"])

    monkeypatch.setattr(TMDbService, "fetch_metadata", fake_fetch)

    result = invoke("link", matrix.slug, "603")

    assert result.exit_code == 0
    assert "Linked The Matrix (1999) [Film] to TMDb 603" in result.output
    assert MetadataStore().read(matrix).tmdb_id == "603"


def test_link_rejects_bad_id(invoke, matrix):
    """A non-numeric id is refused before any request."""
    result = invoke("link", matrix.slug, "tt0133093")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_import_wizard(invoke, blu_ray_source, media_dir):
    """The wizard moves a Blu-Ray into a new film entry."""
    # mode, kind, TMDb lookup, title, year, label, confirm
    answers = "\n\nn\nThe Matrix\n\n\ny\n"

    result = invoke("import", "--source", "THE_MATRIX_1999", input=answers)

    assert result.exit_code == 0, result.output
    assert "Imported Disk [Blu-Ray] into The Matrix (1999) [Film]" in result.output
    assert (media_dir / "The Matrix (1999) [Film]" / "Disk [Blu-Ray]" / "BDMV").is_dir()
    assert not blu_ray_source.exists()


def test_import_wizard_declined(invoke, blu_ray_source, media_dir):
    """Declining the preview leaves everything in place."""
    answers = "\n\nn\nThe Matrix\n\n\nn\n"

    result = invoke("import", "--source", "THE_MATRIX_1999", input=answers)

    assert result.exit_code == 0
    assert "Import cancelled." in result.output
    assert blu_ray_source.is_dir()
    assert list(media_dir.iterdir()) == []
