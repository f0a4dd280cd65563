"""CLI integration tests."""

import subprocess
import sys
from pathlib import Path

import pytest

from media_shelf.core.models import MediaKind


def _run(*args):
    return subprocess.run(
        [sys.executable, "-m", "media_shelf.cli", *args],
        capture_output=True,
        text=True,
        cwd=Path(__file__).parent.parent.parent,
    )


@pytest.mark.integration
def test_cli_help():
    """Test CLI help command."""
    result = _run("--help")

    assert result.returncode == 0
    assert "Media Shelf" in result.stdout
    for command in ("list", "show", "play", "import", "link", "set-meta"):
        assert command in result.stdout


@pytest.mark.integration
def test_cli_init_command(tmp_path):
    """Test CLI init command."""
    config_path = tmp_path / "test_config.yaml"

    result = _run("init", "--output", str(config_path))

    assert result.returncode == 0
    content = config_path.read_text()
    assert "catalog:" in content
    assert "playback:" in content


@pytest.mark.integration
def test_cli_play_command(temp_config_file, repository, make_disk, tmp_path):
    """Test CLI play command on a real catalog."""
    entry = repository.create_entry(MediaKind.TV, "Firefly")
    repository.add_disk(entry, make_disk(tmp_path / "d1", "dvd"), "DVD", season=1, disk_number=1)

    result = _run("--config", str(temp_config_file), "play", entry.slug)

    assert result.returncode == 0
    assert "Series 1 Disk 1 (DVD):" in result.stdout
    assert "mpv dvd:// --dvd-device=" in result.stdout
