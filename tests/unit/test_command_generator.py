"""Test playback command generation."""

import shlex
from pathlib import Path

import pytest

from media_shelf.core.models import Disk
from media_shelf.core.services import CommandGenerator

DISK_PATH = Path("/media/The Matrix (1999) [Film]/Disk [Blu-Ray]")


def _disk(disk_format: str, path: Path = DISK_PATH) -> Disk:
    return Disk(label="Disk", format=disk_format, path=path)


@pytest.fixture
def generator(config):
    """Command generator without a URL prefix."""
    return CommandGenerator(config)


def test_blu_ray_commands(generator):
    """Blu-Ray disks open through the players' disc schemes."""
    commands = generator.generate(_disk("Blu-Ray"))

    assert commands.vlc == f"vlc 'bluray://{DISK_PATH}'"
    assert commands.mpv == f"mpv bd:// --bluray-device='{DISK_PATH}'"


def test_dvd_commands(generator):
    """DVDs use the DVD device syntax."""
    path = Path("/media/Firefly [TV]/Series 1 Disk 1 [DVD]")

    commands = generator.generate(_disk("DVD", path))

    assert commands.vlc == f"vlc 'dvd://{path}'"
    assert commands.mpv == f"mpv dvd:// --dvd-device='{path}'"


def test_custom_format_passes_path(generator):
    """Unrecognised formats hand the path to both players."""
    commands = generator.generate(_disk("MKV"))

    assert commands.vlc == f"vlc '{DISK_PATH}'"
    assert commands.mpv == f"mpv '{DISK_PATH}'"


@pytest.mark.parametrize("disk_format", ["Blu-Ray UHD", "4K UHD BluRay", "blu-ray"])
def test_blu_ray_variants(generator, disk_format):
    """Any format mentioning Blu-Ray is treated as one."""
    assert generator.generate(_disk(disk_format)).vlc.startswith("vlc 'bluray://")


@pytest.mark.parametrize("disk_format", ["Blu-Ray", "DVD", "Custom"])
def test_commands_round_trip_to_disk_path(generator, disk_format):
    """Stripping the addressing syntax yields the disk path again."""
    commands = generator.generate(_disk(disk_format))

    vlc_args = shlex.split(commands.vlc)
    mpv_args = shlex.split(commands.mpv)

    assert vlc_args[0] == "vlc"
    assert mpv_args[0] == "mpv"
    vlc_target = vlc_args[-1].split("://", 1)[-1]
    mpv_target = mpv_args[-1].split("=", 1)[-1]
    assert Path(vlc_target) == DISK_PATH
    assert Path(mpv_target) == DISK_PATH


def test_paths_with_quotes_are_shell_safe(generator):
    """Single quotes in titles survive shell parsing."""
    path = Path("/media/Schindler's List (1993) [Film]/Disk [DVD]")

    commands = generator.generate(_disk("DVD", path))

    assert shlex.split(commands.vlc) == ["vlc", f"dvd://{path}"]
    assert shlex.split(commands.mpv) == ["mpv", "dvd://", f"--dvd-device={path}"]


def test_url_prefix(config):
    """The configured prefix is prepended to the path."""
    config.playback.url_prefix = "smb://nas"

    commands = CommandGenerator(config).generate(_disk("Blu-Ray"))

    assert shlex.split(commands.vlc) == ["vlc", f"bluray://smb://nas{DISK_PATH}"]
    assert shlex.split(commands.mpv)[-1] == f"--bluray-device=smb://nas{DISK_PATH}"
