"""Playback command generator implementation."""

import shlex

from ...config.models import Config
from ..interfaces import ICommandGenerator
from ..models import Disk, PlaybackCommands

VLC_BLU_RAY_SCHEME = "bluray://"
VLC_DVD_SCHEME = "dvd://"
MPV_BLU_RAY_ARGS = ("bd://", "--bluray-device=")
MPV_DVD_ARGS = ("dvd://", "--dvd-device=")


def is_blu_ray(disk_format: str) -> bool:
    """Check if a format tag denotes a Blu-Ray disk (including UHD)."""
    fmt = disk_format.lower()
    return "blu-ray" in fmt or "bluray" in fmt


def is_dvd(disk_format: str) -> bool:
    """Check if a format tag denotes a DVD."""
    return "dvd" in disk_format.lower()


class CommandGenerator(ICommandGenerator):
    """Builds VLC and MPV invocations that open a disk backup.

    Blu-Ray and DVD backups are opened as disc roots so players show the
    disc menus: VLC through its ``bluray://`` and ``dvd://`` access modules,
    MPV through ``bd://`` or ``dvd://`` with the device pointed at the disk
    directory. Anything else is handed to both players as a plain path.
    Every path is POSIX shell quoted.
    """

    def __init__(self, config: Config) -> None:
        """Initialize command generator.

        Args:
            config: Application configuration.
        """
        self._prefix = config.playback.url_prefix

    def generate(self, disk: Disk) -> PlaybackCommands:
        """Build VLC and MPV invocations for a disk.

        Args:
            disk: Catalog disk.

        Returns:
            Shell-safe commands.
        """
        path = f"{self._prefix}{disk.path}"

        if is_blu_ray(disk.format):
            return PlaybackCommands(
                vlc=f"vlc {shlex.quote(VLC_BLU_RAY_SCHEME + path)}",
                mpv=self._mpv_disc(MPV_BLU_RAY_ARGS, path),
            )

        if is_dvd(disk.format):
            return PlaybackCommands(
                vlc=f"vlc {shlex.quote(VLC_DVD_SCHEME + path)}",
                mpv=self._mpv_disc(MPV_DVD_ARGS, path),
            )

        return PlaybackCommands(
            vlc=f"vlc {shlex.quote(path)}",
            mpv=f"mpv {shlex.quote(path)}",
        )

    @staticmethod
    def _mpv_disc(args: tuple, path: str) -> str:
        scheme, device_flag = args
        return f"mpv {scheme} {device_flag}{shlex.quote(path)}"
