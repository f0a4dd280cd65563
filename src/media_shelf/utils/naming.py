"""Canonical catalog directory naming.

Entry directories are named ``{Title} ({Year}) [Film]`` or ``{Title} [TV]``.
Disk directories are named ``{Label} [{Format}]`` inside films and
``Series {Season} Disk {DiskNum} [{Format}]`` inside TV entries. Every name
produced here must parse back to the same values.
"""

import re
from typing import NamedTuple, Optional

from .exceptions import ValidationFailedError
from .text_utils import sanitize_name

FILM_MARKER = "Film"
TV_MARKER = "TV"
DEFAULT_FILM_DISK_LABEL = "Disk"

_FILM_PATTERN = re.compile(r"^(.+) \((\d{4})\) \[Film\]$")
_TV_PATTERN = re.compile(r"^(.+) \[TV\]$")
_DISK_PATTERN = re.compile(r"^(.+?) \[([^\[\]]+)\]$")
_TV_DISK_PATTERN = re.compile(r"^Series (\d+) Disk (\d+) \[([^\[\]]+)\]$")


class ParsedEntryName(NamedTuple):
    """Fields encoded in an entry directory name."""

    title: str
    marker: str
    year: Optional[int]


class ParsedDiskName(NamedTuple):
    """Fields encoded in a disk directory name."""

    label: str
    format: str
    season: Optional[int]
    disk_number: Optional[int]


def clean_title(title: str) -> str:
    """Sanitize a title for use in an entry name.

    Raises:
        ValidationFailedError: If nothing usable remains.
    """
    cleaned = sanitize_name(title or "")
    if not cleaned:
        raise ValidationFailedError("Title is required")
    return cleaned


def clean_format(disk_format: str) -> str:
    """Sanitize a format tag; brackets would break disk name parsing.

    Raises:
        ValidationFailedError: If nothing usable remains.
    """
    cleaned = sanitize_name(disk_format or "").replace("[", "(").replace("]", ")")
    if not cleaned:
        raise ValidationFailedError("Disk format is required")
    return cleaned


def validate_year(year: Optional[int]) -> int:
    """Validate a film year.

    Raises:
        ValidationFailedError: If the year is missing or not four digits.
    """
    if year is None or not 1000 <= int(year) <= 9999:
        raise ValidationFailedError(f"A four-digit year is required for films, got {year!r}")
    return int(year)


def validate_positive(value: Optional[int], what: str) -> int:
    """Validate a season or disk number.

    Raises:
        ValidationFailedError: If the value is missing or not positive.
    """
    if value is None or isinstance(value, bool) or int(value) <= 0:
        raise ValidationFailedError(f"{what} must be a positive integer, got {value!r}")
    return int(value)


def film_entry_name(title: str, year: int) -> str:
    """Build a film entry directory name."""
    return f"{clean_title(title)} ({validate_year(year)}) [{FILM_MARKER}]"


def tv_entry_name(title: str) -> str:
    """Build a TV entry directory name."""
    return f"{clean_title(title)} [{TV_MARKER}]"


def film_disk_name(disk_format: str, label: Optional[str] = None) -> str:
    """Build a film disk directory name."""
    label = sanitize_name(label or "") or DEFAULT_FILM_DISK_LABEL
    return f"{label} [{clean_format(disk_format)}]"


def tv_disk_name(disk_format: str, season: int, disk_number: int) -> str:
    """Build a TV disk directory name."""
    season = validate_positive(season, "Season number")
    disk_number = validate_positive(disk_number, "Disk number")
    return f"Series {season} Disk {disk_number} [{clean_format(disk_format)}]"


def tv_disk_label(season: int, disk_number: int) -> str:
    """Human label of a TV disk."""
    return f"Series {season} Disk {disk_number}"


def parse_entry_name(name: str) -> Optional[ParsedEntryName]:
    """Parse an entry directory name.

    Returns:
        Parsed fields, or None if the name is not canonical.
    """
    match = _FILM_PATTERN.match(name)
    if match:
        return ParsedEntryName(match.group(1), FILM_MARKER, int(match.group(2)))

    match = _TV_PATTERN.match(name)
    if match:
        return ParsedEntryName(match.group(1), TV_MARKER, None)

    return None


def parse_film_disk_name(name: str) -> Optional[ParsedDiskName]:
    """Parse a disk directory name inside a film entry."""
    match = _DISK_PATTERN.match(name)
    if not match:
        return None
    return ParsedDiskName(match.group(1), match.group(2), None, None)


def parse_tv_disk_name(name: str) -> Optional[ParsedDiskName]:
    """Parse a disk directory name inside a TV entry."""
    match = _TV_DISK_PATTERN.match(name)
    if not match:
        return None
    season, disk_number = int(match.group(1)), int(match.group(2))
    if season <= 0 or disk_number <= 0:
        return None
    return ParsedDiskName(tv_disk_label(season, disk_number), match.group(3), season, disk_number)
