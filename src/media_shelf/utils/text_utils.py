"""Text processing utilities."""

import re
from pathlib import Path
from typing import Optional, Tuple, Union

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
_UNDERSCORE_RUN = re.compile(r"_+")

_FORBIDDEN_CHARS = {
    ":": "_",
    "/": "_",
    "\\": "_",
    "<": "_",
    ">": "_",
    '"': "'",
    "|": "_",
    "?": "_",
    "*": "_",
}


def slugify(name: str) -> str:
    """Build a URL-safe slug from a directory name.

    Args:
        name: Canonical directory name.

    Returns:
        Lower-cased slug with non-alphanumeric runs collapsed to ``-``.

    Examples:
        >>> slugify("The Matrix (1999) [Film]")
        'the-matrix-1999-film'
    """
    return _SLUG_PATTERN.sub("-", name.lower()).strip("-")


def sanitize_name(name: str) -> str:
    """Make a title or label safe to use as a path component.

    Args:
        name: Raw user-provided text.

    Returns:
        Sanitized text.
    """
    for char, replacement in _FORBIDDEN_CHARS.items():
        name = name.replace(char, replacement)

    # Drop control characters
    name = "".join(ch for ch in name if ord(ch) >= 32)

    name = name.strip()
    return _UNDERSCORE_RUN.sub("_", name)


def guess_title(name: Union[str, Path]) -> Tuple[str, Optional[int]]:
    """Guess a title and year from a raw rip folder name.

    Folder names are not file names, so dots are treated as separators
    rather than as an extension marker.

    Args:
        name: Folder name or path.

    Returns:
        Tuple of (title, year_or_none).

    Examples:
        >>> guess_title("The.Matrix.1999.1080p.BluRay-GROUP")
        ('The Matrix', 1999)
        >>> guess_title("INCEPTION_DISC1")
        ('INCEPTION DISC1', None)
    """
    if isinstance(name, Path):
        name = name.name

    original = name
    year = _extract_year(original)

    name = re.sub(r"\[[^\]]*\]", "", name)
    name = re.sub(r"\([^)]*\)", "", name)
    name = re.sub(r"[._]", " ", name)

    # Remove quality, source and codec indicators
    noise_patterns = [
        r"\b(2160p|1080p|720p|480p|4k|uhd|hd|sd)\b",
        r"\b(bluray|blu-ray|bdrip|brrip|bdmv|dvd|dvdrip|remux|iso)\b",
        r"\b(x264|x265|h264|h265|hevc|avc|mpeg2)\b",
        r"\b(aac|ac3|dts|dts-hd|truehd|atmos|flac|pcm)\b",
    ]
    for pattern in noise_patterns:
        name = re.sub(pattern, " ", name, flags=re.IGNORECASE)

    # Release group at the end
    name = re.sub(r"-[A-Za-z0-9]+$", "", name.strip())

    if year:
        name = re.sub(rf"\b{year}\b", "", name)

    name = re.sub(r"\s+", " ", name).strip(" -")

    if not name:
        # Fallback to original if we cleaned too much
        name = re.sub(r"[._]", " ", original)
        name = re.sub(r"\s+", " ", name).strip()

    return name, year


def _extract_year(text: str) -> Optional[int]:
    """Extract year from a folder name.

    Args:
        text: Text to parse.

    Returns:
        Extracted year or None if not found.
    """
    year_patterns = [
        r"\((\d{4})\)",  # (2020)
        r"\[(\d{4})\]",  # [2020]
        r"(?<!\d)(19\d{2}|20\d{2})(?!\d)",  # 1900-2099
    ]

    for pattern in year_patterns:
        match = re.search(pattern, text)
        if match:
            year = int(match.group(1))
            if 1900 <= year <= 2099:
                return year

    return None


def parse_genres(text: Optional[str]) -> list:
    """Split a comma-separated genre list.

    Args:
        text: Raw genre text.

    Returns:
        List of non-empty genre names.
    """
    if not text:
        return []
    return [genre.strip() for genre in text.split(",") if genre.strip()]
