"""File system utilities."""

import json
import os
import shutil
from pathlib import Path
from typing import Any, Dict, Optional


def get_file_size(path: Path) -> int:
    """Get file size in bytes.

    Args:
        path: Path to file.

    Returns:
        File size in bytes.

    Raises:
        OSError: If file cannot be accessed.
    """
    return path.stat().st_size


def is_hidden_file(path: Path) -> bool:
    """Check if file is hidden.

    Args:
        path: Path to check.

    Returns:
        True if file is hidden.
    """
    # Unix-style hidden files (start with dot)
    if path.name.startswith("."):
        return True

    # Windows hidden files
    if os.name == "nt":
        try:
            import stat

            return bool(path.stat().st_file_attributes & stat.FILE_ATTRIBUTE_HIDDEN)
        except (AttributeError, OSError):
            pass

    return False


def get_directory_size(path: Path) -> int:
    """Get total size of directory in bytes.

    Args:
        path: Directory path.

    Returns:
        Total size in bytes.
    """
    total_size = 0

    try:
        for file_path in path.rglob("*"):
            if file_path.is_file() and not file_path.is_symlink():
                try:
                    total_size += get_file_size(file_path)
                except OSError:
                    # Skip files we can't access
                    continue
    except OSError:
        # Skip directories we can't access
        pass

    return total_size


def read_text_file(path: Path) -> Optional[str]:
    """Read a small UTF-8 text file.

    Bytes that are not valid UTF-8 are replaced with U+FFFD instead of failing.

    Args:
        path: File to read.

    Returns:
        Stripped content, or None if the file is missing or blank.
    """
    try:
        content = path.read_bytes().decode("utf-8", errors="replace").strip()
    except (FileNotFoundError, NotADirectoryError):
        return None
    return content or None


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write a file through a temporary sibling and rename it into place.

    Args:
        path: Destination path.
        data: File content.

    Raises:
        OSError: If the write or rename fails.
    """
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def atomic_write_text(path: Path, text: str) -> None:
    """Write UTF-8 text atomically.

    Args:
        path: Destination path.
        text: File content.
    """
    atomic_write_bytes(path, text.encode("utf-8"))


def load_json_dict(path: Path) -> Dict[str, Any]:
    """Load a JSON object from disk.

    Missing files and malformed content both yield an empty dict.

    Args:
        path: JSON file path.

    Returns:
        Parsed dictionary.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def remove_tree(path: Path) -> None:
    """Remove a directory tree, ignoring a missing path.

    Args:
        path: Directory to remove.
    """
    if path.exists():
        shutil.rmtree(path)
