"""Metadata store service implementation."""

import os
import threading
import uuid
from pathlib import Path
from typing import Dict, List, Optional

from ...infrastructure.logging import LoggerMixin
from ...utils import (
    InvalidMetadataLinkError,
    MediaShelfError,
    atomic_write_text,
    parse_genres,
    read_text_file,
)
from ..interfaces import IMetadataStore
from ..models import FetchedMetadata, MediaEntry, Metadata

TMDB_FILE = "tmdb.txt"
TITLE_FILE = "title.txt"
DESCRIPTION_FILE = "description.txt"
GENRE_FILE = "genre.txt"
POSTER_FILE = "poster.jpg"
POSTER_FILES = ("poster.jpg", "poster.jpeg", "poster.png", "poster.webp")

_entry_locks: Dict[Path, threading.Lock] = {}
_entry_locks_guard = threading.Lock()


def _entry_lock(entry_path: Path) -> threading.Lock:
    key = entry_path.resolve()
    with _entry_locks_guard:
        return _entry_locks.setdefault(key, threading.Lock())


def is_valid_tmdb_id(tmdb_id: Optional[str]) -> bool:
    """Check that a TMDb id is a non-empty string of digits."""
    return bool(tmdb_id) and str(tmdb_id).strip().isdigit()


class MetadataStore(IMetadataStore, LoggerMixin):
    """Reads and writes sidecar files next to an entry's disks.

    Every file is optional. Reads and writes of one entry are serialised so a
    reader never sees half of a TMDb link change.
    """

    def read(self, entry: MediaEntry) -> Metadata:
        """Read all sidecar files of an entry.

        Args:
            entry: Catalog entry.

        Returns:
            Metadata with absent fields for missing files.
        """
        with _entry_lock(entry.path):
            return self._read_unlocked(entry.path)

    def read_poster(self, entry: MediaEntry) -> Optional[bytes]:
        """Read poster image bytes.

        Args:
            entry: Catalog entry.

        Returns:
            Image bytes or None if there is no poster.
        """
        with _entry_lock(entry.path):
            poster = self._find_poster(entry.path)
            if poster is None:
                return None
            try:
                return poster.read_bytes()
            except FileNotFoundError:
                return None

    def set_title_override(self, entry: MediaEntry, title: Optional[str]) -> None:
        """Write the title override; an empty value removes it."""
        self._set_text(entry, TITLE_FILE, title)

    def set_description(self, entry: MediaEntry, description: Optional[str]) -> None:
        """Write the description; an empty value removes it."""
        self._set_text(entry, DESCRIPTION_FILE, description)

    def set_genres(self, entry: MediaEntry, genres: List[str]) -> None:
        """Write the genre list; an empty list removes it."""
        self._set_text(entry, GENRE_FILE, self._format_genres(genres))

    def set_tmdb_link(self, entry: MediaEntry, tmdb_id: str, metadata: FetchedMetadata) -> Metadata:
        """Replace the TMDb id and every field derived from it.

        All files are written to temporary names first. The live sidecars are
        then moved aside and the new files renamed into place, with
        ``tmdb.txt`` last. If any rename fails the previous files are put
        back. Fields missing from ``metadata`` are removed rather than left
        over from a previous link.

        Args:
            entry: Catalog entry.
            tmdb_id: Numeric TMDb id.
            metadata: Bundle fetched for ``tmdb_id``.

        Returns:
            Metadata as stored after the replace.

        Raises:
            InvalidMetadataLinkError: If the id is malformed or does not match the bundle.
            MediaShelfError: If the files cannot be written; prior metadata is kept.
        """
        if not is_valid_tmdb_id(tmdb_id):
            raise InvalidMetadataLinkError(f"TMDb id must be numeric, got {tmdb_id!r}")
        tmdb_id = str(tmdb_id).strip()
        if str(metadata.tmdb_id).strip() != tmdb_id:
            raise InvalidMetadataLinkError(
                f"Fetched metadata is for TMDb id {metadata.tmdb_id}, not {tmdb_id}"
            )

        # Ordered so the id is the final file to change
        contents: Dict[str, Optional[bytes]] = {
            TITLE_FILE: self._encode(metadata.title),
            DESCRIPTION_FILE: self._encode(metadata.description),
            GENRE_FILE: self._encode(self._format_genres(metadata.genres)),
            POSTER_FILE: metadata.poster or None,
            TMDB_FILE: tmdb_id.encode("utf-8"),
        }

        with _entry_lock(entry.path):
            previous = read_text_file(entry.path / TMDB_FILE)
            staged = self._stage_files(entry.path, contents)
            managed = list(contents) + [name for name in POSTER_FILES if name not in contents]
            backups: Dict[str, Path] = {}
            installed: List[str] = []
            try:
                token = uuid.uuid4().hex
                for name in managed:
                    backup = entry.path / f".{name}.{token}.bak"
                    try:
                        os.rename(entry.path / name, backup)
                    except FileNotFoundError:
                        continue
                    backups[name] = backup
                for name, tmp_path in staged.items():
                    os.replace(tmp_path, entry.path / name)
                    installed.append(name)
            except OSError as e:
                self._restore_backups(entry, installed, backups)
                self._discard_staged(staged)
                raise MediaShelfError(f"Failed to save metadata for {entry.name}: {e}") from e

            for name, backup in backups.items():
                try:
                    backup.unlink()
                except OSError as e:
                    self.logger.warning(f"Failed to remove old {name} in {entry.name}: {e}")

            result = self._read_unlocked(entry.path)

        if previous and previous != tmdb_id:
            self.logger.info(f"Changed TMDb id of {entry.name} from {previous} to {tmdb_id}")
        else:
            self.logger.info(f"Linked {entry.name} to TMDb id {tmdb_id}")
        return result

    def _read_unlocked(self, entry_path: Path) -> Metadata:
        return Metadata(
            tmdb_id=read_text_file(entry_path / TMDB_FILE),
            title=read_text_file(entry_path / TITLE_FILE),
            description=read_text_file(entry_path / DESCRIPTION_FILE),
            genres=parse_genres(read_text_file(entry_path / GENRE_FILE)),
            poster_path=self._find_poster(entry_path),
        )

    def _find_poster(self, entry_path: Path) -> Optional[Path]:
        for name in POSTER_FILES:
            candidate = entry_path / name
            if candidate.is_file():
                return candidate
        return None

    def _set_text(self, entry: MediaEntry, name: str, value: Optional[str]) -> None:
        """Write or remove one text sidecar."""
        path = entry.path / name
        value = (value or "").strip()
        with _entry_lock(entry.path):
            try:
                if value:
                    atomic_write_text(path, value)
                else:
                    path.unlink(missing_ok=True)
            except OSError as e:
                raise MediaShelfError(f"Failed to write {name} for {entry.name}: {e}") from e
        self.logger.debug(f"Updated {name} for {entry.name}")

    def _stage_files(
        self, entry_path: Path, contents: Dict[str, Optional[bytes]]
    ) -> Dict[str, Path]:
        """Write temporary copies of every file that will be replaced."""
        token = uuid.uuid4().hex
        staged: Dict[str, Path] = {}
        try:
            for name, data in contents.items():
                if data is None:
                    continue
                tmp_path = entry_path / f".{name}.{token}.tmp"
                staged[name] = tmp_path
                with open(tmp_path, "wb") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
        except OSError as e:
            self._discard_staged(staged)
            raise MediaShelfError(f"Failed to stage metadata in {entry_path}: {e}") from e
        return staged

    def _discard_staged(self, staged: Dict[str, Path]) -> None:
        for tmp_path in staged.values():
            tmp_path.unlink(missing_ok=True)

    def _restore_backups(
        self, entry: MediaEntry, installed: List[str], backups: Dict[str, Path]
    ) -> None:
        """Undo a partial link change by putting the previous files back."""
        for name in installed:
            try:
                (entry.path / name).unlink(missing_ok=True)
            except OSError as e:
                self.logger.error(f"Failed to remove new {name} in {entry.name}: {e}")
        for name, backup in backups.items():
            try:
                os.rename(backup, entry.path / name)
            except OSError as e:
                self.logger.error(f"Failed to restore {name} in {entry.name} from {backup}: {e}")

    @staticmethod
    def _encode(value: Optional[str]) -> Optional[bytes]:
        value = (value or "").strip()
        return value.encode("utf-8") if value else None

    @staticmethod
    def _format_genres(genres: Optional[List[str]]) -> str:
        return ", ".join(g.strip() for g in genres or [] if g and g.strip())
