"""Catalog repository service implementation."""

import errno
import os
import shutil
import threading
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple

from ...config.models import Config
from ...infrastructure.logging import LoggerMixin
from ...utils import (
    AlreadyExistsError,
    DuplicateDiskError,
    MediaShelfError,
    NotFoundError,
    RelocationFailedError,
    SlugCollisionError,
    SourceNotFoundError,
    ValidationFailedError,
    is_hidden_file,
    remove_tree,
    slugify,
)
from ...utils.naming import (
    FILM_MARKER,
    clean_format,
    film_disk_name,
    film_entry_name,
    parse_entry_name,
    parse_film_disk_name,
    parse_tv_disk_name,
    tv_disk_label,
    tv_disk_name,
    tv_entry_name,
    validate_positive,
)
from ..interfaces import ICatalogRepository
from ..models import Disk, DiskFormat, MediaEntry, MediaKind
from .size_cache import DiskSizeCache

_root_locks: Dict[Path, threading.RLock] = {}
_root_locks_guard = threading.Lock()


def catalog_lock(root: Path) -> threading.RLock:
    """Get the mutation lock shared by every repository on one catalog root.

    Args:
        root: Catalog root directory.

    Returns:
        Re-entrant lock for the resolved root.
    """
    key = root.resolve()
    with _root_locks_guard:
        lock = _root_locks.get(key)
        if lock is None:
            lock = threading.RLock()
            _root_locks[key] = lock
        return lock


class CatalogRepository(ICatalogRepository, LoggerMixin):
    """Media catalog where the directory tree is the database.

    Reads scan the tree on demand and never take the lock. Mutations are
    serialised per catalog root; a disk becomes visible through a single
    rename of a hidden staging directory.
    """

    def __init__(self, config: Config) -> None:
        """Initialize catalog repository.

        Args:
            config: Application configuration.
        """
        self._root = Path(config.catalog.media_dir)
        self._staging_prefix = config.catalog.staging_prefix
        self._lock = catalog_lock(self._root)
        self._size_cache = DiskSizeCache(persist=config.catalog.persist_size_cache)

    @property
    def root(self) -> Path:
        """Catalog root directory."""
        return self._root

    def list_entries(self) -> List[MediaEntry]:
        """List all canonical entries under the catalog root.

        Returns:
            Entries sorted by name. Non-canonical directories are skipped.

        Raises:
            NotFoundError: If the catalog root is missing.
            SlugCollisionError: If two entries share a slug.
        """
        if not self._root.is_dir():
            raise NotFoundError(f"Catalog root is not a directory: {self._root}")

        entries = []
        for child in sorted(self._root.iterdir()):
            if not child.is_dir() or is_hidden_file(child):
                continue
            entry = self._load_entry(child)
            if entry is None:
                self.logger.debug(f"Skipping non-canonical directory: {child.name}")
                continue
            entries.append(entry)

        self._check_slugs(entries)
        return entries

    def get(self, slug: str) -> MediaEntry:
        """Get an entry by slug.

        Args:
            slug: URL-safe entry key.

        Returns:
            Matching entry.

        Raises:
            NotFoundError: If no entry has this slug.
            SlugCollisionError: If the catalog holds colliding slugs.
        """
        for entry in self.list_entries():
            if entry.slug == slug:
                return entry
        raise NotFoundError(f"No media entry with slug '{slug}'")

    def create_entry(self, kind: MediaKind, title: str, year: Optional[int] = None) -> MediaEntry:
        """Create a new, empty canonical entry directory.

        Args:
            kind: Film or TV.
            title: Media title.
            year: Release year (required for films).

        Returns:
            Created entry.

        Raises:
            AlreadyExistsError: If the canonical name or its slug is taken.
            ValidationFailedError: If title or year is invalid.
        """
        kind = MediaKind(kind)
        name = film_entry_name(title, year) if kind == MediaKind.FILM else tv_entry_name(title)
        slug = slugify(name)

        with self._lock:
            path = self._root / name
            if path.exists():
                raise AlreadyExistsError(f"Media entry already exists: {name}")

            taken = self._slugs_in_use()
            if slug in taken:
                raise AlreadyExistsError(
                    f"Media entry '{name}' would share slug '{slug}' with '{taken[slug]}'"
                )

            try:
                # mkdir fails if the name appeared since the check above
                path.mkdir()
            except FileExistsError as e:
                raise AlreadyExistsError(f"Media entry already exists: {name}") from e
            except OSError as e:
                raise MediaShelfError(f"Failed to create media directory {path}: {e}") from e

        self.logger.info(f"Created media entry: {name}")
        entry = self._load_entry(path)
        assert entry is not None
        return entry

    def add_disk(
        self,
        entry: MediaEntry,
        source_path: Path,
        disk_format: str,
        label: Optional[str] = None,
        season: Optional[int] = None,
        disk_number: Optional[int] = None,
    ) -> Disk:
        """Relocate a source directory into an entry as a new disk.

        The source is first moved (or copied, across filesystems) to a hidden
        staging directory inside the entry, then renamed to its final name.
        On failure the staging directory is removed or moved back, so no
        partial disk is ever visible.

        Args:
            entry: Target entry.
            source_path: Directory to relocate.
            disk_format: Format tag; ``Unknown`` is rejected.
            label: Disk label (films only).
            season: Season number (TV only).
            disk_number: Disk number within the season (TV only).

        Returns:
            The new disk.

        Raises:
            DuplicateDiskError: If the placement is already taken.
            NotFoundError: If the entry directory no longer exists.
            RelocationFailedError: If the move could not complete.
            SourceNotFoundError: If the source directory is missing.
            ValidationFailedError: If the format or placement is invalid.
        """
        source_path = Path(source_path)
        disk_format = self._effective_format(disk_format)
        entry_path = entry.path

        if entry.kind == MediaKind.TV:
            season = validate_positive(season, "Season number")
            disk_number = validate_positive(disk_number, "Disk number")
            dir_name = tv_disk_name(disk_format, season, disk_number)
            label = tv_disk_label(season, disk_number)
        else:
            if season is not None or disk_number is not None:
                raise ValidationFailedError("Season and disk numbers only apply to TV entries")
            dir_name = film_disk_name(disk_format, label)
            parsed = parse_film_disk_name(dir_name)
            assert parsed is not None
            label = parsed.label

        if not source_path.is_dir():
            raise SourceNotFoundError(f"Source directory does not exist: {source_path}")
        resolved_source = source_path.resolve()
        resolved_entry = entry_path.resolve()
        if resolved_source == resolved_entry or resolved_source in resolved_entry.parents:
            raise ValidationFailedError(f"Cannot import {source_path} into itself")

        with self._lock:
            if not entry_path.is_dir():
                raise NotFoundError(f"Media entry no longer exists: {entry.name}")

            target = entry_path / dir_name
            if entry.kind == MediaKind.TV and (season, disk_number) in self._tv_placements(
                entry_path
            ):
                raise DuplicateDiskError(
                    f"{entry.name} already has series {season} disk {disk_number}"
                )
            if target.exists():
                raise DuplicateDiskError(f"Disk already exists: {target}")

            staging = entry_path / f"{self._staging_prefix}{uuid.uuid4().hex}"
            self._relocate(source_path, staging, target)
            self._size_cache.invalidate_entry(entry_path)

        self.logger.info(f"Added disk '{dir_name}' to {entry.name}")
        return Disk(
            label=label,
            format=disk_format,
            path=target,
            size_bytes=self.disk_size(target),
            season=season if entry.kind == MediaKind.TV else None,
            disk_number=disk_number if entry.kind == MediaKind.TV else None,
        )

    def abandon_entry(self, entry: MediaEntry) -> bool:
        """Remove an entry directory only if it is still empty.

        Args:
            entry: Entry created during a failed import.

        Returns:
            True if the directory was removed.
        """
        with self._lock:
            try:
                entry.path.rmdir()
            except OSError as e:
                self.logger.warning(f"Keeping media entry {entry.name}: {e}")
                return False
        self.logger.info(f"Removed empty media entry: {entry.name}")
        return True

    def disk_size(self, disk_path: Path) -> int:
        """Get the cached recursive size of a disk directory.

        Args:
            disk_path: Disk directory.

        Returns:
            Size in bytes.
        """
        return self._size_cache.get(disk_path)

    def staging_leftovers(self) -> List[Path]:
        """Find staging directories left behind by an interrupted ``add_disk``.

        Returns:
            Paths of staging directories inside entry directories, sorted.
        """
        if not self._root.is_dir():
            raise NotFoundError(f"Catalog root is not a directory: {self._root}")

        leftovers = []
        with self._lock:
            for entry_path in self._root.iterdir():
                if not entry_path.is_dir() or is_hidden_file(entry_path):
                    continue
                try:
                    children = list(entry_path.iterdir())
                except OSError as e:
                    self.logger.warning(f"Cannot scan {entry_path.name} for staging: {e}")
                    continue
                leftovers.extend(
                    child
                    for child in children
                    if child.is_dir() and child.name.startswith(self._staging_prefix)
                )
        return sorted(leftovers)

    def _effective_format(self, disk_format: str) -> str:
        """Normalise a format tag and reject undetected formats."""
        if isinstance(disk_format, DiskFormat):
            disk_format = disk_format.value
        disk_format = (disk_format or "").strip()
        if not disk_format or disk_format.lower() == DiskFormat.UNKNOWN.value.lower():
            raise ValidationFailedError(
                "Disk format could not be detected; a manual format is required"
            )
        return clean_format(disk_format)

    def _relocate(self, source: Path, staging: Path, target: Path) -> None:
        """Move source to target through a staging directory.

        Raises:
            RelocationFailedError: If any step fails; nothing is left at target.
        """
        renamed = False
        try:
            try:
                os.rename(source, staging)
                renamed = True
            except OSError as e:
                if e.errno != errno.EXDEV:
                    raise
                self.logger.info(f"Copying {source} across filesystems")
                shutil.copytree(source, staging, symlinks=True)
            os.rename(staging, target)
        except (OSError, shutil.Error) as e:
            self._rollback(source, staging, renamed)
            raise RelocationFailedError(f"Failed to move {source} to {target}: {e}") from e

        if not renamed:
            try:
                shutil.rmtree(source)
            except OSError as e:
                self.logger.warning(f"Imported copy of {source} but could not remove it: {e}")

    def _rollback(self, source: Path, staging: Path, renamed: bool) -> None:
        """Undo a failed relocation."""
        try:
            if renamed and staging.exists() and not source.exists():
                os.rename(staging, source)
            else:
                remove_tree(staging)
        except OSError as e:
            self.logger.error(f"Failed to roll back staging directory {staging}: {e}")

    def _load_entry(self, path: Path) -> Optional[MediaEntry]:
        """Build an entry from a directory, or None if the name is not canonical."""
        parsed = parse_entry_name(path.name)
        if parsed is None:
            return None

        kind = MediaKind.FILM if parsed.marker == FILM_MARKER else MediaKind.TV
        return MediaEntry(
            name=path.name,
            title=parsed.title,
            kind=kind,
            year=parsed.year,
            path=path,
            disks=self._collect_disks(path, kind),
        )

    def _collect_disks(self, entry_path: Path, kind: MediaKind) -> List[Disk]:
        """Collect disks of an entry in display order."""
        parse = parse_tv_disk_name if kind == MediaKind.TV else parse_film_disk_name

        disks = []
        try:
            children = sorted(entry_path.iterdir())
        except OSError as e:
            self.logger.warning(f"Cannot read media directory {entry_path}: {e}")
            return []

        for child in children:
            if not child.is_dir() or is_hidden_file(child):
                continue
            parsed = parse(child.name)
            if parsed is None:
                continue
            disks.append(
                Disk(
                    label=parsed.label,
                    format=parsed.format,
                    path=child,
                    size_bytes=self.disk_size(child),
                    season=parsed.season,
                    disk_number=parsed.disk_number,
                )
            )

        if kind == MediaKind.TV:
            disks.sort(key=lambda d: (d.season, d.disk_number, d.dir_name))
        return disks

    def _tv_placements(self, entry_path: Path) -> Set[Tuple[int, int]]:
        """Season/disk pairs already present in a TV entry."""
        placements = set()
        for child in entry_path.iterdir():
            parsed = parse_tv_disk_name(child.name)
            if parsed is not None and child.is_dir():
                placements.add((parsed.season, parsed.disk_number))
        return placements

    def _slugs_in_use(self) -> Dict[str, str]:
        """Map slugs of canonical directories to their names."""
        slugs = {}
        for child in self._root.iterdir():
            if child.is_dir() and not is_hidden_file(child) and parse_entry_name(child.name):
                slugs[slugify(child.name)] = child.name
        return slugs

    def _check_slugs(self, entries: List[MediaEntry]) -> None:
        """Raise if two entries share a slug."""
        seen: Dict[str, str] = {}
        for entry in entries:
            other = seen.get(entry.slug)
            if other is not None:
                raise SlugCollisionError(entry.slug, [other, entry.name])
            seen[entry.slug] = entry.name
