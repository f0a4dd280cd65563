"""Import wizard state machine."""

import threading
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Union

from ...infrastructure.logging import LoggerMixin
from ...utils import (
    InvalidMetadataLinkError,
    InvalidTransitionError,
    MediaShelfError,
    NotFoundError,
    SourceNotFoundError,
    ValidationFailedError,
)
from ...utils.naming import (
    clean_title,
    film_disk_name,
    film_entry_name,
    tv_disk_name,
    tv_entry_name,
    validate_positive,
    validate_year,
)
from ..interfaces import ICatalogRepository, IImportScanner, IMetadataStore
from ..models import (
    DiskFormat,
    FetchedMetadata,
    ImportCandidate,
    ImportMode,
    ImportPreview,
    ImportResult,
    MediaEntry,
    MediaKind,
    WizardStep,
)
from .metadata_store import is_valid_tmdb_id

# Forward path through the wizard; add-to-existing skips SELECT_KIND
STEP_ORDER = [
    WizardStep.SELECT_SOURCE,
    WizardStep.SELECT_MODE,
    WizardStep.SELECT_KIND,
    WizardStep.COLLECT_IDENTITY,
    WizardStep.COLLECT_PLACEMENT,
    WizardStep.PREVIEW,
]


class ImportSession(LoggerMixin):
    """One run of the import wizard.

    Each step method is only accepted in its own state and advances to the
    next one. ``go_back`` returns to an earlier step without forgetting
    what was entered; step methods called with ``None`` reuse the collected
    value. Values that stop making sense after a change (season and disk
    numbers after switching to Film, a title after switching to
    add-to-existing) are cleared at that moment.

    Nothing touches the filesystem before ``commit``.
    """

    def __init__(
        self,
        repository: ICatalogRepository,
        scanner: IImportScanner,
        metadata_store: Optional[IMetadataStore] = None,
    ) -> None:
        """Initialize import session.

        Args:
            repository: Catalog repository used on commit.
            scanner: Import candidate scanner.
            metadata_store: Store for TMDb metadata attached during the wizard.
        """
        self._repository = repository
        self._scanner = scanner
        self._metadata_store = metadata_store

        self.step = WizardStep.SELECT_SOURCE
        self.source: Optional[ImportCandidate] = None
        self.mode: Optional[ImportMode] = None
        self.kind: Optional[MediaKind] = None
        self.title: Optional[str] = None
        self.year: Optional[int] = None
        self.target_entry: Optional[MediaEntry] = None
        self.season: Optional[int] = None
        self.disk_number: Optional[int] = None
        self.label: Optional[str] = None
        self.format_override: Optional[str] = None
        self.tmdb_metadata: Optional[FetchedMetadata] = None
        self.last_error: Optional[MediaShelfError] = None
        self.result: Optional[ImportResult] = None

    @property
    def is_finished(self) -> bool:
        """Whether the session was committed or cancelled."""
        return self.step.is_terminal

    @property
    def tmdb_id(self) -> Optional[str]:
        """TMDb id attached to the session."""
        return self.tmdb_metadata.tmdb_id if self.tmdb_metadata else None

    @property
    def effective_format(self) -> Optional[str]:
        """Manual format if set, otherwise the detected one, None if unknown."""
        if self.format_override:
            return self.format_override
        if self.source and self.source.detected_format != DiskFormat.UNKNOWN:
            return self.source.detected_format.value
        return None

    def available_modes(self) -> List[ImportMode]:
        """Modes selectable in SELECT_MODE."""
        modes = [ImportMode.NEW_MEDIA]
        if self._repository.list_entries():
            modes.append(ImportMode.ADD_TO_EXISTING)
        return modes

    def compatible_entries(self) -> List[MediaEntry]:
        """Existing entries the source could be added to."""
        return self._repository.list_entries()

    def select_source(self, name_or_path: Union[str, Path]) -> ImportCandidate:
        """Choose the raw directory to import.

        Raises:
            SourceNotFoundError: If the candidate does not exist.
        """
        self._require(WizardStep.SELECT_SOURCE)
        candidate = self._scanner.get_candidate(name_or_path)

        if self.source is not None and self.source.path != candidate.path:
            # An override chosen for another source does not carry over
            self.format_override = None
        self.source = candidate
        self.step = WizardStep.SELECT_MODE
        return candidate

    def select_mode(self, mode: Union[str, ImportMode]) -> None:
        """Choose between creating a new entry and extending an existing one.

        Raises:
            ValidationFailedError: If add-to-existing is chosen on an empty catalog.
        """
        self._require(WizardStep.SELECT_MODE)
        mode = ImportMode(mode)
        if mode not in self.available_modes():
            raise ValidationFailedError("There is no existing media to add a disk to")

        if mode != self.mode:
            if mode == ImportMode.ADD_TO_EXISTING:
                self.title = None
                self.year = None
                self.tmdb_metadata = None
            else:
                self.target_entry = None
        self.mode = mode
        if mode == ImportMode.NEW_MEDIA:
            self.step = WizardStep.SELECT_KIND
        else:
            self.step = WizardStep.COLLECT_IDENTITY

    def select_kind(self, kind: Union[str, MediaKind]) -> None:
        """Choose Film or TV for a new entry."""
        self._require(WizardStep.SELECT_KIND)
        self._apply_kind(MediaKind(kind))
        self.step = WizardStep.COLLECT_IDENTITY

    def attach_metadata(self, metadata: FetchedMetadata) -> None:
        """Attach TMDb metadata to a new entry; its title and year become defaults.

        Raises:
            InvalidMetadataLinkError: If the id is malformed.
        """
        self._require(WizardStep.COLLECT_IDENTITY)
        if self.mode != ImportMode.NEW_MEDIA:
            raise InvalidTransitionError("TMDb metadata can only be attached to new media")
        if not is_valid_tmdb_id(metadata.tmdb_id):
            raise InvalidMetadataLinkError(f"TMDb id must be numeric, got {metadata.tmdb_id!r}")
        self.tmdb_metadata = metadata

    def set_identity(self, title: Optional[str] = None, year: Optional[int] = None) -> None:
        """Collect title and (for films) year of a new entry.

        Missing values fall back to what was collected before, then to the
        attached TMDb metadata, then to the guess from the source name.

        Raises:
            ValidationFailedError: If the title or year is invalid.
        """
        self._require(WizardStep.COLLECT_IDENTITY)
        if self.mode != ImportMode.NEW_MEDIA:
            raise InvalidTransitionError("Use choose_existing() when adding to existing media")

        tmdb = self.tmdb_metadata
        title = self._first(
            title, self.title, tmdb.title if tmdb else None, self._source().title_guess
        )
        title = clean_title(title or "")

        if self.kind == MediaKind.FILM:
            year = validate_year(
                self._first(year, self.year, tmdb.year if tmdb else None, self._source().year_guess)
            )
        else:
            year = None

        self.title = title
        self.year = year
        self.step = WizardStep.COLLECT_PLACEMENT

    def choose_existing(self, slug: str) -> MediaEntry:
        """Pick the entry the disk will be added to.

        Raises:
            NotFoundError: If no entry has this slug.
        """
        self._require(WizardStep.COLLECT_IDENTITY)
        if self.mode != ImportMode.ADD_TO_EXISTING:
            raise InvalidTransitionError("Use set_identity() when creating new media")

        entry = self._repository.get(slug)
        self.target_entry = entry
        self._apply_kind(entry.kind)
        self.step = WizardStep.COLLECT_PLACEMENT
        return entry

    def set_placement(
        self,
        season: Optional[int] = None,
        disk_number: Optional[int] = None,
        label: Optional[str] = None,
        format_override: Optional[str] = None,
    ) -> None:
        """Collect where the disk goes inside the entry and its format.

        Args:
            season: Season number (TV only).
            disk_number: Disk number within the season (TV only).
            label: Disk label (films only).
            format_override: Manual format; an empty string reverts to detection.

        Raises:
            ValidationFailedError: If a value is invalid or no format is known.
        """
        self._require(WizardStep.COLLECT_PLACEMENT)

        if self.kind == MediaKind.TV:
            if label:
                raise ValidationFailedError("TV disks are labelled by season and disk number")
            season = validate_positive(self._first(season, self.season), "Season number")
            disk_number = validate_positive(
                self._first(disk_number, self.disk_number), "Disk number"
            )
        elif season is not None or disk_number is not None:
            raise ValidationFailedError("Season and disk numbers only apply to TV")

        if format_override is not None:
            format_override = format_override.strip()
            if format_override.lower() == DiskFormat.UNKNOWN.value.lower():
                format_override = ""

        new_override = self.format_override if format_override is None else format_override or None
        detected_known = self.source is not None and (
            self.source.detected_format != DiskFormat.UNKNOWN
        )
        if not new_override and not detected_known:
            raise ValidationFailedError(
                "The disk format could not be detected; enter it manually"
            )

        if self.kind == MediaKind.TV:
            self.season, self.disk_number = season, disk_number
        elif label is not None:
            self.label = label.strip() or None
        self.format_override = new_override
        self.step = WizardStep.PREVIEW

    def preview(self) -> ImportPreview:
        """Summarise the pending import without touching the filesystem."""
        self._require(WizardStep.PREVIEW)
        source = self._source()
        disk_format = self.effective_format
        assert disk_format is not None and self.kind is not None

        if self.kind == MediaKind.TV:
            disk_dir_name = tv_disk_name(
                disk_format, self.season, self.disk_number  # type: ignore[arg-type]
            )
        else:
            disk_dir_name = film_disk_name(disk_format, self.label)

        if self.mode == ImportMode.ADD_TO_EXISTING:
            assert self.target_entry is not None
            entry_name = self.target_entry.name
            entry_path = self.target_entry.path
        else:
            if self.kind == MediaKind.FILM:
                entry_name = film_entry_name(self.title, self.year)  # type: ignore[arg-type]
            else:
                entry_name = tv_entry_name(self.title)  # type: ignore[arg-type]
            entry_path = self._repository.root / entry_name

        return ImportPreview(
            mode=self.mode,
            kind=self.kind,
            entry_name=entry_name,
            disk_dir_name=disk_dir_name,
            destination=entry_path / disk_dir_name,
            format=disk_format,
            format_overridden=bool(self.format_override),
            size_bytes=source.size_bytes,
            creates_entry=self.mode == ImportMode.NEW_MEDIA,
            tmdb_id=self.tmdb_id,
        )

    def commit(self) -> ImportResult:
        """Move the source into the catalog.

        On failure the session stays in PREVIEW with ``last_error`` set, and
        an entry created by this commit is removed again if it is still
        empty.

        Returns:
            Committed entry and disk.

        Raises:
            MediaShelfError: Any repository failure, after recording it.
        """
        self._require(WizardStep.PREVIEW)
        self.last_error = None
        source = self._source()
        disk_format = self.effective_format

        created: Optional[MediaEntry] = None
        try:
            if not source.path.is_dir():
                raise SourceNotFoundError(f"Import source has disappeared: {source.path}")

            if self.mode == ImportMode.NEW_MEDIA:
                entry = self._repository.create_entry(
                    self.kind, self.title, self.year  # type: ignore[arg-type]
                )
                created = entry
            else:
                assert self.target_entry is not None
                entry = self.target_entry

            disk = self._repository.add_disk(
                entry,
                source.path,
                disk_format,  # type: ignore[arg-type]
                label=self.label if self.kind == MediaKind.FILM else None,
                season=self.season if self.kind == MediaKind.TV else None,
                disk_number=self.disk_number if self.kind == MediaKind.TV else None,
            )
        except MediaShelfError as e:
            if created is not None:
                self._repository.abandon_entry(created)
            self.last_error = e
            self.logger.warning(f"Import of {source.name} failed: {e}")
            raise

        metadata_written = self._write_metadata(entry)
        entry = entry.model_copy(update={"disks": [*entry.disks, disk]})
        self.result = ImportResult(entry=entry, disk=disk, metadata_written=metadata_written)
        self.step = WizardStep.COMMITTED
        self.logger.info(f"Imported {source.name} as {entry.name}/{disk.dir_name}")
        return self.result

    def go_back(self, step: Union[str, WizardStep]) -> None:
        """Return to an earlier step, keeping collected values.

        Raises:
            InvalidTransitionError: If the step is not behind the current one.
        """
        self._require(*STEP_ORDER)
        step = WizardStep(step)
        if step not in STEP_ORDER or STEP_ORDER.index(step) > STEP_ORDER.index(self.step):
            raise InvalidTransitionError(f"Cannot go back from {self.step.value} to {step.value}")
        if step == WizardStep.SELECT_KIND and self.mode == ImportMode.ADD_TO_EXISTING:
            raise InvalidTransitionError("Media kind is taken from the existing entry")
        self.step = step
        self.last_error = None

    def cancel(self) -> None:
        """Abandon the wizard. Never touches the filesystem."""
        if self.step == WizardStep.COMMITTED:
            raise InvalidTransitionError("A committed import cannot be cancelled")
        if self.step != WizardStep.CANCELLED:
            self.logger.debug("Import session cancelled")
        self.step = WizardStep.CANCELLED

    def _apply_kind(self, kind: MediaKind) -> None:
        if kind != self.kind:
            if kind == MediaKind.FILM:
                self.season = None
                self.disk_number = None
            else:
                self.year = None
                self.label = None
            if self.kind is not None:
                # TMDb ids are not shared between movies and TV
                self.tmdb_metadata = None
        self.kind = kind

    def _write_metadata(self, entry: MediaEntry) -> bool:
        """Save attached TMDb metadata; failures do not undo the import."""
        if self.tmdb_metadata is None or self._metadata_store is None:
            return False
        try:
            self._metadata_store.set_tmdb_link(
                entry, self.tmdb_metadata.tmdb_id, self.tmdb_metadata
            )
        except MediaShelfError as e:
            self.logger.warning(f"Imported {entry.name} but failed to save metadata: {e}")
            return False
        return True

    def _require(self, *steps: WizardStep) -> None:
        if self.step.is_terminal:
            raise InvalidTransitionError(f"Import session is already {self.step.value}")
        if self.step not in steps:
            raise InvalidTransitionError(
                f"Step not allowed while at {self.step.value} "
                f"(expected {', '.join(s.value for s in steps)})"
            )

    def _source(self) -> ImportCandidate:
        if self.source is None:
            raise InvalidTransitionError("No import source selected")
        return self.source

    @staticmethod
    def _first(*values):  # type: ignore[no-untyped-def]
        for value in values:
            if value is not None and value != "":
                return value
        return None


class ImportSessionStore:
    """In-memory registry of running import wizards."""

    def __init__(self) -> None:
        self._sessions: Dict[str, ImportSession] = {}
        self._lock = threading.Lock()

    def create(self, session: ImportSession) -> str:
        """Register a session and return its id."""
        session_id = uuid.uuid4().hex
        with self._lock:
            self._sessions[session_id] = session
        return session_id

    def get(self, session_id: str) -> ImportSession:
        """Look up a session.

        Raises:
            NotFoundError: If the id is unknown.
        """
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(f"Unknown import session: {session_id}")
        return session

    def discard(self, session_id: str) -> None:
        """Forget a session."""
        with self._lock:
            self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
