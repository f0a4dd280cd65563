"""Import wizard data models."""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .media import Disk, DiskFormat, MediaEntry, MediaKind


class ImportMode(str, Enum):
    """Whether an import creates a new entry or extends an existing one."""

    NEW_MEDIA = "new-media"
    ADD_TO_EXISTING = "add-to-existing"


class WizardStep(str, Enum):
    """States of the import wizard."""

    SELECT_SOURCE = "select-source"
    SELECT_MODE = "select-mode"
    SELECT_KIND = "select-kind"
    COLLECT_IDENTITY = "collect-identity"
    COLLECT_PLACEMENT = "collect-placement"
    PREVIEW = "preview"
    COMMITTED = "committed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Check if the wizard has finished."""
        return self in (WizardStep.COMMITTED, WizardStep.CANCELLED)


class ImportCandidate(BaseModel):
    """A raw source directory found under the import root."""

    name: str = Field(..., description="Directory name")
    path: Path = Field(..., description="Absolute path")
    detected_format: DiskFormat = Field(..., description="Auto-detected disk format")
    title_guess: str = Field(..., description="Title guessed from the directory name")
    year_guess: Optional[int] = Field(None, description="Year guessed from the directory name")
    size_bytes: int = Field(default=0, description="Recursive size")

    @property
    def size_gb(self) -> float:
        """Get size in GB."""
        return self.size_bytes / (1024 * 1024 * 1024)

    model_config = ConfigDict(arbitrary_types_allowed=True)


class ImportPreview(BaseModel):
    """Read-only summary of what a commit would do."""

    mode: ImportMode
    kind: MediaKind
    entry_name: str = Field(..., description="Canonical name of the target entry")
    disk_dir_name: str = Field(..., description="Name of the new disk directory")
    destination: Path = Field(..., description="Final path of the disk directory")
    format: str = Field(..., description="Effective disk format")
    format_overridden: bool = Field(..., description="Whether the format was set manually")
    size_bytes: int = Field(..., description="Size of the source directory")
    creates_entry: bool = Field(..., description="Whether a new entry will be created")
    tmdb_id: Optional[str] = Field(None, description="TMDb id written after commit")

    @property
    def size_gb(self) -> float:
        """Get size in GB."""
        return self.size_bytes / (1024 * 1024 * 1024)

    model_config = ConfigDict(arbitrary_types_allowed=True)


class ImportResult(BaseModel):
    """Outcome of a committed import."""

    entry: MediaEntry
    disk: Disk
    metadata_written: bool = Field(default=False, description="Whether TMDb metadata was saved")
