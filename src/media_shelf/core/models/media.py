"""Catalog data models."""

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...utils.text_utils import slugify


class MediaKind(str, Enum):
    """Kind of media stored in a catalog entry."""

    FILM = "Film"
    TV = "TV"


class DiskFormat(str, Enum):
    """Known physical disk formats."""

    BLU_RAY = "Blu-Ray"
    BLU_RAY_UHD = "Blu-Ray UHD"
    DVD = "DVD"
    UNKNOWN = "Unknown"


class Disk(BaseModel):
    """One physical disk backup inside a media entry."""

    label: str = Field(..., description="Disk label, e.g. 'Disk' or 'Series 1 Disk 2'")
    format: str = Field(..., description="Detected or overridden format tag")
    path: Path = Field(..., description="Absolute path to the disk directory")
    size_bytes: int = Field(default=0, ge=0, description="Recursive size of the disk")
    season: Optional[int] = Field(None, ge=1, description="Season number (TV only)")
    disk_number: Optional[int] = Field(None, ge=1, description="Disk number within season")

    @property
    def dir_name(self) -> str:
        """Directory name of the disk inside its entry."""
        return self.path.name

    @property
    def size_gb(self) -> float:
        """Get disk size in GB."""
        return self.size_bytes / (1024 * 1024 * 1024)

    @property
    def display_name(self) -> str:
        """Label and format as shown to users."""
        return f"{self.label} ({self.format})"

    @property
    def placement(self) -> Optional[tuple]:
        """Season/disk pair for TV disks."""
        if self.season is None or self.disk_number is None:
            return None
        return (self.season, self.disk_number)

    model_config = ConfigDict(arbitrary_types_allowed=True)


class Metadata(BaseModel):
    """Sidecar metadata of a media entry."""

    tmdb_id: Optional[str] = Field(None, description="TMDb id")
    title: Optional[str] = Field(None, description="Title override")
    description: Optional[str] = Field(None, description="Plot description")
    genres: List[str] = Field(default_factory=list, description="Genre names")
    poster_path: Optional[Path] = Field(None, description="Poster image file")

    @property
    def has_poster(self) -> bool:
        """Check if a poster image is present."""
        return self.poster_path is not None

    @property
    def is_empty(self) -> bool:
        """Check if no sidecar file was found."""
        return not (
            self.tmdb_id or self.title or self.description or self.genres or self.poster_path
        )


class MediaEntry(BaseModel):
    """One catalog unit, identified by its canonical directory name."""

    name: str = Field(..., description="Canonical directory name")
    title: str = Field(..., description="Title parsed from the directory name")
    kind: MediaKind = Field(..., description="Film or TV")
    year: Optional[int] = Field(None, description="Release year (films only)")
    path: Path = Field(..., description="Absolute path to the entry directory")
    disks: List[Disk] = Field(default_factory=list, description="Disks in display order")
    metadata: Optional[Metadata] = Field(None, description="Sidecar metadata")

    @property
    def slug(self) -> str:
        """URL-safe lookup key."""
        return slugify(self.name)

    @property
    def display_title(self) -> str:
        """Title shown to users, preferring a metadata override."""
        title = self.title
        if self.metadata and self.metadata.title:
            title = self.metadata.title
        if self.kind == MediaKind.FILM and self.year:
            return f"{title} ({self.year})"
        return title

    @property
    def disk_count(self) -> int:
        """Number of disks in the entry."""
        return len(self.disks)

    @property
    def total_size_bytes(self) -> int:
        """Sum of all disk sizes."""
        return sum(disk.size_bytes for disk in self.disks)

    @property
    def total_size_gb(self) -> float:
        """Get the size of all disks in GB."""
        return self.total_size_bytes / (1024 * 1024 * 1024)

    model_config = ConfigDict(arbitrary_types_allowed=True)
