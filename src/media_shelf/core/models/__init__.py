"""Core data models."""

from .import_models import (
    ImportCandidate,
    ImportMode,
    ImportPreview,
    ImportResult,
    WizardStep,
)
from .media import Disk, DiskFormat, MediaEntry, MediaKind, Metadata
from .metadata import FetchedMetadata, TitleCandidate
from .playback import PlaybackCommands

__all__ = [
    "MediaKind",
    "DiskFormat",
    "Disk",
    "Metadata",
    "MediaEntry",
    "TitleCandidate",
    "FetchedMetadata",
    "ImportMode",
    "WizardStep",
    "ImportCandidate",
    "ImportPreview",
    "ImportResult",
    "PlaybackCommands",
]
