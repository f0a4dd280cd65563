"""Core service implementations."""

from .catalog_repository import CatalogRepository
from .command_generator import CommandGenerator
from .disk_classifier import DiskClassifier
from .import_scanner import ImportScanner
from .import_session import ImportSession, ImportSessionStore
from .metadata_linker import MetadataLinker
from .metadata_store import MetadataStore
from .size_cache import DiskSizeCache
from .tmdb_service import TMDbService

__all__ = [
    "DiskClassifier",
    "CatalogRepository",
    "DiskSizeCache",
    "MetadataStore",
    "CommandGenerator",
    "ImportScanner",
    "ImportSession",
    "ImportSessionStore",
    "TMDbService",
    "MetadataLinker",
]
