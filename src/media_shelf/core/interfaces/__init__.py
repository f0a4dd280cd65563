"""Core interfaces for dependency injection."""

from .catalog_repository import ICatalogRepository
from .command_generator import ICommandGenerator
from .disk_classifier import IDiskClassifier
from .import_scanner import IImportScanner
from .metadata_linker import IMetadataLinker
from .metadata_provider import IMetadataProvider
from .metadata_store import IMetadataStore

__all__ = [
    "IDiskClassifier",
    "ICatalogRepository",
    "IMetadataStore",
    "IMetadataProvider",
    "IMetadataLinker",
    "ICommandGenerator",
    "IImportScanner",
]
