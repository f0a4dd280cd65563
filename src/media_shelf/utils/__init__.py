"""Utility functions and classes."""

from .exceptions import (
    AlreadyExistsError,
    ConfigurationError,
    DuplicateDiskError,
    ImportSessionError,
    InvalidMetadataLinkError,
    InvalidTransitionError,
    MediaShelfError,
    MetadataProviderError,
    NotFoundError,
    RelocationFailedError,
    SlugCollisionError,
    SourceNotFoundError,
    ValidationFailedError,
)
from .file_utils import (
    atomic_write_bytes,
    atomic_write_text,
    get_directory_size,
    get_file_size,
    is_hidden_file,
    load_json_dict,
    read_text_file,
    remove_tree,
)
from .text_utils import guess_title, parse_genres, sanitize_name, slugify

__all__ = [
    "MediaShelfError",
    "ConfigurationError",
    "ValidationFailedError",
    "NotFoundError",
    "AlreadyExistsError",
    "DuplicateDiskError",
    "SlugCollisionError",
    "RelocationFailedError",
    "SourceNotFoundError",
    "InvalidMetadataLinkError",
    "MetadataProviderError",
    "ImportSessionError",
    "InvalidTransitionError",
    "get_file_size",
    "is_hidden_file",
    "get_directory_size",
    "read_text_file",
    "atomic_write_bytes",
    "atomic_write_text",
    "load_json_dict",
    "remove_tree",
    "slugify",
    "sanitize_name",
    "guess_title",
    "parse_genres",
]
