"""Custom exceptions for the application."""


class MediaShelfError(Exception):
    """Base exception for all application errors."""

    pass


class ConfigurationError(MediaShelfError):
    """Configuration-related errors."""

    pass


class ValidationFailedError(MediaShelfError):
    """User supplied values that cannot be used."""

    pass


class NotFoundError(MediaShelfError):
    """Lookup of a catalog entry or disk failed."""

    pass


class AlreadyExistsError(MediaShelfError):
    """A media entry with the same canonical name already exists."""

    pass


class DuplicateDiskError(MediaShelfError):
    """A disk with the same placement already exists in the entry."""

    pass


class SlugCollisionError(MediaShelfError):
    """Two catalog directories map to the same slug."""

    def __init__(self, slug: str, names: list) -> None:
        self.slug = slug
        self.names = sorted(names)
        super().__init__(f"Slug '{slug}' is shared by: {', '.join(self.names)}")


class RelocationFailedError(MediaShelfError):
    """Moving a source directory into the catalog failed."""

    pass


class SourceNotFoundError(MediaShelfError):
    """An import candidate no longer exists."""

    pass


class InvalidMetadataLinkError(MediaShelfError):
    """A TMDb id was rejected."""

    pass


class MetadataProviderError(MediaShelfError):
    """Metadata provider errors."""

    pass


class ImportSessionError(MediaShelfError):
    """Import wizard errors."""

    pass


class InvalidTransitionError(ImportSessionError):
    """A wizard step was invoked from a state that does not allow it."""

    pass
