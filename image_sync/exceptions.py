"""
Exceptions raised by the image sync tooling.

Every error is fatal to the operation that raised it; the CLI turns any of
them into a non-zero exit status.
"""


class ImageSyncError(Exception):
    """Base class for all image sync errors."""
    pass


class StagingError(ImageSyncError):
    """A local input could not be staged (missing, unreadable or a bad archive)."""
    pass


class SyncError(ImageSyncError):
    """The remote synchronization failed."""
    pass


class DeleteError(ImageSyncError):
    """The remote tree deletion failed."""
    pass


class NotFoundError(ImageSyncError):
    """A search (ancestor directory, glob, JSON path) found no match."""
    pass


class PackagingError(ImageSyncError):
    """An image could not be located or its packaging script failed."""
    pass


class ConfigurationError(ImageSyncError):
    """Mandatory settings are missing or invalid."""
    pass
