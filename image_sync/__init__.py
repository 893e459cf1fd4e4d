"""
Image Sync - CI/CD glue for staging build images into S3 and managing them per format.
"""

from .services.bucket_syncer import BucketSyncer
from .services.tree_deleter import TreeDeleter
from .services.image_manager import ImageFormat, ImageManager
from .models.config import SyncConfig, S3Config, AutomationConfig
from .models.data_models import SyncRequest, DeleteRequest, SyncResult
from .exceptions import (
    ImageSyncError,
    StagingError,
    SyncError,
    DeleteError,
    NotFoundError,
    PackagingError,
    ConfigurationError,
)

__version__ = "1.0.0"
__all__ = [
    "BucketSyncer",
    "TreeDeleter",
    "ImageFormat",
    "ImageManager",
    "SyncConfig",
    "S3Config",
    "AutomationConfig",
    "SyncRequest",
    "DeleteRequest",
    "SyncResult",
    "ImageSyncError",
    "StagingError",
    "SyncError",
    "DeleteError",
    "NotFoundError",
    "PackagingError",
    "ConfigurationError"
]
