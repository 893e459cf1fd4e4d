# Services package
from .staging import StagingArea
from .bucket_syncer import BucketSyncer
from .tree_deleter import TreeDeleter
from .image_manager import ImageFormat, ImageManager, Packager

__all__ = ['StagingArea', 'BucketSyncer', 'TreeDeleter', 'ImageFormat', 'ImageManager', 'Packager']
