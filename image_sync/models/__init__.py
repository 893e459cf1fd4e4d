"""
Models package for the image sync tooling.
"""
from .data_models import SyncOptions, SyncRequest, DeleteRequest, SyncAction, SyncResult
from .config import S3Config, SyncConfig, AutomationConfig

__all__ = [
    'SyncOptions',
    'SyncRequest',
    'DeleteRequest',
    'SyncAction',
    'SyncResult',
    'S3Config',
    'SyncConfig',
    'AutomationConfig'
]
