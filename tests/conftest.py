"""
Pytest configuration and fixtures for the image sync tests.
"""
import zipfile
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from image_sync.models.config import S3Config, SyncConfig


# Remote timestamps well before and after any local file modification time
OLD_TIMESTAMP = datetime(2000, 1, 1, tzinfo=timezone.utc)
FUTURE_TIMESTAMP = datetime(2100, 1, 1, tzinfo=timezone.utc)


def s3_entry(key: str, size: int, last_modified=FUTURE_TIMESTAMP) -> dict:
    """One entry of a list_objects_v2 page."""
    return {
        'Key': key,
        'Size': size,
        'LastModified': last_modified,
        'ETag': '"abc123"',
        'StorageClass': 'STANDARD'
    }


@pytest.fixture
def sync_config(tmp_path):
    """SyncConfig with its work directory under the test's temp dir."""
    work_dir = tmp_path / 'work'
    work_dir.mkdir()
    return SyncConfig(s3=S3Config(region='eu-west-1'), work_dir=work_dir)


@pytest.fixture
def s3_client():
    """Patch boto3.client and hand back the mock client with an empty bucket."""
    with patch('image_sync.clients.s3_manager.boto3.client') as mock_boto3:
        client = Mock()
        client.get_paginator.return_value.paginate.return_value = [{}]
        client.delete_objects.return_value = {}
        mock_boto3.return_value = client
        yield client


def set_remote_objects(client: Mock, entries: list) -> None:
    client.get_paginator.return_value.paginate.return_value = [{'Contents': entries}]


@pytest.fixture
def source_dir(tmp_path) -> Path:
    source = tmp_path / 'src'
    source.mkdir()
    return source


def write_file(path: Path, content: bytes = b'content') -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def write_zip(path: Path, entries: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, 'w') as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return path
