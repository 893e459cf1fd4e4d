"""
S3 client manager for listing, uploading and deleting objects under a prefix.
"""
import time
from typing import Iterator, List, Dict, Any, Sequence
import boto3
from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError, EndpointConnectionError
from loguru import logger

from ..models.config import S3Config


# DeleteObjects accepts at most this many keys per call
DELETE_BATCH_SIZE = 1000

# Failures raised by boto3 while talking to S3
REMOTE_ERRORS = (ClientError, BotoCoreError, Boto3Error)
# Client construction also reports a malformed endpoint URL as ValueError
CLIENT_ERRORS = REMOTE_ERRORS + (ValueError,)


class S3Object:
    """Represents an S3 object with metadata."""

    def __init__(self, key: str, size: int, last_modified, etag: str, storage_class: str = 'STANDARD'):
        self.key = key
        self.size = size
        self.last_modified = last_modified
        self.etag = etag
        self.storage_class = storage_class


class S3Manager:
    """Manages S3 operations against a single bucket."""

    def __init__(self, config: S3Config, bucket: str):
        """Initialize S3Manager for one bucket."""
        self.config = config
        self.bucket = bucket

        self.client = self._create_s3_client(config)

        logger.debug(f"S3Manager initialized for bucket {bucket} in {config.region}")

    def _create_s3_client(self, config: S3Config):
        """Create an S3 client from configuration; credentials come from the default chain."""
        try:
            client = boto3.client(
                's3',
                endpoint_url=config.endpoint,
                region_name=config.region
            )
            logger.debug(f"Created S3 client for region: {config.region}")
            return client
        except Exception as e:
            logger.error(f"Failed to create S3 client for region {config.region}: {e}")
            raise

    def _retry_operation(self, operation, max_retries: int = 3, backoff_factor: float = 1.0):
        """Execute an operation with exponential backoff retry logic."""
        for attempt in range(max_retries):
            try:
                return operation()
            except (ClientError, EndpointConnectionError) as e:
                if attempt == max_retries - 1:
                    logger.error(f"Operation failed after {max_retries} attempts: {e}")
                    raise

                wait_time = backoff_factor * (2 ** attempt)
                logger.warning(f"Operation failed (attempt {attempt + 1}/{max_retries}), retrying in {wait_time}s: {e}")
                time.sleep(wait_time)

    def list_objects(self, prefix: str = '') -> Iterator[S3Object]:
        """
        List all objects whose key starts with prefix.

        Args:
            prefix: Key prefix to list below; empty lists the whole bucket

        Yields:
            S3Object: Objects under the prefix
        """
        client, bucket = self.client, self.bucket

        def _list_operation():
            paginator = client.get_paginator('list_objects_v2')
            objects = []
            for page in paginator.paginate(Bucket=bucket, Prefix=prefix):
                for obj in page.get('Contents', []):
                    objects.append(S3Object(
                        key=obj['Key'],
                        size=obj['Size'],
                        last_modified=obj['LastModified'],
                        etag=obj['ETag'].strip('"'),
                        storage_class=obj.get('StorageClass', 'STANDARD')
                    ))
            return objects

        try:
            yield from self._retry_operation(_list_operation)
        except Exception as e:
            logger.error(f"Failed to list objects in s3://{bucket}/{prefix}: {e}")
            raise

    def upload_file(self, local_path: str, key: str) -> None:
        """
        Upload one local file to the bucket.

        Args:
            local_path: File to upload
            key: Destination object key
        """
        client, bucket = self.client, self.bucket

        def _upload_operation():
            client.upload_file(local_path, bucket, key)

        try:
            self._retry_operation(_upload_operation)
            logger.debug(f"Uploaded {local_path} to s3://{bucket}/{key}")
        except Exception as e:
            logger.error(f"Failed to upload {local_path} to s3://{bucket}/{key}: {e}")
            raise

    def delete_objects(self, keys: Sequence[str]) -> List[Dict[str, Any]]:
        """
        Delete keys in batches.

        Args:
            keys: Object keys to delete

        Returns:
            List of per-key error entries reported by S3; empty when all succeeded
        """
        client, bucket = self.client, self.bucket
        errors: List[Dict[str, Any]] = []

        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            batch = keys[start:start + DELETE_BATCH_SIZE]

            def _delete_operation():
                return client.delete_objects(
                    Bucket=bucket,
                    Delete={'Objects': [{'Key': key} for key in batch], 'Quiet': True}
                )

            try:
                response = self._retry_operation(_delete_operation)
            except Exception as e:
                logger.error(f"Failed to delete {len(batch)} objects from {bucket}: {e}")
                raise

            errors.extend(response.get('Errors', []))
            logger.debug(f"Deleted batch of {len(batch)} objects from {bucket}")

        return errors

    def is_prefix_accessible(self, prefix: str = '') -> bool:
        """
        Check that the prefix can be listed with the current credentials.

        Returns:
            bool: True if listing succeeded, False otherwise
        """
        try:
            self.client.list_objects_v2(Bucket=self.bucket, Prefix=prefix, MaxKeys=1)
            logger.info(f"s3://{self.bucket}/{prefix} is accessible")
            return True
        except (ClientError, EndpointConnectionError) as e:
            logger.error(f"s3://{self.bucket}/{prefix} is not accessible: {e}")
            return False
