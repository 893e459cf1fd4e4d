"""
Tree deleter that removes every object below a key prefix.
"""
from typing import Sequence

from loguru import logger

from ..clients.s3_manager import CLIENT_ERRORS, REMOTE_ERRORS, S3Manager
from ..exceptions import DeleteError
from ..models.config import S3Config, SyncConfig
from ..models.data_models import DRY_RUN_FLAGS, DeleteRequest, SyncAction, SyncOptions, SyncResult


class TreeDeleter:
    """Deletes the whole key tree at or below ``prefix/``."""

    def __init__(self, config: SyncConfig):
        self.config = config

    def delete_tree(self, region: str, bucket: str, prefix: str,
                    options: Sequence[str] = ()) -> SyncResult:
        """
        Delete every object whose key starts with ``prefix/``.

        The prefix is always slash terminated before matching, so deleting
        ``builds/123`` leaves ``builds/1234/...`` alone.

        Raises:
            DeleteError: If the prefix is empty, an option is unsupported, or S3 reports a failure
        """
        return self.run(DeleteRequest(region=region, bucket=bucket, prefix=prefix, options=list(options)))

    def run(self, request: DeleteRequest) -> SyncResult:
        if not request.prefix.strip('/'):
            raise DeleteError(f"Refusing to delete the whole of bucket {request.bucket}: prefix is empty")

        try:
            delete_options = SyncOptions.parse(request.options, allowed=DRY_RUN_FLAGS)
        except ValueError as e:
            raise DeleteError(str(e)) from e

        result = SyncResult(destination=request.destination, dry_run=delete_options.dry_run)
        try:
            s3_manager = S3Manager(S3Config(region=request.region, endpoint=self.config.s3.endpoint),
                                   request.bucket)
        except CLIENT_ERRORS as e:
            raise DeleteError(f"Cannot create S3 client for {request.destination}: {e}") from e

        try:
            keys = [obj.key for obj in s3_manager.list_objects(request.tree_prefix)]
            for key in keys:
                action = SyncAction('delete', key)
                result.actions.append(action)
                logger.info(action.describe(request.bucket, result.dry_run))

            if keys and not result.dry_run:
                errors = s3_manager.delete_objects(keys)
                if errors:
                    failed = [error.get('Key', '?') for error in errors]
                    raise DeleteError(f"Failed to delete {len(failed)} objects below "
                                      f"{request.destination}: {', '.join(failed)}")
                result.deleted = len(keys)
        except REMOTE_ERRORS as e:
            raise DeleteError(f"Delete of {request.destination} failed: {e}") from e

        logger.info(f"Delete of {request.destination} complete - "
                    f"{'would delete' if result.dry_run else 'deleted'} {len(result.actions)} objects")
        return result
