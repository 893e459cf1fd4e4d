"""
Bucket syncer that stages local build artifacts and mirrors them to an S3 prefix.
"""
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from loguru import logger

from ..clients.s3_manager import CLIENT_ERRORS, REMOTE_ERRORS, S3Manager, S3Object
from ..exceptions import SyncError
from ..models.config import S3Config, SyncConfig
from ..models.data_models import SyncAction, SyncOptions, SyncRequest, SyncResult, key_prefix
from .staging import StagingArea


class BucketSyncer:
    """
    Stages files (expanding zip archives) into the well-known staging directory
    and one-way syncs it to ``s3://bucket/prefix/``.

    The staging directory is fixed per work directory, so callers must not run
    two syncs against the same work directory at once.
    """

    def __init__(self, config: SyncConfig):
        """
        Initialize the syncer.

        Args:
            config: SyncConfig providing the work directory and S3 endpoint
        """
        self.config = config
        self.staging = StagingArea(config.staging_dir)

    def sync(self, region: str, bucket: str, prefix: str, files: Sequence[str],
             options: Sequence[str] = ()) -> SyncResult:
        """
        Stage files and sync them to the bucket prefix.

        Args:
            region: AWS region of the bucket
            bucket: Destination bucket
            prefix: Key prefix, may be empty
            files: Local files in staging order
            options: AWS CLI style flags such as ``--delete`` and ``--dryrun``

        Returns:
            SyncResult describing the uploads and deletes performed (or planned)

        Raises:
            StagingError: If a local input cannot be staged; nothing remote is touched
            SyncError: If the options are invalid or the remote sync fails
        """
        return self.run(SyncRequest(region=region, bucket=bucket, prefix=prefix,
                                    files=list(files), options=list(options)))

    def run(self, request: SyncRequest) -> SyncResult:
        try:
            sync_options = SyncOptions.parse(request.options)
        except ValueError as e:
            raise SyncError(str(e)) from e

        self.staging.reset()
        self.staging.populate(request.files)
        logger.info(f"Staged {len(self.staging.relative_keys())} files in {self.staging.path}")

        try:
            s3_manager = S3Manager(S3Config(region=request.region, endpoint=self.config.s3.endpoint),
                                   request.bucket)
        except CLIENT_ERRORS as e:
            raise SyncError(f"Cannot create S3 client for {request.destination}: {e}") from e

        try:
            result = self._sync_directory(s3_manager, request, sync_options)
        except REMOTE_ERRORS as e:
            raise SyncError(f"Sync to {request.destination} failed: {e}") from e

        logger.info(f"Sync to {result.destination} complete - Uploaded: {result.uploaded}, "
                    f"Deleted: {result.deleted}, Unchanged: {result.skipped}"
                    f"{' (dry run)' if result.dry_run else ''}")
        return result

    def _sync_directory(self, s3_manager: S3Manager, request: SyncRequest,
                        options: SyncOptions) -> SyncResult:
        destination_prefix = key_prefix(request.prefix)
        result = SyncResult(destination=request.destination, dry_run=options.dry_run)

        remote: Dict[str, S3Object] = {
            obj.key: obj for obj in s3_manager.list_objects(destination_prefix)
        }

        local_keys = set()
        for path in self.staging.files():
            relative = path.relative_to(self.staging.path).as_posix()
            if not options.is_included(relative):
                continue
            key = f"{destination_prefix}{relative}"
            local_keys.add(key)

            if self._needs_upload(path, remote.get(key), options):
                result.actions.append(SyncAction('upload', key, source=str(path)))
            else:
                result.skipped += 1

        if options.delete:
            for key in sorted(remote):
                if key in local_keys or not options.is_included(key[len(destination_prefix):]):
                    continue
                result.actions.append(SyncAction('delete', key))

        self._apply(s3_manager, result, request.bucket)
        return result

    @staticmethod
    def _needs_upload(path: Path, remote: Optional[S3Object], options: SyncOptions) -> bool:
        if remote is None:
            return True
        stat = path.stat()
        if stat.st_size != remote.size:
            return True
        if options.size_only:
            return False
        local_modified = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
        return local_modified > remote.last_modified

    def _apply(self, s3_manager: S3Manager, result: SyncResult, bucket: str) -> None:
        uploads = [action for action in result.actions if action.operation == 'upload']
        deletes = [action for action in result.actions if action.operation == 'delete']

        for action in uploads:
            logger.info(action.describe(bucket, result.dry_run))
            if not result.dry_run:
                s3_manager.upload_file(action.source, action.key)
                result.uploaded += 1

        for action in deletes:
            logger.info(action.describe(bucket, result.dry_run))

        if deletes and not result.dry_run:
            errors = s3_manager.delete_objects([action.key for action in deletes])
            if errors:
                failed: List[str] = [error.get('Key', '?') for error in errors]
                raise SyncError(f"Failed to delete {len(failed)} objects: {', '.join(failed)}")
            result.deleted = len(deletes)
