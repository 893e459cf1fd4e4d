"""
Main entry point for the image sync tooling.

Each command maps to one pipeline step and exits 0 on success, 1 on failure.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .exceptions import ImageSyncError
from .models.config import AutomationConfig, SyncConfig
from .services.bucket_syncer import BucketSyncer
from .services.image_manager import ImageManager
from .services.tree_deleter import TreeDeleter
from .utils.paths import cleanup, find_ancestor_dir


def setup_logging(debug: bool = False, log_file: Optional[str] = None):
    """Configure logging for the pipeline step."""
    # Remove default logger
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level="DEBUG" if debug else "INFO"
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation="10 MB",
            retention="7 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level="DEBUG"
        )


def _sync_options(args) -> List[str]:
    options: List[str] = []
    if args.delete:
        options.append('--delete')
    if args.dryrun:
        options.append('--dryrun')
    if args.size_only:
        options.append('--size-only')
    for flag, pattern in args.filters or []:
        options.extend([flag, pattern])
    return options


def run_sync(args, config: SyncConfig) -> int:
    """Stage the given files and sync them to the bucket prefix."""
    logger.info(f"Syncing {len(args.files)} files to s3://{args.bucket}/{args.prefix}")
    result = BucketSyncer(config).sync(args.region, args.bucket, args.prefix, args.files, _sync_options(args))
    return result.exit_status


def run_delete_tree(args, config: SyncConfig) -> int:
    """Delete everything below the prefix."""
    options = ['--dryrun'] if args.dryrun else []
    result = TreeDeleter(config).delete_tree(args.region, args.bucket, args.prefix, options)
    return result.exit_status


def run_manage_images(args, config: SyncConfig) -> int:
    automation_config = AutomationConfig.from_env()
    ImageManager(automation_config).manage(
        image_formats=args.formats,
        deployment_unit=args.deployment_unit,
        code_commit=args.code_commit
    )
    return 0


def run_find_ancestor(args, config: SyncConfig) -> int:
    print(find_ancestor_dir(args.marker, args.start_dir))
    return 0


def run_cleanup(args, config: SyncConfig) -> int:
    removed = cleanup(args.root)
    logger.info(f"Removed {removed} scratch paths below {args.root}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one sub-command per pipeline step."""
    parser = argparse.ArgumentParser(
        prog="python -m image_sync.main",
        description="Stage, sync and manage build images.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync = subparsers.add_parser("sync", help="Stage files (expanding zips) and sync them to S3")
    sync.add_argument("-r", "--region", default=None, help="Bucket region (default: AWS_REGION)")
    sync.add_argument("-b", "--bucket", required=True)
    sync.add_argument("-p", "--prefix", default="")
    sync.add_argument("--delete", action="store_true", help="Delete remote objects absent locally")
    sync.add_argument("--dryrun", "--dry-run", action="store_true", help="Report without changing S3")
    sync.add_argument("--size-only", action="store_true", help="Compare by size only")
    sync.add_argument("--exclude", dest="filters", action="append", type=lambda p: ('--exclude', p))
    sync.add_argument("--include", dest="filters", action="append", type=lambda p: ('--include', p))
    sync.add_argument("files", nargs="+")
    sync.set_defaults(handler=run_sync)

    delete = subparsers.add_parser("delete-tree", help="Delete every object below a prefix")
    delete.add_argument("-r", "--region", default=None)
    delete.add_argument("-b", "--bucket", required=True)
    delete.add_argument("-p", "--prefix", required=True)
    delete.add_argument("--dryrun", "--dry-run", action="store_true")
    delete.set_defaults(handler=run_delete_tree)

    images = subparsers.add_parser("manage-images", help="Manage the images of the current build")
    images.add_argument("-f", "--formats", dest="formats", default=None,
                        help="Separated list of image formats (default: first of IMAGE_FORMATS_LIST)")
    images.add_argument("-g", "--code-commit", default=None)
    images.add_argument("-u", "--deployment-unit", default=None)
    images.set_defaults(handler=run_manage_images)

    ancestor = subparsers.add_parser("find-ancestor", help="Print the nearest matching ancestor directory")
    ancestor.add_argument("marker")
    ancestor.add_argument("start_dir", nargs="?", default=None)
    ancestor.set_defaults(handler=run_find_ancestor)

    clean = subparsers.add_parser("cleanup", help="Remove pipeline scratch files")
    clean.add_argument("root", nargs="?", default=".")
    clean.set_defaults(handler=run_cleanup)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = SyncConfig.from_env(getattr(args, 'region', None))
    if getattr(args, 'region', None) is None and hasattr(args, 'region'):
        args.region = config.s3.region
    setup_logging(config.debug, config.log_file)

    try:
        return args.handler(args, config)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, stopping")
        return 1
    except ImageSyncError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
