"""
Core data models for the image sync tooling.
"""
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import List, Optional, Sequence, Tuple


DRY_RUN_FLAGS = ('--dryrun', '--dry-run')


@dataclass
class SyncOptions:
    """Parsed form of the AWS CLI style option list passed to sync and delete."""
    delete: bool = False
    dry_run: bool = False
    size_only: bool = False
    # (kind, pattern) pairs in the order given; kind is 'exclude' or 'include'
    filters: List[Tuple[str, str]] = field(default_factory=list)

    @classmethod
    def parse(cls, options: Sequence[str], allowed: Optional[Sequence[str]] = None) -> 'SyncOptions':
        """
        Parse an option list such as ``['--delete', '--exclude', '*.map']``.

        Args:
            options: Flags in AWS CLI spelling
            allowed: Restrict the accepted flags, e.g. to dry-run only for deletes

        Raises:
            ValueError: On unknown flags or a filter flag missing its pattern
        """
        parsed = cls()
        remaining = [option for option in options if option]
        index = 0
        while index < len(remaining):
            option = remaining[index]
            if allowed is not None and option not in allowed:
                raise ValueError(f"Unsupported option: {option}")

            if option == '--delete':
                parsed.delete = True
            elif option in DRY_RUN_FLAGS:
                parsed.dry_run = True
            elif option == '--size-only':
                parsed.size_only = True
            elif option in ('--exclude', '--include'):
                if index + 1 >= len(remaining):
                    raise ValueError(f"Option {option} requires a pattern")
                parsed.filters.append((option[2:], remaining[index + 1]))
                index += 1
            else:
                raise ValueError(f"Unsupported option: {option}")
            index += 1
        return parsed

    def is_included(self, relative_key: str) -> bool:
        """Apply the filters in order; the last matching filter decides."""
        included = True
        for kind, pattern in self.filters:
            if fnmatchcase(relative_key, pattern):
                included = kind == 'include'
        return included


@dataclass
class SyncRequest:
    """A request to mirror local files to a bucket prefix."""
    region: str
    bucket: str
    prefix: str
    files: List[str]
    options: List[str] = field(default_factory=list)

    @property
    def destination(self) -> str:
        return f"s3://{self.bucket}/{key_prefix(self.prefix)}"


@dataclass
class DeleteRequest:
    """A request to remove every object below a bucket prefix."""
    region: str
    bucket: str
    prefix: str
    options: List[str] = field(default_factory=list)

    @property
    def tree_prefix(self) -> str:
        return tree_prefix(self.prefix)

    @property
    def destination(self) -> str:
        return f"s3://{self.bucket}/{self.tree_prefix}"


@dataclass
class SyncAction:
    """One planned or executed remote change."""
    operation: str  # 'upload' or 'delete'
    key: str
    source: Optional[str] = None

    def describe(self, bucket: str, dry_run: bool = False) -> str:
        marker = '(dryrun) ' if dry_run else ''
        target = f"s3://{bucket}/{self.key}"
        if self.source:
            return f"{marker}{self.operation}: {self.source} to {target}"
        return f"{marker}{self.operation}: {target}"


@dataclass
class SyncResult:
    """Outcome of a sync or delete; failures raise instead of returning."""
    destination: str
    actions: List[SyncAction] = field(default_factory=list)
    uploaded: int = 0
    deleted: int = 0
    skipped: int = 0
    dry_run: bool = False

    @property
    def exit_status(self) -> int:
        """
        Process exit status for the CLI.

        A result is only returned when the operation succeeded, so this is
        always the success code 0; failures surface as raised errors that the
        CLI maps to 1.
        """
        return 0


def key_prefix(prefix: str) -> str:
    """Prefix used for sync destinations: a trailing slash only when non-empty."""
    stripped = prefix.rstrip('/')
    return f"{stripped}/" if stripped else ''


def tree_prefix(prefix: str) -> str:
    """Prefix used for tree deletes: always exactly one trailing slash."""
    return f"{prefix.rstrip('/')}/"
