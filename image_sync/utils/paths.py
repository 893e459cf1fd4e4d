"""
Path helpers shared by the staging, cleanup and image management code.

The string helpers work on '/' separated paths exactly as given and never
touch the filesystem. The search helpers take every behavioural flag as a
parameter and leave no global state behind.
"""
import glob
import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Union

from loguru import logger

from ..exceptions import NotFoundError

PathLike = Union[str, Path]

# Scratch files left behind by pipeline steps
CLEANUP_FILE_PATTERNS = ('composite_*', 'STATUS.txt', 'stripped_*', 'ciphertext*', 'temp_*')
CLEANUP_DIR_PATTERN = 'temp_*'


def format_path(*parts: str) -> str:
    return '/'.join(parts)


def file_path(path: str) -> str:
    """Everything before the last '/'; a path without one is returned unchanged."""
    head, separator, _ = path.rpartition('/')
    return head if separator else path


def file_name(path: str) -> str:
    """Everything after the last '/'."""
    return path.rpartition('/')[2]


def file_base(path: str) -> str:
    """File name without its last extension."""
    name = file_name(path)
    base, separator, _ = name.rpartition('.')
    return base if separator else name


def file_extension(path: str) -> str:
    """
    Substring after the last '.' of the file name.

    A name without a '.' is returned whole, so callers comparing against a
    known extension simply see no match.
    """
    return file_name(path).rpartition('.')[2]


def find_ancestor_dir(marker: str, start_dir: Optional[PathLike] = None) -> Path:
    """
    Walk upward from start_dir looking for a directory called marker, or one
    holding a file called marker. The first level that matches wins.

    Args:
        marker: Directory name or marker file name
        start_dir: Where to start; defaults to the current directory

    Returns:
        The matching directory

    Raises:
        NotFoundError: If the filesystem root is passed without a match
    """
    current = Path(start_dir if start_dir is not None else Path.cwd()).absolute()

    while True:
        if current.name == marker or (current / marker).is_file():
            logger.debug(f"Found ancestor {current} for marker {marker}")
            return current
        if current.parent == current:
            raise NotFoundError(f"No ancestor of {start_dir or Path.cwd()} matches {marker}")
        current = current.parent


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith('.') for part in path.relative_to(root).parts)


def glob_paths(root: PathLike, pattern: str, recursive: bool = True,
               include_hidden: bool = False) -> List[Path]:
    """
    Sorted matches of pattern under root.

    With recursive set the pattern may sit at any depth below root, as with
    the shell's ``root/**/pattern`` under globstar. No match gives an empty list.
    """
    root_path = Path(root)
    full_pattern = f"**/{pattern}" if recursive else pattern
    matches = sorted(root_path.glob(full_pattern))
    if not include_hidden:
        matches = [match for match in matches if not _is_hidden(match, root_path)]
    return matches


def find_dir(root: PathLike, *patterns: str, recursive: bool = True,
             include_hidden: bool = False) -> Path:
    """
    Directory of the first match of any pattern below root.

    A matching file yields the directory holding it; a matching directory is
    returned as is.

    Raises:
        NotFoundError: If nothing matches
    """
    matches: List[Path] = []
    for pattern in patterns:
        matches.extend(glob_paths(root, pattern, recursive, include_hidden))

    for match in matches:
        if match.is_file():
            return match.parent
        if match.is_dir():
            return match

    raise NotFoundError(f"No directory below {root} matches {', '.join(patterns)}")


def find_file(*patterns: str, recursive: bool = True) -> Path:
    """
    First regular file matching the patterns, checked in order.

    Raises:
        NotFoundError: If no pattern matches a file
    """
    for pattern in patterns:
        for match in sorted(glob.glob(pattern, recursive=recursive)):
            if Path(match).is_file():
                return Path(match)

    raise NotFoundError(f"No file matches {', '.join(patterns)}")


def _matching(root: Path, patterns: Iterable[str]) -> List[Path]:
    found: List[Path] = []
    for pattern in patterns:
        found.extend(root.rglob(pattern))
    return found


def cleanup(root: PathLike = '.') -> int:
    """
    Remove scratch files and temporary directories left by pipeline steps.

    Returns:
        Number of paths removed
    """
    root_path = Path(root)
    removed = 0

    for path in _matching(root_path, CLEANUP_FILE_PATTERNS):
        if path.is_file() or path.is_symlink():
            path.unlink()
            removed += 1

    for path in sorted(_matching(root_path, [CLEANUP_DIR_PATTERN])):
        # Nested temp dirs may already be gone with their parent
        if path.is_dir():
            shutil.rmtree(path)
            removed += 1

    logger.debug(f"Cleanup removed {removed} paths below {root_path}")
    return removed
