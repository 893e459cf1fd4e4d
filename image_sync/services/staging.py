"""
Staging area that assembles the exact file tree to be mirrored to S3.
"""
import os
import shutil
import time
import zipfile
from pathlib import Path
from typing import Iterator, List, Sequence

from loguru import logger

from ..exceptions import StagingError
from ..utils.paths import file_extension


ARCHIVE_EXTENSION = 'zip'


class StagingArea:
    """
    Scratch directory exclusively owned by one sync run.

    ``reset()`` removes whatever a previous run left behind before anything is
    staged, so two runs never leak into each other. Concurrent runs must use
    different directories.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def reset(self) -> None:
        """Remove the directory recursively if present, then create it empty."""
        try:
            if self.path.exists():
                logger.debug(f"Removing previous staging directory {self.path}")
                shutil.rmtree(self.path)
            self.path.mkdir(parents=True)
        except OSError as e:
            raise StagingError(f"Cannot reset staging directory {self.path}: {e}") from e

    def populate(self, files: Sequence[str]) -> None:
        """
        Stage files in order: zip archives are extracted, anything else is
        copied into the root by base name. Empty entries are skipped. Later
        entries overwrite earlier ones on path collision.

        Raises:
            StagingError: If a file is missing or unreadable, or an archive is corrupt
        """
        for file in files:
            if not file:
                continue
            if file_extension(file) == ARCHIVE_EXTENSION:
                self.extract_archive(file)
            else:
                self.copy_file(file)

    def copy_file(self, file: str) -> Path:
        source = Path(file)
        if not source.is_file():
            raise StagingError(f"Cannot stage {file}: not an existing file")

        target = self.path / source.name
        try:
            shutil.copy2(source, target)
        except OSError as e:
            raise StagingError(f"Cannot copy {file} into {self.path}: {e}") from e

        logger.debug(f"Staged {file} as {target}")
        return target

    def extract_archive(self, file: str) -> List[str]:
        """Extract every entry of a zip, keeping sub-paths; returns the entry names."""
        source = Path(file)
        if not source.is_file():
            raise StagingError(f"Cannot stage {file}: not an existing file")

        try:
            with zipfile.ZipFile(source) as archive:
                names = archive.namelist()
                archive.extractall(self.path)
                self._restore_timestamps(archive)
        except (zipfile.BadZipFile, OSError) as e:
            raise StagingError(f"Cannot extract {file} into {self.path}: {e}") from e

        logger.debug(f"Extracted {len(names)} entries from {file}")
        return names

    def _restore_timestamps(self, archive: zipfile.ZipFile) -> None:
        """Give extracted files the modification time recorded in the archive, as unzip does."""
        for info in archive.infolist():
            name = Path(info.filename)
            if info.is_dir() or name.is_absolute() or '..' in name.parts:
                continue
            target = self.path / name
            if not target.is_file():
                continue
            # zip stores naive local time
            modified = time.mktime(info.date_time + (0, 0, -1))
            os.utime(target, (modified, modified))

    def files(self) -> Iterator[Path]:
        """Staged regular files in a stable order."""
        return (path for path in sorted(self.path.rglob('*')) if path.is_file())

    def relative_keys(self) -> List[str]:
        return [path.relative_to(self.path).as_posix() for path in self.files()]
