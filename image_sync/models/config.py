"""
Configuration classes for the image sync tooling.

Library code never reads the environment; the CLI builds these objects once
and passes them down.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


STAGING_DIR_NAME = 'temp_copyfiles'
DEFAULT_FORMAT_SEPARATORS = ',;| '


def _first_entry(value: str) -> str:
    """Return the first whitespace separated entry of a list variable."""
    entries = value.split()
    return entries[0] if entries else ''


@dataclass
class S3Config:
    """Configuration for the S3 connection."""
    region: str
    endpoint: Optional[str] = None

    @classmethod
    def from_env(cls, region: Optional[str] = None) -> 'S3Config':
        """Create S3Config from environment variables, letting an explicit region win."""
        return cls(
            region=region or os.getenv('AWS_REGION') or os.getenv('AWS_DEFAULT_REGION', 'us-east-1'),
            endpoint=os.getenv('S3_ENDPOINT_URL') or None
        )


@dataclass
class SyncConfig:
    """Main configuration for sync and delete operations."""
    s3: S3Config
    work_dir: Path = field(default_factory=Path.cwd)
    staging_dir_name: str = STAGING_DIR_NAME
    debug: bool = False
    log_file: Optional[str] = None

    @property
    def staging_dir(self) -> Path:
        return Path(self.work_dir) / self.staging_dir_name

    @classmethod
    def from_env(cls, region: Optional[str] = None) -> 'SyncConfig':
        """Create SyncConfig from environment variables."""
        return cls(
            s3=S3Config.from_env(region),
            work_dir=Path(os.getenv('WORK_DIR', os.getcwd())),
            debug=bool(os.getenv('GENERATION_DEBUG')),
            log_file=os.getenv('LOG_FILE') or None
        )


@dataclass
class AutomationConfig:
    """Locations and defaults used when managing the images of a build."""
    build_dir: Path
    build_src_dir: Path
    build_devops_dir: Path
    automation_dir: Path
    deployment_unit: str = ''
    code_commit: str = ''
    image_formats: str = ''
    format_separators: str = DEFAULT_FORMAT_SEPARATORS
    data_stage: str = ''

    def split_formats(self, formats: Optional[str] = None) -> List[str]:
        """Split a format list on any of the configured separator characters."""
        value = self.image_formats if formats is None else formats
        names = [value]
        for separator in self.format_separators:
            names = [part for name in names for part in name.split(separator)]
        return [name for name in names if name]

    @classmethod
    def from_env(cls) -> 'AutomationConfig':
        """Create AutomationConfig from the automation environment variables."""
        build_dir = Path(os.getenv('AUTOMATION_BUILD_DIR', os.getcwd()))
        return cls(
            build_dir=build_dir,
            build_src_dir=Path(os.getenv('AUTOMATION_BUILD_SRC_DIR', str(build_dir))),
            build_devops_dir=Path(os.getenv('AUTOMATION_BUILD_DEVOPS_DIR', str(build_dir / 'devops'))),
            automation_dir=Path(os.getenv('AUTOMATION_DIR', str(build_dir))),
            deployment_unit=_first_entry(os.getenv('DEPLOYMENT_UNIT_LIST', '')),
            code_commit=_first_entry(os.getenv('CODE_COMMIT_LIST', '')),
            image_formats=_first_entry(os.getenv('IMAGE_FORMATS_LIST', '')),
            format_separators=os.getenv('IMAGE_FORMAT_SEPARATORS', DEFAULT_FORMAT_SEPARATORS),
            data_stage=os.getenv('S3_DATA_STAGE', '')
        )
