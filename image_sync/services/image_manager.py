"""
Image manager that hands each requested image format of a build to its
packaging script.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from ..clients.script_runner import ScriptRunner
from ..exceptions import ConfigurationError, PackagingError
from ..models.config import AutomationConfig


@dataclass
class ImageBuildContext:
    """What every packager needs to know about the build being managed."""
    deployment_unit: str
    code_commit: str
    config: AutomationConfig


class Packager(ABC):
    """Locates the image produced by a build and runs the script that manages it."""

    def __init__(self, script: str):
        self.script = script

    @abstractmethod
    def locate(self, context: ImageBuildContext) -> Optional[Path]:
        """
        Find the image file for this format.

        Raises:
            PackagingError: If the build did not produce it
        """

    @abstractmethod
    def arguments(self, context: ImageBuildContext, image_file: Optional[Path]) -> List[str]:
        """Arguments passed to the handler script."""

    def package(self, context: ImageBuildContext, runner: ScriptRunner) -> None:
        image_file = self.locate(context)
        status = runner.run(self.script, self.arguments(context, image_file))
        if status != 0:
            raise PackagingError(f"{self.script} failed with exit status {status}")


def _require(path: Path, label: Optional[str] = None) -> Path:
    if not path.is_file():
        raise PackagingError(f"{label or path} missing")
    return path


class ZipImagePackager(Packager):
    """Formats shipped as ``dist/<name>.zip`` in the build source directory."""

    def __init__(self, name: str, script: str):
        super().__init__(script)
        self.name = name

    def locate(self, context: ImageBuildContext) -> Path:
        return _require(context.config.build_src_dir / 'dist' / f"{self.name}.zip")

    def arguments(self, context: ImageBuildContext, image_file: Optional[Path]) -> List[str]:
        return ['-s', '-u', context.deployment_unit, '-g', context.code_commit, '-f', str(image_file)]


class DataSetPackager(Packager):
    MANIFEST = 'cot_data_file_manifest.json'

    def locate(self, context: ImageBuildContext) -> Path:
        return _require(context.config.build_src_dir / self.MANIFEST)

    def arguments(self, context: ImageBuildContext, image_file: Optional[Path]) -> List[str]:
        return ['-s', '-u', context.deployment_unit, '-g', context.code_commit,
                '-f', str(image_file), '-b', context.config.data_stage]


class RdsSnapshotPackager(Packager):
    """Snapshots are taken from the live database, so there is no file to find."""

    def locate(self, context: ImageBuildContext) -> None:
        return None

    def arguments(self, context: ImageBuildContext, image_file: Optional[Path]) -> List[str]:
        return ['-s', '-u', context.deployment_unit, '-g', context.code_commit]


class DockerPackager(Packager):
    def locate(self, context: ImageBuildContext) -> Path:
        # devops copy takes precedence over the one in the source tree
        devops_dockerfile = context.config.build_devops_dir / 'docker' / 'Dockerfile'
        if devops_dockerfile.is_file():
            return devops_dockerfile
        return _require(context.config.build_src_dir / 'Dockerfile', 'Dockerfile')

    def arguments(self, context: ImageBuildContext, image_file: Optional[Path]) -> List[str]:
        return ['-b', '-s', context.deployment_unit, '-g', context.code_commit]


class ImageFormat(Enum):
    """Image formats a build can produce."""
    DATASET = 'dataset'
    RDSSNAPSHOT = 'rdssnapshot'
    DOCKER = 'docker'
    LAMBDA = 'lambda'
    PIPELINE = 'pipeline'
    SCRIPTS = 'scripts'
    SWAGGER = 'swagger'
    SPA = 'spa'
    CONTENTNODE = 'contentnode'

    @classmethod
    def parse(cls, name: str) -> 'ImageFormat':
        try:
            return cls(name.lower())
        except ValueError:
            raise PackagingError(f'Unsupported image format "{name}"') from None

    @property
    def packager(self) -> Packager:
        return PACKAGERS[self]


PACKAGERS: Dict[ImageFormat, Packager] = {
    ImageFormat.DATASET: DataSetPackager('manageDataSetS3.sh'),
    ImageFormat.RDSSNAPSHOT: RdsSnapshotPackager('manageDataSetRDSSnapshot.sh'),
    ImageFormat.DOCKER: DockerPackager('manageDocker.sh'),
    ImageFormat.LAMBDA: ZipImagePackager('lambda', 'manageLambda.sh'),
    ImageFormat.PIPELINE: ZipImagePackager('pipeline', 'managePipeline.sh'),
    ImageFormat.SCRIPTS: ZipImagePackager('scripts', 'manageScripts.sh'),
    ImageFormat.SWAGGER: ZipImagePackager('swagger', 'manageSwagger.sh'),
    ImageFormat.SPA: ZipImagePackager('spa', 'manageSpa.sh'),
    ImageFormat.CONTENTNODE: ZipImagePackager('contentnode', 'manageContentNode.sh'),
}


class ImageManager:
    """Runs the packager of every requested format, stopping at the first failure."""

    def __init__(self, config: AutomationConfig, runner: Optional[ScriptRunner] = None):
        self.config = config
        self.runner = runner or ScriptRunner(config.automation_dir, cwd=config.build_dir)

    def parse_formats(self, formats: str) -> List[ImageFormat]:
        """Resolve every name up front so an unknown format fails before any script runs."""
        return [ImageFormat.parse(name) for name in self.config.split_formats(formats)]

    def manage(self, image_formats: Optional[str] = None, deployment_unit: Optional[str] = None,
               code_commit: Optional[str] = None) -> List[ImageFormat]:
        """
        Manage the images of the current build.

        Args:
            image_formats: Separated list of format names; defaults from config
            deployment_unit: Deployment unit the images belong to; defaults from config
            code_commit: Commit the images were built from; defaults from config

        Returns:
            The formats that were managed, in order

        Raises:
            ConfigurationError: If a mandatory value is missing after defaults
            PackagingError: If a format is unknown, its image is missing, or its script fails
        """
        context = ImageBuildContext(
            deployment_unit=deployment_unit or self.config.deployment_unit,
            code_commit=code_commit or self.config.code_commit,
            config=self.config
        )
        formats = image_formats or self.config.image_formats

        if not context.deployment_unit or not context.code_commit or not formats:
            raise ConfigurationError("Mandatory arguments missing: deployment unit, code commit "
                                     "and image formats are all required")

        resolved = self.parse_formats(formats)
        for image_format in resolved:
            logger.info(f"Managing {image_format.value} image for {context.deployment_unit} "
                        f"at {context.code_commit}")
            image_format.packager.package(context, self.runner)

        logger.info(f"Managed {len(resolved)} image formats")
        return resolved
