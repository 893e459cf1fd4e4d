"""
Runs external packaging scripts and reports their exit status.
"""
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger


class ScriptRunner:
    """Invokes handler scripts found in the automation directory."""

    def __init__(self, automation_dir: Path, cwd: Optional[Path] = None):
        self.automation_dir = Path(automation_dir)
        self.cwd = cwd

    def script_path(self, script: str) -> Path:
        return self.automation_dir / script

    def run(self, script: str, args: Sequence[str]) -> int:
        """
        Run one script with its arguments; output streams straight to the CI log.

        Returns:
            The script's exit status
        """
        command = [str(self.script_path(script)), *args]
        logger.info(f"Running {' '.join(command)}")
        try:
            result = subprocess.run(command, cwd=self.cwd, check=False)
        except OSError as e:
            logger.error(f"Could not start {command[0]}: {e}")
            return 127

        if result.returncode != 0:
            logger.error(f"{script} exited with status {result.returncode}")
        return result.returncode
