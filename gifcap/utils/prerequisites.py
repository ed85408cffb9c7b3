"""
This module provides the Modules class to locate and verify the external tools
the application needs: adb, ffmpeg and ffprobe.
"""
import shutil
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config.common import ADB_EXECUTABLE, FFMPEG_EXECUTABLE, FFPROBE_EXECUTABLE
from ..domain.capture import CaptureConfig
from ..domain.exceptions import MissingDependencyException


class Modules:
    """
    Resolves the external executables used by a capture run.

    A directory configured in the user config (`adb_dir`, `ffmpeg_dir`) is
    checked first; otherwise the executable must be on the system PATH.
    """

    @staticmethod
    def _executable_name(name: str) -> str:
        return f"{name}.exe" if sys.platform == "win32" else name

    @staticmethod
    def resolve(name: str, configured_dir: Optional[Path] = None) -> Optional[str]:
        """
        Determines the path of an executable.

        Args:
            name: The tool name, e.g. "ffmpeg".
            configured_dir: Optional install directory from the user config.

        Returns:
            The absolute path of the executable, or None if it cannot be found.
        """
        exe_name = Modules._executable_name(name)

        if configured_dir and configured_dir.is_dir():
            configured_path = configured_dir / exe_name
            if configured_path.is_file():
                logger.debug(f"Using {name} from configured path: '{configured_path}'")
                return str(configured_path)
            logger.warning(f"'{configured_dir}' is configured, but '{exe_name}' was not found there. Falling back to system PATH.")

        return shutil.which(exe_name)

    @staticmethod
    def check_prerequisites(config: CaptureConfig):
        """
        Verifies that adb, ffmpeg and ffprobe can be found, in that order.

        On success the resolved paths are stored on `config` so every later
        invocation uses exactly the checked executables.

        Raises:
            MissingDependencyException: Naming the first tool that is missing.
        """
        resolved = {}
        for name, configured_dir in (
            (ADB_EXECUTABLE, config.adb_dir),
            (FFMPEG_EXECUTABLE, config.ffmpeg_dir),
            (FFPROBE_EXECUTABLE, config.ffmpeg_dir),
        ):
            path = Modules.resolve(name, configured_dir)
            if not path:
                raise MissingDependencyException(name)
            resolved[name] = path

        config.adb_cmd = resolved[ADB_EXECUTABLE]
        config.ffmpeg_cmd = resolved[FFMPEG_EXECUTABLE]
        config.ffprobe_cmd = resolved[FFPROBE_EXECUTABLE]
        logger.debug(f"External tools: {resolved}")
