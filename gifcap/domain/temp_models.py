"""
Scoped temporary storage for a capture run.

All intermediate artifacts (the pulled recording and the palette image) live in
a single working directory owned by the orchestrator. The directory is removed
when the `WorkingDirectory` context exits, whatever the reason.
"""
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from loguru import logger

from .exceptions import TempResourceCreationException
from ..config.common import WORKDIR_PREFIX


def better_mktemp(template: str, directory: Path) -> Path:
    """
    Creates an empty temporary file named after `template`, keeping its extension.

    Given `screencap.mp4`, the created file is `screencap.<random>.mp4`: the
    random part goes before the final extension, so ffmpeg and ffprobe still
    recognise the format from the name. A template without an extension yields
    `<template>.<random>`.

    Args:
        template: The base filename, e.g. "palette.png".
        directory: Directory in which to create the file.

    Returns:
        The path of the newly created (empty) file.

    Raises:
        TempResourceCreationException: If the file cannot be created.
    """
    base, dot, ext = template.rpartition(".")
    if not dot or not base:
        base, ext = template, ""
    suffix = f".{ext}" if ext else ""

    try:
        fd, name = tempfile.mkstemp(prefix=f"{base}.", suffix=suffix, dir=directory)
    except OSError as e:
        raise TempResourceCreationException(f"Failed to create temp file: {template} ({e})") from e
    os.close(fd)
    return Path(name)


class WorkingDirectory:
    """
    A temporary directory whose lifetime is tied to a `with` block.

    The directory is created on `__enter__` and recursively removed on
    `__exit__`, including when the block exits with an exception or a
    `KeyboardInterrupt`. Removal happens at most once.

    Attributes:
        parent (Path): Directory in which the working directory is created.
        path (Optional[Path]): The working directory, set once entered.
        removed (bool): True once the directory has been cleaned up.
    """

    def __init__(self, parent: Optional[Path] = None, prefix: str = WORKDIR_PREFIX):
        self.parent = Path(parent) if parent else Path.cwd()
        self.prefix = prefix
        self.path: Optional[Path] = None
        self.removed = False

    def __enter__(self) -> "WorkingDirectory":
        try:
            self.path = Path(tempfile.mkdtemp(prefix=self.prefix, dir=self.parent))
        except OSError as e:
            raise TempResourceCreationException(
                f"Failed to create a temporary working directory in '{self.parent}', aborting ({e})"
            ) from e
        logger.debug(f"Created working directory: {self.path}")
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.cleanup()
        return False

    def mktemp(self, template: str) -> Path:
        """Creates a `better_mktemp` file inside this working directory."""
        if self.path is None:
            raise TempResourceCreationException("Working directory has not been created yet.")
        return better_mktemp(template, self.path)

    def cleanup(self):
        if self.removed or self.path is None:
            return
        self.removed = True
        try:
            shutil.rmtree(self.path)
            logger.debug(f"Removed working directory: {self.path}")
        except OSError as e:
            logger.warning(f"Could not remove working directory '{self.path}': {e}")
