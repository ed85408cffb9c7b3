"""
Models describing a single capture run.
"""
import threading
from pathlib import Path
from typing import List, Optional

from ..config.common import (
    ADB_EXECUTABLE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUTPUT,
    DEFAULT_REMOTE_DIR,
    DEFAULT_SETTLE_DELAY,
    FFMPEG_EXECUTABLE,
    FFPROBE_EXECUTABLE,
)


class CaptureConfig:
    """
    Everything a capture run needs to know, set once from the parsed arguments.

    The adb command prefix is derived from this object instead of being kept
    in global state, so every bridge invocation of a run targets the same
    device.

    Attributes:
        selector (Optional[str]): Device serial or qualifier passed to `adb -s`.
        output (Path): Where the final GIF is written.
        settle_delay (float): Seconds to wait after recording stops before pulling.
        remote_dir (str): Directory on the device that receives the recording.
        work_parent (Path): Directory in which the scoped working directory is created.
        adb_cmd (str): adb executable (name or absolute path).
        ffmpeg_cmd (str): ffmpeg executable (name or absolute path).
        ffprobe_cmd (str): ffprobe executable (name or absolute path).
        adb_dir (Optional[Path]): Directory to look for adb in before PATH.
        ffmpeg_dir (Optional[Path]): Directory to look for ffmpeg/ffprobe in before PATH.
        log_level (str): Effective loguru level.
    """

    def __init__(
        self,
        selector: Optional[str] = None,
        output: Path = Path(DEFAULT_OUTPUT),
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        remote_dir: str = DEFAULT_REMOTE_DIR,
        work_parent: Optional[Path] = None,
        adb_dir: Optional[Path] = None,
        ffmpeg_dir: Optional[Path] = None,
        log_level: str = DEFAULT_LOG_LEVEL,
    ):
        if settle_delay < 0:
            raise ValueError("settle_delay cannot be negative.")
        self.selector = selector or None
        self.output = Path(output)
        self.settle_delay = float(settle_delay)
        self.remote_dir = remote_dir.rstrip("/") or "/"
        self.work_parent = Path(work_parent) if work_parent else Path.cwd()
        self.adb_dir = adb_dir
        self.ffmpeg_dir = ffmpeg_dir
        self.log_level = log_level

        # Replaced with resolved paths by the prerequisite check.
        self.adb_cmd: str = ADB_EXECUTABLE
        self.ffmpeg_cmd: str = FFMPEG_EXECUTABLE
        self.ffprobe_cmd: str = FFPROBE_EXECUTABLE

    def adb_prefix(self) -> List[str]:
        """The adb command prefix shared by every bridge invocation."""
        prefix = [self.adb_cmd]
        if self.selector:
            prefix += ["-s", self.selector]
        return prefix

    def remote_path_for(self, local_path: Path) -> str:
        """Device-side path for a local artifact, e.g. `/sdcard/screencap.x1y2.mp4`."""
        if self.remote_dir == "/":
            return f"/{local_path.name}"
        return f"{self.remote_dir}/{local_path.name}"

    def __repr__(self) -> str:
        return (
            f"CaptureConfig(selector={self.selector!r}, output={str(self.output)!r}, "
            f"settle_delay={self.settle_delay}, remote_dir={self.remote_dir!r}, "
            f"work_parent={str(self.work_parent)!r})"
        )


class CancellationToken:
    """
    A one-shot flag telling the blocking capture wrapper to stop.

    It is set from the SIGINT handler installed for the duration of the
    recording (see `cancel_on_interrupt`) and polled by `run_until_cancelled`.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()
