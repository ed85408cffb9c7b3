"""
Device bridge service: every interaction with the device goes through `adb`.
"""
from pathlib import Path
from typing import List

from loguru import logger

from ..config.common import ADB_DEVICES_HEADER
from ..domain.capture import CancellationToken, CaptureConfig
from ..domain.exceptions import (
    CaptureFailedException,
    NoDeviceAttachedException,
    PullFailedException,
)
from ..utils.process_utils import run_cmd, run_until_cancelled


def parse_devices(output: str) -> List[str]:
    """
    Extracts device serials from the output of `adb devices`.

    Only lines after the "List of devices attached" header count; daemon
    status lines (starting with '*') and blank lines are skipped. Devices in
    any state (device, unauthorized, offline) are listed.
    """
    serials: List[str] = []
    in_list = False
    for line in output.splitlines():
        stripped = line.strip()
        if stripped.startswith(ADB_DEVICES_HEADER):
            in_list = True
            continue
        if not in_list or not stripped or stripped.startswith("*"):
            continue
        serials.append(stripped.split()[0])
    return serials


class DeviceBridge:
    """
    Runs adb commands against the device selected by a `CaptureConfig`.

    The command prefix (`adb` or `adb -s <selector>`) is taken from the
    config once, so all invocations of a run target the same device.
    """

    def __init__(self, config: CaptureConfig):
        self.config = config
        self.prefix: List[str] = config.adb_prefix()

    def _cmd(self, *args: str) -> List[str]:
        return self.prefix + list(args)

    def list_devices(self) -> List[str]:
        """
        Returns the serials listed by `adb devices`.

        Raises:
            NoDeviceAttachedException: If adb cannot be queried at all.
        """
        result = run_cmd(self._cmd("devices"))
        if result is None or result.returncode != 0:
            detail = result.stderr.strip() if result is not None else "adb could not be started"
            raise NoDeviceAttachedException(f"Could not list devices: {detail}")
        return parse_devices(result.stdout)

    def screenrecord(self, remote_path: str, token: CancellationToken) -> int:
        """
        Records the device screen to `remote_path` until `token` is cancelled.

        Returns:
            The exit status of `adb shell screenrecord`. It is non-zero when
            the recording was interrupted, which is the normal way to stop it.
        """
        try:
            return run_until_cancelled(self._cmd("shell", "screenrecord", remote_path), token)
        except OSError as e:
            raise CaptureFailedException(f"Could not start screenrecord: {e}") from e

    def pull(self, remote_path: str, local_path: Path):
        """
        Copies the recording from the device.

        Raises:
            PullFailedException: If adb fails or the local file is missing/empty.
        """
        result = run_cmd(self._cmd("pull", remote_path, str(local_path)))
        if result is None or result.returncode != 0:
            detail = result.stderr.strip() if result is not None else "adb could not be started"
            raise PullFailedException(f"Failed to pull '{remote_path}' from device: {detail}")
        if not local_path.is_file() or local_path.stat().st_size == 0:
            raise PullFailedException(f"Pulled file '{local_path}' is missing or empty.")

    def remove(self, remote_path: str) -> bool:
        """Deletes the recording from the device. Returns False if adb reported a failure."""
        result = run_cmd(self._cmd("shell", "rm", "-f", remote_path))
        if result is None or result.returncode != 0:
            logger.warning(f"Could not delete '{remote_path}' from the device.")
            return False
        return True
