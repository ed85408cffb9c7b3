"""
The capture pipeline: record the device screen, pull the video and turn it
into a GIF inside a scoped working directory.
"""
import time
from pathlib import Path
from typing import Callable, List, Optional

from loguru import logger

from ..config.common import (
    STATE_CONVERTING,
    STATE_DONE,
    STATE_IDLE,
    STATE_RECORDING,
    STATE_STOPPING,
)
from ..config.gif import PALETTE_TEMPLATE, SCREENCAP_TEMPLATE
from ..domain.capture import CancellationToken, CaptureConfig
from ..domain.exceptions import CaptureFailedException, NoDeviceAttachedException
from ..domain.temp_models import WorkingDirectory
from ..services.bridge import DeviceBridge
from ..services.transcoder import GifTranscoder
from ..utils.format_utils import format_duration, formatted_size
from ..utils.process_utils import cancel_on_interrupt


class CaptureOrchestrator:
    """
    Records the device screen and converts the recording into a GIF.

    A run moves through the states idle -> recording -> stopping ->
    converting -> done. Recording only ends through the cancellation token
    (set by Ctrl+C while recording) or by the device stopping on its own.
    Every step after recording is fail-fast: the first exception aborts the
    run, after the working directory has been removed.
    """

    def __init__(
        self,
        config: CaptureConfig,
        bridge: Optional[DeviceBridge] = None,
        transcoder: Optional[GifTranscoder] = None,
        token: Optional[CancellationToken] = None,
        sleep: Callable[[float], None] = time.sleep,
        install_signal_handler: bool = True,
    ):
        self.config = config
        self.bridge = bridge or DeviceBridge(config)
        self.transcoder = transcoder or GifTranscoder(config.ffmpeg_cmd, config.ffprobe_cmd)
        self.token = token or CancellationToken()
        self._sleep = sleep
        self._install_signal_handler = install_signal_handler

        self.state: str = STATE_IDLE
        self.state_history: List[str] = [STATE_IDLE]
        self.work_dir: Optional[WorkingDirectory] = None

    def _transition(self, new_state: str):
        logger.debug(f"State: {self.state} -> {new_state}")
        self.state = new_state
        self.state_history.append(new_state)

    def check_device_attached(self):
        """
        Raises:
            NoDeviceAttachedException: If adb lists no device.
        """
        devices = self.bridge.list_devices()
        if not devices:
            raise NoDeviceAttachedException("Device is not attached")
        logger.debug(f"Attached devices: {devices}")
        if self.config.selector and self.config.selector not in devices:
            logger.warning(
                f"Selector '{self.config.selector}' does not match a listed serial ({', '.join(devices)}); "
                "passing it to adb anyway."
            )

    def run(self) -> Path:
        """
        Executes the full capture-to-GIF pipeline.

        Returns:
            The path of the written GIF.
        """
        self.check_device_attached()

        with WorkingDirectory(self.config.work_parent) as work_dir:
            self.work_dir = work_dir
            screencap = work_dir.mktemp(SCREENCAP_TEMPLATE)
            palette = work_dir.mktemp(PALETTE_TEMPLATE)
            remote_path = self.config.remote_path_for(screencap)

            self._record(remote_path)

            self._transition(STATE_STOPPING)
            if self.config.settle_delay > 0:
                logger.debug(f"Waiting {self.config.settle_delay}s for the device to finish writing.")
                self._sleep(self.config.settle_delay)

            logger.info("Pulling recording...")
            self.bridge.pull(remote_path, screencap)
            self.bridge.remove(remote_path)

            self._transition(STATE_CONVERTING)
            duration = self.transcoder.probe_duration(screencap)
            logger.info(f"Captured {format_duration(duration)}. Building palette...")
            self.transcoder.generate_palette(screencap, palette, duration)

            logger.info("Converting...")
            self.transcoder.encode_gif(screencap, palette, self.config.output, duration)

        self._transition(STATE_DONE)
        size = self.config.output.stat().st_size if self.config.output.is_file() else 0
        logger.info(f"Done. Wrote {self.config.output} ({formatted_size(size)}).")
        return self.config.output

    def _record(self, remote_path: str):
        """
        Runs `screenrecord` until interrupted.

        A non-zero exit after an interrupt is how screenrecord always ends, so
        it is ignored. Without an interrupt, a zero exit means the device hit
        its own time limit; anything else is a failed recording.
        """
        logger.info("Recording, end with CTRL+C")
        self._transition(STATE_RECORDING)

        if self._install_signal_handler:
            with cancel_on_interrupt(self.token):
                returncode = self.bridge.screenrecord(remote_path, self.token)
        else:
            returncode = self.bridge.screenrecord(remote_path, self.token)

        if self.token.is_cancelled:
            logger.info("Recording stopped. Converting...")
            logger.debug(f"screenrecord exited with {returncode} after interrupt.")
        elif returncode == 0:
            logger.warning("Recording ended by the device (time limit reached). Converting...")
        else:
            raise CaptureFailedException(f"screenrecord failed with exit status {returncode}.")
