"""
Defines custom exception types for gifcap.

Each stage of the capture pipeline raises its own exception type so the entry
point can report a short, specific message. None of them is retried: any of
these ends the run with exit status 1 after the working directory has been
cleaned up.

The expected non-zero exit of an interrupted `screenrecord` is not an error and
has no exception type.

All custom exceptions inherit from the base `GifcapException`.
"""


class GifcapException(Exception):
    """Base class for all custom exceptions in gifcap."""

    pass


# --- Startup Checks ---
class MissingDependencyException(GifcapException):
    """
    Raised when a required external tool (adb, ffmpeg, ffprobe) cannot be found.

    The offending tool name is kept in `tool` so callers can report it.
    """

    def __init__(self, tool: str, message: str = ""):
        self.tool = tool
        super().__init__(
            message or f"I require {tool} to be installed and in your PATH. Aborting."
        )


class NoDeviceAttachedException(GifcapException):
    """Raised when `adb devices` lists no device, or cannot be queried at all."""

    pass


class TempResourceCreationException(GifcapException):
    """Raised when the working directory or a temporary file cannot be created."""

    pass


# --- Recording ---
class CaptureFailedException(GifcapException):
    """
    Raised when `screenrecord` exits with an error without having been interrupted.

    An interrupted recording always moves on to the pull step regardless of
    the exit status; this exception only covers a recording that failed on
    its own (for example the device lacks the screenrecord binary).
    """

    pass


class PullFailedException(GifcapException):
    """Raised when the recorded file cannot be copied from the device."""

    pass


# --- Media Processing ---
class ProbeFailedException(GifcapException):
    """Raised when ffprobe cannot read the pulled capture."""

    pass


class NoDurationFoundException(ProbeFailedException):
    """
    Raised when the probe succeeds but reports no usable duration.

    The duration bounds the encode time range, so a capture without one
    cannot be converted.
    """

    pass


class EncodeFailedException(GifcapException):
    """Raised when palette generation or the final GIF encode fails."""

    pass
