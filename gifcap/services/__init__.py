"""
Services Package for gifcap.

A service wraps one external tool behind a small Python interface so the
pipeline never assembles command lines itself:

- **DeviceBridge** (`bridge.py`): talks to the device through `adb`: lists
  devices, runs the interruptible `screenrecord`, pulls and deletes the
  recording.

- **GifTranscoder** (`transcoder.py`): probes the recording with `ffprobe` and
  drives `ffmpeg` (through ffmpeg-python) to generate the palette and encode
  the final GIF.
"""
from .bridge import DeviceBridge
from .transcoder import GifTranscoder

__all__ = ["DeviceBridge", "GifTranscoder"]
