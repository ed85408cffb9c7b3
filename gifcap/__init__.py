"""
gifcap: record the screen of an attached Android device and turn it into a GIF.

The package is split the same way as a small media pipeline:

- `config`: static settings (logging format, tool names, fixed GIF parameters)
  and the loader for the optional user YAML file.
- `domain`: exceptions, the capture configuration, the cancellation token and
  the scoped temporary working directory.
- `services`: thin wrappers around the external tools, `adb` (DeviceBridge)
  and `ffmpeg`/`ffprobe` (GifTranscoder).
- `pipeline`: the CaptureOrchestrator that sequences the whole run.
- `utils`: process helpers, prerequisite checks and formatting helpers.
"""

__version__ = "1.0.0"
