"""
Configuration Package for gifcap.

This package centralizes the static configuration settings for the application.
Keeping them apart from the pipeline code makes it easy to adjust defaults
without touching the orchestration logic.

This package includes settings for:
- Logging format and default log level.
- Names of the external tools (adb, ffmpeg, ffprobe) and the user config file
  that may point to their install directories.
- Capture defaults such as the output filename, the remote directory on the
  device and the settle delay before pulling a recording.
- The fixed palette/encode parameters used to produce the GIF.
"""
