"""
Utilities Package for gifcap.

Modules:
    - process_utils.py: Runs external commands, including the interruptible
      wrapper used for the blocking screen recording.
    - prerequisites.py: Locates and verifies the external tools (adb, ffmpeg,
      ffprobe) before anything else runs.
    - format_utils.py: Formats durations and file sizes for log messages.
"""
