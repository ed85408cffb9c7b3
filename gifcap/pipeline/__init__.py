"""
This package contains the capture pipeline of gifcap.

The pipeline sequences the whole run: device check, scoped working directory,
interruptible recording, pull, probe, palette generation and GIF encode.
"""
