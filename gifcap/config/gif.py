"""
Fixed parameters of the palette generation and GIF encode.

These are deliberately not exposed on the command line; every GIF produced by
the tool uses the same frame rate, width and dithering.
"""

# --- Temporary Artifact Templates ---
# `better_mktemp` turns these into e.g. `screencap.k2j4h1x9.mp4`.
SCREENCAP_TEMPLATE = "screencap.mp4"
PALETTE_TEMPLATE = "palette.png"

# --- Filter Chain ---
GIF_FPS = 30
GIF_WIDTH = 320
GIF_HEIGHT = -1  # keep aspect ratio
SCALE_FLAGS = "lanczos"

# --- Palette Application ---
DITHER_MODE = "bayer"
BAYER_SCALE = 4

# Encode range always starts at the beginning of the capture.
START_OFFSET = 0
