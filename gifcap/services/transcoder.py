"""
Transcoder service: probes the recording and turns it into a GIF with ffmpeg.

The ffmpeg command lines are built with ffmpeg-python. The conversion is the
classic two-pass palette approach:

1. `palettegen` computes a 256-color palette from the scaled video.
2. `paletteuse` maps every frame of the same scaled video onto that palette,
   with ordered (Bayer) dithering.

Both passes read the capture from offset 0 for the probed duration.
"""
from pathlib import Path

import ffmpeg
from loguru import logger

from ..config.common import FFMPEG_EXECUTABLE, FFPROBE_EXECUTABLE
from ..config.gif import (
    BAYER_SCALE,
    DITHER_MODE,
    GIF_FPS,
    GIF_HEIGHT,
    GIF_WIDTH,
    SCALE_FLAGS,
    START_OFFSET,
)
from ..domain.exceptions import (
    EncodeFailedException,
    NoDurationFoundException,
    ProbeFailedException,
)


def parse_duration(duration_str) -> float:
    """
    Parses ffprobe's `format.duration` (seconds, e.g. "12.345000").

    Missing or non-numeric values ("N/A", "") give 0.0; the caller treats
    that as no duration.
    """
    try:
        return float(duration_str)
    except (TypeError, ValueError):
        logger.debug(f"Unusable duration value: {duration_str!r}")
        return 0.0


def _scaled_input(capture: Path, duration: float):
    """Capture input limited to [0, duration], normalized to the GIF frame rate and width."""
    return (
        ffmpeg.input(str(capture), ss=START_OFFSET, t=duration)
        .filter("fps", fps=GIF_FPS)
        .filter("scale", GIF_WIDTH, GIF_HEIGHT, flags=SCALE_FLAGS)
    )


def build_palette_stream(capture: Path, palette: Path, duration: float):
    """Builds the ffmpeg-python graph that writes the palette image."""
    return (
        _scaled_input(capture, duration)
        .filter("palettegen")
        .output(str(palette))
        .overwrite_output()
    )


def build_gif_stream(capture: Path, palette: Path, output: Path, duration: float):
    """Builds the ffmpeg-python graph that encodes the GIF using a generated palette."""
    palette_input = ffmpeg.input(str(palette)).video
    return (
        ffmpeg.filter(
            [_scaled_input(capture, duration), palette_input],
            "paletteuse",
            dither=DITHER_MODE,
            bayer_scale=BAYER_SCALE,
        )
        .output(str(output))
        .overwrite_output()
    )


class GifTranscoder:
    """
    Wraps ffprobe and ffmpeg for the three media steps of a run.

    Attributes:
        ffmpeg_cmd (str): ffmpeg executable to invoke.
        ffprobe_cmd (str): ffprobe executable to invoke.
    """

    def __init__(self, ffmpeg_cmd: str = FFMPEG_EXECUTABLE, ffprobe_cmd: str = FFPROBE_EXECUTABLE):
        self.ffmpeg_cmd = ffmpeg_cmd
        self.ffprobe_cmd = ffprobe_cmd

    def probe_duration(self, capture: Path) -> float:
        """
        Returns the duration of `capture` in seconds, from the probe's format section.

        Raises:
            ProbeFailedException: If ffprobe cannot read the file.
            NoDurationFoundException: If no positive duration is reported.
        """
        try:
            probe = ffmpeg.probe(str(capture), cmd=self.ffprobe_cmd)
        except ffmpeg.Error as e:
            stderr = e.stderr.decode("utf-8", errors="replace") if e.stderr else ""
            raise ProbeFailedException(f"Failed to probe '{capture}': {stderr.strip()}") from e
        except OSError as e:
            raise ProbeFailedException(f"Could not run {self.ffprobe_cmd}: {e}") from e

        duration_str = (probe.get("format") or {}).get("duration")
        duration = parse_duration(duration_str)
        if not 0 < duration < float("inf"):
            raise NoDurationFoundException(f"No duration found for '{capture}'.")
        logger.debug(f"Probed duration of {capture.name}: {duration}s")
        return duration

    def _run(self, stream, artifact: Path, step: str):
        logger.debug(f"Executing: {' '.join(stream.compile(cmd=self.ffmpeg_cmd))}")
        try:
            stream.run(cmd=self.ffmpeg_cmd, capture_stdout=True, capture_stderr=True)
        except ffmpeg.Error as e:
            stderr = e.stderr.decode("utf-8", errors="replace") if e.stderr else ""
            logger.debug(f"ffmpeg stderr ({step}): {stderr}")
            last_line = stderr.strip().splitlines()[-1] if stderr.strip() else "ffmpeg error"
            raise EncodeFailedException(f"{step} failed: {last_line}") from e
        except OSError as e:
            raise EncodeFailedException(f"Could not run {self.ffmpeg_cmd}: {e}") from e

        if not artifact.is_file() or artifact.stat().st_size == 0:
            raise EncodeFailedException(f"{step} produced no output at '{artifact}'.")

    def generate_palette(self, capture: Path, palette: Path, duration: float):
        """Writes the reduced color palette for `capture` to `palette`."""
        self._run(build_palette_stream(capture, palette, duration), palette, "Palette generation")

    def encode_gif(self, capture: Path, palette: Path, output: Path, duration: float):
        """Encodes `capture` into the GIF at `output` using `palette`."""
        self._run(build_gif_stream(capture, palette, output, duration), output, "GIF encode")
