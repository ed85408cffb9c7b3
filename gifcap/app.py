"""
Application entry point for gifcap.

Configures logging, parses the command line, checks the external tools and
runs the capture pipeline. This is the only place where exceptions are turned
into an exit status.
"""
import sys
from typing import List, Optional

from loguru import logger

from .cli import build_config, get_args
from .config.common import DEFAULT_LOG_LEVEL, LOGGER_FORMAT
from .domain.exceptions import GifcapException
from .pipeline.capture_pipeline import CaptureOrchestrator
from .utils.prerequisites import Modules

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def configure_logger(level: str = DEFAULT_LOG_LEVEL):
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOGGER_FORMAT)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Runs gifcap and returns the process exit status.

    1. Parses command-line arguments (`-h` exits here with status 0).
    2. Re-configures the logger with the requested level.
    3. Verifies that adb, ffmpeg and ffprobe are available.
    4. Runs the capture pipeline.

    Returns:
        0 on success, 1 on any failure (including an abort by a second CTRL+C).
    """
    configure_logger()
    args = get_args(argv)
    configure_logger(args.log_level)

    config = build_config(args)
    logger.debug(f"Configuration: {config!r}")

    try:
        Modules.check_prerequisites(config)
        orchestrator = CaptureOrchestrator(config)
        output = orchestrator.run()
    except GifcapException as e:
        logger.error(str(e))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.error("Aborted.")
        return EXIT_FAILURE

    logger.success(f"gifcap finished: {output}")
    return EXIT_SUCCESS
