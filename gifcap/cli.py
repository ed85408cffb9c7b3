"""
Command-Line Interface (CLI) setup for gifcap.

This module uses Python's `argparse` to define and parse the command-line
arguments, and turns them into the `CaptureConfig` used by the pipeline.
Parsing is lenient: unrecognized options are ignored rather than rejected.
"""
import argparse
import os
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .config.common import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUTPUT,
    DEFAULT_REMOTE_DIR,
    DEFAULT_SETTLE_DELAY,
    DEVICE_SELECTOR_ENV_VAR,
    LOG_LEVELS,
    load_user_config,
)
from .domain.capture import CaptureConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gifcap",
        usage="gifcap [options...] [output]",
        description="Record video from an Android device and make a gif out of it.",
        epilog="Recording starts immediately; press CTRL+C to stop it and convert.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "output", nargs="?", default=None,
        help=f"the output filename; defaults to {DEFAULT_OUTPUT}",
    )
    parser.add_argument(
        "-s", dest="selector", metavar="<specific device>", default=None,
        help=(
            "directs command to the device with the given serial number or qualifier. "
            f"Overrides {DEVICE_SELECTOR_ENV_VAR} env variable."
        ),
    )
    parser.add_argument(
        "--settle-delay", type=float, default=None, metavar="SECONDS",
        help=f"seconds to wait for the device to finish writing the video (default: {DEFAULT_SETTLE_DELAY:g})",
    )
    parser.add_argument(
        "--remote-dir", type=str, default=None,
        help=f"directory on the device used for the recording (default: {DEFAULT_REMOTE_DIR})",
    )
    parser.add_argument(
        "--temp-work-dir", type=str, default=None,
        help="directory in which the temporary working directory is created (default: current directory)",
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="path to a user config YAML file",
    )
    parser.add_argument(
        "--log-level", type=str, default=DEFAULT_LOG_LEVEL, choices=LOG_LEVELS,
        help="set the logging level",
    )
    return parser


def get_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments.

    `-h`/`--help` prints the usage text and exits with status 0 (argparse's
    own behavior). Unknown options are ignored.

    Returns:
        argparse.Namespace: The parsed arguments.
    """
    parser = build_parser()
    args, unknown = parser.parse_known_args(argv)
    if unknown:
        logger.debug(f"Ignoring unrecognized arguments: {unknown}")

    if args.settle_delay is not None and args.settle_delay < 0:
        parser.error("--settle-delay cannot be negative")

    return args


def build_config(args: argparse.Namespace) -> CaptureConfig:
    """
    Builds the run configuration. CLI flags win over the user config file,
    which wins over the built-in defaults. Without `-s`, the selector falls
    back to the `ANDROID_SERIAL` environment variable.
    """
    user_config = load_user_config(Path(args.config).expanduser() if args.config else None)

    selector = args.selector or os.environ.get(DEVICE_SELECTOR_ENV_VAR) or None

    settle_delay = args.settle_delay
    if settle_delay is None:
        settle_delay = user_config["settle_delay"]
    if settle_delay is None or settle_delay < 0:
        settle_delay = DEFAULT_SETTLE_DELAY

    return CaptureConfig(
        selector=selector,
        output=Path(args.output or DEFAULT_OUTPUT),
        settle_delay=settle_delay,
        remote_dir=args.remote_dir or user_config["remote_dir"] or DEFAULT_REMOTE_DIR,
        work_parent=Path(args.temp_work_dir).expanduser() if args.temp_work_dir else None,
        adb_dir=user_config["adb_dir"],
        ffmpeg_dir=user_config["ffmpeg_dir"],
        log_level=args.log_level,
    )
