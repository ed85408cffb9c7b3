"""
Common configuration settings used throughout the application.

This module contains the constants shared by the CLI, the services and the
pipeline: logging format, executable names, capture defaults and orchestrator
state names. It also loads the optional user configuration file (YAML), which
can point to install directories of the external tools and override capture
defaults without modifying the source code.
"""
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger

# --- User-Defined Configuration ---
# An optional YAML file can provide tool locations and capture defaults.
# `GIFCAP_CONFIG` overrides the default location.

CONFIG_ENV_VAR = "GIFCAP_CONFIG"
DEFAULT_USER_CONFIG_PATH = Path.home() / ".config" / "gifcap" / "config.user.yaml"

# The environment variable adb itself reads to pick a target device.
DEVICE_SELECTOR_ENV_VAR = "ANDROID_SERIAL"


def get_user_config_path() -> Path:
    """Returns the user config path, honoring the `GIFCAP_CONFIG` override."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return DEFAULT_USER_CONFIG_PATH


def load_user_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Loads the user configuration file, if present.

    The file is expected to have up to two sections:

        paths:
          adb_dir: /opt/android/platform-tools
          ffmpeg_dir: /opt/ffmpeg/bin
        capture:
          settle_delay: 5
          remote_dir: /sdcard

    Args:
        config_path: Explicit file to read. Defaults to `get_user_config_path()`.

    Returns:
        A dictionary with the keys `adb_dir`, `ffmpeg_dir` (as `Path` or None),
        `settle_delay` (float or None) and `remote_dir` (str or None). A missing
        or unreadable file yields all-None values.
    """
    path = config_path or get_user_config_path()
    result: Dict[str, Any] = {
        "adb_dir": None,
        "ffmpeg_dir": None,
        "settle_delay": None,
        "remote_dir": None,
    }

    if not path.is_file():
        logger.debug(f"User config '{path}' not found. Relying on system PATH for executables.")
        return result

    try:
        with path.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}
        paths_config = user_config.get("paths") or {}
        capture_config = user_config.get("capture") or {}

        if paths_config.get("adb_dir"):
            result["adb_dir"] = Path(paths_config["adb_dir"]).expanduser()
        if paths_config.get("ffmpeg_dir"):
            result["ffmpeg_dir"] = Path(paths_config["ffmpeg_dir"]).expanduser()
        if capture_config.get("settle_delay") is not None:
            result["settle_delay"] = float(capture_config["settle_delay"])
        if capture_config.get("remote_dir"):
            result["remote_dir"] = str(capture_config["remote_dir"])
    except (OSError, yaml.YAMLError, AttributeError, TypeError, ValueError) as e:
        logger.warning(f"Could not load or parse '{path}': {e}")

    return result


# --- Logging Configuration ---

# The format string for the Loguru logger.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"]


# --- External Tools ---

ADB_EXECUTABLE = "adb"
FFMPEG_EXECUTABLE = "ffmpeg"
FFPROBE_EXECUTABLE = "ffprobe"


# --- Capture Defaults ---

DEFAULT_OUTPUT = "output.gif"

# Where `screenrecord` writes on the device before the file is pulled.
DEFAULT_REMOTE_DIR = "/sdcard"

# The device needs a moment to finish writing the video after recording stops.
# Empirical value; there is no polling for the file to become complete.
DEFAULT_SETTLE_DELAY = 5.0

# Prefix of the scoped working directory created in the invocation directory.
WORKDIR_PREFIX = "gifcap."

# How often the capture wrapper checks the cancellation token (seconds).
CAPTURE_POLL_INTERVAL = 0.2

# How long an interrupted recording may take to exit before it is killed.
# screenrecord finalizes the file on SIGINT, which normally takes well under this.
CAPTURE_STOP_TIMEOUT = 10.0

# Header printed by `adb devices` before the device list.
ADB_DEVICES_HEADER = "List of devices attached"


# --- Orchestrator States ---

STATE_IDLE = "idle"
STATE_RECORDING = "recording"
STATE_STOPPING = "stopping"
STATE_CONVERTING = "converting"
STATE_DONE = "done"
