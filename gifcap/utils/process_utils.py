"""
This module provides helpers for running the external tools.

`run_cmd` wraps `subprocess.run` for short commands whose output is needed.
`run_until_cancelled` runs a long blocking command (the screen recording) that
is stopped through a `CancellationToken`, and `cancel_on_interrupt` connects
SIGINT to such a token for the duration of a `with` block.
"""
import shlex
import signal
import subprocess
from contextlib import contextmanager
from typing import Iterator, List, Optional

from loguru import logger

from ..config.common import CAPTURE_POLL_INTERVAL, CAPTURE_STOP_TIMEOUT
from ..domain.capture import CancellationToken


def format_cmd(cmd_list: List[str]) -> str:
    """Returns a shell-quoted, display-friendly version of a command list."""
    return shlex.join(cmd_list)


def run_cmd(cmd_list: List[str], show_cmd: bool = True) -> Optional[subprocess.CompletedProcess]:
    """
    Executes an external command and captures its output.

    Args:
        cmd_list: The command to execute as a list of arguments (never a shell string).
        show_cmd: If True, the command is logged at DEBUG level before execution.

    Returns:
        A `subprocess.CompletedProcess` with the return code, stdout and stderr.
        Returns `None` if the command could not be started at all (e.g. the
        executable is missing).
    """
    if not cmd_list:
        logger.error("run_cmd received an empty command list.")
        return None

    display_cmd_str = format_cmd(cmd_list)
    if show_cmd:
        logger.debug(f"Executing: {display_cmd_str}")

    try:
        result = subprocess.run(
            cmd_list,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            shell=False,
        )
    except FileNotFoundError:
        logger.error(
            f"Error: Command not found ('{cmd_list[0]}'). Ensure it's in your system's PATH or configured correctly."
        )
        return None
    except OSError as e:
        logger.error(f"Could not start command '{display_cmd_str}': {e}")
        return None

    if result.stdout:
        logger.trace(f"Command stdout: {result.stdout[:500]}")
    if result.stderr and result.returncode != 0:
        logger.debug(f"Command stderr (error, rc={result.returncode}): {result.stderr}")
    elif result.stderr:
        logger.trace(f"Command stderr (non-error, rc={result.returncode}): {result.stderr}")

    return result


def run_until_cancelled(
    cmd_list: List[str],
    token: CancellationToken,
    poll_interval: float = CAPTURE_POLL_INTERVAL,
    stop_timeout: float = CAPTURE_STOP_TIMEOUT,
) -> int:
    """
    Runs a blocking command until it exits or `token` is cancelled.

    The command inherits the terminal, so its own output stays visible. Once
    the token is cancelled, the child gets SIGINT if it is still running
    (terminal interrupts usually reach it directly already) and the wrapper
    waits up to `stop_timeout` seconds for it to exit before killing it.

    Args:
        cmd_list: The command to execute.
        token: Cancellation token polled while the command runs.
        poll_interval: Seconds between checks of the token.
        stop_timeout: Seconds a cancelled command gets to exit on its own.

    Returns:
        The command's exit status. It is returned as-is even when non-zero;
        interpreting it is up to the caller.

    Raises:
        FileNotFoundError / OSError: If the command cannot be started.
    """
    logger.debug(f"Executing (interruptible): {format_cmd(cmd_list)}")
    process = subprocess.Popen(cmd_list)
    try:
        while True:
            try:
                return process.wait(timeout=poll_interval)
            except subprocess.TimeoutExpired:
                if token.is_cancelled:
                    break

        if process.poll() is None:
            logger.debug(f"Forwarding interrupt to pid {process.pid}")
            process.send_signal(signal.SIGINT)
        try:
            return process.wait(timeout=stop_timeout)
        except subprocess.TimeoutExpired:
            logger.warning(f"Recording did not stop within {stop_timeout:g}s; killing it.")
            process.kill()
            return process.wait()
    except BaseException:
        if process.poll() is None:
            process.kill()
            process.wait()
        raise


@contextmanager
def cancel_on_interrupt(token: CancellationToken) -> Iterator[CancellationToken]:
    """
    Translates SIGINT into `token.cancel()` inside the `with` block.

    The previous handler is restored on exit, so an interrupt outside the
    block behaves normally (raises `KeyboardInterrupt`).
    """

    def _handler(signum, frame):
        token.cancel()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)
