import signal
import subprocess

import pytest

import gifcap.utils.process_utils as process_utils
from gifcap.domain.capture import CancellationToken
from gifcap.utils.process_utils import cancel_on_interrupt, run_cmd, run_until_cancelled


class FakePopen:
    """A child process that keeps running until it receives SIGINT."""

    def __init__(self, cmd_list, exits_after_polls=None, cancel_token_after_polls=None, token=None):
        self.cmd_list = cmd_list
        self.pid = 4242
        self.returncode = None
        self.signals = []
        self.polls = 0
        self.exits_after_polls = exits_after_polls
        self.cancel_token_after_polls = cancel_token_after_polls
        self.token = token
        self.killed = False

    def wait(self, timeout=None):
        if self.returncode is not None:
            return self.returncode
        self.polls += 1
        if self.exits_after_polls is not None and self.polls >= self.exits_after_polls:
            self.returncode = 0
            return self.returncode
        if self.cancel_token_after_polls is not None and self.polls >= self.cancel_token_after_polls:
            self.token.cancel()
        raise subprocess.TimeoutExpired(self.cmd_list, timeout)

    def poll(self):
        return self.returncode

    def send_signal(self, signum):
        self.signals.append(signum)
        self.returncode = 130

    def kill(self):
        self.killed = True
        self.returncode = -9


def _install_fake_popen(monkeypatch, **kwargs):
    created = []

    def factory(cmd_list):
        process = FakePopen(cmd_list, **kwargs)
        created.append(process)
        return process

    monkeypatch.setattr(process_utils.subprocess, "Popen", factory)
    return created


def test_run_until_cancelled_forwards_interrupt(monkeypatch):
    token = CancellationToken()
    created = _install_fake_popen(monkeypatch, cancel_token_after_polls=3, token=token)

    returncode = run_until_cancelled(["adb", "shell", "screenrecord", "/sdcard/x.mp4"], token, poll_interval=0)

    assert returncode == 130
    assert created[0].signals == [signal.SIGINT]


def test_run_until_cancelled_returns_when_process_exits(monkeypatch):
    token = CancellationToken()
    created = _install_fake_popen(monkeypatch, exits_after_polls=2)

    assert run_until_cancelled(["adb", "shell", "screenrecord", "/sdcard/x.mp4"], token, poll_interval=0) == 0
    assert created[0].signals == []
    assert not token.is_cancelled


class SigintIgnoringPopen(FakePopen):
    """A child that traps SIGINT and never exits until killed."""

    def wait(self, timeout=None):
        if self.killed:
            return self.returncode
        self.polls += 1
        self.token.cancel()
        raise subprocess.TimeoutExpired(self.cmd_list, timeout)

    def send_signal(self, signum):
        self.signals.append(signum)


def test_run_until_cancelled_kills_child_that_ignores_interrupt(monkeypatch):
    token = CancellationToken()
    created = []

    def factory(cmd_list):
        process = SigintIgnoringPopen(cmd_list, token=token)
        created.append(process)
        return process

    monkeypatch.setattr(process_utils.subprocess, "Popen", factory)

    returncode = run_until_cancelled(
        ["adb", "shell", "screenrecord", "/sdcard/x.mp4"], token, poll_interval=0, stop_timeout=0,
    )

    assert returncode == -9
    assert created[0].signals == [signal.SIGINT]
    assert created[0].killed


class InterruptedPopen(FakePopen):
    """Raises KeyboardInterrupt from wait() until the child has been killed."""

    def wait(self, timeout=None):
        if self.killed:
            return self.returncode
        raise KeyboardInterrupt


def test_run_until_cancelled_kills_child_on_unexpected_error(monkeypatch):
    token = CancellationToken()
    created = []

    def factory(cmd_list):
        process = InterruptedPopen(cmd_list)
        created.append(process)
        return process

    monkeypatch.setattr(process_utils.subprocess, "Popen", factory)

    with pytest.raises(KeyboardInterrupt):
        run_until_cancelled(["adb", "shell", "screenrecord", "/sdcard/x.mp4"], token, poll_interval=0)

    assert created[0].killed


def test_cancel_on_interrupt_sets_token_and_restores_handler():
    token = CancellationToken()
    original = signal.getsignal(signal.SIGINT)

    with cancel_on_interrupt(token):
        assert signal.getsignal(signal.SIGINT) is not original
        signal.raise_signal(signal.SIGINT)
        assert token.is_cancelled

    assert signal.getsignal(signal.SIGINT) is original


def test_run_cmd_missing_executable_returns_none():
    assert run_cmd(["gifcap-definitely-not-installed-tool", "--version"]) is None


def test_run_cmd_empty_command():
    assert run_cmd([]) is None
