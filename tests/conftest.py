from pathlib import Path

import pytest

from gifcap.domain.capture import CaptureConfig
from gifcap.domain.exceptions import PullFailedException


class FakeBridge:
    """Stands in for DeviceBridge; records every call instead of running adb."""

    def __init__(self, devices=("emulator-5554",), record_returncode=130, interrupt=True,
                 pull_error=None):
        self.devices = list(devices)
        self.record_returncode = record_returncode
        self.interrupt = interrupt
        self.pull_error = pull_error
        self.calls = []

    def list_devices(self):
        self.calls.append(("devices",))
        return list(self.devices)

    def screenrecord(self, remote_path, token):
        self.calls.append(("screenrecord", remote_path))
        if self.interrupt:
            token.cancel()
        return self.record_returncode

    def pull(self, remote_path, local_path):
        self.calls.append(("pull", remote_path, Path(local_path)))
        if self.pull_error:
            raise PullFailedException(self.pull_error)
        Path(local_path).write_bytes(b"\x00\x00\x00\x18ftypmp42")

    def remove(self, remote_path):
        self.calls.append(("rm", remote_path))
        return True

    def call_names(self):
        return [call[0] for call in self.calls]


class FakeTranscoder:
    """Stands in for GifTranscoder; writes small placeholder artifacts."""

    def __init__(self, duration=3.5, encode_error=None):
        self.duration = duration
        self.encode_error = encode_error
        self.calls = []

    def probe_duration(self, capture):
        self.calls.append(("probe", Path(capture)))
        return self.duration

    def generate_palette(self, capture, palette, duration):
        self.calls.append(("palette", Path(capture), Path(palette), duration))
        Path(palette).write_bytes(b"\x89PNG")

    def encode_gif(self, capture, palette, output, duration):
        self.calls.append(("encode", Path(capture), Path(palette), Path(output), duration))
        if self.encode_error:
            raise self.encode_error
        Path(output).write_bytes(b"GIF89a")


@pytest.fixture
def config(tmp_path):
    return CaptureConfig(
        output=tmp_path / "demo.gif",
        settle_delay=0,
        work_parent=tmp_path,
    )


@pytest.fixture
def fake_bridge():
    return FakeBridge()


@pytest.fixture
def fake_transcoder():
    return FakeTranscoder()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the developer's adb target and config file out of the tests."""
    monkeypatch.delenv("ANDROID_SERIAL", raising=False)
    monkeypatch.setenv("GIFCAP_CONFIG", str(tmp_path / "no-such-config.yaml"))
