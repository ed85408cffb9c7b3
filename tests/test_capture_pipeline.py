import pytest

import gifcap.domain.temp_models as temp_models
from gifcap.config.common import (
    STATE_CONVERTING,
    STATE_DONE,
    STATE_IDLE,
    STATE_RECORDING,
    STATE_STOPPING,
)
from gifcap.domain.capture import CancellationToken
from gifcap.domain.exceptions import (
    CaptureFailedException,
    EncodeFailedException,
    NoDeviceAttachedException,
    PullFailedException,
)
from gifcap.pipeline.capture_pipeline import CaptureOrchestrator

from .conftest import FakeBridge, FakeTranscoder


def _orchestrator(config, bridge, transcoder, sleeps=None):
    return CaptureOrchestrator(
        config,
        bridge=bridge,
        transcoder=transcoder,
        sleep=(sleeps.append if sleeps is not None else lambda seconds: None),
        install_signal_handler=False,
    )


def test_end_to_end_interrupted_capture(config, tmp_path):
    bridge = FakeBridge(record_returncode=130)
    transcoder = FakeTranscoder(duration=7.0)
    orchestrator = _orchestrator(config, bridge, transcoder)

    output = orchestrator.run()

    assert output == tmp_path / "demo.gif"
    assert output.is_file()
    assert not orchestrator.work_dir.path.exists()
    assert orchestrator.work_dir.path.parent == tmp_path
    assert list(tmp_path.glob("gifcap.*")) == []
    assert orchestrator.state == STATE_DONE
    assert orchestrator.state_history == [
        STATE_IDLE, STATE_RECORDING, STATE_STOPPING, STATE_CONVERTING, STATE_DONE,
    ]
    assert bridge.call_names() == ["devices", "screenrecord", "pull", "rm"]


def test_artifacts_follow_naming_and_remote_path(config):
    bridge = FakeBridge()
    transcoder = FakeTranscoder(duration=2.0)

    _orchestrator(config, bridge, transcoder).run()

    _, remote_path = bridge.calls[1]
    _, pulled_remote, local_capture = bridge.calls[2]
    assert remote_path == pulled_remote == f"/sdcard/{local_capture.name}"
    assert local_capture.name.startswith("screencap.")
    assert local_capture.suffix == ".mp4"
    assert bridge.calls[3] == ("rm", remote_path)

    probe, palette, encode = transcoder.calls
    assert probe == ("probe", local_capture)
    assert palette[1] == local_capture
    assert palette[2].name.startswith("palette.") and palette[2].suffix == ".png"
    assert palette[3] == 2.0
    assert encode == ("encode", local_capture, palette[2], config.output, 2.0)


def test_settle_delay_before_pull(config):
    config.settle_delay = 5.0
    sleeps = []

    _orchestrator(config, FakeBridge(), FakeTranscoder(), sleeps=sleeps).run()

    assert sleeps == [5.0]


def test_no_device_fails_before_capture(config, tmp_path):
    bridge = FakeBridge(devices=())
    transcoder = FakeTranscoder()

    with pytest.raises(NoDeviceAttachedException):
        _orchestrator(config, bridge, transcoder).run()

    assert bridge.call_names() == ["devices"]
    assert transcoder.calls == []
    assert list(tmp_path.glob("gifcap.*")) == []


def test_interrupt_exit_status_is_not_an_error(config):
    orchestrator = _orchestrator(config, FakeBridge(record_returncode=255), FakeTranscoder())

    orchestrator.run()

    assert orchestrator.token.is_cancelled
    assert orchestrator.state == STATE_DONE


def test_recording_ended_by_device_continues(config):
    bridge = FakeBridge(record_returncode=0, interrupt=False)

    orchestrator = _orchestrator(config, bridge, FakeTranscoder())
    orchestrator.run()

    assert orchestrator.state == STATE_DONE


def test_recording_failure_without_interrupt(config):
    bridge = FakeBridge(record_returncode=1, interrupt=False)
    orchestrator = _orchestrator(config, bridge, FakeTranscoder())

    with pytest.raises(CaptureFailedException):
        orchestrator.run()

    assert "pull" not in bridge.call_names()
    assert not orchestrator.work_dir.path.exists()


def test_pull_failure_cleans_up_and_writes_nothing(config):
    bridge = FakeBridge(pull_error="remote object does not exist")
    transcoder = FakeTranscoder()
    orchestrator = _orchestrator(config, bridge, transcoder)

    with pytest.raises(PullFailedException):
        orchestrator.run()

    assert transcoder.calls == []
    assert not orchestrator.work_dir.path.exists()
    assert not config.output.exists()
    assert orchestrator.state == STATE_STOPPING


def test_encode_failure_cleans_up(config):
    transcoder = FakeTranscoder(encode_error=EncodeFailedException("GIF encode failed"))
    orchestrator = _orchestrator(config, FakeBridge(), transcoder)

    with pytest.raises(EncodeFailedException):
        orchestrator.run()

    assert not orchestrator.work_dir.path.exists()
    assert not config.output.exists()
    assert orchestrator.state == STATE_CONVERTING


def test_working_directory_removed_exactly_once(config, monkeypatch):
    removed = []
    real_rmtree = temp_models.shutil.rmtree

    def counting_rmtree(path, *args, **kwargs):
        removed.append(path)
        real_rmtree(path, *args, **kwargs)

    monkeypatch.setattr(temp_models.shutil, "rmtree", counting_rmtree)

    orchestrator = _orchestrator(config, FakeBridge(), FakeTranscoder())
    orchestrator.run()

    assert removed == [orchestrator.work_dir.path]


def test_signal_handler_stops_recording(config):
    import signal

    class SignalledBridge(FakeBridge):
        def screenrecord(self, remote_path, token):
            self.calls.append(("screenrecord", remote_path))
            signal.raise_signal(signal.SIGINT)
            return 130

    original = signal.getsignal(signal.SIGINT)
    token = CancellationToken()
    orchestrator = CaptureOrchestrator(
        config,
        bridge=SignalledBridge(interrupt=False),
        transcoder=FakeTranscoder(),
        token=token,
        sleep=lambda seconds: None,
    )

    orchestrator.run()

    assert token.is_cancelled
    assert orchestrator.state == STATE_DONE
    assert signal.getsignal(signal.SIGINT) is original
