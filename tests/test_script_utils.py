"""Resource cleanup of the frame loop, with the camera and tracker faked."""

import pytest

from handsynth.config import Cfg

script_utils = pytest.importorskip('handsynth.script_utils')


class FakeTracker:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


class FakeCapture:
    def __init__(self):
        self.released = False

    def isOpened(self):
        return True

    def release(self):
        self.released = True


@pytest.fixture
def tracker(monkeypatch):
    tracker = FakeTracker()
    monkeypatch.setattr(
        script_utils.HandTracker, 'from_config', staticmethod(lambda config: tracker)
    )
    monkeypatch.setattr(script_utils.cv2, 'destroyAllWindows', lambda: None)
    return tracker


def test_tracker_is_closed_when_the_camera_fails_to_open(tracker, monkeypatch):
    def open_camera(config):
        raise script_utils.CameraReadError("Failed to open camera 0")

    monkeypatch.setattr(script_utils, 'open_camera', open_camera)

    with pytest.raises(script_utils.CameraReadError):
        script_utils.run_handsynth(config=Cfg())
    assert tracker.closed


def test_tracker_and_camera_are_released_when_the_sound_file_is_missing(
    tracker, monkeypatch, tmp_path
):
    cap = FakeCapture()
    monkeypatch.setattr(script_utils, 'open_camera', lambda config: cap)

    with pytest.raises(FileNotFoundError):
        script_utils.run_handsynth(
            config=Cfg(), sound_file=str(tmp_path / 'missing.wav')
        )
    assert tracker.closed
    assert cap.released
