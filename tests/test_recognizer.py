"""
Tests for the MediaPipe frame source that need neither a camera nor the network
"""

import asyncio
from types import SimpleNamespace

import numpy as np
import pytest
from fake_hands import make_hand

from gesturock import recognizer
from gesturock.models.landmarks import Landmark
from gesturock.recognizer import MediaPipeHandSource, ModelLoadError


def black_frame():
    return np.zeros((48, 64, 3), dtype=np.uint8)


class TestInitialize:
    def test_load_failure(self, monkeypatch, tmp_path):
        def create_from_options(options):
            raise RuntimeError("Unable to open model")

        model_path = tmp_path / "hand_landmarker.task"
        model_path.write_bytes(b"not a model")
        monkeypatch.setattr(recognizer.HandLandmarker, "create_from_options", create_from_options)
        source = MediaPipeHandSource(str(model_path))

        with pytest.raises(ModelLoadError, match="Unable to open model"):
            asyncio.run(source.initialize())
        assert source.landmarker is None

    def test_download_failure(self, monkeypatch, tmp_path):
        def urlretrieve(url, filename):
            raise OSError("network unreachable")

        monkeypatch.setattr(recognizer.urllib.request, "urlretrieve", urlretrieve)
        source = MediaPipeHandSource(str(tmp_path / "missing.task"))

        with pytest.raises(ModelLoadError, match="network unreachable"):
            asyncio.run(source.initialize())
        assert source.landmarker is None

    def test_already_initialized(self, monkeypatch):
        def check_model(model_path):
            raise AssertionError("The model must not be loaded twice")

        source = MediaPipeHandSource("unused.task")
        source.landmarker = SimpleNamespace(close=lambda: None)
        monkeypatch.setattr(source, "check_model", check_model)

        asyncio.run(source.initialize())


class TestDetect:
    def test_detect_before_initialize(self):
        source = MediaPipeHandSource("unused.task")
        image = source.convert_image_from_opencv(black_frame())

        with pytest.raises(RuntimeError):
            source.detect(image, 0.0)

    def test_detect_from_opencv_before_initialize(self):
        with pytest.raises(RuntimeError):
            MediaPipeHandSource("unused.task").detect_from_opencv(black_frame(), 0.0)

    def test_timestamps_are_forced_increasing(self):
        calls = []

        def detect_for_video(image, timestamp_ms):
            calls.append(timestamp_ms)
            return SimpleNamespace(hand_landmarks=[])

        source = MediaPipeHandSource("unused.task")
        source.landmarker = SimpleNamespace(detect_for_video=detect_for_video, close=lambda: None)

        for timestamp in (0.5, 0.5, 0.2):
            frame = source.detect_from_opencv(black_frame(), timestamp)
            assert not frame

        assert calls == [500, 501, 502]


class TestConvertResult:
    def test_mirroring(self):
        hand = [SimpleNamespace(x=point.x, y=point.y, z=point.z) for point in make_hand(index=True)]
        result = SimpleNamespace(hand_landmarks=[hand])

        frame = MediaPipeHandSource("unused.task", mirroring=True).convert_result(result, 1.25)

        assert frame.timestamp == 1.25
        assert len(frame.landmarks) == 21
        assert frame.landmarks[0] == Landmark(1 - hand[0].x, hand[0].y, hand[0].z)

    def test_close(self):
        closed = []
        source = MediaPipeHandSource("unused.task")
        source.landmarker = SimpleNamespace(close=lambda: closed.append(True))

        with source:
            pass

        assert closed == [True]
        assert source.landmarker is None
