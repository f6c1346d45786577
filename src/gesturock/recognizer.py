from __future__ import annotations

import asyncio
import logging
import os
import urllib.request
from typing import ClassVar, Protocol, TypeAlias

import cv2

from .mediapipe import (
    BaseOptions,
    HandLandmarker,
    HandLandmarkerOptions,
    HandLandmarkerResult,
    RunningMode,
    mp,
)
from .models.landmarks import HandFrame, Landmark

logger = logging.getLogger("gesturock.recognizer")

OpenCVImage: TypeAlias = cv2.typing.MatLike  # Type alias for images (numpy arrays)


class ModelLoadError(RuntimeError):
    """The hand landmarks backend could not be initialized."""


class FrameSource(Protocol):
    async def initialize(self) -> None: ...


class MediaPipeHandSource:
    """Hand landmarks frame source backed by MediaPipe's HandLandmarker."""

    model_url: ClassVar[str] = (
        "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"
    )

    def __init__(self, model_path: str, use_gpu: bool = False, mirroring: bool = False, num_hands: int = 1) -> None:
        self.model_path = model_path
        self.use_gpu = use_gpu
        self.mirroring = mirroring
        self.num_hands = num_hands
        self.landmarker: HandLandmarker | None = None
        self._last_timestamp_ms = -1

    async def initialize(self) -> None:
        """Load the model without blocking the event loop.

        Raises:
            ModelLoadError: If the model cannot be downloaded or the landmarker cannot be created
        """
        if self.landmarker is not None:
            return
        try:
            await asyncio.to_thread(self._load)
        except Exception as exc:
            raise ModelLoadError(f"Could not load hand landmarks model '{self.model_path}': {exc}") from exc

    def _load(self) -> None:
        self.check_model(self.model_path)
        self.landmarker = HandLandmarker.create_from_options(
            HandLandmarkerOptions(
                base_options=BaseOptions(
                    model_asset_path=self.model_path,
                    delegate=BaseOptions.Delegate.GPU if self.use_gpu else BaseOptions.Delegate.CPU,
                ),
                running_mode=RunningMode.VIDEO,
                num_hands=self.num_hands,
                min_hand_detection_confidence=0.5,
                min_hand_presence_confidence=0.5,
                min_tracking_confidence=0.5,
            )
        )
        logger.info(f"Hand landmarker loaded from '{self.model_path}' (gpu={self.use_gpu})")

    def check_model(self, model_path: str) -> None:
        # Check if model file exists
        if not os.path.exists(model_path):
            logger.info(f"Model file '{model_path}' not found. Downloading...")
            try:
                urllib.request.urlretrieve(self.model_url, model_path)
                logger.info(f"Successfully downloaded model to '{model_path}'")
            except Exception as exc:
                raise RuntimeError(f"Could not download model from {self.model_url}: {exc}") from exc

    @staticmethod
    def convert_image_from_opencv(frame: OpenCVImage) -> mp.Image:
        # Convert frame to RGB (opencv BGR not supported by MediaPipe)
        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        return mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

    def detect_from_opencv(self, frame: OpenCVImage, timestamp: float) -> HandFrame:
        return self.detect(self.convert_image_from_opencv(frame), timestamp)

    def detect(self, image: mp.Image, timestamp: float) -> HandFrame:
        """Detect hands in the image. `timestamp` is in seconds and must be monotonic."""
        if self.landmarker is None:
            raise RuntimeError("The hand landmarker is not initialized, call `initialize()` first")

        # MediaPipe refuses non increasing timestamps in VIDEO mode
        timestamp_ms = max(int(timestamp * 1000), self._last_timestamp_ms + 1)
        self._last_timestamp_ms = timestamp_ms

        result: HandLandmarkerResult = self.landmarker.detect_for_video(image, timestamp_ms)
        return self.convert_result(result, timestamp)

    def convert_result(self, result: HandLandmarkerResult, timestamp: float) -> HandFrame:
        return HandFrame(
            hands=[
                [Landmark.from_normalized(landmark, self.mirroring) for landmark in hand_landmarks]
                for hand_landmarks in (result.hand_landmarks or [])
            ],
            timestamp=timestamp,
        )

    def close(self) -> None:
        """Close the landmarker and release resources."""
        if self.landmarker:
            self.landmarker.close()
            self.landmarker = None

    def __enter__(self) -> MediaPipeHandSource:
        return self

    def __exit__(self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object) -> None:
        self.close()
