import mediapipe as mp  # type: ignore[import-untyped]
from mediapipe.tasks.python import BaseOptions  # type: ignore[import-untyped]
from mediapipe.tasks.python.vision import (  # type: ignore[import-untyped]
    HandLandmarker,
    HandLandmarkerOptions,
    HandLandmarkerResult,
    RunningMode,
)

from mediapipe.tasks.python.components.containers import (  # type: ignore[import-untyped] # isort: skip
    NormalizedLandmark,
)

__all__ = [
    "BaseOptions",
    "HandLandmarker",
    "HandLandmarkerOptions",
    "HandLandmarkerResult",
    "RunningMode",
    "NormalizedLandmark",
    "mp",
]
