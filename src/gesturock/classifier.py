"""Geometric rock/paper/scissors classifier working on a single hand pose."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, NamedTuple

import numpy as np

from .gestures import Gesture
from .models.landmarks import FingerIndex, HandFrame, HandLandmark, Landmark, check_hand_landmarks

# A finger is open when its tip is farther from the wrist than this ratio of its PIP distance.
# The margin keeps barely bent fingers from flickering between open and closed.
OPEN_FINGER_RATIO = 1.1

# (tip, pip) landmarks for each finger taken into account. The thumb is ignored.
FINGERS_TIP_AND_PIP: dict[FingerIndex, tuple[HandLandmark, HandLandmark]] = {
    FingerIndex.INDEX: (HandLandmark.INDEX_FINGER_TIP, HandLandmark.INDEX_FINGER_PIP),
    FingerIndex.MIDDLE: (HandLandmark.MIDDLE_FINGER_TIP, HandLandmark.MIDDLE_FINGER_PIP),
    FingerIndex.RING: (HandLandmark.RING_FINGER_TIP, HandLandmark.RING_FINGER_PIP),
    FingerIndex.PINKY: (HandLandmark.PINKY_TIP, HandLandmark.PINKY_PIP),
}

_TIPS = [int(tip) for tip, _ in FINGERS_TIP_AND_PIP.values()]
_PIPS = [int(pip) for _, pip in FINGERS_TIP_AND_PIP.values()]


class FingersState(NamedTuple):
    """Open (True) or closed (False) state of the four non-thumb fingers."""

    index: bool
    middle: bool
    ring: bool
    pinky: bool

    @property
    def all_open(self) -> bool:
        return all(self)

    @property
    def all_closed(self) -> bool:
        return not any(self)


def fingers_state(landmarks: Sequence[Landmark], open_ratio: float = OPEN_FINGER_RATIO) -> FingersState:
    """Compute which fingers are open, using only the x,y plane."""
    check_hand_landmarks(landmarks)

    points = np.array([(landmark.x, landmark.y) for landmark in landmarks], dtype=float)
    wrist = points[int(HandLandmark.WRIST)]
    tips_distances = np.linalg.norm(points[_TIPS] - wrist, axis=1)
    pips_distances = np.linalg.norm(points[_PIPS] - wrist, axis=1)
    is_open = tips_distances > pips_distances * open_ratio

    return FingersState(*(bool(value) for value in is_open))


def classify(landmarks: Sequence[Landmark], open_ratio: float = OPEN_FINGER_RATIO) -> Gesture:
    """Classify a 21 landmarks hand pose as ROCK, PAPER, SCISSORS or UNKNOWN.

    Args:
        landmarks: The hand pose, indexed as `HandLandmark`
        open_ratio: Minimum tip/PIP distance ratio (from the wrist) for a finger to be open

    Raises:
        ValueError: If `landmarks` does not contain exactly 21 points
    """
    state = fingers_state(landmarks, open_ratio)

    if state.all_closed:
        return Gesture.ROCK
    if state.all_open:
        return Gesture.PAPER
    if state == (True, True, False, False):
        return Gesture.SCISSORS
    return Gesture.UNKNOWN


@dataclass(frozen=True)
class GestureResult:
    gesture: Gesture
    landmarks: list[Landmark] = field(default_factory=list)  # Passed through for display

    def to_dict(self) -> dict[str, Any]:
        return {
            "gesture": self.gesture.value,
            "landmarks": [landmark.to_dict() for landmark in self.landmarks],
        }


def classify_frame(frame: HandFrame, open_ratio: float = OPEN_FINGER_RATIO) -> GestureResult:
    """Classify the first hand of a frame, or return NONE without any geometry if there is no hand."""
    if (landmarks := frame.landmarks) is None:
        return GestureResult(gesture=Gesture.NONE)
    return GestureResult(gesture=classify(landmarks, open_ratio), landmarks=list(landmarks))
