from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Any, NamedTuple, TypeAlias

if TYPE_CHECKING:
    from ..mediapipe import NormalizedLandmark

HAND_LANDMARKS_COUNT = 21


class HandLandmark(IntEnum):
    """MediaPipe hand landmark indices."""

    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_FINGER_MCP = 5
    INDEX_FINGER_PIP = 6
    INDEX_FINGER_DIP = 7
    INDEX_FINGER_TIP = 8
    MIDDLE_FINGER_MCP = 9
    MIDDLE_FINGER_PIP = 10
    MIDDLE_FINGER_DIP = 11
    MIDDLE_FINGER_TIP = 12
    RING_FINGER_MCP = 13
    RING_FINGER_PIP = 14
    RING_FINGER_DIP = 15
    RING_FINGER_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


class FingerIndex(IntEnum):
    """Finger index constants for easier reference."""

    THUMB = 0
    INDEX = 1
    MIDDLE = 2
    RING = 3
    PINKY = 4


# Bones drawn between landmarks, per finger, starting from the wrist
HAND_CONNECTIONS: list[tuple[HandLandmark, HandLandmark]] = [
    (HandLandmark.WRIST, HandLandmark.THUMB_CMC),
    (HandLandmark.THUMB_CMC, HandLandmark.THUMB_MCP),
    (HandLandmark.THUMB_MCP, HandLandmark.THUMB_IP),
    (HandLandmark.THUMB_IP, HandLandmark.THUMB_TIP),
    (HandLandmark.WRIST, HandLandmark.INDEX_FINGER_MCP),
    (HandLandmark.INDEX_FINGER_MCP, HandLandmark.INDEX_FINGER_PIP),
    (HandLandmark.INDEX_FINGER_PIP, HandLandmark.INDEX_FINGER_DIP),
    (HandLandmark.INDEX_FINGER_DIP, HandLandmark.INDEX_FINGER_TIP),
    (HandLandmark.INDEX_FINGER_MCP, HandLandmark.MIDDLE_FINGER_MCP),
    (HandLandmark.MIDDLE_FINGER_MCP, HandLandmark.MIDDLE_FINGER_PIP),
    (HandLandmark.MIDDLE_FINGER_PIP, HandLandmark.MIDDLE_FINGER_DIP),
    (HandLandmark.MIDDLE_FINGER_DIP, HandLandmark.MIDDLE_FINGER_TIP),
    (HandLandmark.MIDDLE_FINGER_MCP, HandLandmark.RING_FINGER_MCP),
    (HandLandmark.RING_FINGER_MCP, HandLandmark.RING_FINGER_PIP),
    (HandLandmark.RING_FINGER_PIP, HandLandmark.RING_FINGER_DIP),
    (HandLandmark.RING_FINGER_DIP, HandLandmark.RING_FINGER_TIP),
    (HandLandmark.RING_FINGER_MCP, HandLandmark.PINKY_MCP),
    (HandLandmark.WRIST, HandLandmark.PINKY_MCP),
    (HandLandmark.PINKY_MCP, HandLandmark.PINKY_PIP),
    (HandLandmark.PINKY_PIP, HandLandmark.PINKY_DIP),
    (HandLandmark.PINKY_DIP, HandLandmark.PINKY_TIP),
]


class Landmark(NamedTuple):
    """A hand joint in normalized frame coordinates.

    Attributes:
        x: X coordinate (0 to 1, relative to frame width)  => also accessible via `landmark[0]`
        y: Y coordinate (0 to 1, relative to frame height)  => also accessible via `landmark[1]`
        z: Depth relative to the wrist, not used for classification
    """

    x: float
    y: float
    z: float = 0.0

    @classmethod
    def from_normalized(cls, normalized_landmark: NormalizedLandmark, mirroring: bool = False) -> Landmark:
        """Create a Landmark from a MediaPipe normalized landmark.

        Args:
            normalized_landmark: MediaPipe landmark with normalized coordinates
            mirroring: Whether to mirror the X coordinate (when the output is displayed flipped)
        """
        return cls(
            x=normalized_landmark.x if not mirroring else 1 - normalized_landmark.x,
            y=normalized_landmark.y,
            z=normalized_landmark.z,
        )

    def to_pixels(self, width: int, height: int) -> tuple[int, int]:
        """Get the (x, y) coordinates in pixels for an image of the given size."""
        return int(round(self.x * width)), int(round(self.y * height))

    def to_dict(self) -> dict[str, Any]:
        return {"x": self.x, "y": self.y, "z": self.z}


HandLandmarks: TypeAlias = list[Landmark]


@dataclass(frozen=True)
class HandFrame:
    """One delivery of the frame source: zero or more detected hands at a given time.

    Only the first hand is ever used by the game, the others are kept for display.
    """

    hands: list[HandLandmarks] = field(default_factory=list)
    timestamp: float = 0.0  # Monotonic, in seconds

    def __post_init__(self) -> None:
        for hand in self.hands:
            check_hand_landmarks(hand)

    @property
    def landmarks(self) -> HandLandmarks | None:
        """Landmarks of the first reported hand, or None if no hand was detected."""
        return self.hands[0] if self.hands else None

    def __bool__(self) -> bool:
        """Check if at least one hand was detected."""
        return len(self.hands) > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "hands": [[landmark.to_dict() for landmark in hand] for hand in self.hands],
        }


def check_hand_landmarks(landmarks: Sequence[Landmark]) -> None:
    """Raise a ValueError if the landmarks do not describe a full hand pose."""
    if len(landmarks) != HAND_LANDMARKS_COUNT:
        raise ValueError(f"A hand pose needs exactly {HAND_LANDMARKS_COUNT} landmarks, got {len(landmarks)}")
