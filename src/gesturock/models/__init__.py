from .game import BEATS, GameResult, GameState, Score, Winner, determine_winner
from .landmarks import (
    HAND_CONNECTIONS,
    HAND_LANDMARKS_COUNT,
    FingerIndex,
    HandFrame,
    HandLandmark,
    HandLandmarks,
    Landmark,
)

__all__ = [
    "BEATS",
    "GameResult",
    "GameState",
    "Score",
    "Winner",
    "determine_winner",
    "HAND_CONNECTIONS",
    "HAND_LANDMARKS_COUNT",
    "FingerIndex",
    "HandFrame",
    "HandLandmark",
    "HandLandmarks",
    "Landmark",
]
