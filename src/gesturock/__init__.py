"""Rock/paper/scissors against the computer, played with hand gestures seen by a camera."""

from .classifier import OPEN_FINGER_RATIO, GestureResult, classify, classify_frame
from .commentary import CommentaryBackend, CommentaryError, GeminiCommentator, fallback_commentary
from .config import Config
from .game import GameController, GameNotReadyError
from .gestures import PLAYABLE_GESTURES, Gesture
from .models import GameResult, GameState, HandFrame, Landmark, Score, Winner, determine_winner
from .recognizer import FrameSource, MediaPipeHandSource, ModelLoadError

__all__ = [
    # Core classes
    "GameController",
    "MediaPipeHandSource",
    "GeminiCommentator",
    # Classification
    "classify",
    "classify_frame",
    "GestureResult",
    "OPEN_FINGER_RATIO",
    # Models
    "Gesture",
    "PLAYABLE_GESTURES",
    "GameState",
    "GameResult",
    "Score",
    "Winner",
    "determine_winner",
    "HandFrame",
    "Landmark",
    # Collaborators
    "FrameSource",
    "CommentaryBackend",
    "fallback_commentary",
    # Errors
    "CommentaryError",
    "GameNotReadyError",
    "ModelLoadError",
    # Configuration
    "Config",
]
