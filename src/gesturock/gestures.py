from __future__ import annotations

from enum import Enum


class Gesture(str, Enum):
    # Real moves
    ROCK = "Rock"
    PAPER = "Paper"
    SCISSORS = "Scissors"
    # Detection gaps
    UNKNOWN = "Unknown"  # Hand visible but finger configuration not recognized
    NONE = "None"  # No hand visible

    @property
    def is_playable(self) -> bool:
        """Check if the gesture is a real rock/paper/scissors move."""
        return self in PLAYABLE_GESTURES

    @property
    def label(self) -> str:
        """Localized name of the gesture."""
        return GESTURE_LABELS[self]

    @property
    def emoji(self) -> str:
        return GESTURE_EMOJIS[self]


PLAYABLE_GESTURES: tuple[Gesture, ...] = (Gesture.ROCK, Gesture.PAPER, Gesture.SCISSORS)

GESTURE_EMOJIS: dict[Gesture, str] = {
    Gesture.ROCK: "✊",
    Gesture.PAPER: "✋",
    Gesture.SCISSORS: "✌️",
    Gesture.UNKNOWN: "❓",
    Gesture.NONE: "",
}

GESTURE_LABELS: dict[Gesture, str] = {
    Gesture.ROCK: "Piedra",
    Gesture.PAPER: "Papel",
    Gesture.SCISSORS: "Tijera",
    Gesture.UNKNOWN: "Desconocido",
    Gesture.NONE: "Ninguno",
}
