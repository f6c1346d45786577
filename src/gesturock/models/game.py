from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..gestures import Gesture


class GameState(str, Enum):
    LOADING_MODEL = "loading_model"
    IDLE = "idle"
    COUNTDOWN = "countdown"
    DETECTING = "detecting"  # Reserved, never entered
    RESULT = "result"


class Winner(str, Enum):
    USER = "user"
    CPU = "cpu"
    DRAW = "draw"

    def __str__(self) -> str:
        return self.value


# Each move beats exactly one other move
BEATS: dict[Gesture, Gesture] = {
    Gesture.ROCK: Gesture.SCISSORS,
    Gesture.PAPER: Gesture.ROCK,
    Gesture.SCISSORS: Gesture.PAPER,
}


def determine_winner(user_move: Gesture, cpu_move: Gesture) -> Winner:
    """Resolve a rock/paper/scissors turn between two real moves."""
    for move in (user_move, cpu_move):
        if not move.is_playable:
            raise ValueError(f"{move.name} is not a playable move")

    if user_move == cpu_move:
        return Winner.DRAW
    if BEATS[user_move] == cpu_move:
        return Winner.USER
    return Winner.CPU


@dataclass(frozen=True)
class GameResult:
    user_move: Gesture
    cpu_move: Gesture
    winner: Winner
    message: str | None = None
    turn: int = 0  # Sequence number of the turn that produced this result

    @property
    def is_forfeit(self) -> bool:
        """Check if the user lost because no valid gesture was captured."""
        return not self.user_move.is_playable

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_move": self.user_move.value,
            "cpu_move": self.cpu_move.value,
            "winner": self.winner.value,
            "message": self.message,
            "turn": self.turn,
        }


@dataclass
class Score:
    user: int = 0
    cpu: int = 0

    def record(self, winner: Winner) -> None:
        """Credit the winning side. A draw leaves both counters unchanged."""
        if winner == Winner.USER:
            self.user += 1
        elif winner == Winner.CPU:
            self.cpu += 1

    def to_dict(self) -> dict[str, int]:
        return {"user": self.user, "cpu": self.cpu}
