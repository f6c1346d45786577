"""Turn state machine of a rock/paper/scissors match against the computer.

Everything here runs on the event loop thread: frames, timers and the commentary
request completion all mutate the controller from the same thread, so no locking is
needed. Each turn gets a sequence number, used to discard commentary arriving after a
newer turn started.
"""

from __future__ import annotations

import asyncio
import logging
import random
from contextlib import suppress
from typing import Any

from .classifier import OPEN_FINGER_RATIO, GestureResult, classify_frame
from .commentary import CommentaryBackend, fallback_commentary
from .config import GameConfig
from .gestures import PLAYABLE_GESTURES, Gesture
from .models.game import GameResult, GameState, Score, Winner, determine_winner
from .models.landmarks import HandFrame, Landmark
from .recognizer import FrameSource, ModelLoadError
from .timers import Timer

logger = logging.getLogger("gesturock.game")

MODEL_LOAD_ERROR_MESSAGE = "Error cargando el modelo de visión. Por favor reinicia la aplicación."
FORFEIT_MESSAGE = "No se detectó ningún gesto válido: la CPU gana la ronda."


class GameNotReadyError(RuntimeError):
    """A turn was requested before the hand landmarks model was loaded."""


def resolve_user_move(current_gesture: Gesture, last_valid_gesture: Gesture) -> Gesture:
    """Get the move to play: the current gesture, or the latched one if the current is not a real move."""
    if current_gesture.is_playable or last_valid_gesture == Gesture.NONE:
        return current_gesture
    return last_valid_gesture


class GameController:
    def __init__(
        self,
        frame_source: FrameSource,
        commentator: CommentaryBackend | None = None,
        config: GameConfig | None = None,
        open_ratio: float = OPEN_FINGER_RATIO,
        rng: random.Random | None = None,
    ) -> None:
        self.frame_source = frame_source
        self.commentator = commentator
        self.config = config or GameConfig()
        self.open_ratio = open_ratio
        self.rng = rng or random.Random()

        self.state = GameState.LOADING_MODEL
        self.error: str | None = None

        self.current_gesture = Gesture.NONE
        self.current_landmarks: list[Landmark] = []
        self.last_valid_gesture = Gesture.NONE  # Latched during the countdown

        self.turn = 0
        self.countdown = self.config.countdown_seconds
        self.shuffle_move = PLAYABLE_GESTURES[0]
        self.result: GameResult | None = None
        self.score = Score()
        self.draws = 0

        self.commentary = ""
        self.commentary_loading = False

        self.countdown_timer: Timer | None = None
        self.shuffle_timer: Timer | None = None
        self._commentary_task: asyncio.Task[None] | None = None
        self._pending_commentaries: set[asyncio.Task[None]] = set()  # Requests of previous turns keep running

    def _set_state(self, state: GameState) -> None:
        if state != self.state:
            logger.info(f"State {self.state.name} -> {state.name} (turn {self.turn})")
        self.state = state

    async def initialize(self) -> None:
        """Wait for the frame source to be ready, then accept turns.

        Raises:
            ModelLoadError: If the frame source failed to initialize. The game stays in LOADING_MODEL.
        """
        if self.state != GameState.LOADING_MODEL:
            return
        try:
            await self.frame_source.initialize()
        except Exception as exc:
            self.error = MODEL_LOAD_ERROR_MESSAGE
            logger.error(f"Failed to load the hand landmarks model: {exc}")
            if isinstance(exc, ModelLoadError):
                raise
            raise ModelLoadError(str(exc)) from exc
        self.error = None
        self._set_state(GameState.IDLE)

    def handle_frame(self, frame: HandFrame) -> GestureResult:
        """Classify a frame from the frame source and update the current gesture."""
        detection = classify_frame(frame, self.open_ratio)
        self.current_landmarks = detection.landmarks
        self.update_gesture(detection.gesture)
        return detection

    def update_gesture(self, gesture: Gesture) -> None:
        self.current_gesture = gesture
        if self.state == GameState.COUNTDOWN and gesture.is_playable:
            self.last_valid_gesture = gesture

    def start(self) -> None:
        """Start a new turn, from IDLE or RESULT, or restart the current countdown.

        Raises:
            GameNotReadyError: If the model is not loaded yet
        """
        if self.state == GameState.LOADING_MODEL:
            raise GameNotReadyError(self.error or "The hand landmarks model is not loaded yet")

        self._cancel_timers()

        self.turn += 1
        self.countdown = self.config.countdown_seconds
        self.result = None
        self.commentary = ""
        self.commentary_loading = False
        self.last_valid_gesture = Gesture.NONE

        self._set_state(GameState.COUNTDOWN)

        self.shuffle_timer = Timer(self.config.shuffle_interval, self._shuffle, repeat=True).start()
        self.countdown_timer = Timer(self.config.countdown_interval, self.tick, repeat=True).start()

    def tick(self) -> None:
        """Advance the countdown by one step, finishing the turn when it reaches zero."""
        if self.state != GameState.COUNTDOWN:
            return
        self.countdown = max(self.countdown - 1, 0)
        logger.debug(f"Countdown: {self.countdown}")
        if self.countdown == 0:
            self._finish_turn()

    def _shuffle(self) -> None:
        index = PLAYABLE_GESTURES.index(self.shuffle_move)
        self.shuffle_move = PLAYABLE_GESTURES[(index + 1) % len(PLAYABLE_GESTURES)]

    def _cancel_timers(self) -> None:
        for timer in (self.countdown_timer, self.shuffle_timer):
            if timer is not None:
                timer.cancel()

    def _finish_turn(self) -> None:
        self._cancel_timers()

        user_move = resolve_user_move(self.current_gesture, self.last_valid_gesture)
        cpu_move = self.rng.choice(PLAYABLE_GESTURES)

        message: str | None = None
        if not user_move.is_playable:
            winner = Winner.CPU
            user_move = Gesture.NONE
            message = FORFEIT_MESSAGE
        else:
            winner = determine_winner(user_move, cpu_move)

        self.score.record(winner)
        if winner == Winner.DRAW:
            self.draws += 1

        self.result = GameResult(
            user_move=user_move, cpu_move=cpu_move, winner=winner, message=message, turn=self.turn
        )
        self.shuffle_move = cpu_move
        logger.info(
            f"Turn {self.turn}: user={user_move.name} cpu={cpu_move.name} winner={winner.value} "
            f"score={self.score.user}-{self.score.cpu}"
        )
        self._set_state(GameState.RESULT)

        self._request_commentary(self.result)

    def _request_commentary(self, result: GameResult) -> None:
        if self.commentator is None:
            self.commentary = fallback_commentary(result.winner)
            return
        self.commentary_loading = True
        self._commentary_task = task = asyncio.get_running_loop().create_task(self._fetch_commentary(result))
        self._pending_commentaries.add(task)
        task.add_done_callback(self._pending_commentaries.discard)

    async def _fetch_commentary(self, result: GameResult) -> None:
        assert self.commentator is not None
        text = ""
        try:
            text = await asyncio.wait_for(
                self.commentator.describe_outcome(result.user_move, result.cpu_move, result.winner),
                timeout=self.config.commentary_timeout,
            )
        except Exception as exc:
            logger.warning(f"Commentary unavailable for turn {result.turn}, using fallback text: {exc!r}")

        if result.turn != self.turn:
            logger.debug(f"Discarding commentary of turn {result.turn}, turn {self.turn} is in progress")
            return

        self.commentary = (text or "").strip() or fallback_commentary(result.winner)
        self.commentary_loading = False

    async def wait_for_commentary(self) -> str:
        """Wait for the pending commentary request, if any, and return the commentary."""
        if self._commentary_task is not None:
            await self._commentary_task
        return self.commentary

    async def aclose(self) -> None:
        """Cancel timers and any pending commentary request."""
        self._cancel_timers()
        for task in list(self._pending_commentaries):
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        self._commentary_task = None

    async def __aenter__(self) -> GameController:
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        await self.aclose()

    def to_dict(self) -> dict[str, Any]:
        """Export the state read by presentation layers as a dictionary."""
        return {
            "state": self.state.value,
            "error": self.error,
            "turn": self.turn,
            "countdown": self.countdown,
            "current_gesture": self.current_gesture.value,
            "last_valid_gesture": self.last_valid_gesture.value,
            "shuffle_move": self.shuffle_move.value,
            "result": self.result.to_dict() if self.result else None,
            "score": self.score.to_dict(),
            "draws": self.draws,
            "commentary": self.commentary,
            "commentary_loading": self.commentary_loading,
        }
