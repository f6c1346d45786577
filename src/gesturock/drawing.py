import unicodedata
from typing import TypeAlias

import cv2  # type: ignore[import-untyped]

from .game import GameController
from .models.game import GameState, Winner
from .models.landmarks import HAND_CONNECTIONS, Landmark

OpenCVImage: TypeAlias = cv2.typing.MatLike  # Type alias for images (numpy arrays)

# BGR colors
WHITE = (255, 255, 255)
YELLOW = (0, 255, 255)
GREY = (180, 180, 180)
WINNER_COLORS = {
    Winner.USER: (255, 128, 0),  # Blue
    Winner.CPU: (0, 0, 255),  # Red
    Winner.DRAW: GREY,
}


def ascii_text(text: str) -> str:
    """Strip accents and other characters that OpenCV fonts can't render."""
    normalized = unicodedata.normalize("NFKD", text)
    return normalized.encode("ascii", "ignore").decode("ascii")


def put_text(
    image: OpenCVImage,
    text: str,
    position: tuple[int, int],
    scale: float = 0.6,
    color: tuple[int, int, int] = WHITE,
    thickness: int = 1,
    centered: bool = False,
) -> None:
    text = ascii_text(text)
    x, y = position
    if centered:
        text_size = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, scale, thickness)[0]
        x -= text_size[0] // 2
    cv2.putText(image, text, (x, y), cv2.FONT_HERSHEY_SIMPLEX, scale, color, thickness, cv2.LINE_AA)


def draw_landmarks(landmarks: list[Landmark], image: OpenCVImage) -> OpenCVImage:
    """Draw the hand skeleton."""
    if not landmarks:
        return image
    height, width = image.shape[:2]
    points = [landmark.to_pixels(width, height) for landmark in landmarks]

    for start, end in HAND_CONNECTIONS:
        cv2.line(image, points[start], points[end], GREY, 2)
    for point in points:
        cv2.circle(image, point, 4, YELLOW, -1)

    return image


def draw_game_info(controller: GameController, image: OpenCVImage) -> OpenCVImage:
    """Draw the score, the detected gesture and the state of the current turn."""
    height, width = image.shape[:2]
    center_x = width // 2

    # Header with the score
    overlay = image.copy()
    cv2.rectangle(overlay, (0, 0), (width, 40), (0, 0, 0), -1)
    cv2.rectangle(overlay, (0, height - 70), (width, height), (0, 0, 0), -1)
    image = cv2.addWeighted(overlay, 0.6, image, 0.4, 0)

    put_text(image, f"TU: {controller.score.user}", (10, 27), color=WINNER_COLORS[Winner.USER], thickness=2)
    put_text(image, f"CPU: {controller.score.cpu}", (width - 110, 27), color=WINNER_COLORS[Winner.CPU], thickness=2)
    put_text(image, f"Detectando: {controller.current_gesture.label}", (center_x, 27), centered=True)

    state = controller.state
    if state == GameState.LOADING_MODEL:
        put_text(image, controller.error or "Cargando IA Vision...", (center_x, height - 30), centered=True)
    elif state == GameState.IDLE:
        put_text(image, "ESPACIO para jugar", (center_x, height - 30), centered=True)
    elif state == GameState.COUNTDOWN:
        put_text(image, str(controller.countdown), (center_x, height // 2), 4.0, YELLOW, 8, centered=True)
        put_text(image, f"CPU: {controller.shuffle_move.label}", (center_x, height - 30), centered=True)
    elif state == GameState.RESULT and (result := controller.result):
        title = {Winner.USER: "VICTORIA!", Winner.CPU: "DERROTA", Winner.DRAW: "EMPATE"}[result.winner]
        put_text(image, title, (center_x, height // 2), 2.0, WINNER_COLORS[result.winner], 4, centered=True)
        put_text(
            image,
            f"Tu: {result.user_move.label} - CPU: {result.cpu_move.label}",
            (center_x, height - 45),
            centered=True,
        )
        if result.message:
            put_text(image, result.message, (center_x, height // 2 + 40), 0.5, centered=True)
        commentary = "..." if controller.commentary_loading else f'"{controller.commentary}"'
        put_text(image, commentary, (center_x, height - 15), 0.5, YELLOW, centered=True)

    return image
