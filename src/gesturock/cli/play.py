from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path
from typing import cast

import cv2  # type: ignore[import-untyped]
import typer

from ..commentary import GeminiCommentator
from ..config import Config
from ..drawing import draw_game_info, draw_landmarks
from ..game import GameController
from ..models.game import GameState
from ..recognizer import MediaPipeHandSource, ModelLoadError
from . import options
from .common import (
    app,
    determine_gpu_usage,
    determine_mirror_mode,
    determine_model_path,
    init_camera_capture,
    setup_logging,
)

RESULT_PAUSE = 3.0  # Seconds a result stays displayed before the next automatic turn


def print_game_info(controller: GameController, printed_turns: set[int]) -> None:
    """Print the game progress to console, each result only once."""
    if controller.state == GameState.RESULT and (result := controller.result):
        if controller.commentary_loading or result.turn in printed_turns:
            return
        printed_turns.add(result.turn)
        print(
            f"\rTurn {result.turn}: {result.user_move.label} vs {result.cpu_move.label} "
            f"=> {result.winner.value.upper()} | score {controller.score.user}-{controller.score.cpu}"
        )
        if result.message:
            print(f"  {result.message}")
        print(f'  "{controller.commentary}"')
        return

    status = f"Detectando: {controller.current_gesture.label}"
    if controller.state == GameState.COUNTDOWN:
        status = f"{controller.countdown}... {status} (CPU: {controller.shuffle_move.label})"
    print(f"\r{status:<60}", end="")


def should_stop_auto_play(controller: GameController, rounds: int | None, result_time: float | None) -> bool:
    """Start turns automatically when there is no preview window to press a key in.

    Returns True when the requested number of rounds has been played.
    """
    if controller.state == GameState.IDLE:
        if rounds is not None and controller.turn >= rounds:
            return True
        controller.start()
    elif controller.state == GameState.RESULT and not controller.commentary_loading and result_time is not None:
        if time.perf_counter() - result_time < RESULT_PAUSE:
            return False
        if rounds is not None and controller.turn >= rounds:
            return True
        controller.start()
    return False


async def play_game(
    camera_index: int,
    show_preview: bool,
    config: Config,
    mirror: bool,
    use_gpu: bool,
    desired_size: int,
    rounds: int | None = None,
) -> None:
    """Play rock/paper/scissors against the computer using the selected camera."""
    cap, window_name = init_camera_capture(camera_index, show_preview, desired_size)
    if cap is None:
        return

    source = MediaPipeHandSource(determine_model_path(config), use_gpu=use_gpu, mirroring=mirror)
    commentator = GeminiCommentator.from_config(config.commentary)
    controller = GameController(
        source, commentator, config=config.game, open_ratio=config.classifier.open_ratio
    )

    try:
        async with controller:
            print("Loading hand landmarks model...")
            try:
                await controller.initialize()
            except ModelLoadError as exc:
                print(f"\n{controller.error}\n{exc}", file=sys.stderr)
                raise typer.Exit(1) from exc

            print("Hand landmarks model loaded successfully")
            if show_preview:
                print("Press SPACE to play, 'q' or ESC to quit")

            start_time = time.perf_counter()
            result_time: float | None = None
            printed_turns: set[int] = set()

            while True:
                ret, frame = await asyncio.to_thread(cap.read)
                if not ret:
                    print("Error: Failed to capture frame", file=sys.stderr)
                    break

                controller.handle_frame(source.detect_from_opencv(frame, time.perf_counter() - start_time))

                if controller.state == GameState.RESULT:
                    result_time = result_time or time.perf_counter()
                else:
                    result_time = None

                if show_preview:
                    if mirror:
                        frame = cv2.flip(frame, 1)
                    frame = draw_landmarks(controller.current_landmarks, frame)
                    frame = draw_game_info(controller, frame)
                    cv2.imshow(cast(str, window_name), frame)

                    key = cv2.waitKey(1) & 0xFF
                    if key == ord("q") or key == 27:  # 'q' or ESC
                        break
                    if key == ord(" "):
                        controller.start()

                    # Check if window was closed
                    try:
                        if cv2.getWindowProperty(cast(str, window_name), cv2.WND_PROP_VISIBLE) < 1:
                            break
                    except cv2.error:
                        break
                else:
                    print_game_info(controller, printed_turns)
                    if should_stop_auto_play(controller, rounds, result_time):
                        break

                # Let timers and the commentary request run
                await asyncio.sleep(0)
    finally:
        source.close()
        if commentator is not None:
            await commentator.close()
        cap.release()
        if show_preview:
            cv2.destroyAllWindows()

    print(f"\nFinal score: you {controller.score.user} - {controller.score.cpu} CPU ({controller.draws} draws)")


@app.callback(invoke_without_command=True)
def play_cmd(
    ctx: typer.Context,
    camera: int | None = options.camera,
    preview: bool = options.preview,
    mirror: bool | None = options.mirror,
    size: int | None = options.size,
    gpu: bool | None = options.gpu,
    rounds: int | None = typer.Option(
        None, "--rounds", "-r", min=1, help="Stop after this many turns (without preview)"
    ),
    config_path: Path | None = options.config,
    verbose: bool = options.verbose,
) -> None:
    """Play rock/paper/scissors against the computer with your hand.

    The default config location is platform-specific and will be shown if the config file is not found.
    """
    # If a subcommand is being invoked, don't run the default behavior
    if ctx.invoked_subcommand is not None:
        return

    setup_logging(verbose)
    config = Config.load(config_path)

    # Use config values as defaults, but CLI options take precedence
    final_camera = camera if camera is not None else config.cli.camera
    final_size = size if size is not None else config.cli.size

    try:
        asyncio.run(
            play_game(
                final_camera,
                show_preview=preview,
                config=config,
                mirror=determine_mirror_mode(mirror, config),
                use_gpu=determine_gpu_usage(gpu, config),
                desired_size=final_size,
                rounds=rounds,
            )
        )
    except KeyboardInterrupt:
        print("\nInterrupted")
