from __future__ import annotations

import asyncio
import sys
import time
from pathlib import Path
from typing import cast

import cv2  # type: ignore[import-untyped]
import typer

from ..classifier import GestureResult, classify_frame, fingers_state
from ..config import Config
from ..drawing import draw_landmarks, put_text
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


def describe_detection(detection: GestureResult, open_ratio: float) -> str:
    """One line description of the detected gesture and of each finger state."""
    if not detection.landmarks:
        return "No hand detected"
    state = fingers_state(detection.landmarks, open_ratio)
    fingers = " ".join(f"{name}:{'open' if is_open else 'closed'}" for name, is_open in state._asdict().items())
    return f"{detection.gesture.name:<8} {detection.gesture.emoji} | {fingers}"


def detect_gestures(
    camera_index: int,
    show_preview: bool,
    config: Config,
    mirror: bool,
    use_gpu: bool,
    desired_size: int,
) -> None:
    """Show the classified gesture of each frame, without playing."""
    cap, window_name = init_camera_capture(camera_index, show_preview, desired_size)
    if cap is None:
        return

    open_ratio = config.classifier.open_ratio

    print("Loading hand landmarks model...")
    with MediaPipeHandSource(determine_model_path(config), use_gpu=use_gpu, mirroring=mirror) as source:
        try:
            asyncio.run(source.initialize())
        except ModelLoadError as exc:
            print(f"\n{exc}", file=sys.stderr)
            cap.release()
            raise typer.Exit(1) from exc

        if show_preview:
            print("Press 'q' or ESC to quit")

        start_time = time.perf_counter()
        try:
            while True:
                ret, frame = cap.read()
                if not ret:
                    print("Error: Failed to capture frame", file=sys.stderr)
                    break

                hand_frame = source.detect_from_opencv(frame, time.perf_counter() - start_time)
                detection = classify_frame(hand_frame, open_ratio)
                description = describe_detection(detection, open_ratio)

                if not show_preview:
                    print(f"\r{description:<80}", end="")
                    continue

                if mirror:
                    frame = cv2.flip(frame, 1)
                frame = draw_landmarks(detection.landmarks, frame)
                put_text(frame, description, (10, 25))
                cv2.imshow(cast(str, window_name), frame)

                key = cv2.waitKey(1) & 0xFF
                if key == ord("q") or key == 27:  # 'q' or ESC
                    break
                try:
                    if cv2.getWindowProperty(cast(str, window_name), cv2.WND_PROP_VISIBLE) < 1:
                        break
                except cv2.error:
                    break
        finally:
            cap.release()
            if show_preview:
                cv2.destroyAllWindows()


@app.command(name="detect")
def detect_cmd(
    camera: int | None = options.camera,
    preview: bool = options.preview,
    mirror: bool | None = options.mirror,
    size: int | None = options.size,
    gpu: bool | None = options.gpu,
    config_path: Path | None = options.config,
    verbose: bool = options.verbose,
) -> None:
    """Show the gesture detected on each frame, to check the classifier."""
    setup_logging(verbose)
    config = Config.load(config_path)

    try:
        detect_gestures(
            camera if camera is not None else config.cli.camera,
            show_preview=preview,
            config=config,
            mirror=determine_mirror_mode(mirror, config),
            use_gpu=determine_gpu_usage(gpu, config),
            desired_size=size if size is not None else config.cli.size,
        )
    except KeyboardInterrupt:
        print("\nInterrupted")
