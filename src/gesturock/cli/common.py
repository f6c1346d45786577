from __future__ import annotations

import logging
import os
import sys

import cv2  # type: ignore[import-untyped]
import typer

from ..config import Config

app = typer.Typer()

DEFAULT_USER_CONFIG_PATH = Config.get_user_path()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Configure the `gesturock` loggers to write on stderr."""
    logger = logging.getLogger("gesturock")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # Configure handler if logger doesn't have one
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False  # Don't propagate to root logger


def init_camera_capture(
    camera_index: int, show_preview: bool, desired_size: int
) -> tuple[cv2.VideoCapture | None, str | None]:
    """Initialize camera capture and set resolution."""
    cap = cv2.VideoCapture(camera_index)

    if not cap.isOpened():
        print(f"Error: Could not open camera {camera_index}", file=sys.stderr)
        return None, None

    # Keep the camera aspect ratio, limiting the largest dimension to desired_size
    width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)) or 640
    height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)) or 480
    aspect_ratio = width / height
    if width > height:
        width = desired_size
        height = int(desired_size / aspect_ratio)
    else:
        height = desired_size
        width = int(desired_size * aspect_ratio)

    cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
    cap.set(cv2.CAP_PROP_FOURCC, cv2.VideoWriter.fourcc(*"MJPG"))  # Use MJPEG for better performance
    cap.set(cv2.CAP_PROP_FPS, 30)

    cap_fps = cap.get(cv2.CAP_PROP_FPS)
    height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
    width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))

    print(f"Camera {camera_index} opened successfully at {width}x{height} with FPS: {cap_fps:.2f}")

    window_name = None
    if show_preview:
        window_name = f"GestuRock - camera {camera_index}"
        cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)

    return cap, window_name


def _flag_from_env(name: str) -> bool | None:
    value = os.getenv(name, "").strip().lower()
    if value in ("false", "0", "no"):
        return False
    if value in ("true", "1", "yes"):
        return True
    return None


def determine_gpu_usage(gpu: bool | None, config: Config) -> bool:
    """Determine whether to use GPU based on CLI arguments, environment variable, and config.

    Priority order:
    1. CLI arguments (--gpu / --no-gpu)
    2. Environment variable (GESTUROCK_USE_GPU)
    3. Config file (config.cli.use_gpu)
    """
    if gpu is not None:
        use_gpu = gpu
    elif (env_gpu := _flag_from_env("GESTUROCK_USE_GPU")) is not None:
        use_gpu = env_gpu
    else:
        use_gpu = config.cli.use_gpu

    if use_gpu:
        print("Using GPU acceleration (may fall back to CPU if GPU is unavailable)")
    else:
        print("Using CPU processing")

    return use_gpu


def determine_mirror_mode(mirror: bool | None, config: Config) -> bool:
    """Determine whether to use mirror mode based on CLI arguments, environment variable, and config.

    Priority order:
    1. CLI arguments (--mirror / --no-mirror)
    2. Environment variable (GESTUROCK_MIRROR)
    3. Config file (config.cli.mirror)
    """
    if mirror is not None:
        return mirror
    if (env_mirror := _flag_from_env("GESTUROCK_MIRROR")) is not None:
        return env_mirror
    return config.cli.mirror


def determine_model_path(config: Config) -> str:
    return os.getenv("GESTUROCK_MODEL_PATH", "").strip() or config.cli.model_path
