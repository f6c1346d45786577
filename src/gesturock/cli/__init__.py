#!/usr/bin/env python3

"""Command line interface to play against the computer."""


from .common import app
from .config import config_cmd  # noqa: F401
from .detect import detect_cmd  # noqa: F401
from .play import play_cmd  # noqa: F401


def main() -> None:
    """Entry point for the application."""
    app()


if __name__ == "__main__":
    main()
