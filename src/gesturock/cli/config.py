from __future__ import annotations

from pathlib import Path

import typer

from ..config import Config
from . import options
from .common import app


@app.command(name="config")
def config_cmd(
    init: bool = typer.Option(False, "--init", help="Write the default configuration (overwrites existing file)"),
    config_path: Path | None = options.config,
) -> None:
    """Show the configuration, or write the default one."""
    path = Config.validate_path(config_path)

    if init:
        saved_path = Config().save(path)
        print(f"Default configuration written to {saved_path}")
        return

    print(f"Config file: {path}")
    print(Config.load(path).model_dump_json(indent=2))
