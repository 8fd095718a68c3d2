"""Connection options shared by commands that talk to the issue tracker."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from deskboard.config import DeskboardConfig


def api_options(func):
    """Add ``--api-url`` and ``--config`` to a command."""
    func = click.option(
        "--config",
        "config_path",
        type=click.Path(dir_okay=False, path_type=Path),
        default=None,
        help="Path to config.toml",
    )(func)
    return click.option(
        "--api-url",
        default=None,
        help="Issue tracker API root (overrides config and DESKBOARD_API_URL)",
    )(func)


def load_config(config_path: Path | None, api_url: str | None) -> DeskboardConfig:
    from deskboard.config import DeskboardConfig

    config = DeskboardConfig.load(config_path)
    if api_url:
        config.api = config.api.model_copy(update={"base_url": api_url.rstrip("/")})
    return config
