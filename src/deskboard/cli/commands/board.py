"""Board (TUI) command."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from deskboard.cli.commands.options import api_options, load_config

if TYPE_CHECKING:
    from pathlib import Path


@click.command()
@click.option(
    "--url",
    "start_url",
    default="/issues",
    show_default=True,
    help="Shared link to open, e.g. '/issues?status=Open,Pending&q=printer'",
)
@api_options
def board(start_url: str, api_url: str | None, config_path: Path | None) -> None:
    """Open the issue board."""
    from deskboard.tui.app import DeskboardApp

    DeskboardApp(config=load_config(config_path, api_url), start_url=start_url).run()
