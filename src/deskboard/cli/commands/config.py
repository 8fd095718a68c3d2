"""Config show/update command."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click


@click.command(name="config")
@click.option("--api-url", default=None, help="Set api.base_url")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None)
@click.option("--page-size", type=click.IntRange(min=1), default=None, help="Set board.page_size")
@click.option("--expiring-days", type=click.IntRange(min=0), default=None)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to config.toml",
)
def config_cmd(
    api_url: str | None,
    timeout: float | None,
    page_size: int | None,
    expiring_days: int | None,
    config_path: Path | None,
) -> None:
    """Show the configuration; any option given is written back to the file."""
    from deskboard.config import DeskboardConfig
    from deskboard.paths import get_config_path

    path = config_path or get_config_path()
    # File values only, so saving never captures DESKBOARD_API_URL.
    config = DeskboardConfig.load(path, env=False)

    updates = {
        ("api", "base_url"): api_url.rstrip("/") if api_url else None,
        ("api", "timeout"): timeout,
        ("board", "page_size"): page_size,
        ("warranty", "expiring_days"): expiring_days,
    }
    changed = False
    for (section_name, key), value in updates.items():
        if value is None:
            continue
        section = getattr(config, section_name)
        setattr(config, section_name, section.model_copy(update={key: value}))
        changed = True

    if changed:
        asyncio.run(config.save(path))
        click.echo(f"Saved {path}")

    click.echo(f"api.base_url           = {config.api.base_url}")
    click.echo(f"api.timeout            = {config.api.timeout}")
    click.echo(f"board.page_size        = {config.board.page_size}")
    click.echo(f"board.list_page_size   = {config.board.list_page_size}")
    click.echo(f"warranty.expiring_days = {config.warranty.expiring_days}")
