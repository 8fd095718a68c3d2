"""Root CLI command registration."""

from __future__ import annotations

import click

from deskboard import __version__

from .board import board
from .config import config_cmd
from .customers import customers
from .issues import batch, issues, show
from .link import link
from .warranty import warranty


@click.group(invoke_without_command=True)
@click.option("--version", is_flag=True, help="Show version and exit")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """Service-desk console for a REST issue tracker."""
    if version:
        click.echo(f"deskboard {__version__}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        ctx.invoke(board)


cli.add_command(board)
cli.add_command(issues)
cli.add_command(show)
cli.add_command(batch)
cli.add_command(customers)
cli.add_command(link)
cli.add_command(warranty)
cli.add_command(config_cmd)
