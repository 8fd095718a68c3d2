"""Customer list command."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import TYPE_CHECKING

import click

from deskboard.cli.commands.options import api_options, load_config
from deskboard.core.services.issues import HttpIssueService, IssueServiceError
from deskboard.core.warranty import classify, split_customers_by_warranty

if TYPE_CHECKING:
    from pathlib import Path

    from deskboard.config import DeskboardConfig
    from deskboard.core.models.entities import Customer


async def _list_customers_data(config: DeskboardConfig) -> list[Customer]:
    async with HttpIssueService(config.api) as service:
        return await service.list_customers()


@click.command()
@click.option("--expired", is_flag=True, help="Show customers whose warranty has expired")
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Reference date (defaults to today)",
)
@api_options
def customers(
    expired: bool, today: datetime | None, api_url: str | None, config_path: Path | None
) -> None:
    """List customers under warranty, or with --expired those without."""
    config = load_config(config_path, api_url)
    try:
        rows = asyncio.run(_list_customers_data(config))
    except IssueServiceError as exc:
        raise click.ClickException(str(exc)) from exc

    reference = today.date() if today else None
    current, lapsed = split_customers_by_warranty(rows, reference)
    shown = lapsed if expired else current
    for customer in shown:
        status = classify(
            customer.warranty_due, reference, expiring_days=config.warranty.expiring_days
        )
        click.echo(f"#{customer.id:<6} {customer.name:<30} {status.label}")
    click.echo(f"{len(shown)} {'expired' if expired else 'active'} of {len(rows)} customer(s)")
