"""Warranty classification command."""

from __future__ import annotations

from datetime import datetime

import click

from deskboard.core.models.enums import WarrantyColor
from deskboard.core.warranty import classify, summarize

_COLORS = {
    WarrantyColor.NEUTRAL: "white",
    WarrantyColor.SUCCESS: "green",
    WarrantyColor.WARNING: "yellow",
    WarrantyColor.DANGER: "red",
}


@click.command()
@click.argument("end_dates", nargs=-1)
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Reference date (defaults to today)",
)
@click.option(
    "--expiring-days",
    type=click.IntRange(min=0),
    default=None,
    help="Days before the due date that count as expiring (default from config)",
)
def warranty(
    end_dates: tuple[str, ...], today: datetime | None, expiring_days: int | None
) -> None:
    """Classify warranty END_DATES; several dates are also summarized.

    \b
    Examples:
        deskboard warranty 2024-06-10 --today 2024-06-01
        deskboard warranty 2024-05-27 2025-01-01
    """
    if expiring_days is None:
        from deskboard.config import DeskboardConfig
        from deskboard.paths import get_config_path

        # Read-only: an explicit path keeps load() from creating directories.
        expiring_days = DeskboardConfig.load(get_config_path()).warranty.expiring_days

    reference = today.date() if today else None
    if not end_dates:
        end_dates = ("",)

    for end_date in end_dates:
        status = classify(end_date or None, reference, expiring_days=expiring_days)
        click.echo(
            f"{end_date or '-':<12} "
            + click.style(f"{status.state.value:<9}", fg=_COLORS[status.color])
            + f" {status.label}"
        )

    if len(end_dates) > 1:
        summary = summarize(end_dates, reference, expiring_days=expiring_days)
        due = summary.due_date.isoformat() if summary.due_date else "-"
        click.echo(
            f"{'summary':<12} "
            + click.style(f"{summary.state.value:<9}", fg=_COLORS[summary.status.color])
            + f" reference due date {due}"
        )
