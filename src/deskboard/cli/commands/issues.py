"""Issue list, detail and batch update commands."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click

from deskboard.cli.commands.link import criteria_from_options, criteria_options
from deskboard.cli.commands.options import api_options, load_config
from deskboard.core.models.enums import IssueStatus, WarrantyType
from deskboard.core.services.issues import HttpIssueService, IssueServiceError
from deskboard.core.warranty import classify, summarize_issue

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from deskboard.config import DeskboardConfig
    from deskboard.core.models.entities import BatchUpdateResult, Issue, IssueListResponse


async def _list_issues_data(config: DeskboardConfig, options: dict) -> IssueListResponse:
    from deskboard.core.query import build_page_params

    criteria = criteria_from_options(**options)
    async with HttpIssueService(config.api) as service:
        return await service.list_issues(
            build_page_params(criteria, page_size=config.board.list_page_size)
        )


async def _get_issue_data(config: DeskboardConfig, issue_id: int) -> Issue:
    async with HttpIssueService(config.api) as service:
        return await service.get_issue(issue_id)


async def _batch_update_data(
    config: DeskboardConfig,
    issue_ids: Sequence[int],
    status: IssueStatus | None,
    assignee_id: int | None,
) -> BatchUpdateResult:
    async with HttpIssueService(config.api) as service:
        return await service.batch_update(issue_ids, status=status, assignee_id=assignee_id)


@click.command()
@criteria_options
@click.option("--project", "project_id", type=int, default=None, help="Only this project")
@click.option("--customer", "customer_id", type=int, default=None, help="Only this customer")
@api_options
def issues(api_url: str | None, config_path: Path | None, **options) -> None:
    """List one page of issues matching the filters."""
    config = load_config(config_path, api_url)
    try:
        response = asyncio.run(_list_issues_data(config, options))
    except IssueServiceError as exc:
        raise click.ClickException(str(exc)) from exc

    for issue in response.results:
        warranty = classify(
            issue.customer_warranty_due, expiring_days=config.warranty.expiring_days
        )
        click.echo(
            f"#{issue.id:<6} {issue.status.value:<12} {issue.priority.value:<7} "
            f"{warranty.state.value:<9} {issue.title}"
        )
    click.echo(f"{len(response.results)} of {response.count} issue(s)")


@click.command()
@click.argument("issue_id", type=int)
@api_options
def show(issue_id: int, api_url: str | None, config_path: Path | None) -> None:
    """Show one issue with its warranty summaries."""
    config = load_config(config_path, api_url)
    try:
        issue = asyncio.run(_get_issue_data(config, issue_id))
    except IssueServiceError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"#{issue.id} {issue.title}")
    click.echo(f"  Status:   {issue.status.value} ({issue.priority.value})")
    if issue.customer_name:
        click.echo(f"  Customer: {issue.customer_name}")
    if issue.assignee_name:
        click.echo(f"  Assignee: {issue.assignee_name}")

    customer = classify(issue.customer_warranty_due, expiring_days=config.warranty.expiring_days)
    click.echo(f"  Customer warranty: {customer.label}")
    summaries = summarize_issue(issue, expiring_days=config.warranty.expiring_days)
    for warranty_type in (WarrantyType.HARDWARE, WarrantyType.SOFTWARE):
        summary = summaries[warranty_type]
        if summary.record_count:
            click.echo(
                f"  {warranty_type.value.capitalize()} warranty: {summary.status.label} "
                f"({summary.record_count} record(s))"
            )


@click.command()
@click.argument("issue_ids", nargs=-1, type=int, required=True)
@click.option(
    "-s",
    "--status",
    type=click.Choice([s.value for s in IssueStatus]),
    default=None,
    help="New status for every issue",
)
@click.option("--assignee", "assignee_id", type=int, default=None, help="New assignee id")
@api_options
def batch(
    issue_ids: tuple[int, ...],
    status: str | None,
    assignee_id: int | None,
    api_url: str | None,
    config_path: Path | None,
) -> None:
    """Change status and/or assignee of several ISSUE_IDS at once."""
    if status is None and assignee_id is None:
        raise click.UsageError("Give --status and/or --assignee")

    config = load_config(config_path, api_url)
    new_status = IssueStatus(status) if status else None
    try:
        result = asyncio.run(_batch_update_data(config, list(issue_ids), new_status, assignee_id))
    except IssueServiceError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Updated {result.updated_count} of {len(issue_ids)} issue(s)")
