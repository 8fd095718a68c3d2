"""Shareable link command."""

from __future__ import annotations

import click

from deskboard.core.filters import FilterCriteria, FilterStore
from deskboard.core.models.enums import IssuePriority, IssueStatus, SortField, SortOrder
from deskboard.core.url_sync import build_url, parse_query


def criteria_options(func):
    """Filter options shared by commands that take issue criteria."""
    options = [
        click.option(
            "--from-link",
            "from_link",
            default=None,
            help="Start from an existing link's filters",
        ),
        click.option(
            "-s",
            "--status",
            multiple=True,
            type=click.Choice([s.value for s in IssueStatus]),
            help="Status filter (repeatable)",
        ),
        click.option(
            "-p",
            "--priority",
            multiple=True,
            type=click.Choice([p.value for p in IssuePriority]),
            help="Priority filter (repeatable)",
        ),
        click.option("--category", multiple=True, help="Category filter (repeatable)"),
        click.option("--source", multiple=True, help="Source filter (repeatable)"),
        click.option("--assignee", "assignee_id", type=int, default=None),
        click.option("--from", "date_from", default=None, help="Created on or after (YYYY-MM-DD)"),
        click.option("--to", "date_to", default=None, help="Created on or before (YYYY-MM-DD)"),
        click.option("-q", "--search", default=None, help="Free-text search"),
        click.option("--page", type=click.IntRange(min=1), default=None),
        click.option(
            "--sort",
            "sort_field",
            type=click.Choice([f.value for f in SortField]),
            default=None,
        ),
        click.option("--asc", is_flag=True, help="Sort ascending (default descending)"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def criteria_from_options(
    from_link: str | None,
    status: tuple[str, ...],
    priority: tuple[str, ...],
    category: tuple[str, ...],
    source: tuple[str, ...],
    assignee_id: int | None,
    date_from: str | None,
    date_to: str | None,
    search: str | None,
    page: int | None,
    sort_field: str | None,
    asc: bool,
    project_id: int | None = None,
    customer_id: int | None = None,
) -> FilterCriteria:
    """Overlay the given options on ``from_link`` (or defaults) through the store setters."""
    store = FilterStore(parse_query(from_link) if from_link else FilterCriteria())
    if status:
        store.set_status(status)
    if priority:
        store.set_priority(priority)
    if category:
        store.set_category(category)
    if source:
        store.set_source(source)
    if assignee_id is not None:
        store.set_assignee_id(assignee_id)
    if project_id is not None:
        store.set_project_id(project_id)
    if customer_id is not None:
        store.set_customer_id(customer_id)
    if date_from is not None and date_to is not None:
        store.set_date_range(date_from, date_to)
    elif date_from is not None:
        store.set_date_from(date_from)
    elif date_to is not None:
        store.set_date_to(date_to)
    if search is not None:
        store.set_search(search)
    if sort_field:
        store.set_sort(sort_field, SortOrder.ASC if asc else SortOrder.DESC)
    if page is not None:
        store.set_page(page)
    return store.criteria.normalized()


@click.command()
@criteria_options
@click.option("--base", default="", help="Prefix, e.g. https://desk.example.com")
@click.option("--path", default="/issues", show_default=True)
def link(base: str, path: str, **options) -> None:
    """Print a shareable issue-list link for the given filters."""
    criteria = criteria_from_options(**options)
    click.echo(f"{base.rstrip('/')}{build_url(path, criteria)}")
