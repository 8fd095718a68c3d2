"""Request parameters for the issue list endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

from deskboard.core.filters import MULTI_VALUE_FACETS
from deskboard.core.models.enums import SortOrder

if TYPE_CHECKING:
    from deskboard.core.filters import FilterCriteria

type ParamValue = str | int | list[str]
type RequestParams = dict[str, ParamValue]


def encode_ordering(field: str | None, order: SortOrder | str = SortOrder.DESC) -> str | None:
    """``field`` for ascending, ``-field`` for descending, None when unsorted."""
    if not field:
        return None
    return f"-{field}" if SortOrder(order) is SortOrder.DESC else field


def decode_ordering(ordering: str | None) -> tuple[str, SortOrder] | None:
    if not ordering:
        return None
    if ordering.startswith("-"):
        field = ordering[1:]
        return (field, SortOrder.DESC) if field else None
    return ordering, SortOrder.ASC


def build_list_params(
    criteria: FilterCriteria,
    *,
    page: int | None = None,
    page_size: int,
    include_ordering: bool = True,
) -> RequestParams:
    """Map filter criteria onto ``GET /issues/`` parameters.

    Multi-value facets are sent as lists, which the HTTP client expands into
    one repeated parameter per value. The address bar encodes the same facets
    as a single comma-joined string instead; the two encodings are separate
    on purpose. Empty facets are left out entirely.
    """
    criteria = criteria.normalized()
    params: RequestParams = {}

    for facet in MULTI_VALUE_FACETS:
        values = getattr(criteria, facet)
        if values:
            params[facet] = list(values)

    if criteria.assignee_id:
        params["assignee_id"] = criteria.assignee_id
    if criteria.project_id:
        params["project_id"] = criteria.project_id
    if criteria.customer_id:
        params["customer_id"] = criteria.customer_id
    if criteria.search:
        params["q"] = criteria.search
    if criteria.date_from:
        params["from"] = criteria.date_from
    if criteria.date_to:
        params["to"] = criteria.date_to

    if page is not None:
        params["page"] = page
    params["page_size"] = page_size

    if include_ordering:
        ordering = encode_ordering(criteria.sort_field, criteria.sort_order)
        if ordering:
            params["ordering"] = ordering

    return params


def build_page_params(criteria: FilterCriteria, *, page_size: int) -> RequestParams:
    """Parameters for one page of the issue list, using the criteria's page and sort."""
    return build_list_params(criteria, page=criteria.normalized().page, page_size=page_size)


def build_board_params(criteria: FilterCriteria, *, page_size: int) -> RequestParams:
    """Parameters for the board: every matching issue in one request, server order."""
    return build_list_params(criteria, page_size=page_size, include_ordering=False)
