"""Shared filter, paging and sort state for the issue views."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING

from deskboard.core.models.enums import SortOrder

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)

MULTI_VALUE_FACETS = ("status", "priority", "category", "source")


def _clean_values(values: Iterable[object] | None) -> tuple[str, ...]:
    """Drop blanks and duplicates, keep first-seen order."""
    if not values:
        return ()
    seen: dict[str, None] = {}
    for value in values:
        text = str(value).strip()
        if text:
            seen.setdefault(text, None)
    return tuple(seen)


def _positive_or_none(value: int | None) -> int | None:
    return value if value is not None and value > 0 else None


def _blank_to_none[T](value: T | None) -> T | None:
    if value == "":
        return None
    return value


def _clean_sort_field(field: str | None) -> str | None:
    """Bare field name; a leading ``-`` is the descending marker of ``ordering``."""
    if not field:
        return None
    return field.strip().lstrip("-").strip() or None


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    """Active filter, paging and sort selection.

    Multi-value facets are tuples in selection order; only membership matters
    for equality (see :func:`criteria_equal`).
    """

    status: tuple[str, ...] = ()
    priority: tuple[str, ...] = ()
    category: tuple[str, ...] = ()
    source: tuple[str, ...] = ()
    assignee_id: int | None = None
    project_id: int | None = None
    customer_id: int | None = None
    date_from: str | None = None
    date_to: str | None = None
    search: str | None = None
    page: int = 1
    sort_field: str | None = None
    sort_order: SortOrder = SortOrder.DESC

    def normalized(self) -> FilterCriteria:
        """Canonical form: blanks become absent, duplicate selections collapse."""
        sort_field = _clean_sort_field(self.sort_field)
        return FilterCriteria(
            status=_clean_values(self.status),
            priority=_clean_values(self.priority),
            category=_clean_values(self.category),
            source=_clean_values(self.source),
            assignee_id=_positive_or_none(self.assignee_id),
            project_id=_positive_or_none(self.project_id),
            customer_id=_positive_or_none(self.customer_id),
            date_from=_blank_to_none(self.date_from),
            date_to=_blank_to_none(self.date_to),
            search=_blank_to_none(self.search),
            page=self.page if self.page and self.page > 1 else 1,
            sort_field=sort_field,
            sort_order=SortOrder(self.sort_order) if sort_field else SortOrder.DESC,
        )

    @property
    def is_default(self) -> bool:
        return criteria_equal(self, FilterCriteria())


def criteria_equal(left: FilterCriteria, right: FilterCriteria) -> bool:
    """Facet-by-facet equality; empty tuples, None and "" all mean absent."""
    a = left.normalized()
    b = right.normalized()
    for field in fields(FilterCriteria):
        name = field.name
        if name in MULTI_VALUE_FACETS:
            if set(getattr(a, name)) != set(getattr(b, name)):
                return False
        elif getattr(a, name) != getattr(b, name):
            return False
    return True


type FilterListener = Callable[[FilterCriteria], None]


class FilterStore:
    """Observable container for :class:`FilterCriteria`.

    All mutation goes through the named setters. Every setter call notifies
    subscribers synchronously with the new criteria; there is no batching.
    """

    def __init__(self, initial: FilterCriteria | None = None) -> None:
        self._criteria = initial if initial is not None else FilterCriteria()
        self._listeners: list[FilterListener] = []

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    def subscribe(self, listener: FilterListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            self._listeners = [fn for fn in self._listeners if fn is not listener]

        return unsubscribe

    def _set(self, **changes: object) -> None:
        self._criteria = replace(self._criteria, **changes)
        self._notify()

    def _notify(self) -> None:
        criteria = self._criteria
        for listener in list(self._listeners):
            try:
                listener(criteria)
            except Exception:
                logger.exception("Filter listener %r failed", listener)

    def set_status(self, values: Iterable[str]) -> None:
        self._set(status=_clean_values(values))

    def set_priority(self, values: Iterable[str]) -> None:
        self._set(priority=_clean_values(values))

    def set_category(self, values: Iterable[str]) -> None:
        self._set(category=_clean_values(values))

    def set_source(self, values: Iterable[str]) -> None:
        self._set(source=_clean_values(values))

    def set_assignee_id(self, assignee_id: int | None) -> None:
        self._set(assignee_id=assignee_id)

    def set_project_id(self, project_id: int | None) -> None:
        self._set(project_id=project_id)

    def set_customer_id(self, customer_id: int | None) -> None:
        self._set(customer_id=customer_id)

    def set_date_range(self, date_from: str | None, date_to: str | None) -> None:
        """Set both bounds at once. Bounds are inclusive and not cross-checked."""
        self._set(date_from=_blank_to_none(date_from), date_to=_blank_to_none(date_to))

    def set_date_from(self, date_from: str | None) -> None:
        self._set(date_from=_blank_to_none(date_from))

    def set_date_to(self, date_to: str | None) -> None:
        self._set(date_to=_blank_to_none(date_to))

    def set_search(self, search: str | None) -> None:
        self._set(search=_blank_to_none(search))

    def set_page(self, page: int) -> None:
        self._set(page=max(1, page))

    def set_sort(self, field: str | None, order: SortOrder | str = SortOrder.DESC) -> None:
        self._set(sort_field=_clean_sort_field(field), sort_order=SortOrder(order))

    def replace_all(self, criteria: FilterCriteria) -> None:
        """Swap in a whole criteria value (used by URL hydration)."""
        self._criteria = criteria
        self._notify()

    def reset(self) -> None:
        """Restore every facet, the page and the sort to their defaults."""
        self._criteria = FilterCriteria()
        self._notify()
