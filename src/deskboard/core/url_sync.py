"""Keep filter state shareable through the address bar.

Two directions, wired separately so neither can re-trigger the other:

* hydration reads the current location once, when the view mounts;
* export writes every later filter change back with ``history.replace`` so
  filter churn never adds back/forward entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING
from urllib.parse import parse_qsl, unquote, urlencode, urlsplit

from deskboard.core.filters import MULTI_VALUE_FACETS, FilterCriteria
from deskboard.core.query import decode_ordering, encode_ordering

if TYPE_CHECKING:
    from collections.abc import Callable

    from deskboard.core.filters import FilterStore

logger = logging.getLogger(__name__)

URL_KEYS = (*MULTI_VALUE_FACETS, "assignee_id", "from", "to", "q", "page", "ordering")


@dataclass
class BrowserHistory:
    """Minimal session history: a stack of URLs and a cursor into it."""

    entries: list[str] = field(default_factory=lambda: ["/issues"])
    index: int = 0

    @classmethod
    def at(cls, url: str) -> BrowserHistory:
        return cls(entries=[url], index=0)

    @property
    def location(self) -> str:
        return self.entries[self.index]

    @property
    def path(self) -> str:
        return urlsplit(self.location).path or "/"

    @property
    def search(self) -> str:
        return urlsplit(self.location).query

    def push(self, url: str) -> None:
        del self.entries[self.index + 1 :]
        self.entries.append(url)
        self.index += 1

    def replace(self, url: str) -> None:
        self.entries[self.index] = url

    def back(self) -> str:
        if self.index > 0:
            self.index -= 1
        return self.location

    def forward(self) -> str:
        if self.index < len(self.entries) - 1:
            self.index += 1
        return self.location


def _first_values(query: str) -> dict[str, str]:
    if "?" in query or "://" in query:
        query = urlsplit(query).query
    values: dict[str, str] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=False):
        values.setdefault(key, value)
    return values


def _parse_positive_int(raw: str) -> int | None:
    try:
        number = int(raw)
    except ValueError:
        return None
    return number if number > 0 else None


def _escape_value(value: str) -> str:
    # Commas separate values, so a comma inside one value is percent-escaped.
    return value.replace("%", "%25").replace(",", "%2C")


def _split_values(raw: str) -> tuple[str, ...]:
    selected = (unquote(part).strip() for part in raw.split(","))
    return tuple(dict.fromkeys(value for value in selected if value))


def apply_query(criteria: FilterCriteria, query: str) -> FilterCriteria:
    """Overlay recognized keys from ``query`` onto ``criteria``.

    Keys that are absent leave the existing value alone. Unknown keys and
    values that don't parse are ignored.
    """
    values = _first_values(query)
    changes: dict[str, object] = {}

    for facet in MULTI_VALUE_FACETS:
        if raw := values.get(facet):
            if selected := _split_values(raw):
                changes[facet] = selected

    if raw := values.get("assignee_id"):
        if (assignee_id := _parse_positive_int(raw)) is not None:
            changes["assignee_id"] = assignee_id
    # Date bounds are opaque strings, passed to the API as given.
    if raw := values.get("from"):
        changes["date_from"] = raw
    if raw := values.get("to"):
        changes["date_to"] = raw
    if raw := values.get("q"):
        changes["search"] = raw
    if raw := values.get("page"):
        if (page := _parse_positive_int(raw)) is not None:
            changes["page"] = page
    if raw := values.get("ordering"):
        if decoded := decode_ordering(raw.strip()):
            changes["sort_field"], changes["sort_order"] = decoded

    ignored = set(values) - set(URL_KEYS)
    if ignored:
        logger.debug("Ignoring unknown query keys: %s", ", ".join(sorted(ignored)))

    return replace(criteria, **changes)


def parse_query(query: str) -> FilterCriteria:
    """Criteria described by ``query``, starting from defaults."""
    return apply_query(FilterCriteria(), query)


def serialize_query(criteria: FilterCriteria) -> str:
    """Encode criteria for the address bar, omitting defaults.

    Multi-value facets are comma-joined into one key; commas and percent
    signs inside a value are escaped first so the split is unambiguous.
    """
    criteria = criteria.normalized()
    pairs: list[tuple[str, str]] = []

    for facet in MULTI_VALUE_FACETS:
        values = getattr(criteria, facet)
        if values:
            pairs.append((facet, ",".join(_escape_value(value) for value in values)))
    if criteria.assignee_id:
        pairs.append(("assignee_id", str(criteria.assignee_id)))
    if criteria.date_from:
        pairs.append(("from", criteria.date_from))
    if criteria.date_to:
        pairs.append(("to", criteria.date_to))
    if criteria.search:
        pairs.append(("q", criteria.search))
    if criteria.page > 1:
        pairs.append(("page", str(criteria.page)))
    if ordering := encode_ordering(criteria.sort_field, criteria.sort_order):
        pairs.append(("ordering", ordering))

    return urlencode(pairs, safe=",")


def build_url(path: str, criteria: FilterCriteria) -> str:
    query = serialize_query(criteria)
    return f"{path}?{query}" if query else path


class UrlSync:
    """Binds a :class:`FilterStore` to a :class:`BrowserHistory`.

    ``start()`` hydrates once and then subscribes the exporter. The exporter
    only ever writes to history; nothing reads history after hydration, so
    the two directions can't feed each other.
    """

    def __init__(self, store: FilterStore, history: BrowserHistory) -> None:
        self._store = store
        self._history = history
        self._hydrated = False
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    @property
    def exporting(self) -> bool:
        return self._unsubscribe is not None

    def hydrate(self) -> bool:
        """Import the current location into the store. Runs at most once."""
        if self._hydrated:
            return False
        self._hydrated = True
        search = self._history.search
        if not search:
            return False
        hydrated = apply_query(self._store.criteria, search)
        logger.debug("Hydrated filters from %s", self._history.location)
        self._store.replace_all(hydrated)
        return True

    def start(self) -> None:
        self.hydrate()
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(self._export)
        self._export(self._store.criteria)

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _export(self, criteria: FilterCriteria) -> None:
        url = build_url(self._history.path, criteria)
        if url != self._history.location:
            self._history.replace(url)

    def share_link(self, base_url: str = "") -> str:
        """Absolute link for the current state, e.g. for copying to a colleague."""
        return f"{base_url.rstrip('/')}{build_url(self._history.path, self._store.criteria)}"
