"""Kanban board state with optimistic drag-and-drop moves."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from deskboard.constants import BOARD_PAGE_SIZE, COLUMN_ORDER, STATUS_LABELS
from deskboard.core.filters import FilterCriteria
from deskboard.core.models.enums import IssueStatus
from deskboard.core.query import build_board_params
from deskboard.core.services.issues import IssueServiceError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from deskboard.core.filters import FilterStore
    from deskboard.core.models.entities import BatchUpdateResult, Issue
    from deskboard.core.services.issues import IssueService


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BoardColumn:
    """Issues currently shown under one status, in display order."""

    status: IssueStatus
    issues: list[Issue] = field(default_factory=list)

    @property
    def title(self) -> str:
        return STATUS_LABELS[self.status]

    @property
    def issue_ids(self) -> list[int]:
        return [issue.id for issue in self.issues]


class ReorderOutcome(StrEnum):
    """What :meth:`BoardController.on_reorder` ended up doing."""

    NOOP = "noop"
    REORDERED = "reordered"
    MOVED = "moved"
    ROLLED_BACK = "rolled_back"


def partition_issues(issues: Iterable[Issue]) -> list[BoardColumn]:
    """Group issues into the fixed status columns, keeping server order.

    An issue id seen twice keeps its first position only.
    """
    columns = {status: BoardColumn(status=status) for status in COLUMN_ORDER}
    seen: set[int] = set()
    for issue in issues:
        if issue.id in seen:
            continue
        seen.add(issue.id)
        columns[issue.status].issues.append(issue)
    return [columns[status] for status in COLUMN_ORDER]


def _coerce_status(value: IssueStatus | str) -> IssueStatus | None:
    try:
        return IssueStatus(value)
    except ValueError:
        return None


type BoardListener = Callable[[list[BoardColumn]], None]


class BoardController:
    """Owns the board's column state.

    The columns are a derived cache of server state: :meth:`load` rebuilds them
    wholesale. Cross-column moves are applied locally first and then sent to
    the server; if the server refuses, the whole board is reloaded rather
    than undoing the single move. Same-column reordering is never persisted.
    """

    def __init__(
        self,
        service: IssueService,
        store: FilterStore | None = None,
        *,
        page_size: int = BOARD_PAGE_SIZE,
    ) -> None:
        self._service = service
        self._store = store
        self._page_size = page_size
        self._columns: list[BoardColumn] = partition_issues([])
        self._listeners: list[BoardListener] = []
        self._generation = 0
        self._last_criteria = FilterCriteria()
        self.loading = False
        self.last_error: IssueServiceError | None = None
        self.pending_transition: int | None = None
        # Set when a failed move could not be rolled back by a reload.
        self.stale = False

    @property
    def columns(self) -> list[BoardColumn]:
        return self._columns

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: BoardListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            self._listeners = [fn for fn in self._listeners if fn is not listener]

        return unsubscribe

    def _publish(self, columns: list[BoardColumn]) -> None:
        self._columns = columns
        for listener in list(self._listeners):
            try:
                listener(columns)
            except Exception:
                logger.exception("Board listener %r failed", listener)

    def column(self, status: IssueStatus | str) -> BoardColumn | None:
        resolved = _coerce_status(status)
        if resolved is None:
            return None
        for column in self._columns:
            if column.status == resolved:
                return column
        return None

    def locate(self, issue_id: int) -> tuple[IssueStatus, int] | None:
        """Column and index of ``issue_id``, if it is on the board."""
        for column in self._columns:
            for index, issue in enumerate(column.issues):
                if issue.id == issue_id:
                    return column.status, index
        return None

    def snapshot(self) -> dict[IssueStatus, list[int]]:
        """Issue ids per column, for cheap state comparisons."""
        return {column.status: column.issue_ids for column in self._columns}

    def _current_criteria(self) -> FilterCriteria:
        if self._store is not None:
            return self._store.criteria
        return self._last_criteria

    async def load(self, criteria: FilterCriteria | None = None) -> bool:
        """Fetch every matching issue and rebuild the columns.

        Each call takes a new generation number. When calls overlap, only the
        most recently started one may apply its result; older responses are
        dropped. Returns True when this call's result was applied.

        Raises:
            IssueServiceError: the list request failed; the board is unchanged.
        """
        if criteria is None:
            criteria = self._current_criteria()
        self._last_criteria = criteria
        self._generation += 1
        generation = self._generation
        self.loading = True

        try:
            response = await self._service.list_issues(
                build_board_params(criteria, page_size=self._page_size)
            )
        finally:
            if generation == self._generation:
                self.loading = False

        if generation != self._generation:
            logger.debug(
                "Dropping board load %d, superseded by %d", generation, self._generation
            )
            return False

        self.stale = False
        logger.debug("Board loaded %d of %d issues", len(response.results), response.count)
        self._publish(partition_issues(response.results))
        return True

    async def on_reorder(
        self,
        source_column: IssueStatus | str,
        source_index: int,
        dest_column: IssueStatus | str,
        dest_index: int,
    ) -> ReorderOutcome:
        """Apply a drag gesture that ended at ``(dest_column, dest_index)``."""
        source_status = _coerce_status(source_column)
        dest_status = _coerce_status(dest_column)
        if source_status is None or dest_status is None:
            return ReorderOutcome.NOOP
        if source_status == dest_status and source_index == dest_index:
            return ReorderOutcome.NOOP

        source = self.column(source_status)
        dest = self.column(dest_status)
        if source is None or dest is None or not 0 <= source_index < len(source.issues):
            return ReorderOutcome.NOOP

        if source_status == dest_status:
            self._reorder_within(source, source_index, dest_index)
            return ReorderOutcome.REORDERED

        return await self._move_across(source, source_index, dest, dest_index)

    def _reorder_within(self, column: BoardColumn, source_index: int, dest_index: int) -> None:
        issues = list(column.issues)
        issue = issues.pop(source_index)
        issues.insert(max(0, min(dest_index, len(issues))), issue)
        self._publish(
            [
                BoardColumn(status=col.status, issues=issues) if col is column else col
                for col in self._columns
            ]
        )

    async def _move_across(
        self,
        source: BoardColumn,
        source_index: int,
        dest: BoardColumn,
        dest_index: int,
    ) -> ReorderOutcome:
        issue = source.issues[source_index]
        moved = issue.with_status(dest.status)

        source_issues = [item for index, item in enumerate(source.issues) if index != source_index]
        dest_issues = list(dest.issues)
        dest_issues.insert(max(0, min(dest_index, len(dest_issues))), moved)

        columns: list[BoardColumn] = []
        for col in self._columns:
            if col is source:
                columns.append(BoardColumn(status=col.status, issues=source_issues))
            elif col is dest:
                columns.append(BoardColumn(status=col.status, issues=dest_issues))
            else:
                columns.append(col)
        before = self._columns
        self._publish(columns)

        self.pending_transition = issue.id
        try:
            await self._service.update_status(issue.id, dest.status)
        except IssueServiceError as exc:
            self.last_error = exc
            logger.warning(
                "Moving issue #%d to %s failed (%s); reloading board", issue.id, dest.status, exc
            )
            await self._rollback(before)
            return ReorderOutcome.ROLLED_BACK
        finally:
            self.pending_transition = None

        self.last_error = None
        logger.info("Issue #%d moved %s -> %s", issue.id, issue.status, dest.status)
        return ReorderOutcome.MOVED

    async def _rollback(self, before: list[BoardColumn]) -> None:
        """Reload after a refused move.

        If the reload fails too, the pre-move columns are put back, ``stale``
        is set, and the load error propagates. A newer load that started in
        the meantime owns the board, so nothing is restored then.
        """
        generation = self._generation
        try:
            await self.load(self._current_criteria())
        except IssueServiceError:
            if self._generation == generation + 1:
                self.stale = True
                self._publish(before)
            raise

    async def batch_update(
        self,
        issue_ids: Sequence[int],
        *,
        status: IssueStatus | None = None,
        assignee_id: int | None = None,
    ) -> BatchUpdateResult:
        """Update several issues server-side, then reload the board."""
        result = await self._service.batch_update(
            issue_ids, status=status, assignee_id=assignee_id
        )
        logger.info("Batch update touched %d issue(s)", result.updated_count)
        await self.load(self._current_criteria())
        return result
