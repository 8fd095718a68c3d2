"""Tests for the board controller: loading, reordering and optimistic moves."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest
from hypothesis import given

from deskboard.constants import COLUMN_ORDER
from deskboard.core.board import BoardController, ReorderOutcome, partition_issues
from deskboard.core.filters import FilterCriteria, FilterStore
from deskboard.core.models.entities import BatchUpdateResult, Issue, IssueListResponse
from deskboard.core.models.enums import IssueStatus
from deskboard.core.services.issues import IssueServiceError
from tests.helpers import set_issues
from tests.strategies import issue_lists

if TYPE_CHECKING:
    from collections.abc import Callable
    from unittest.mock import AsyncMock

pytestmark = pytest.mark.unit

OPEN = IssueStatus.OPEN
IN_PROGRESS = IssueStatus.IN_PROGRESS
PENDING = IssueStatus.PENDING
CLOSED = IssueStatus.CLOSED


@pytest.fixture
def board_issues(issue_factory: Callable[..., Issue]) -> list[Issue]:
    return [
        issue_factory(issue_id=1, status=OPEN),
        issue_factory(issue_id=2, status=OPEN),
        issue_factory(issue_id=3, status=OPEN),
        issue_factory(issue_id=4, status=IN_PROGRESS),
        issue_factory(issue_id=5, status=CLOSED),
    ]


@pytest.fixture
async def controller(mock_issue_service: AsyncMock, board_issues: list[Issue]) -> BoardController:
    set_issues(mock_issue_service, board_issues)
    board = BoardController(mock_issue_service)
    await board.load()
    return board


class TestPartition:
    def test_columns_in_fixed_order(self, board_issues: list[Issue]):
        columns = partition_issues(board_issues)

        assert [c.status for c in columns] == COLUMN_ORDER
        assert [c.issue_ids for c in columns] == [[1, 2, 3], [4], [], [5]]

    def test_duplicate_ids_keep_first(self, issue_factory):
        first = issue_factory(issue_id=1, status=OPEN)
        again = issue_factory(issue_id=1, status=CLOSED)

        columns = partition_issues([first, again])

        assert columns[0].issue_ids == [1]
        assert columns[3].issue_ids == []

    @given(issue_lists())
    def test_partition_is_exact(self, issues: list[Issue]):
        columns = partition_issues(issues)

        placed = [issue.id for column in columns for issue in column.issues]
        assert sorted(placed) == sorted(issue.id for issue in issues)
        for column in columns:
            assert all(issue.status == column.status for issue in column.issues)


class TestLoad:
    async def test_load_builds_columns(self, controller: BoardController):
        assert controller.snapshot() == {
            OPEN: [1, 2, 3],
            IN_PROGRESS: [4],
            PENDING: [],
            CLOSED: [5],
        }
        assert controller.loading is False

    async def test_load_requests_board_params(self, mock_issue_service: AsyncMock):
        store = FilterStore(FilterCriteria(status=("Open",), page=3, sort_field="title"))
        board = BoardController(mock_issue_service, store, page_size=500)

        await board.load()

        mock_issue_service.list_issues.assert_awaited_once_with(
            {"status": ["Open"], "page_size": 500}
        )

    async def test_load_error_leaves_board_unchanged(
        self, controller: BoardController, mock_issue_service: AsyncMock
    ):
        before = controller.snapshot()
        mock_issue_service.list_issues.side_effect = IssueServiceError("down", status_code=503)

        with pytest.raises(IssueServiceError):
            await controller.load()

        assert controller.snapshot() == before
        assert controller.loading is False

    async def test_superseded_load_is_dropped(self, mock_issue_service: AsyncMock, issue_factory):
        slow_started = asyncio.Event()
        release_slow = asyncio.Event()
        stale = IssueListResponse(count=1, results=[issue_factory(issue_id=10)])
        fresh = IssueListResponse(count=1, results=[issue_factory(issue_id=20)])

        async def list_issues(params):
            if params.get("q") == "slow":
                slow_started.set()
                await release_slow.wait()
                return stale
            return fresh

        mock_issue_service.list_issues.side_effect = list_issues
        board = BoardController(mock_issue_service)

        slow = asyncio.create_task(board.load(FilterCriteria(search="slow")))
        await slow_started.wait()
        applied_fast = await board.load(FilterCriteria(search="fast"))
        release_slow.set()
        applied_slow = await slow

        assert applied_fast is True
        assert applied_slow is False
        assert board.snapshot()[OPEN] == [20]

    async def test_listeners_receive_columns(self, controller: BoardController):
        seen = []
        unsubscribe = controller.subscribe(seen.append)

        await controller.load()
        unsubscribe()
        await controller.load()

        assert len(seen) == 1
        assert [c.status for c in seen[0]] == COLUMN_ORDER


class TestReorder:
    async def test_same_position_is_noop(
        self, controller: BoardController, mock_issue_service: AsyncMock
    ):
        before = controller.snapshot()
        published = []
        controller.subscribe(published.append)

        outcome = await controller.on_reorder(OPEN, 1, OPEN, 1)

        assert outcome is ReorderOutcome.NOOP
        assert controller.snapshot() == before
        assert published == []
        mock_issue_service.update_status.assert_not_awaited()

    async def test_within_column_is_local_only(
        self, controller: BoardController, mock_issue_service: AsyncMock
    ):
        outcome = await controller.on_reorder(OPEN, 0, OPEN, 2)

        assert outcome is ReorderOutcome.REORDERED
        assert controller.snapshot()[OPEN] == [2, 3, 1]
        mock_issue_service.update_status.assert_not_awaited()

    async def test_within_column_order_lost_on_reload(self, controller: BoardController):
        await controller.on_reorder(OPEN, 2, OPEN, 0)
        assert controller.snapshot()[OPEN] == [3, 1, 2]

        await controller.load()

        assert controller.snapshot()[OPEN] == [1, 2, 3]

    @pytest.mark.parametrize(
        ("source", "index", "dest"),
        [("Bogus", 0, OPEN), (OPEN, 0, "Bogus"), (OPEN, 9, CLOSED), (PENDING, 0, OPEN)],
    )
    async def test_invalid_gestures_are_noops(
        self, controller: BoardController, mock_issue_service: AsyncMock, source, index, dest
    ):
        before = controller.snapshot()

        outcome = await controller.on_reorder(source, index, dest, 0)

        assert outcome is ReorderOutcome.NOOP
        assert controller.snapshot() == before
        mock_issue_service.update_status.assert_not_awaited()


class TestMoveAcross:
    async def test_optimistic_move_then_persist(
        self, controller: BoardController, mock_issue_service: AsyncMock
    ):
        snapshots = []
        controller.subscribe(lambda columns: snapshots.append(partition_snapshot(columns)))

        outcome = await controller.on_reorder(OPEN, 1, PENDING, 0)

        assert outcome is ReorderOutcome.MOVED
        mock_issue_service.update_status.assert_awaited_once_with(2, PENDING)
        assert controller.snapshot()[OPEN] == [1, 3]
        assert controller.snapshot()[PENDING] == [2]
        assert snapshots[0][PENDING] == [2]
        assert controller.pending_transition is None
        assert controller.last_error is None

    async def test_moved_issue_carries_new_status(self, controller: BoardController):
        await controller.on_reorder(OPEN, 0, CLOSED, 5)

        column = controller.column(CLOSED)
        assert column is not None
        assert column.issue_ids == [5, 1]
        assert column.issues[1].status is CLOSED

    async def test_pending_transition_set_while_request_runs(
        self, controller: BoardController, mock_issue_service: AsyncMock
    ):
        during = []

        async def update_status(issue_id, status):
            during.append(controller.pending_transition)

        mock_issue_service.update_status.side_effect = update_status

        await controller.on_reorder(IN_PROGRESS, 0, CLOSED, 0)

        assert during == [4]
        assert controller.pending_transition is None

    async def test_failure_reloads_from_server(
        self,
        controller: BoardController,
        mock_issue_service: AsyncMock,
        board_issues: list[Issue],
    ):
        mock_issue_service.update_status.side_effect = IssueServiceError(
            "Invalid transition", status_code=400
        )

        outcome = await controller.on_reorder(OPEN, 0, CLOSED, 0)

        assert outcome is ReorderOutcome.ROLLED_BACK
        assert controller.snapshot() == {
            column.status: column.issue_ids for column in partition_issues(board_issues)
        }
        assert isinstance(controller.last_error, IssueServiceError)
        assert controller.last_error.status_code == 400
        assert controller.pending_transition is None

    async def test_rollback_shows_server_truth(
        self, controller: BoardController, mock_issue_service: AsyncMock, issue_factory
    ):
        # Someone else changed the board meanwhile; the reload shows their change too.
        changed = [issue_factory(issue_id=1, status=PENDING), issue_factory(issue_id=4)]
        set_issues(mock_issue_service, changed)
        mock_issue_service.update_status.side_effect = IssueServiceError("rejected")

        await controller.on_reorder(OPEN, 0, CLOSED, 0)

        assert controller.snapshot() == {OPEN: [4], IN_PROGRESS: [], PENDING: [1], CLOSED: []}

    async def test_rollback_reload_failure_restores_board_and_propagates(
        self, controller: BoardController, mock_issue_service: AsyncMock
    ):
        before = controller.snapshot()
        mock_issue_service.update_status.side_effect = IssueServiceError("rejected")
        mock_issue_service.list_issues.side_effect = IssueServiceError("down")

        with pytest.raises(IssueServiceError, match="down"):
            await controller.on_reorder(OPEN, 0, CLOSED, 0)

        assert controller.snapshot() == before
        assert controller.stale is True
        assert str(controller.last_error) == "rejected"
        assert controller.pending_transition is None

    async def test_next_successful_load_clears_stale(
        self, controller: BoardController, mock_issue_service: AsyncMock, board_issues
    ):
        mock_issue_service.update_status.side_effect = IssueServiceError("rejected")
        mock_issue_service.list_issues.side_effect = IssueServiceError("down")
        with pytest.raises(IssueServiceError):
            await controller.on_reorder(OPEN, 0, CLOSED, 0)

        mock_issue_service.list_issues.side_effect = None
        set_issues(mock_issue_service, board_issues)
        await controller.load()

        assert controller.stale is False


class TestBatchUpdate:
    async def test_batch_update_reloads(
        self, controller: BoardController, mock_issue_service: AsyncMock
    ):
        mock_issue_service.batch_update.return_value = BatchUpdateResult(
            success=True, updated_count=2
        )
        calls_before = mock_issue_service.list_issues.await_count

        result = await controller.batch_update([1, 2], status=CLOSED)

        assert result.updated_count == 2
        mock_issue_service.batch_update.assert_awaited_once_with(
            [1, 2], status=CLOSED, assignee_id=None
        )
        assert mock_issue_service.list_issues.await_count == calls_before + 1


class TestLookups:
    async def test_locate(self, controller: BoardController):
        assert controller.locate(3) == (OPEN, 2)
        assert controller.locate(99) is None

    async def test_column_accepts_strings(self, controller: BoardController):
        column = controller.column("In Progress")

        assert column is not None
        assert column.title == "IN PROGRESS"
        assert controller.column("nope") is None


def partition_snapshot(columns) -> dict[IssueStatus, list[int]]:
    return {column.status: column.issue_ids for column in columns}
