"""Small helpers shared by deskboard tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from deskboard.core.models.entities import BatchUpdateResult, IssueListResponse
from deskboard.core.services.issues import IssueServiceError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from unittest.mock import AsyncMock

    from deskboard.core.models.entities import Issue
    from deskboard.core.models.enums import IssueStatus


def set_issues(service: AsyncMock, issues: list[Issue]) -> None:
    """Make ``service.list_issues`` return exactly ``issues``."""
    service.list_issues.return_value = IssueListResponse(count=len(issues), results=issues)


class FakeIssueService:
    """In-memory issue tracker that records what the UI asked for."""

    def __init__(self, issues: list[Issue]) -> None:
        self.issues = {issue.id: issue for issue in issues}
        self.list_calls: list[dict] = []
        self.status_updates: list[tuple[int, IssueStatus]] = []
        self.batch_calls: list[tuple[list[int], IssueStatus | None]] = []
        self.reject_updates = False

    async def list_issues(self, params: dict) -> IssueListResponse:
        self.list_calls.append(params)
        wanted = set(params.get("status", []))
        results = [
            issue for issue in self.issues.values() if not wanted or issue.status in wanted
        ]
        return IssueListResponse(count=len(results), results=results)

    async def update_status(self, issue_id: int, status: IssueStatus) -> Issue:
        if self.reject_updates:
            raise IssueServiceError("Invalid status transition", status_code=400)
        self.status_updates.append((issue_id, status))
        self.issues[issue_id] = self.issues[issue_id].with_status(status)
        return self.issues[issue_id]

    async def batch_update(
        self,
        issue_ids: Sequence[int],
        *,
        status: IssueStatus | None = None,
        assignee_id: int | None = None,
    ) -> BatchUpdateResult:
        del assignee_id
        self.batch_calls.append((list(issue_ids), status))
        if status is not None:
            for issue_id in issue_ids:
                self.issues[issue_id] = self.issues[issue_id].with_status(status)
        return BatchUpdateResult(success=True, updated_count=len(issue_ids))
