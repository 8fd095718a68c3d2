"""Pytest fixtures for deskboard tests."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

import pytest
from hypothesis import Phase, Verbosity, settings

from deskboard.core.models.entities import BatchUpdateResult, IssueListResponse
from deskboard.core.models.enums import IssuePriority, IssueStatus

_TEST_BASE_DIR = Path(tempfile.mkdtemp(prefix="deskboard-tests-"))
os.environ["DESKBOARD_DATA_DIR"] = str(_TEST_BASE_DIR / "data")
os.environ["DESKBOARD_CONFIG_DIR"] = str(_TEST_BASE_DIR / "config")
os.environ.pop("DESKBOARD_API_URL", None)

if TYPE_CHECKING:
    from collections.abc import Callable

    from deskboard.core.models.entities import Issue


settings.register_profile(
    "ci",
    max_examples=100,
    deadline=None,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)
settings.register_profile(
    "dev",
    max_examples=20,
    deadline=500,
)
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture
def issue_factory() -> Callable[..., Issue]:
    """Factory for Issue models with sequential ids."""
    from deskboard.core.models.entities import Issue

    counter = {"next": 1}

    def _factory(
        *,
        title: str | None = None,
        status: IssueStatus = IssueStatus.OPEN,
        priority: IssuePriority = IssuePriority.MEDIUM,
        issue_id: int | None = None,
        **extra: object,
    ) -> Issue:
        if issue_id is None:
            issue_id = counter["next"]
        counter["next"] = max(counter["next"], issue_id) + 1
        return Issue(
            id=issue_id,
            title=title or f"Issue {issue_id}",
            status=status,
            priority=priority,
            **extra,
        )

    return _factory


@pytest.fixture
def mock_issue_service() -> AsyncMock:
    """IssueService double whose list_issues result can be swapped per test."""
    service = AsyncMock()
    service.list_issues.return_value = IssueListResponse(count=0, results=[])
    service.batch_update.return_value = BatchUpdateResult(success=True, updated_count=0)
    return service
