"""Issue tracker REST client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import httpx
from pydantic import ValidationError

from deskboard.core.models.entities import (
    BatchUpdateResult,
    Customer,
    Issue,
    IssueListResponse,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from deskboard.config import ApiConfig
    from deskboard.core.models.enums import IssueStatus
    from deskboard.core.query import RequestParams

logger = logging.getLogger(__name__)


class IssueServiceError(Exception):
    """A request to the issue tracker failed or returned an unusable payload."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class IssueService(Protocol):
    """What the board and list views need from the backend."""

    async def list_issues(self, params: RequestParams) -> IssueListResponse: ...

    async def update_status(self, issue_id: int, status: IssueStatus) -> Issue: ...

    async def batch_update(
        self,
        issue_ids: Sequence[int],
        *,
        status: IssueStatus | None = None,
        assignee_id: int | None = None,
    ) -> BatchUpdateResult: ...


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or "request failed"
    if isinstance(body, dict):
        for key in ("error", "detail"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase or "request failed"


class HttpIssueService:
    """:class:`IssueService` over ``httpx.AsyncClient``.

    The client can be injected (tests, shared connection pools); otherwise one
    is created from :class:`ApiConfig` and closed by :meth:`aclose`.
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if client is None:
            if config is None:
                from deskboard.config import ApiConfig

                config = ApiConfig()
            client = httpx.AsyncClient(
                base_url=config.base_url,
                timeout=config.timeout,
                headers={"Content-Type": "application/json", **config.headers},
            )
            self._owns_client = True
        else:
            self._owns_client = False
        self._client = client

    async def __aenter__(self) -> HttpIssueService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = _error_detail(exc.response)
            logger.error("%s %s failed: %s", method, url, detail)
            raise IssueServiceError(detail, status_code=exc.response.status_code) from exc
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise IssueServiceError(f"{method} {url} failed: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise IssueServiceError(f"{method} {url} returned invalid JSON") from exc

    async def list_issues(self, params: RequestParams) -> IssueListResponse:
        data = await self._request("GET", "/issues/", params=params)
        try:
            return IssueListResponse.model_validate(data)
        except ValidationError as exc:
            raise IssueServiceError(f"Unexpected issue list payload: {exc}") from exc

    async def get_issue(self, issue_id: int) -> Issue:
        data = await self._request("GET", f"/issues/{issue_id}/")
        try:
            return Issue.model_validate(data)
        except ValidationError as exc:
            raise IssueServiceError(f"Unexpected issue payload: {exc}") from exc

    async def update_status(self, issue_id: int, status: IssueStatus) -> Issue:
        data = await self._request(
            "PATCH", f"/issues/{issue_id}/status/", json={"status": str(status)}
        )
        try:
            return Issue.model_validate(data)
        except ValidationError as exc:
            raise IssueServiceError(f"Unexpected issue payload: {exc}") from exc

    async def batch_update(
        self,
        issue_ids: Sequence[int],
        *,
        status: IssueStatus | None = None,
        assignee_id: int | None = None,
    ) -> BatchUpdateResult:
        body: dict[str, Any] = {"issue_ids": list(issue_ids)}
        if status is not None:
            body["status"] = str(status)
        if assignee_id is not None:
            body["assignee_id"] = assignee_id
        data = await self._request("POST", "/issues/batch-update/", json=body)
        try:
            return BatchUpdateResult.model_validate(data)
        except ValidationError as exc:
            raise IssueServiceError(f"Unexpected batch update payload: {exc}") from exc

    async def list_customers(self) -> list[Customer]:
        data = await self._request("GET", "/customers/")
        rows = data.get("results", []) if isinstance(data, dict) else data
        try:
            return [Customer.model_validate(row) for row in rows]
        except (ValidationError, TypeError) as exc:
            raise IssueServiceError(f"Unexpected customer payload: {exc}") from exc
