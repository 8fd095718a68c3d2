"""API boundary models.

Payloads from the issue tracker are validated here so the rest of the
package never handles raw JSON. Unknown keys are ignored; missing optional
keys get defaults.
"""

from __future__ import annotations

from datetime import date, datetime  # noqa: TC003 - Pydantic needs runtime access

from pydantic import BaseModel, ConfigDict, Field, field_validator

from deskboard.core.models.enums import (
    IssuePriority,
    IssueStatus,
    WarrantyColor,
    WarrantyState,
    WarrantyType,
)


class DomainModel(BaseModel):
    """Base model with common config."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")


class WarrantyRecord(DomainModel):
    """One warranty batch attached to a customer or issue.

    ``end_date`` stays a raw string: parsing it is the classifier's job and a
    malformed value must degrade to "no warranty", not reject the payload.
    """

    id: int | None = None
    type: WarrantyType
    title: str = ""
    end_date: str | None = None
    notes: str = ""
    created_at: datetime | None = None

    @field_validator("end_date", mode="before")
    @classmethod
    def coerce_end_date(cls, value: object) -> str | None:
        if value is None or value == "":
            return None
        if isinstance(value, date):
            return value.isoformat()
        return str(value)


class Issue(DomainModel):
    """Issue as returned by ``GET /issues/``."""

    id: int
    title: str = ""
    description: str = ""
    status: IssueStatus = IssueStatus.OPEN
    priority: IssuePriority = IssuePriority.MEDIUM
    category: str = ""
    source: str = ""
    project: int | None = None
    project_name: str | None = None
    customer: int | None = None
    customer_name: str | None = None
    customer_warranty_due: str | None = None
    warranty: int | None = None
    assignee: int | None = None
    assignee_name: str | None = None
    reporter: int | None = None
    reporter_name: str | None = None
    hardware_warranties: list[WarrantyRecord] = Field(default_factory=list)
    software_warranties: list[WarrantyRecord] = Field(default_factory=list)
    due_date: str | None = None
    first_response_at: datetime | None = None
    resolved_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("category", "source", "description", "title", mode="before")
    @classmethod
    def none_to_empty(cls, value: object) -> object:
        return "" if value is None else value

    def with_status(self, status: IssueStatus) -> Issue:
        """Return a copy carrying ``status``; the original is left untouched."""
        return self.model_copy(update={"status": status})


class Customer(DomainModel):
    """Customer record with its warranty batches."""

    id: int
    name: str = ""
    warranty_due: str | None = None
    hardware_warranties: list[WarrantyRecord] = Field(default_factory=list)
    software_warranties: list[WarrantyRecord] = Field(default_factory=list)


class IssueListResponse(DomainModel):
    count: int = 0
    results: list[Issue] = Field(default_factory=list)


class BatchUpdateResult(DomainModel):
    success: bool = False
    updated_count: int = 0


class WarrantyStatus(BaseModel):
    """Derived warranty status. Computed on demand, never persisted."""

    model_config = ConfigDict(frozen=True)

    state: WarrantyState
    label: str
    days_left: int | None = None
    color: WarrantyColor
    due_date: date | None = None


class WarrantySummary(BaseModel):
    """Most urgent status across all records of one warranty type."""

    model_config = ConfigDict(frozen=True)

    type: WarrantyType | None
    status: WarrantyStatus
    due_date: date | None = None
    record_count: int = 0

    @property
    def state(self) -> WarrantyState:
        return self.status.state
