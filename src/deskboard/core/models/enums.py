"""Core domain enums."""

from __future__ import annotations

from enum import StrEnum


class IssueStatus(StrEnum):
    """Issue status values; each one is a board column."""

    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    PENDING = "Pending"
    CLOSED = "Closed"


class IssuePriority(StrEnum):
    """Issue priority levels."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def css_class(self) -> str:
        """CSS class name for styling."""
        return f"priority-{self.value.lower()}"


class WarrantyType(StrEnum):
    HARDWARE = "hardware"
    SOFTWARE = "software"


class WarrantyState(StrEnum):
    """Qualitative warranty state, derived from an end date."""

    NONE = "none"
    ACTIVE = "active"
    EXPIRING = "expiring"
    EXPIRED = "expired"

    @property
    def severity(self) -> int:
        """Urgency rank; higher wins when summarizing several records."""
        return _SEVERITY[self]


_SEVERITY = {
    WarrantyState.NONE: 0,
    WarrantyState.ACTIVE: 1,
    WarrantyState.EXPIRING: 2,
    WarrantyState.EXPIRED: 3,
}


class WarrantyColor(StrEnum):
    NEUTRAL = "neutral"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class SortField(StrEnum):
    """Columns the issue list can be ordered by."""

    ID = "id"
    TITLE = "title"
    STATUS = "status"
    PRIORITY = "priority"
    CATEGORY = "category"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
