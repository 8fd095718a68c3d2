"""IssueCard widget for displaying one issue on the board."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from textual.message import Message
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Label

from deskboard.constants import (
    CARD_TITLE_MAX_LENGTH,
    PRIORITY_ICONS,
    WARRANTY_EXPIRING_DAYS,
)
from deskboard.core.models.enums import WarrantyState, WarrantyType
from deskboard.core.warranty import summarize_issue

if TYPE_CHECKING:
    from textual import events
    from textual.app import ComposeResult

    from deskboard.core.models.entities import Issue, WarrantySummary
    from deskboard.core.models.enums import IssueStatus

DRAG_THRESHOLD = 5

_WARRANTY_ICONS = {
    WarrantyState.ACTIVE: "✓",
    WarrantyState.EXPIRING: "!",
    WarrantyState.EXPIRED: "✗",
}


def _truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def warranty_badge(summaries: dict[WarrantyType, WarrantySummary]) -> str:
    """Compact ``HW✓ SW!`` style badge; types without records are left out."""
    parts = []
    for warranty_type, prefix in ((WarrantyType.HARDWARE, "HW"), (WarrantyType.SOFTWARE, "SW")):
        icon = _WARRANTY_ICONS.get(summaries[warranty_type].state)
        if icon:
            parts.append(f"{prefix}{icon}")
    return " ".join(parts)


class IssueCard(Widget):
    """A focusable card; drag it sideways to change the issue's status."""

    can_focus = True

    issue: reactive[Issue | None] = reactive(None, recompose=True)
    _press_x: int | None = None

    @dataclass
    class DragMove(Message):
        issue: Issue
        target_status: IssueStatus

    def __init__(
        self,
        issue: Issue,
        *,
        expiring_days: int = WARRANTY_EXPIRING_DAYS,
        selected: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(id=f"card-{issue.id}", **kwargs)
        self.expiring_days = expiring_days
        self.set_class(selected, "selected")
        self.set_reactive(IssueCard.issue, issue)

    def compose(self) -> ComposeResult:
        if self.issue is None:
            return
        issue = self.issue

        yield Label(
            f"#{issue.id} {_truncate(issue.title, CARD_TITLE_MAX_LENGTH)}", classes="card-title"
        )

        icon = PRIORITY_ICONS[issue.priority]
        assignee = issue.assignee_name or "unassigned"
        yield Label(
            f"{icon} {issue.priority.value} · {_truncate(assignee, 12)}",
            classes=f"card-meta {issue.priority.css_class}",
        )

        summaries = summarize_issue(issue, expiring_days=self.expiring_days)
        badge = warranty_badge(summaries)
        if badge:
            worst = max(summaries.values(), key=lambda summary: summary.state.severity).state
            yield Label(badge, classes=f"card-warranty warranty-{worst.value}")

    def on_mouse_down(self, event: events.MouseDown) -> None:
        self._press_x = event.screen_x
        self.capture_mouse()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self._press_x is None or self.has_class("dragging"):
            return
        if abs(event.screen_x - self._press_x) > DRAG_THRESHOLD:
            self.add_class("dragging")

    def on_mouse_up(self, event: events.MouseUp) -> None:
        dragged = self.has_class("dragging")
        self._press_x = None
        self.release_mouse()
        self.remove_class("dragging")
        if not dragged:
            self.focus()
            return
        target = self._status_at(event.screen_x)
        if self.issue is not None and target is not None and target != self.issue.status:
            self.post_message(self.DragMove(self.issue, target))

    def _status_at(self, screen_x: int) -> IssueStatus | None:
        """Status of the column under ``screen_x``, if any."""
        for column in self.screen.query("StatusColumn"):
            region = column.region
            if region.x <= screen_x < region.right:
                return getattr(column, "status", None)
        return None
