"""StatusColumn widget for one board column."""

from __future__ import annotations

from typing import TYPE_CHECKING

from textual.containers import ScrollableContainer, Vertical
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Label

from deskboard.constants import STATUS_LABELS, WARRANTY_EXPIRING_DAYS
from deskboard.tui.widgets.card import IssueCard

if TYPE_CHECKING:
    from textual.app import ComposeResult

    from deskboard.core.models.entities import Issue
    from deskboard.core.models.enums import IssueStatus


def column_dom_id(status: IssueStatus) -> str:
    return f"column-{status.value.lower().replace(' ', '-')}"


class StatusColumn(Widget):
    can_focus = False

    issues: reactive[list[Issue]] = reactive(list, recompose=True)

    def __init__(
        self,
        status: IssueStatus,
        issues: list[Issue] | None = None,
        *,
        expiring_days: int = WARRANTY_EXPIRING_DAYS,
        selected: set[int] | None = None,
        **kwargs,
    ) -> None:
        super().__init__(id=column_dom_id(status), **kwargs)
        self.status = status
        self.expiring_days = expiring_days
        # Shared with the screen; marks survive recomposition.
        self.selected = selected if selected is not None else set()
        self.set_reactive(StatusColumn.issues, list(issues or []))

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(
                f"{STATUS_LABELS[self.status]} ({len(self.issues)})", classes="column-header"
            )
            with ScrollableContainer(classes="column-content"):
                if self.issues:
                    for issue in self.issues:
                        yield IssueCard(
                            issue,
                            expiring_days=self.expiring_days,
                            selected=issue.id in self.selected,
                        )
                else:
                    yield Label("No issues", classes="empty-message")

    def get_cards(self) -> list[IssueCard]:
        return list(self.query(IssueCard))

    def focus_card(self, index: int) -> bool:
        cards = self.get_cards()
        if not cards:
            return False
        cards[max(0, min(index, len(cards) - 1))].focus()
        return True

    def focus_issue(self, issue_id: int) -> bool:
        for card in self.get_cards():
            if card.issue is not None and card.issue.id == issue_id:
                card.focus()
                return True
        return False
