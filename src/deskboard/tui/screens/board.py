"""Kanban board screen."""

from __future__ import annotations

import logging
from contextlib import suppress
from typing import TYPE_CHECKING

from textual.containers import Horizontal
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widgets import Footer, Input, Label

from deskboard.constants import (
    COLUMN_ORDER,
    MIN_SCREEN_HEIGHT,
    MIN_SCREEN_WIDTH,
    NOTIFICATION_TITLE_MAX_LENGTH,
    STATUS_LABELS,
    WARRANTY_EXPIRING_DAYS,
)
from deskboard.core.board import ReorderOutcome
from deskboard.core.models.enums import IssueStatus
from deskboard.core.services.issues import IssueServiceError
from deskboard.tui.keybindings import BOARD_BINDINGS
from deskboard.tui.widgets.card import IssueCard
from deskboard.tui.widgets.column import StatusColumn, column_dom_id

if TYPE_CHECKING:
    from collections.abc import Callable

    from textual.app import ComposeResult

    from deskboard.core.board import BoardColumn, BoardController
    from deskboard.core.filters import FilterCriteria, FilterStore
    from deskboard.core.url_sync import UrlSync

logger = logging.getLogger(__name__)


class BoardScreen(Screen[None]):
    """Four status columns; keyboard or mouse moves change issue status."""

    BINDINGS = BOARD_BINDINGS

    def __init__(
        self,
        controller: BoardController,
        store: FilterStore,
        url_sync: UrlSync,
        *,
        expiring_days: int = WARRANTY_EXPIRING_DAYS,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.expiring_days = expiring_days
        self.controller = controller
        self.store = store
        self.url_sync = url_sync
        self._unsubscribers: list[Callable[[], None]] = []
        self.selected: set[int] = set()

    def compose(self) -> ComposeResult:
        yield Label("", id="share-link")
        with Horizontal(classes="board-container"):
            for status in COLUMN_ORDER:
                yield StatusColumn(
                    status, expiring_days=self.expiring_days, selected=self.selected
                )
        search = Input(placeholder="Search issues...", id="search-input")
        search.display = False
        yield search
        yield Footer()

    def on_mount(self) -> None:
        # Hydrate from the link before listening, so hydration doesn't count as a change.
        self.url_sync.start()
        self._unsubscribers.append(self.controller.subscribe(self._render_columns))
        self._unsubscribers.append(self.store.subscribe(self._on_filters_changed))
        self._update_share_link()
        self._check_screen_size()
        self.schedule_load()

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.url_sync.stop()

    def on_resize(self) -> None:
        self._check_screen_size()

    def _check_screen_size(self) -> None:
        size = self.app.size
        if size.width < MIN_SCREEN_WIDTH or size.height < MIN_SCREEN_HEIGHT:
            self.add_class("too-small")
        else:
            self.remove_class("too-small")

    # -- state -> widgets -------------------------------------------------

    def _render_columns(self, columns: list[BoardColumn]) -> None:
        focused_id = self._focused_issue_id()
        for column in columns:
            with suppress(NoMatches):
                widget = self.query_one(f"#{column_dom_id(column.status)}", StatusColumn)
                widget.issues = list(column.issues)
        if focused_id is not None:
            self.call_after_refresh(self._restore_focus, focused_id)

    def _restore_focus(self, issue_id: int) -> None:
        location = self.controller.locate(issue_id)
        if location is None:
            return
        with suppress(NoMatches):
            self._column_widget(location[0]).focus_issue(issue_id)

    def _on_filters_changed(self, criteria: FilterCriteria) -> None:
        del criteria
        self._update_share_link()
        self.schedule_load()

    def _update_share_link(self) -> None:
        with suppress(NoMatches):
            self.query_one("#share-link", Label).update(f"Link: {self.url_sync.share_link()}")

    # -- loading ------------------------------------------------------------

    def schedule_load(self) -> None:
        # Overlapping loads are fine; the controller drops superseded responses.
        self.run_worker(self._load(), group="board-load")

    async def _load(self) -> None:
        try:
            await self.controller.load(self.store.criteria)
        except IssueServiceError as exc:
            logger.error("Board load failed: %s", exc)
            self.notify(f"Failed to load issues: {exc}", severity="error")

    # -- focus helpers --------------------------------------------------

    def _column_widget(self, status: IssueStatus) -> StatusColumn:
        return self.query_one(f"#{column_dom_id(status)}", StatusColumn)

    def _focused_card(self) -> IssueCard | None:
        focused = self.app.focused
        if isinstance(focused, IssueCard) and focused.issue is not None:
            return focused
        return None

    def _focused_issue_id(self) -> int | None:
        card = self._focused_card()
        return card.issue.id if card is not None and card.issue is not None else None

    def _focused_position(self) -> tuple[IssueStatus, int] | None:
        issue_id = self._focused_issue_id()
        if issue_id is None:
            return None
        return self.controller.locate(issue_id)

    def _focus_column(self, delta: int) -> None:
        position = self._focused_position()
        if position is None:
            self._focus_first_card()
            return
        status, index = position
        column_index = COLUMN_ORDER.index(status)
        target = column_index + delta
        while 0 <= target < len(COLUMN_ORDER):
            if self._column_widget(COLUMN_ORDER[target]).focus_card(index):
                return
            target += delta

    def _focus_first_card(self) -> None:
        for status in COLUMN_ORDER:
            if self._column_widget(status).focus_card(0):
                return

    def action_focus_left(self) -> None:
        self._focus_column(-1)

    def action_focus_right(self) -> None:
        self._focus_column(1)

    def action_focus_up(self) -> None:
        position = self._focused_position()
        if position is None:
            self._focus_first_card()
            return
        self._column_widget(position[0]).focus_card(position[1] - 1)

    def action_focus_down(self) -> None:
        position = self._focused_position()
        if position is None:
            self._focus_first_card()
            return
        self._column_widget(position[0]).focus_card(position[1] + 1)

    # -- moves ------------------------------------------------------------

    async def _reorder(
        self, source: IssueStatus, index: int, dest: IssueStatus, dest_index: int
    ) -> None:
        if self.controller.pending_transition is not None:
            self.notify("Another move is still being saved", severity="warning")
            return
        column = self.controller.column(source)
        if column is None or not 0 <= index < len(column.issues):
            return
        issue = column.issues[index]

        try:
            outcome = await self.controller.on_reorder(source, index, dest, dest_index)
        except IssueServiceError as exc:
            # The rollback reload itself failed.
            logger.error("Board reload after failed move failed: %s", exc)
            self.notify(
                f"Move failed and the board could not be reloaded ({exc}); press r to retry",
                severity="error",
            )
            return
        if outcome is ReorderOutcome.ROLLED_BACK:
            error = self.controller.last_error
            self.notify(f"Move failed, board reloaded: {error}", severity="error")
        elif outcome is ReorderOutcome.MOVED:
            title = issue.title[:NOTIFICATION_TITLE_MAX_LENGTH]
            self.notify(f"#{issue.id} {title}: {STATUS_LABELS[source]} -> {STATUS_LABELS[dest]}")

    def _move_focused(self, delta: int) -> None:
        position = self._focused_position()
        if position is None:
            return
        status, index = position
        target = COLUMN_ORDER.index(status) + delta
        if not 0 <= target < len(COLUMN_ORDER):
            return
        dest = COLUMN_ORDER[target]
        dest_len = len(self.controller.column(dest).issues)
        self.run_worker(self._reorder(status, index, dest, min(index, dest_len)))

    def action_move_left(self) -> None:
        self._move_focused(-1)

    def action_move_right(self) -> None:
        self._move_focused(1)

    def _reorder_focused(self, delta: int) -> None:
        position = self._focused_position()
        if position is None:
            return
        status, index = position
        size = len(self.controller.column(status).issues)
        if not 0 <= index + delta < size:
            return
        self.run_worker(self._reorder(status, index, status, index + delta))

    def action_reorder_up(self) -> None:
        self._reorder_focused(-1)

    def action_reorder_down(self) -> None:
        self._reorder_focused(1)

    def on_issue_card_drag_move(self, message: IssueCard.DragMove) -> None:
        location = self.controller.locate(message.issue.id)
        if location is None:
            return
        status, index = location
        self.run_worker(self._reorder(status, index, message.target_status, 0))

    # -- batch --------------------------------------------------------------

    def action_toggle_select(self) -> None:
        card = self._focused_card()
        if card is None or card.issue is None:
            return
        issue_id = card.issue.id
        if issue_id in self.selected:
            self.selected.discard(issue_id)
        else:
            self.selected.add(issue_id)
        card.set_class(issue_id in self.selected, "selected")

    def action_close_selected(self) -> None:
        issue_ids = sorted(self.selected)
        if not issue_ids and (focused := self._focused_issue_id()) is not None:
            issue_ids = [focused]
        if issue_ids:
            self.run_worker(self._close_issues(issue_ids))

    async def _close_issues(self, issue_ids: list[int]) -> None:
        try:
            result = await self.controller.batch_update(issue_ids, status=IssueStatus.CLOSED)
        except IssueServiceError as exc:
            logger.error("Batch close failed: %s", exc)
            self.notify(f"Failed to close issues: {exc}", severity="error")
            return
        self.selected.difference_update(issue_ids)
        for card in self.query(IssueCard):
            if card.issue is not None:
                card.set_class(card.issue.id in self.selected, "selected")
        self.notify(f"Closed {result.updated_count} issue(s)")

    # -- filters ----------------------------------------------------------

    def action_reload(self) -> None:
        self.schedule_load()

    def action_reset_filters(self) -> None:
        self.store.reset()
        with suppress(NoMatches):
            self.query_one("#search-input", Input).value = ""

    def action_toggle_status_filter(self, column_index: int) -> None:
        status = COLUMN_ORDER[column_index].value
        selected = list(self.store.criteria.status)
        if status in selected:
            selected.remove(status)
        else:
            selected.append(status)
        self.store.set_status(selected)

    def action_toggle_search(self) -> None:
        search = self.query_one("#search-input", Input)
        search.display = not search.display
        if search.display:
            search.value = self.store.criteria.search or ""
            search.focus()
        else:
            self._focus_first_card()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "search-input":
            return
        self.store.set_search(event.value.strip() or None)
        event.input.display = False
        self._focus_first_card()
