"""Main deskboard TUI application."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from textual.app import App

from deskboard.config import DeskboardConfig
from deskboard.core.board import BoardController
from deskboard.core.filters import FilterStore
from deskboard.core.services.issues import HttpIssueService
from deskboard.core.url_sync import BrowserHistory, UrlSync
from deskboard.debug_log import setup_debug_logging
from deskboard.tui.keybindings import APP_BINDINGS
from deskboard.tui.modals.debug_log import DebugLogModal
from deskboard.tui.screens.board import BoardScreen

if TYPE_CHECKING:
    from deskboard.core.services.issues import IssueService

logger = logging.getLogger(__name__)


class DeskboardApp(App[None]):
    """Service-desk console: issue board driven by the REST API."""

    TITLE = "deskboard"
    CSS_PATH = "styles/deskboard.tcss"
    BINDINGS = APP_BINDINGS

    def __init__(
        self,
        *,
        config: DeskboardConfig | None = None,
        service: IssueService | None = None,
        start_url: str = "/issues",
    ) -> None:
        super().__init__()
        self.config = config or DeskboardConfig()
        self._owned_service: HttpIssueService | None = None
        if service is None:
            self._owned_service = HttpIssueService(self.config.api)
            service = self._owned_service
        self.service = service
        self.store = FilterStore()
        self.history = BrowserHistory.at(start_url)
        self.url_sync = UrlSync(self.store, self.history)
        self.controller = BoardController(
            service, self.store, page_size=self.config.board.page_size
        )

    async def on_mount(self) -> None:
        setup_debug_logging()
        logger.info("Connecting to %s", self.config.api.base_url)
        await self.push_screen(
            BoardScreen(
                self.controller,
                self.store,
                self.url_sync,
                expiring_days=self.config.warranty.expiring_days,
            )
        )

    async def on_unmount(self) -> None:
        if self._owned_service is not None:
            await self._owned_service.aclose()

    def action_toggle_debug_log(self) -> None:
        if isinstance(self.screen, DebugLogModal):
            self.screen.dismiss(None)
        else:
            self.push_screen(DebugLogModal())
