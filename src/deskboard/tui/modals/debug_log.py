"""Debug log viewer modal (F12)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from rich.markup import escape
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Footer, Label, RichLog, Rule

from deskboard.debug_log import LogCursor, log_buffer
from deskboard.paths import get_debug_log_path
from deskboard.tui.keybindings import DEBUG_LOG_BINDINGS

if TYPE_CHECKING:
    from textual.app import ComposeResult

    from deskboard.debug_log import LogEntry

REFRESH_INTERVAL = 0.5

_LEVEL_STYLES = {
    "DEBUG": "dim",
    "INFO": "blue",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold red",
}


def render_entry(entry: LogEntry) -> str:
    """Rich markup line for one entry; the message itself is escaped."""
    style = _LEVEL_STYLES.get(entry.level, "white")
    stamp = datetime.fromtimestamp(entry.timestamp).strftime("%H:%M:%S")
    return f"[{style}]{stamp} \\[{entry.level}][/{style}] {escape(entry.message)}"


class DebugLogModal(ModalScreen[None]):
    """Tails :data:`deskboard.debug_log.log_buffer` while open."""

    BINDINGS = DEBUG_LOG_BINDINGS

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._cursor = LogCursor(generation=-1)

    def compose(self) -> ComposeResult:
        with Vertical(id="debug-log-container"):
            yield Label("Debug Logs", classes="modal-title")
            yield Label(
                "[dim]F12/Escape close · c clear · s save[/dim]", classes="modal-subtitle"
            )
            yield Rule()
            yield RichLog(id="debug-log", markup=True, wrap=True)
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_log()
        self.set_interval(REFRESH_INTERVAL, self._refresh_log)

    @property
    def _log(self) -> RichLog:
        return self.query_one("#debug-log", RichLog)

    def _refresh_log(self) -> None:
        entries, self._cursor, restart = log_buffer.read_since(self._cursor)
        if restart:
            self._log.clear()
        for entry in entries:
            self._log.write(render_entry(entry))

    def action_close(self) -> None:
        self.dismiss(None)

    def action_clear_logs(self) -> None:
        log_buffer.clear()
        self._refresh_log()
        self._log.write("[dim]Logs cleared[/dim]")

    def action_save_logs(self) -> None:
        path = get_debug_log_path()
        try:
            count = log_buffer.export(path)
        except OSError as exc:
            self._log.write(f"[red]Failed to export logs: {escape(str(exc))}[/red]")
            return
        self._log.write(f"[green]Exported {count} entries to {escape(str(path))}[/green]")
