"""In-memory capture of the ``deskboard`` logger for the F12 viewer.

Records are kept in a bounded buffer. Viewers poll it with
:meth:`LogBuffer.read_since`, which also tells them when the buffer was
cleared or wrapped underneath them.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)

MAX_LOG_LINES = 2000
MAX_LOG_MESSAGE_LENGTH = 4000
TRUNCATION_MARKER = "... [truncated]"


@dataclass(frozen=True, slots=True)
class LogEntry:
    level: str
    message: str
    timestamp: float

    def format(self, time_format: str = "%Y-%m-%d %H:%M:%S") -> str:
        stamp = datetime.fromtimestamp(self.timestamp).strftime(time_format)
        return f"{stamp} [{self.level}] {self.message}"


@dataclass(frozen=True, slots=True)
class LogCursor:
    """Position of a reader: which clear cycle, and how many entries seen."""

    generation: int = 0
    total: int = 0


class LogBuffer:
    """Ring buffer of log entries with a monotonically growing append count."""

    def __init__(self, max_lines: int = MAX_LOG_LINES) -> None:
        self._entries: deque[LogEntry] = deque(maxlen=max_lines)
        self._generation = 0
        self._appended = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> LogEntry:
        return self._entries[index]

    @property
    def generation(self) -> int:
        return self._generation

    def append(self, entry: LogEntry) -> None:
        self._entries.append(entry)
        self._appended += 1

    def clear(self) -> None:
        self._entries.clear()
        self._appended = 0
        self._generation += 1

    def cursor(self) -> LogCursor:
        return LogCursor(self._generation, self._appended)

    def read_since(self, cursor: LogCursor) -> tuple[list[LogEntry], LogCursor, bool]:
        """Entries appended after ``cursor``.

        The flag is True when the reader must start over: the buffer was
        cleared, or more entries arrived than the buffer could hold.
        """
        new_cursor = self.cursor()
        unseen = self._appended - cursor.total
        if cursor.generation != self._generation or unseen > len(self._entries):
            return list(self._entries), new_cursor, True
        if unseen <= 0:
            return [], new_cursor, False
        return list(self._entries)[-unseen:], new_cursor, False

    def export(self, path: str | Path) -> int:
        """Write every buffered entry to ``path``; returns the entry count."""
        output = Path(path)
        output.parent.mkdir(parents=True, exist_ok=True)
        entries = list(self._entries)
        lines = [
            "# deskboard debug log export",
            f"# Entries: {len(entries)}",
            "",
            *(entry.format() for entry in entries),
        ]
        output.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return len(entries)


log_buffer = LogBuffer()


class DebugLogHandler(logging.Handler):
    """Copies formatted records into a :class:`LogBuffer`."""

    def __init__(self, buffer: LogBuffer | None = None, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.buffer = buffer if buffer is not None else log_buffer

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
        except Exception:
            self.handleError(record)
            return
        if len(message) > MAX_LOG_MESSAGE_LENGTH:
            message = message[:MAX_LOG_MESSAGE_LENGTH] + TRUNCATION_MARKER
        self.buffer.append(LogEntry(record.levelname, message, record.created))


def setup_debug_logging(level: int = logging.DEBUG) -> DebugLogHandler:
    """Route the ``deskboard`` logger into :data:`log_buffer`; safe to call repeatedly."""
    package_logger = logging.getLogger("deskboard")
    for handler in package_logger.handlers:
        if isinstance(handler, DebugLogHandler) and handler.buffer is log_buffer:
            return handler

    handler = DebugLogHandler()
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    logger.info("Debug logging enabled; press F12 to view")
    return handler
