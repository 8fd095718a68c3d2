"""Unit tests for debug log capture."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from deskboard.debug_log import (
    MAX_LOG_MESSAGE_LENGTH,
    TRUNCATION_MARKER,
    DebugLogHandler,
    LogBuffer,
    LogCursor,
    LogEntry,
    setup_debug_logging,
)
from deskboard.tui.modals.debug_log import render_entry

if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path

pytestmark = pytest.mark.unit


@pytest.fixture
def buffer() -> LogBuffer:
    return LogBuffer(max_lines=5)


@pytest.fixture
def capture_logger(buffer: LogBuffer) -> Generator[logging.Logger]:
    logger = logging.getLogger("deskboard.tests.capture")
    handler = DebugLogHandler(buffer)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield logger
    logger.removeHandler(handler)


def _entry(message: str, level: str = "INFO") -> LogEntry:
    return LogEntry(level=level, message=message, timestamp=0.0)


class TestHandler:
    def test_records_are_captured(self, capture_logger: logging.Logger, buffer: LogBuffer):
        capture_logger.warning("Moving issue #%d failed", 3)

        assert len(buffer) == 1
        assert buffer[0].level == "WARNING"
        assert buffer[0].message == "Moving issue #3 failed"

    def test_oversized_messages_are_truncated(
        self, capture_logger: logging.Logger, buffer: LogBuffer
    ):
        capture_logger.info("x" * (MAX_LOG_MESSAGE_LENGTH + 100))

        message = buffer[0].message
        assert message.endswith(TRUNCATION_MARKER)
        assert len(message) == MAX_LOG_MESSAGE_LENGTH + len(TRUNCATION_MARKER)

    def test_setup_is_idempotent(self):
        package_logger = logging.getLogger("deskboard")

        first = setup_debug_logging()
        second = setup_debug_logging()

        assert first is second
        assert sum(isinstance(h, DebugLogHandler) for h in package_logger.handlers) == 1


class TestReadSince:
    def test_incremental_reads(self, buffer: LogBuffer):
        buffer.append(_entry("one"))
        entries, cursor, restart = buffer.read_since(LogCursor())
        assert [e.message for e in entries] == ["one"]
        assert restart is False

        buffer.append(_entry("two"))
        entries, cursor, restart = buffer.read_since(cursor)

        assert [e.message for e in entries] == ["two"]
        assert buffer.read_since(cursor)[0] == []

    def test_clear_forces_restart(self, buffer: LogBuffer):
        buffer.append(_entry("old"))
        _, cursor, _ = buffer.read_since(LogCursor())

        buffer.clear()
        buffer.append(_entry("new"))
        entries, _, restart = buffer.read_since(cursor)

        assert restart is True
        assert [e.message for e in entries] == ["new"]
        assert buffer.generation == 1

    def test_wrap_forces_restart(self, buffer: LogBuffer):
        _, cursor, _ = buffer.read_since(LogCursor())

        for index in range(8):
            buffer.append(_entry(str(index)))
        entries, _, restart = buffer.read_since(cursor)

        assert restart is True
        assert [e.message for e in entries] == ["3", "4", "5", "6", "7"]


def test_export(buffer: LogBuffer, tmp_path: Path):
    buffer.append(_entry("first"))
    buffer.append(_entry("second", level="ERROR"))
    path = tmp_path / "logs" / "debug.log"

    count = buffer.export(path)

    content = path.read_text(encoding="utf-8")
    assert count == 2
    assert "# Entries: 2" in content
    assert "[INFO] first" in content
    assert "[ERROR] second" in content


def test_render_entry_escapes_markup():
    line = render_entry(_entry("[bold]not markup[/bold]", level="WARNING"))

    assert line.startswith("[yellow]")
    assert "\\[WARNING]" in line
    assert "\\[bold]not markup" in line
