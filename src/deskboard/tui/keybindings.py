"""Keybindings for the deskboard TUI.

Plain Textual ``Binding`` lists, one per screen.
"""

from __future__ import annotations

from textual.binding import Binding, BindingType

APP_BINDINGS: list[BindingType] = [
    Binding("q", "quit", "Quit"),
    Binding("f12", "toggle_debug_log", "Debug", show=False),
]

BOARD_BINDINGS: list[BindingType] = [
    Binding("r", "reload", "Reload"),
    Binding("slash", "toggle_search", "Search", key_display="/"),
    Binding("x", "reset_filters", "Reset filters"),
    Binding("1", "toggle_status_filter(0)", "Open", show=False),
    Binding("2", "toggle_status_filter(1)", "In Progress", show=False),
    Binding("3", "toggle_status_filter(2)", "Pending", show=False),
    Binding("4", "toggle_status_filter(3)", "Closed", show=False),
    # Status transitions
    Binding("left_square_bracket", "move_left", "Move left", key_display="["),
    Binding("right_square_bracket", "move_right", "Move right", key_display="]"),
    # Batch close
    Binding("space", "toggle_select", "Select", show=False),
    Binding("c", "close_selected", "Close selected"),
    # In-column ordering (session only)
    Binding("K", "reorder_up", "Up", show=False, key_display="Shift+K"),
    Binding("J", "reorder_down", "Down", show=False, key_display="Shift+J"),
    # Navigation - vim style
    Binding("h", "focus_left", "Left", show=False),
    Binding("j", "focus_down", "Down", show=False),
    Binding("k", "focus_up", "Up", show=False),
    Binding("l", "focus_right", "Right", show=False),
    Binding("left", "focus_left", "Left", show=False),
    Binding("right", "focus_right", "Right", show=False),
    Binding("down", "focus_down", "Down", show=False),
    Binding("up", "focus_up", "Up", show=False),
]

DEBUG_LOG_BINDINGS: list[BindingType] = [
    Binding("escape", "close", "Close"),
    Binding("f12", "close", "Close", show=False),
    Binding("c", "clear_logs", "Clear"),
    Binding("s", "save_logs", "Save"),
]
