from __future__ import annotations

from typing import List, Optional, Tuple

# Type alias for RGB colors used in UI rendering
Color = Tuple[int, int, int]

# Rejected commands are shown in a warning color, results in the default one.
WARNING_COLOR: Color = (240, 140, 110)
SUCCESS_COLOR: Color = (140, 210, 160)


class MessageLog:
    """
    Advisory messages for the UI (why a move was refused, who won, ...).

    - Keeps a bounded history with an optional color per entry
    - Tracks the latest visible message
    - Multi-line messages become one entry per line
    """

    def __init__(self, max_size: int = 60) -> None:
        self.entries: List[str] = []
        self.entry_colors: List[Optional[Color]] = []
        self.max_size: int = max_size
        self._last_message: str = ""
        self._last_message_color: Optional[Color] = None

    def add_entry(self, value: str, color: Optional[Color] = None) -> None:
        """
        Add a message. Empty or whitespace-only text clears the visible
        last message without touching the history.
        """
        raw = "" if value is None else str(value)
        raw = raw.replace("\r\n", "\n").replace("\r", "\n")
        lines = [ln.strip() for ln in raw.split("\n") if ln.strip()]

        if not lines:
            self._last_message = ""
            self._last_message_color = None
            return

        self.entries.extend(lines)
        self.entry_colors.extend([color] * len(lines))

        # Clamp log size (keep most recent entries)
        max_len = max(1, int(self.max_size))
        if len(self.entries) > max_len:
            self.entries = self.entries[-max_len:]
            self.entry_colors = self.entry_colors[-max_len:]

        self._last_message = lines[-1]
        self._last_message_color = color

    def warn(self, value: str) -> None:
        self.add_entry(value, color=WARNING_COLOR)

    @property
    def last_message(self) -> str:
        return self._last_message

    @property
    def last_message_color(self) -> Optional[Color]:
        return self._last_message_color

    def recent(self, n: int = 5) -> List[str]:
        return self.entries[-n:]

    def clear(self) -> None:
        """Clear all messages and reset the log."""
        self.entries = []
        self.entry_colors = []
        self._last_message = ""
        self._last_message_color = None
