"""
Unit tests for the message log.
"""

from engine.message_log import WARNING_COLOR, MessageLog


class TestMessageLog:
    """Tests for MessageLog."""

    def test_add_entry(self):
        """New entries become the last message."""
        log = MessageLog()
        log.add_entry("Blocked.")
        assert log.last_message == "Blocked."
        assert log.entries == ["Blocked."]

    def test_multiline_split(self):
        """Multi-line text becomes one entry per line."""
        log = MessageLog()
        log.add_entry("first\n\nsecond\r\nthird")
        assert log.entries == ["first", "second", "third"]
        assert log.last_message == "third"

    def test_empty_clears_last_message_only(self):
        """Empty text hides the last message but keeps history."""
        log = MessageLog()
        log.add_entry("Blocked.")
        log.add_entry("   ")
        assert log.last_message == ""
        assert log.entries == ["Blocked."]

    def test_max_size(self):
        """History is clamped to the most recent entries."""
        log = MessageLog(max_size=3)
        for i in range(5):
            log.add_entry(f"m{i}")
        assert log.entries == ["m2", "m3", "m4"]
        assert len(log.entry_colors) == 3
        assert log.recent(2) == ["m3", "m4"]

    def test_warn_uses_warning_color(self):
        """Warnings carry the warning color."""
        log = MessageLog()
        log.warn("Not your turn.")
        assert log.last_message_color == WARNING_COLOR
        assert log.entry_colors[-1] == WARNING_COLOR

    def test_clear(self):
        """clear empties everything."""
        log = MessageLog()
        log.warn("x")
        log.clear()
        assert log.entries == []
        assert log.last_message == ""
        assert log.last_message_color is None
