"""
Unit tests for HUD helpers and drawing.
"""

from engine.config import RulesConfig
from engine.game import Game
from engine.turn_engine import TurnState
from ui.hud import draw_hud, end_banner_lines, phase_label, status_lines
from ui.hud_utils import _calculate_heat_color, _draw_bar


class TestHudText:
    """Tests for the text helpers."""

    def test_phase_labels(self):
        """Every phase has a label."""
        for state in TurnState:
            assert phase_label(state)
        assert phase_label(TurnState.PLAYER_TURN) == "Your turn"

    def test_status_lines(self, make_engine):
        """Status rows show turn, actions and the burn streak."""
        engine = make_engine("PBG")
        texts = [t for t, _ in status_lines(engine)]
        assert texts[0].startswith("Turn 1")
        assert "Actions: 3/3" in texts
        assert not any(t.startswith("Burn streak") for t in texts)

        engine.try_enter((1, 0))
        texts = [t for t, _ in status_lines(engine)]
        assert "Burn streak: 1/2" in texts

    def test_end_banner(self, make_engine):
        """Banner text only appears once the run is over."""
        engine = make_engine("PG")
        assert end_banner_lines(engine) == []
        engine.try_enter((1, 0))
        assert end_banner_lines(engine)[0] == "You made it across!"


class TestHudDrawing:
    """Tests for drawing helpers."""

    def test_heat_color_range(self):
        """Heat color goes from pale to red."""
        assert _calculate_heat_color(0.0) == (255, 230, 120)
        assert _calculate_heat_color(0.5) == (255, 150, 60)
        assert _calculate_heat_color(1.0) == (230, 50, 40)
        assert _calculate_heat_color(2.0) == _calculate_heat_color(1.0)

    def test_draw_bar_fills_fraction(self, sample_screen):
        """A half-full bar is filled on its left half only."""
        sample_screen.fill((0, 0, 0))
        _draw_bar(sample_screen, 10, 10, 100, 10, 0.5, (1, 1, 1), (200, 0, 0), None)
        assert sample_screen.get_at((20, 15))[:3] == (200, 0, 0)
        assert sample_screen.get_at((90, 15))[:3] == (1, 1, 1)

    def test_draw_hud_smoke(self, sample_screen):
        """The HUD draws in every state without errors."""
        game = Game(sample_screen, layout_text="PE.G")
        draw_hud(game)

        game.engine.try_enter((0, 0))
        game.hover_preview = game.engine.preview((1, 0))
        draw_hud(game)

    def test_draw_hud_after_loss(self, sample_screen):
        """The defeat banner is drawn once the replay has caught up."""
        game = Game(sample_screen, layout_text="PE.G", rules=RulesConfig(starting_heat=95))
        game.click_tile((1, 0))
        assert game.engine.state == TurnState.LOST
        for _ in range(10):
            game.update(0.5)
        assert not game.is_animating
        assert end_banner_lines(game.engine)[0] == "Overheated."
        draw_hud(game)
