"""
Unit tests for the pygame front end.
"""

import pygame

from engine.game import Game
from engine.turn_engine import TurnState


def _settle(game, steps=20, dt=0.25):
    for _ in range(steps):
        game.update(dt)
        if not game.is_animating:
            return


def _click(game, coord):
    sx, sy = game.tile_to_screen(coord)
    pos = (int(sx + game.tile_size // 2), int(sy + game.tile_size // 2))
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=pos)


class TestGame:
    """Tests for Game."""

    def test_screen_tile_mapping(self, sample_screen):
        """Tile centers map back to their own coordinate."""
        game = Game(sample_screen, layout_text="...\n.P.\n..G")
        for coord in game.engine.ctx.board:
            sx, sy = game.tile_to_screen(coord)
            center = (int(sx + game.tile_size // 2), int(sy + game.tile_size // 2))
            assert game.screen_to_tile(*center) == coord
        assert game.screen_to_tile(0, 0) is None

    def test_top_row_drawn_highest(self, sample_screen):
        """Higher y is drawn nearer the top of the screen."""
        game = Game(sample_screen, layout_text="G\nP")
        assert game.tile_to_screen((0, 1))[1] < game.tile_to_screen((0, 0))[1]

    def test_click_moves_and_replays(self, sample_screen):
        """A click moves the player at once; the drawing catches up later."""
        game = Game(sample_screen, layout_text="P..G")
        player = game.engine.ctx.player

        game.handle_event(_click(game, (1, 0)))

        assert player.position == (1, 0)
        assert game.is_animating
        _settle(game)
        assert not game.is_animating
        assert game.display_pos[id(player)] == (1.0, 0.0)

    def test_click_ignored_while_animating(self, sample_screen):
        """Input waits for the replay to finish."""
        game = Game(sample_screen, layout_text="P..G")
        game.handle_event(_click(game, (1, 0)))
        game.handle_event(_click(game, (2, 0)))
        assert game.engine.ctx.player.position == (1, 0)

    def test_click_on_enemy_attacks(self, sample_screen):
        """Clicking an adjacent enemy attacks it."""
        game = Game(sample_screen, layout_text="PE.G")
        enemy = game.engine.ctx.enemies[0]
        game.handle_event(_click(game, (1, 0)))
        assert enemy.health == 1

    def test_dead_enemy_hidden_after_replay(self, sample_screen):
        """A killed enemy disappears once its death is replayed."""
        from engine.config import RulesConfig

        game = Game(sample_screen, layout_text="PE.G", rules=RulesConfig(enemy_health=1))
        enemy = game.engine.ctx.enemies[0]
        game.click_tile((1, 0))
        _settle(game)
        assert id(enemy) in game.hidden

    def test_space_ends_turn(self, sample_screen):
        """SPACE ends the player's turn."""
        game = Game(sample_screen, layout_text="P....E\nG.....")
        game.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE))
        assert game.engine.turn_number == 2

    def test_reset_key_snaps_display(self, sample_screen):
        """R resets the run and drops pending animations."""
        game = Game(sample_screen, layout_text="P..G")
        player = game.engine.ctx.player
        game.click_tile((1, 0))

        game.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_r))

        assert game.engine.state == TurnState.PLAYER_TURN
        assert player.position == (0, 0)
        assert not game.is_animating
        assert game.display_pos[id(player)] == (0.0, 0.0)

    def test_hover_preview(self, sample_screen):
        """Mouse motion over a tile sets the hover preview."""
        game = Game(sample_screen, layout_text="PS.G")
        sx, sy = game.tile_to_screen((1, 0))
        pos = (int(sx + 2), int(sy + 2))
        game.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=pos, rel=(0, 0), buttons=(0, 0, 0)))
        assert game.hover_preview.message == "Move: -10 Heat"

    def test_draw_smoke(self, sample_screen):
        """Drawing works mid-animation."""
        game = Game(sample_screen, layout_text="PE.G")
        game.click_tile((1, 0))
        game.update(0.05)
        game.draw()
