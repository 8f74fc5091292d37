# engine/game.py

from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional, Tuple

import pygame

from settings import (
    COLOR_BG,
    COLOR_ENEMY,
    COLOR_GOAL,
    COLOR_PLAYER,
    TILE_SIZE,
    MOVE_ANIM_SECONDS,
    ATTACK_ANIM_SECONDS,
    ENEMY_GAP_SECONDS,
)
from engine.config import RulesConfig
from engine.error_handler import get_logger
from engine.presentation import RecordingHooks
from engine.turn_engine import TilePreview, TurnEngine, new_game
from world.entities import Enemy, Unit
from world.layouts import DESERT_CROSSING
from world.tiles import Coord
from ui.hud import draw_hud

log = get_logger("game")

# Room reserved for the HUD panel (top) and message band (bottom)
HUD_TOP = 170
HUD_BOTTOM = 64


@dataclass
class _Animation:
    kind: str
    args: Tuple[Any, ...]
    duration: float
    elapsed: float = 0.0

    @property
    def done(self) -> bool:
        return self.elapsed >= self.duration


class Game:
    """
    pygame front end.

    The turn engine resolves every command immediately. The hook calls it
    records are replayed here one at a time with the pacing from
    settings.py, so what is drawn lags the simulation by a few frames.
    Input is ignored until the replay catches up.
    """

    def __init__(
        self,
        screen: pygame.Surface,
        layout_text: str = DESERT_CROSSING,
        rules: Optional[RulesConfig] = None,
    ) -> None:
        self.screen = screen

        self.hooks = RecordingHooks()
        self.engine: TurnEngine = new_game(layout_text, rules=rules, hooks=self.hooks)

        self.ui_font = pygame.font.SysFont("consolas", 18)
        self.title_font = pygame.font.SysFont("consolas", 26, bold=True)

        # Replay state
        self.queue: Deque[Tuple[str, Tuple[Any, ...]]] = deque()
        self.current: Optional[_Animation] = None
        self.display_pos: Dict[int, Tuple[float, float]] = {}
        self.hidden: set = set()
        self.effects: List[List[Any]] = []  # [coord, seconds_left]
        self.player_down: bool = False

        self.hover_preview: Optional[TilePreview] = None

        self._layout_board()
        self._snap_units()
        self.hooks.drain()

    # ------------------------------------------------------------------
    # Board <-> screen
    # ------------------------------------------------------------------

    def _layout_board(self) -> None:
        min_x, min_y, max_x, max_y = self.engine.ctx.board.bounds()
        self.min_x, self.max_y = min_x, max_y
        cols = max(1, max_x - min_x + 1)
        rows = max(1, max_y - min_y + 1)

        screen_w, screen_h = self.screen.get_size()
        avail_h = max(1, screen_h - HUD_TOP - HUD_BOTTOM)
        self.tile_size = max(8, min(TILE_SIZE, (screen_w - 20) // cols, avail_h // rows))

        self.origin_x = (screen_w - cols * self.tile_size) // 2
        self.origin_y = HUD_TOP + (avail_h - rows * self.tile_size) // 2

    def tile_to_screen(self, coord: Tuple[float, float]) -> Tuple[float, float]:
        """Top-left pixel of a (possibly fractional) tile coordinate. y grows upward."""
        x, y = coord
        return (
            self.origin_x + (x - self.min_x) * self.tile_size,
            self.origin_y + (self.max_y - y) * self.tile_size,
        )

    def screen_to_tile(self, px: int, py: int) -> Optional[Coord]:
        if px < self.origin_x or py < self.origin_y:
            return None
        col = (px - self.origin_x) // self.tile_size
        row = (py - self.origin_y) // self.tile_size
        coord = (int(self.min_x + col), int(self.max_y - row))
        if coord not in self.engine.ctx.board:
            return None
        return coord

    # ------------------------------------------------------------------
    # Replay of presentation hooks
    # ------------------------------------------------------------------

    @property
    def is_animating(self) -> bool:
        return self.current is not None or bool(self.queue)

    def _units(self) -> List[Unit]:
        ctx = self.engine.ctx
        return [ctx.player, *ctx.roster]

    def _snap_units(self) -> None:
        self.display_pos = {id(u): (float(u.position[0]), float(u.position[1])) for u in self._units()}
        self.hidden = {id(e) for e in self.engine.ctx.roster if e.is_dead}
        self.player_down = False

    def _collect_hook_calls(self) -> None:
        for name, args in self.hooks.drain():
            if name == "reset":
                self.queue.clear()
                self.current = None
                self.effects.clear()
                self._snap_units()
                continue
            self.queue.append((name, args))

    def _start_next(self) -> None:
        name, args = self.queue.popleft()
        gap = 0.0
        if name in ("move", "attack") and isinstance(args[0], Enemy):
            gap = ENEMY_GAP_SECONDS

        if name == "move":
            self.current = _Animation(name, args, MOVE_ANIM_SECONDS + gap)
        elif name == "attack":
            self.current = _Animation(name, args, ATTACK_ANIM_SECONDS + gap)
        elif name == "effect":
            self.effects.append([args[0], ATTACK_ANIM_SECONDS])
            self.current = None
        elif name == "death":
            unit = args[0]
            if isinstance(unit, Enemy):
                self.hidden.add(id(unit))
            else:
                self.player_down = True
            self.current = None

    def _finish(self, anim: _Animation) -> None:
        if anim.kind == "move":
            unit, _src, dst = anim.args
            self.display_pos[id(unit)] = (float(dst[0]), float(dst[1]))

    def _advance(self, dt: float) -> None:
        anim = self.current
        if anim is None:
            return
        anim.elapsed += dt
        if anim.kind == "move":
            unit, src, dst = anim.args
            t = min(1.0, anim.elapsed / MOVE_ANIM_SECONDS) if MOVE_ANIM_SECONDS > 0 else 1.0
            self.display_pos[id(unit)] = (
                src[0] + (dst[0] - src[0]) * t,
                src[1] + (dst[1] - src[1]) * t,
            )
        if anim.done:
            self._finish(anim)
            self.current = None

    # ------------------------------------------------------------------
    # Main loop: update
    # ------------------------------------------------------------------

    def update(self, dt: float) -> None:
        self._collect_hook_calls()

        self._advance(dt)
        while self.current is None and self.queue:
            self._start_next()

        for effect in self.effects:
            effect[1] -= dt
        self.effects = [e for e in self.effects if e[1] > 0.0]

    # ------------------------------------------------------------------
    # Main loop: event handling
    # ------------------------------------------------------------------

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_r:
                # Reset is allowed at any time, even mid-replay
                self.engine.reset_run()
                self._collect_hook_calls()
            elif event.key == pygame.K_SPACE and not self.is_animating:
                self.engine.end_player_turn()
                self._collect_hook_calls()
            elif event.key == pygame.K_ESCAPE:
                pygame.event.post(pygame.event.Event(pygame.QUIT))

        elif event.type == pygame.MOUSEMOTION:
            coord = self.screen_to_tile(*event.pos)
            self.hover_preview = self.engine.preview(coord) if coord is not None else None

        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.is_animating:
                return
            coord = self.screen_to_tile(*event.pos)
            if coord is None:
                return
            self.click_tile(coord)

    def click_tile(self, coord: Coord) -> None:
        """Attack if an enemy stands there, otherwise try to step onto it."""
        if self.engine.ctx.get_enemy_at(coord) is not None:
            result = self.engine.try_attack(coord)
        else:
            result = self.engine.try_enter(coord)
        if not result:
            log.debug("Click on %s refused: %s", coord, result.message)
        self._collect_hook_calls()
        self.hover_preview = self.engine.preview(coord)

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw(self) -> None:
        self.screen.fill(COLOR_BG)
        self.draw_board()
        self.draw_units()
        draw_hud(self)

    def draw_board(self) -> None:
        ts = self.tile_size
        ctx = self.engine.ctx
        for coord, tile in ctx.board.items():
            sx, sy = self.tile_to_screen(coord)
            rect = pygame.Rect(int(sx), int(sy), ts, ts)
            pygame.draw.rect(self.screen, tile.color, rect)
            pygame.draw.rect(self.screen, COLOR_BG, rect, 1)
            if coord == ctx.goal:
                pygame.draw.rect(self.screen, COLOR_GOAL, rect.inflate(-6, -6), 3)

        for coord, _left in self.effects:
            sx, sy = self.tile_to_screen(coord)
            center = (int(sx + ts / 2), int(sy + ts / 2))
            pygame.draw.circle(self.screen, (255, 240, 180), center, ts // 2 - 2, 3)

    def draw_units(self) -> None:
        ts = self.tile_size
        ctx = self.engine.ctx
        anim = self.current

        for enemy in ctx.roster:
            if id(enemy) in self.hidden:
                continue
            sx, sy = self.tile_to_screen(self.display_pos.get(id(enemy), enemy.position))
            rect = pygame.Rect(int(sx) + ts // 6, int(sy) + ts // 6, ts * 2 // 3, ts * 2 // 3)
            color = COLOR_ENEMY
            if anim is not None and anim.kind == "attack" and anim.args[0] is enemy:
                color = (255, 160, 120)
            pygame.draw.rect(self.screen, color, rect)
            hp_surf = self.ui_font.render(str(enemy.health), True, (255, 255, 255))
            self.screen.blit(hp_surf, hp_surf.get_rect(center=rect.center))

        player = ctx.player
        sx, sy = self.tile_to_screen(self.display_pos.get(id(player), player.position))
        center = (int(sx + ts / 2), int(sy + ts / 2))
        color = (110, 100, 60) if self.player_down else COLOR_PLAYER
        if anim is not None and anim.kind == "attack" and anim.args[0] is player:
            color = (255, 255, 200)
        pygame.draw.circle(self.screen, color, center, ts // 3)
