from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple
import pygame

from engine.turn_engine import TurnState
from ui.hud_utils import (
    _calculate_heat_color,
    _draw_panel,
    _draw_pips,
    _draw_resource_bar_with_label,
)

if TYPE_CHECKING:
    from engine.game import Game
    from engine.turn_engine import TurnEngine


TEXT_COLOR = (230, 230, 230)
HINT_COLOR = (170, 170, 170)
INVALID_COLOR = (200, 110, 110)

PHASE_LABELS = {
    TurnState.PLAYER_TURN: "Your turn",
    TurnState.BUSY: "Enemies reacting...",
    TurnState.ENEMY_TURN: "Enemy turn",
    TurnState.WON: "Victory",
    TurnState.LOST: "Defeat",
}

CONTROLS_HINT = "Click: move / attack   SPACE: end turn   R: reset   ESC: quit"


def phase_label(state: TurnState) -> str:
    return PHASE_LABELS.get(state, state.value)


def end_banner_lines(engine: "TurnEngine") -> List[str]:
    """Banner text for a finished run (empty while the run is live)."""
    if engine.state == TurnState.WON:
        return ["You made it across!", "Press R to play again."]
    if engine.state == TurnState.LOST:
        reason = engine.ctx.messages.last_message or "You lost."
        return [reason, "Press R to try again."]
    return []


def status_lines(engine: "TurnEngine") -> List[Tuple[str, Tuple[int, int, int]]]:
    """Text rows of the top-left panel below the heat bar."""
    lines = [
        (f"Turn {engine.turn_number}  -  {phase_label(engine.state)}", TEXT_COLOR),
        (f"Actions: {engine.actions_left}/{engine.actions_per_turn}", TEXT_COLOR),
    ]
    limit = engine.rules.max_consecutive_burn_tiles
    if engine.consecutive_burn_count > 0:
        lines.append((f"Burn streak: {engine.consecutive_burn_count}/{limit}", INVALID_COLOR))
    enemies = engine.ctx.living_enemies()
    lines.append((f"Enemies: {len(enemies)}", HINT_COLOR))
    return lines


def draw_hud(game: "Game") -> None:
    """
    Draw the run HUD:
    - Top-left panel: heat bar, turn / phase, action pips, burn streak
    - Bottom band: latest message and hover preview, controls hint
    - Center banner once the run is won or lost
    """
    engine = game.engine
    screen = game.screen
    ui_font = game.ui_font
    screen_w, screen_h = screen.get_size()

    # --------------------------------------------------------------
    # STATUS PANEL (top-left)
    # --------------------------------------------------------------
    panel_x = 8
    panel_y = 8
    panel_w = 260
    panel_h = 150
    _draw_panel(screen, panel_x, panel_y, panel_w, panel_h)

    text_x = panel_x + 10
    y = panel_y + 8

    heat_fraction = engine.heat / engine.max_heat if engine.max_heat > 0 else 0.0
    y = _draw_resource_bar_with_label(
        screen,
        ui_font,
        text_x,
        y,
        panel_w - 20,
        12,
        "Heat",
        engine.heat,
        engine.max_heat,
        TEXT_COLOR,
        (40, 30, 25),
        _calculate_heat_color(heat_fraction),
    )

    for text, color in status_lines(engine):
        surf = ui_font.render(text, True, color)
        screen.blit(surf, (text_x, y))
        y += 20

    _draw_pips(screen, text_x + 150, panel_y + 56, engine.actions_left, engine.actions_per_turn)

    # --------------------------------------------------------------
    # MESSAGE BAND (bottom)
    # --------------------------------------------------------------
    band_h = 56
    band_y = screen_h - band_h
    _draw_panel(screen, 0, band_y, screen_w, band_h, alpha=200)

    messages = engine.ctx.messages
    if messages.last_message:
        color = messages.last_message_color or TEXT_COLOR
        msg_surf = ui_font.render(messages.last_message, True, color)
        screen.blit(msg_surf, (12, band_y + 6))

    preview = game.hover_preview
    if preview is not None and engine.accepts_input:
        color = TEXT_COLOR if preview.valid else INVALID_COLOR
        hover_surf = ui_font.render(preview.message, True, color)
        screen.blit(hover_surf, (screen_w - hover_surf.get_width() - 12, band_y + 6))

    hint_surf = ui_font.render(CONTROLS_HINT, True, HINT_COLOR)
    screen.blit(hint_surf, (12, band_y + 30))

    # --------------------------------------------------------------
    # END BANNER (center)
    # --------------------------------------------------------------
    lines = end_banner_lines(engine)
    if lines and not game.is_animating:
        draw_end_banner(game, lines)


def draw_end_banner(game: "Game", lines: List[str]) -> None:
    screen = game.screen
    screen_w, screen_h = screen.get_size()
    won = game.engine.state == TurnState.WON

    banner_w = min(screen_w - 40, 520)
    banner_h = 40 + 34 * len(lines)
    bx = (screen_w - banner_w) // 2
    by = (screen_h - banner_h) // 2
    _draw_panel(screen, bx, by, banner_w, banner_h, alpha=220)
    border = (140, 210, 160) if won else (230, 90, 70)
    pygame.draw.rect(screen, border, (bx, by, banner_w, banner_h), 2)

    y = by + 20
    for i, text in enumerate(lines):
        font = game.title_font if i == 0 else game.ui_font
        surf = font.render(text, True, TEXT_COLOR)
        screen.blit(surf, (bx + (banner_w - surf.get_width()) // 2, y))
        y += 34
