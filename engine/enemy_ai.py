# engine/enemy_ai.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from engine.error_handler import get_logger
from engine.pathfinding import PathStep
from engine.signals import EnemyActed

if TYPE_CHECKING:
    from engine.turn_engine import TurnEngine
    from world.entities import Enemy

log = get_logger("enemy_ai")


# Outcomes of one enemy turn
ACTION_ATTACK = "attack"
ACTION_MOVE = "move"
ACTION_HOLD = "hold"      # no step available, stays put
ACTION_WAIT = "wait"      # turn frequency not reached yet
ACTION_SKIP = "skip"      # dead
ACTION_BUSY = "busy"      # turn routine already running
ACTION_ABORT = "abort"    # missing reference (no tile / no player)


@dataclass(frozen=True)
class EnemyTurnResult:
    action: str
    step: Optional[PathStep] = None


def take_enemy_turn(enemy: "Enemy", engine: "TurnEngine") -> EnemyTurnResult:
    """
    One enemy turn:

    - dead enemies are skipped without touching their counter
    - the frequency counter decides whether the enemy acts this cycle
    - next to the player (no diagonals) -> attack, unless enemies are tag-only
    - otherwise take one A* step towards a free tile next to the player,
      or hold position if there is none

    Heat only changes through ``engine.apply_enemy_attack_heat``.
    """
    if enemy.executing_turn:
        log.debug("%s: turn already in progress, ignoring", enemy.name)
        return EnemyTurnResult(ACTION_BUSY)

    if enemy.is_dead:
        return EnemyTurnResult(ACTION_SKIP)

    ctx = engine.ctx
    if ctx.board.get_tile(enemy.position) is None:
        log.error("%s: not standing on a board tile (%s), turn aborted", enemy.name, enemy.position)
        return EnemyTurnResult(ACTION_ABORT)
    if ctx.player is None or ctx.board.get_tile(ctx.player.position) is None:
        log.error("%s: no player on the board, turn aborted", enemy.name)
        return EnemyTurnResult(ACTION_ABORT)

    if not enemy.tick_counter():
        log.debug("%s: waiting (%d/%d)", enemy.name, enemy.turn_counter, enemy.turn_frequency)
        return EnemyTurnResult(ACTION_WAIT)

    enemy.executing_turn = True
    try:
        player_pos = ctx.player.position

        if ctx.board.is_adjacent4(enemy.position, player_pos) and ctx.rules.enemies_attack:
            log.info("%s attacks from %s (+%d heat)", enemy.name, enemy.position, enemy.attack_heat)
            ctx.hooks.play_attack(enemy, player_pos)
            engine.apply_enemy_attack_heat(enemy.attack_heat)
            ctx.hooks.spawn_attack_effect(player_pos)
            ctx.bus.emit(EnemyActed(enemy.name, ACTION_ATTACK, enemy.position))
            return EnemyTurnResult(ACTION_ATTACK)

        def is_blocked(coord) -> bool:
            return ctx.is_occupied_by_enemy(coord, exclude=enemy)

        step = ctx.pathfinder.find_next_step(enemy.position, player_pos, is_blocked)
        if step is None:
            if not ctx.board.is_adjacent4(enemy.position, player_pos):
                log.warning("%s: no path towards player at %s, holding at %s",
                            enemy.name, player_pos, enemy.position)
            ctx.bus.emit(EnemyActed(enemy.name, ACTION_HOLD, enemy.position))
            return EnemyTurnResult(ACTION_HOLD)

        src = enemy.position
        enemy.move_to(step.next_step)
        log.info("%s moves %s -> %s (path length %d)", enemy.name, src, step.next_step, step.path_length)
        ctx.hooks.play_move(enemy, src, step.next_step)
        ctx.bus.emit(EnemyActed(enemy.name, ACTION_MOVE, enemy.position))
        return EnemyTurnResult(ACTION_MOVE, step)
    finally:
        enemy.executing_turn = False
