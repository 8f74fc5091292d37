"""
Turn engine - the turn/action state machine.

    PlayerTurn -> Busy -> PlayerTurn            (enemies answer every action)
    PlayerTurn -> EnemyTurn -> PlayerTurn       (explicit end of turn)
    any        -> Won | Lost                    (absorbing until reset)

The engine is the only writer of heat, actions left, the burn streak and
the phase. Player commands (``try_enter``, ``try_attack``,
``end_player_turn``, ``reset_run``) are the only inbound mutators; all of
them resolve synchronously, so by the time a command returns the whole
enemy response has been applied. Presentation pacing is the front end's
business.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from engine.config import RulesConfig
from engine.enemy_ai import EnemyTurnResult, take_enemy_turn
from engine.error_handler import get_logger
from engine.message_log import SUCCESS_COLOR
from engine.presentation import PresentationHooks
from engine.signals import (
    ActionsChanged,
    EnemyDied,
    GameLost,
    GameReset,
    GameWon,
    HeatChanged,
    SignalBus,
    TurnStateChanged,
)
from engine.simulation import Simulation
from world.layouts import DESERT_CROSSING, parse_layout
from world.tiles import Coord, TileType

log = get_logger("turn_engine")


class TurnState(Enum):
    PLAYER_TURN = "player_turn"
    ENEMY_TURN = "enemy_turn"
    BUSY = "busy"
    WON = "won"
    LOST = "lost"


TERMINAL_STATES = (TurnState.WON, TurnState.LOST)

# Advisory messages for refused commands
MSG_GAME_OVER = "Game over."
MSG_NOT_YOUR_TURN = "Not your turn."
MSG_NO_ACTIONS = "No actions left."
MSG_NOT_ADJACENT = "Only adjacent tiles (no diagonals)."
MSG_BLOCKED = "Blocked."
MSG_OCCUPIED = "Tile occupied by an enemy."
MSG_BURN_STREAK = "Too many burn tiles in a row."
MSG_NO_ENEMY = "No enemy on that tile."


@dataclass(frozen=True)
class ActionResult:
    ok: bool
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True)
class TilePreview:
    """What clicking a tile would do, for hover feedback."""
    valid: bool
    message: str


class TurnEngine:
    """
    Orchestrates player turn -> enemy response -> win/lose checks.
    """

    def __init__(self, ctx: Simulation) -> None:
        self.ctx = ctx
        self._state: TurnState = TurnState.PLAYER_TURN
        self._heat: int = self._starting_heat()
        self._actions_left: int = ctx.rules.actions_per_turn
        self._consecutive_burn: int = 0
        # bumped by reset_run; an enemy cycle from an older run stops early
        self._run_id: int = 0
        self.turn_number: int = 0

        self.start_player_turn()
        # a run configured to start at max heat is already lost
        self._check_heat_loss()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def rules(self) -> RulesConfig:
        return self.ctx.rules

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def heat(self) -> int:
        return self._heat

    @property
    def max_heat(self) -> int:
        return self.rules.max_heat

    @property
    def actions_left(self) -> int:
        return self._actions_left

    @property
    def actions_per_turn(self) -> int:
        return self.rules.actions_per_turn

    @property
    def consecutive_burn_count(self) -> int:
        return self._consecutive_burn

    @property
    def is_over(self) -> bool:
        return self._state in TERMINAL_STATES

    @property
    def accepts_input(self) -> bool:
        return self._state == TurnState.PLAYER_TURN

    def can_spend_action(self) -> bool:
        return self._state == TurnState.PLAYER_TURN and self._actions_left > 0

    # ------------------------------------------------------------------
    # Turn flow
    # ------------------------------------------------------------------

    def start_player_turn(self) -> None:
        """Refill actions and hand control to the player."""
        if self.is_over:
            return

        self.turn_number += 1
        self._actions_left = self.rules.actions_per_turn
        self._set_state(TurnState.PLAYER_TURN)
        self._emit_heat()
        self._emit_actions()
        log.info("Player turn %d started (%d actions)", self.turn_number, self._actions_left)

    def end_player_turn(self) -> ActionResult:
        """
        End the turn explicitly: every living enemy acts once, then a new
        player turn starts. With tag-only enemies, ending the turn next to
        one (diagonals included) loses the run.
        """
        refusal = self._turn_refusal()
        if refusal:
            return self._refuse(refusal)

        log.info("Player ended turn %d with %d actions unused", self.turn_number, self._actions_left)
        if self._check_tagged():
            return ActionResult(True, self.ctx.messages.last_message)

        run_id = self._run_id
        self._set_state(TurnState.ENEMY_TURN)
        self._run_enemy_cycle(run_id)
        if self.is_over or run_id != self._run_id:
            return ActionResult(True)

        self.start_player_turn()
        return ActionResult(True)

    # ------------------------------------------------------------------
    # Player commands
    # ------------------------------------------------------------------

    def enter_refusal(self, coord: Coord) -> Optional[str]:
        """Why the player may not step on ``coord`` right now (None = allowed)."""
        refusal = self._turn_refusal(need_action=True)
        if refusal:
            return refusal

        tile = self.ctx.board.get_tile(coord)
        if tile is None:
            return MSG_BLOCKED
        if not self.ctx.board.is_adjacent4(self.ctx.player.position, coord):
            return MSG_NOT_ADJACENT
        if not tile.walkable:
            return MSG_BLOCKED
        if self.ctx.is_occupied_by_enemy(coord):
            return MSG_OCCUPIED
        if tile.type == TileType.BURN and self._consecutive_burn >= self.rules.max_consecutive_burn_tiles:
            return MSG_BURN_STREAK
        return None

    def can_enter(self, coord: Coord) -> bool:
        return self.enter_refusal(coord) is None

    def try_enter(self, coord: Coord) -> ActionResult:
        """Move the player one tile. Costs one action and applies the tile's heat."""
        refusal = self.enter_refusal(coord)
        if refusal:
            return self._refuse(refusal)

        ctx = self.ctx
        tile = ctx.board.get_tile(coord)

        if tile.type == TileType.BURN:
            self._consecutive_burn += 1
        else:
            self._consecutive_burn = 0

        src = ctx.player.position
        ctx.player.move_to(coord)
        heat_delta = tile.effective_heat_delta
        self._spend_action()
        self._add_heat(heat_delta)
        if tile.consume_if_needed():
            log.debug("Tile %s (%s) consumed", coord, tile.type.value)
        ctx.hooks.play_move(ctx.player, src, coord)

        log.info("Player %s -> %s (%s, %+d heat) | actions %d/%d | heat %d/%d",
                 src, coord, tile.type.value, heat_delta,
                 self._actions_left, self.actions_per_turn, self._heat, self.max_heat)

        if coord == ctx.goal:
            self._win("Goal reached.")
            return ActionResult(True, "Goal reached.")

        if self._check_heat_loss():
            return ActionResult(True, ctx.messages.last_message)

        self._enemy_response()
        return ActionResult(True)

    def attack_refusal(self, coord: Coord) -> Optional[str]:
        refusal = self._turn_refusal(need_action=True)
        if refusal:
            return refusal
        if self.ctx.get_enemy_at(coord) is None:
            return MSG_NO_ENEMY
        if not self.ctx.board.is_adjacent4(self.ctx.player.position, coord):
            return MSG_NOT_ADJACENT
        return None

    def can_attack(self, coord: Coord) -> bool:
        return self.attack_refusal(coord) is None

    def try_attack(self, coord: Coord) -> ActionResult:
        """Hit the enemy on an adjacent tile. Costs one action and ``attack_heat_cost`` heat."""
        refusal = self.attack_refusal(coord)
        if refusal:
            return self._refuse(refusal)

        ctx = self.ctx
        enemy = ctx.get_enemy_at(coord)

        ctx.hooks.play_attack(ctx.player, coord)
        enemy.take_damage(self.rules.attack_damage)
        log.info("Player hits %s for %d (hp %d)", enemy.name, self.rules.attack_damage, enemy.health)
        if enemy.is_dead:
            ctx.remove_enemy(enemy)
            ctx.hooks.play_death(enemy)
            ctx.bus.emit(EnemyDied(enemy.name, enemy.position))
            log.info("%s defeated", enemy.name)

        self._spend_action()
        self._add_heat(self.rules.attack_heat_cost)

        if self._check_heat_loss():
            return ActionResult(True, ctx.messages.last_message)

        self._enemy_response()
        return ActionResult(True)

    def preview(self, coord: Coord) -> TilePreview:
        """Hover text for a tile: attack cost on enemies, heat change on free tiles."""
        tile = self.ctx.board.get_tile(coord)
        if tile is None or not tile.walkable:
            return TilePreview(False, "Blocked")

        if self.ctx.get_enemy_at(coord) is not None:
            return TilePreview(self.can_attack(coord), f"Attack: +{self.rules.attack_heat_cost} Heat")

        delta = tile.effective_heat_delta
        signed = f"+{delta}" if delta >= 0 else str(delta)
        return TilePreview(self.can_enter(coord), f"Move: {signed} Heat")

    # ------------------------------------------------------------------
    # Enemy side
    # ------------------------------------------------------------------

    def apply_enemy_attack_heat(self, amount: int) -> None:
        """Heat damage from an enemy attack."""
        if self.is_over:
            return
        self._add_heat(amount)
        self._check_heat_loss()

    def _enemy_response(self) -> None:
        """
        Enemies answer a single player action. The turn only rotates (and
        actions refill) once the budget is spent.
        """
        run_id = self._run_id
        self._set_state(TurnState.BUSY)
        self._run_enemy_cycle(run_id)
        if self.is_over or run_id != self._run_id:
            return

        if self._actions_left <= 0:
            log.info("No actions left, turn %d over", self.turn_number)
            if self._check_tagged():
                return
            self.start_player_turn()
        else:
            self._set_state(TurnState.PLAYER_TURN)

    def _run_enemy_cycle(self, run_id: int) -> List[EnemyTurnResult]:
        # snapshot: enemies may die mid-cycle
        snapshot = list(self.ctx.enemies)
        results: List[EnemyTurnResult] = []
        for enemy in snapshot:
            if self.is_over or run_id != self._run_id:
                break
            if enemy.is_dead:
                continue
            results.append(take_enemy_turn(enemy, self))
        log.debug("Enemy cycle: %s", [r.action for r in results])
        return results

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset_run(self) -> None:
        """Restore heat, streak, tiles and units, then start a fresh player turn."""
        ctx = self.ctx
        self._run_id += 1
        self._state = TurnState.PLAYER_TURN
        self._heat = self._starting_heat()
        self._consecutive_burn = 0
        self.turn_number = 0

        ctx.board.reset_tiles()
        ctx.reset_units()
        ctx.hooks.reset_visuals()
        ctx.messages.add_entry("Run reset.")
        log.info("Run reset (%d enemies)", len(ctx.enemies))

        ctx.bus.emit(GameReset())
        self.start_player_turn()
        self._check_heat_loss()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _turn_refusal(self, need_action: bool = False) -> Optional[str]:
        if self.is_over:
            return MSG_GAME_OVER
        if self._state != TurnState.PLAYER_TURN:
            return MSG_NOT_YOUR_TURN
        if need_action and self._actions_left <= 0:
            return MSG_NO_ACTIONS
        return None

    def _starting_heat(self) -> int:
        return max(0, min(self.max_heat, self.rules.starting_heat))

    def _refuse(self, message: str) -> ActionResult:
        self.ctx.messages.warn(message)
        log.debug("Refused: %s", message)
        return ActionResult(False, message)

    def _set_state(self, state: TurnState) -> None:
        self._state = state
        self.ctx.bus.emit(TurnStateChanged(state))

    def _emit_heat(self) -> None:
        self.ctx.bus.emit(HeatChanged(self._heat, self.max_heat))

    def _emit_actions(self) -> None:
        self.ctx.bus.emit(ActionsChanged(self._actions_left, self.actions_per_turn))

    def _spend_action(self) -> None:
        self._actions_left = max(0, min(self.actions_per_turn, self._actions_left - 1))
        self._emit_actions()

    def _add_heat(self, delta: int) -> None:
        self._heat = max(0, min(self.max_heat, self._heat + delta))
        self._emit_heat()

    def _check_heat_loss(self) -> bool:
        if self._heat >= self.max_heat:
            self._lose("Overheated.")
            return True
        return False

    def _check_tagged(self) -> bool:
        """Tag-only rule: an enemy touching the player (diagonals count) at turn end."""
        if self.rules.enemies_attack:
            return False
        player_pos = self.ctx.player.position
        for enemy in self.ctx.living_enemies():
            if self.ctx.board.is_adjacent8(enemy.position, player_pos):
                self._lose(f"Tagged by {enemy.name}.")
                return True
        return False

    def _win(self, message: str) -> None:
        self._set_state(TurnState.WON)
        self.ctx.messages.add_entry(message, color=SUCCESS_COLOR)
        self.ctx.bus.emit(GameWon(message))
        log.info("Victory: %s", message)

    def _lose(self, message: str) -> None:
        self.ctx.hooks.play_death(self.ctx.player)
        self._set_state(TurnState.LOST)
        self.ctx.messages.warn(message)
        self.ctx.bus.emit(GameLost(message))
        log.info("Defeat: %s", message)


def new_game(
    layout_text: str = DESERT_CROSSING,
    rules: Optional[RulesConfig] = None,
    hooks: Optional[PresentationHooks] = None,
    bus: Optional[SignalBus] = None,
) -> TurnEngine:
    """Parse a layout, build the simulation and start the first player turn."""
    layout = parse_layout(layout_text)
    ctx = Simulation.from_layout(layout, rules=rules, hooks=hooks, bus=bus)
    return TurnEngine(ctx)
