"""
Simulation context.

Everything the turn engine and the enemy AI need is owned here and passed
explicitly: the board, the pathfinder, the units, the rules, the signal
bus, the presentation hooks and the advisory message log. There is no
global lookup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from engine.config import RulesConfig
from engine.error_handler import ValidationError, get_logger
from engine.message_log import MessageLog
from engine.pathfinding import PathFinder
from engine.presentation import PresentationHooks
from engine.signals import SignalBus
from world.board import Board
from world.entities import Enemy, Player
from world.layouts import LevelLayout
from world.tiles import Coord

log = get_logger("simulation")


@dataclass
class Simulation:
    board: Board
    player: Player
    goal: Coord
    roster: List[Enemy] = field(default_factory=list)
    rules: RulesConfig = field(default_factory=RulesConfig)
    hooks: PresentationHooks = field(default_factory=PresentationHooks)
    bus: SignalBus = field(default_factory=SignalBus)
    messages: MessageLog = field(default_factory=MessageLog)

    # live roster: dead enemies are dropped, reset restores ``roster`` order
    enemies: List[Enemy] = field(init=False)
    pathfinder: PathFinder = field(init=False)

    def __post_init__(self) -> None:
        self.rules = self.rules.validated()
        self._validate()
        self.enemies = list(self.roster)
        self.pathfinder = PathFinder(self.board)
        log.info("Simulation ready: %d tiles, %d enemies", len(self.board), len(self.roster))

    def _validate(self) -> None:
        if not self.board.is_walkable(self.player.start):
            raise ValidationError(f"Player start {self.player.start} is not a walkable tile")
        if self.board.get_tile(self.goal) is None:
            raise ValidationError(f"Goal {self.goal} is not on the board")

        taken: Dict[Coord, str] = {self.player.start: self.player.name}
        for enemy in self.roster:
            pos = enemy.spawn.position
            if not self.board.is_walkable(pos):
                raise ValidationError(f"{enemy.name} spawns on a non-walkable tile {pos}")
            if pos in taken:
                raise ValidationError(f"{enemy.name} spawns on {pos}, already taken by {taken[pos]}")
            taken[pos] = enemy.name

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_layout(
        cls,
        layout: LevelLayout,
        rules: Optional[RulesConfig] = None,
        hooks: Optional[PresentationHooks] = None,
        bus: Optional[SignalBus] = None,
        turn_frequencies: Optional[Sequence[int]] = None,
    ) -> "Simulation":
        """
        Build a simulation from a parsed layout. Enemies are registered in
        the layout's spawn order; ``turn_frequencies`` (optional) gives one
        frequency per spawn and overrides the rules default for it.
        """
        rules = (rules or RulesConfig()).validated()
        board = Board(layout.tiles)
        player = Player(name="Player", position=layout.start)

        roster: List[Enemy] = []
        for i, pos in enumerate(layout.enemy_spawns):
            freq = rules.enemy_turn_frequency
            if turn_frequencies is not None and i < len(turn_frequencies):
                freq = turn_frequencies[i]
            roster.append(Enemy(
                name=f"Enemy {i + 1}",
                position=pos,
                health=rules.enemy_health,
                attack_heat=rules.enemy_attack_heat,
                turn_frequency=freq,
            ))

        return cls(
            board=board,
            player=player,
            goal=layout.goal,
            roster=roster,
            rules=rules,
            hooks=hooks or PresentationHooks(),
            bus=bus or SignalBus(),
        )

    # ------------------------------------------------------------------
    # Unit queries
    # ------------------------------------------------------------------

    def living_enemies(self) -> List[Enemy]:
        return [e for e in self.enemies if e.is_alive]

    def get_enemy_at(self, coord: Coord) -> Optional[Enemy]:
        for enemy in self.enemies:
            if enemy.is_alive and enemy.position == coord:
                return enemy
        return None

    def is_occupied_by_enemy(self, coord: Coord, exclude: Optional[Enemy] = None) -> bool:
        for enemy in self.enemies:
            if enemy is exclude or enemy.is_dead:
                continue
            if enemy.position == coord:
                return True
        return False

    def remove_enemy(self, enemy: Enemy) -> None:
        if enemy in self.enemies:
            self.enemies.remove(enemy)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def reset_units(self) -> None:
        """Player back to start, every registered enemy back to its spawn."""
        self.player.reset()
        self.enemies = []
        for enemy in self.roster:
            enemy.reset()
            self.enemies.append(enemy)
        log.debug("Reset: %d enemies restored", len(self.enemies))
