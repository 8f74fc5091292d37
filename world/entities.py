# world/entities.py

from dataclasses import dataclass, field
from typing import Optional

from world.tiles import Coord


@dataclass
class Unit:
    """Base unit that occupies one board tile."""
    name: str
    position: Coord
    health: int = 1

    @property
    def is_dead(self) -> bool:
        return self.health <= 0

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    def move_to(self, coord: Coord) -> None:
        self.position = coord

    def take_damage(self, amount: int) -> None:
        self.health -= amount


@dataclass
class Player(Unit):
    """
    The player. Heat, not health, is what ends the run, so health is
    only kept for symmetry with enemies.
    """
    start: Optional[Coord] = None
    start_health: int = 1

    def __post_init__(self) -> None:
        if self.start is None:
            self.start = self.position
        self.start_health = self.health

    def reset(self) -> None:
        self.position = self.start
        self.health = self.start_health


@dataclass
class EnemySpawn:
    """Initial data recorded at run start, restored on reset."""
    position: Coord
    health: int


@dataclass
class Enemy(Unit):
    """
    A chasing enemy.

    ``turn_frequency`` is how many enemy sub-cycles pass between its
    actions (1 = acts every time).
    """
    health: int = 2
    attack_heat: int = 5
    turn_frequency: int = 1
    turn_counter: int = 0
    spawn: Optional[EnemySpawn] = None

    # re-entrancy guard for the turn routine
    executing_turn: bool = field(default=False, repr=False)

    def __post_init__(self) -> None:
        if self.turn_frequency < 1:
            self.turn_frequency = 1
        if self.spawn is None:
            self.spawn = EnemySpawn(position=self.position, health=self.health)

    def tick_counter(self) -> bool:
        """
        Advance the frequency counter for one sub-cycle.
        Returns True (and resets the counter) when the enemy should act.
        """
        self.turn_counter += 1
        if self.turn_counter >= self.turn_frequency:
            self.turn_counter = 0
            return True
        return False

    def reset(self) -> None:
        self.position = self.spawn.position
        self.health = self.spawn.health
        self.turn_counter = 0
        self.executing_turn = False
