"""
Presentation hooks.

Fire-and-forget calls from the simulation to whatever draws it. The core
never waits on them or reads anything back; all state has already changed
by the time a hook is called.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Tuple

from world.entities import Unit
from world.tiles import Coord


class PresentationHooks:
    """No-op default. Subclass and override what you need."""

    def play_move(self, unit: Unit, src: Coord, dst: Coord) -> None:
        pass

    def play_attack(self, unit: Unit, target: Coord) -> None:
        pass

    def play_death(self, unit: Unit) -> None:
        pass

    def spawn_attack_effect(self, position: Coord) -> None:
        pass

    def reset_visuals(self) -> None:
        pass


@dataclass
class RecordingHooks(PresentationHooks):
    """
    Records every hook call as ``(name, args)``.

    Used by tests, and by the pygame front end which replays the queue
    with its own pacing.
    """
    calls: List[Tuple[str, Tuple[Any, ...]]] = field(default_factory=list)

    def play_move(self, unit: Unit, src: Coord, dst: Coord) -> None:
        self.calls.append(("move", (unit, src, dst)))

    def play_attack(self, unit: Unit, target: Coord) -> None:
        self.calls.append(("attack", (unit, target)))

    def play_death(self, unit: Unit) -> None:
        self.calls.append(("death", (unit,)))

    def spawn_attack_effect(self, position: Coord) -> None:
        self.calls.append(("effect", (position,)))

    def reset_visuals(self) -> None:
        self.calls.append(("reset", ()))

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def drain(self) -> List[Tuple[str, Tuple[Any, ...]]]:
        calls, self.calls = self.calls, []
        return calls
