"""
Outbound notifications from the simulation core.

The HUD, camera and panels subscribe to these; the core never depends on
who is listening. Dispatch is synchronous and in subscription order so a
listener always sees state that matches the event it receives.

    bus = SignalBus()
    bus.subscribe(HeatChanged, hud.on_heat_changed)
    bus.emit(HeatChanged(heat=40, max_heat=100))

Subscribing the same handler twice is a no-op, so collaborators can
re-subscribe freely after their own lifecycle events.
"""

from __future__ import annotations

from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, List, Optional, Type

from engine.error_handler import get_logger, log_error
from world.tiles import Coord

log = get_logger("signals")


# ---------------------------------------------------------------------------
# Event definitions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TurnStateChanged:
    state: Any  # engine.turn_engine.TurnState


@dataclass(frozen=True)
class HeatChanged:
    heat: int
    max_heat: int


@dataclass(frozen=True)
class ActionsChanged:
    actions_left: int
    actions_per_turn: int


@dataclass(frozen=True)
class GameLost:
    message: str


@dataclass(frozen=True)
class GameWon:
    message: str


@dataclass(frozen=True)
class GameReset:
    pass


@dataclass(frozen=True)
class EnemyActed:
    """An enemy attacked, moved or held position."""
    name: str
    action: str  # "attack" | "move" | "hold"
    position: Coord


@dataclass(frozen=True)
class EnemyDied:
    name: str
    position: Coord


Handler = Callable[[Any], None]


class SignalBus:
    """Synchronous observer registry keyed by event class."""

    def __init__(self, history_size: int = 200) -> None:
        self._subs: Dict[Type, List[Handler]] = defaultdict(list)
        self.history: Deque[Any] = deque(maxlen=history_size)

    def subscribe(self, event_type: Type, handler: Handler) -> None:
        handlers = self._subs[event_type]
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_type: Type, handler: Handler) -> None:
        handlers = self._subs.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def emit(self, event: Any) -> None:
        self.history.append(event)
        # copy: a handler may unsubscribe itself
        for handler in list(self._subs.get(type(event), ())):
            try:
                handler(event)
            except Exception as exc:
                log_error(exc, f"signal:{type(event).__name__}")

    def subscriber_count(self, event_type: Optional[Type] = None) -> int:
        if event_type is not None:
            return len(self._subs.get(event_type, ()))
        return sum(len(h) for h in self._subs.values())

    def recent(self, event_type: Optional[Type] = None, n: int = 20) -> List[Any]:
        """Last *n* emitted events, optionally of one type (oldest first)."""
        events = [e for e in self.history if event_type is None or isinstance(e, event_type)]
        return events[-n:]

    def clear_history(self) -> None:
        self.history.clear()

    def __repr__(self) -> str:
        return f"SignalBus(subs={self.subscriber_count()}, history={len(self.history)})"
