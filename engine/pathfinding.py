"""
Enemy pathfinding module.

Multi-goal A* over the board: an enemy looks for the next tile on a
shortest path to *any* free tile orthogonally adjacent to the player.

- 4-directional movement, unit step cost.
- The player's tile is never entered, not even as a pass-through.
- Other units are excluded through the caller's ``is_blocked`` predicate.
- Heuristic: Manhattan distance to the closest goal (admissible and
  consistent for this grid, so the first goal popped is optimal).
- Open-set order: lowest f, then lowest h, then first inserted.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass
from itertools import count
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from engine.error_handler import get_logger
from world.board import Board
from world.tiles import Coord, DIRS_4

log = get_logger("pathfinding")

BlockedFn = Callable[[Coord], bool]


@dataclass(frozen=True)
class PathStep:
    """Result of a successful search."""
    next_step: Coord
    path_length: int  # tiles on the path, start and goal included


class _Node:
    __slots__ = ("pos", "g", "h", "parent", "seq")

    def __init__(self, pos: Coord, g: int, h: int, parent: Optional["_Node"], seq: int) -> None:
        self.pos = pos
        self.g = g
        self.h = h
        self.parent = parent
        self.seq = seq

    @property
    def f(self) -> int:
        return self.g + self.h


def _never_blocked(_coord: Coord) -> bool:
    return False


def heuristic_to_closest_goal(pos: Coord, goals: Sequence[Coord]) -> int:
    return min(abs(pos[0] - g[0]) + abs(pos[1] - g[1]) for g in goals)


class PathFinder:
    """
    Stateless search over a board. Every call starts from scratch; there is
    no caching between enemy turns.
    """

    def __init__(self, board: Board) -> None:
        self.board = board

    def goal_tiles(self, player_pos: Coord, is_blocked: Optional[BlockedFn] = None) -> List[Coord]:
        """Orthogonal neighbours of the player that an enemy could stand on."""
        blocked = is_blocked or _never_blocked
        goals: List[Coord] = []
        for dx, dy in DIRS_4:
            g = (player_pos[0] + dx, player_pos[1] + dy)
            tile = self.board.get_tile(g)
            if tile is None or not tile.walkable:
                continue
            if g == player_pos:
                continue
            if blocked(g):
                continue
            goals.append(g)
        return goals

    def find_next_step(
        self,
        start: Coord,
        player_pos: Coord,
        is_blocked: Optional[BlockedFn] = None,
    ) -> Optional[PathStep]:
        """
        Next tile from ``start`` towards the closest free tile next to the player.

        Returns None when there is no goal, no path, or ``start`` is already
        on a goal (nothing to step to).
        """
        blocked = is_blocked or _never_blocked

        goals = self.goal_tiles(player_pos, blocked)
        if not goals:
            log.debug("No free goal tile around player at %s", player_pos)
            return None

        path = self.find_path(start, goals, player_pos, blocked)
        if path is None or len(path) < 2:
            return None
        return PathStep(next_step=path[1], path_length=len(path))

    def find_path(
        self,
        start: Coord,
        goals: Sequence[Coord],
        player_pos: Coord,
        is_blocked: Optional[BlockedFn] = None,
    ) -> Optional[List[Coord]]:
        """
        A* from ``start`` to whichever goal is reached first.
        Returns the full path (start first) or None.
        """
        if not goals:
            return None
        blocked = is_blocked or _never_blocked
        goal_set: Set[Coord] = set(goals)
        seq = count()

        start_node = _Node(start, 0, heuristic_to_closest_goal(start, goals), None, next(seq))
        # (f, h, seq, pos); entries whose node has since improved are skipped
        heap: List[Tuple[int, int, int, Coord]] = [(start_node.f, start_node.h, start_node.seq, start)]
        open_map: Dict[Coord, _Node] = {start: start_node}
        closed: Set[Coord] = set()

        while heap:
            f, h, _seq, pos = heapq.heappop(heap)
            current = open_map.get(pos)
            if current is None or (current.f, current.h) != (f, h):
                continue  # stale entry
            del open_map[pos]

            # goal test on expansion, not on generation
            if pos in goal_set:
                return self._reconstruct(current)

            closed.add(pos)

            for dx, dy in DIRS_4:
                npos = (pos[0] + dx, pos[1] + dy)

                if npos in closed:
                    continue
                if npos == player_pos:
                    continue
                if not self.board.is_walkable(npos):
                    continue
                if blocked(npos):
                    continue

                tentative_g = current.g + 1

                existing = open_map.get(npos)
                if existing is not None:
                    if tentative_g >= existing.g:
                        continue
                    # relax in place; keeps its original insertion order
                    existing.g = tentative_g
                    existing.parent = current
                    existing.h = heuristic_to_closest_goal(npos, goals)
                    heapq.heappush(heap, (existing.f, existing.h, existing.seq, npos))
                    continue

                node = _Node(npos, tentative_g, heuristic_to_closest_goal(npos, goals), current, next(seq))
                open_map[npos] = node
                heapq.heappush(heap, (node.f, node.h, node.seq, npos))

        return None

    @staticmethod
    def _reconstruct(end: _Node) -> List[Coord]:
        path: List[Coord] = []
        node: Optional[_Node] = end
        while node is not None:
            path.append(node.pos)
            node = node.parent
        path.reverse()
        return path
