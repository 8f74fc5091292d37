"""
Unit tests for the multi-goal A* pathfinder.
"""

import random
from collections import deque

import pytest

from engine.pathfinding import PathFinder, PathStep, heuristic_to_closest_goal
from world.board import Board
from world.tiles import DIRS_4, make_tile, wall_tile


def _bfs_distance(board, start, goals, player_pos, blocked):
    """Brute-force shortest distance (in steps) to the nearest goal, or None."""
    goals = set(goals)
    seen = {start}
    queue = deque([(start, 0)])
    while queue:
        pos, dist = queue.popleft()
        if pos in goals:
            return dist
        for dx, dy in DIRS_4:
            npos = (pos[0] + dx, pos[1] + dy)
            if npos in seen or npos == player_pos:
                continue
            if not board.is_walkable(npos) or npos in blocked:
                continue
            seen.add(npos)
            queue.append((npos, dist + 1))
    return None


def _random_board(rng, width, height, wall_chance):
    tiles = []
    for y in range(height):
        for x in range(width):
            tile = wall_tile() if rng.random() < wall_chance else make_tile()
            tiles.append(((x, y), tile))
    return Board(tiles)


class TestHeuristic:
    """Tests for the closest-goal Manhattan heuristic."""

    def test_min_over_goals(self):
        """Heuristic is the distance to the nearest goal."""
        assert heuristic_to_closest_goal((0, 0), [(3, 3), (1, 0)]) == 1
        assert heuristic_to_closest_goal((2, 2), [(2, 2)]) == 0


class TestPathFinder:
    """Tests for PathFinder."""

    def test_open_grid_scenario(self, open_board):
        """Player (2,2), enemy (0,2): step to (1,2), which is already a goal."""
        finder = PathFinder(open_board)
        step = finder.find_next_step((0, 2), (2, 2))
        assert step == PathStep(next_step=(1, 2), path_length=2)

    def test_tie_break_prefers_north_first(self, open_board):
        """Equal f and h: the node inserted first (north) is expanded first."""
        finder = PathFinder(open_board)
        step = finder.find_next_step((0, 0), (2, 2))
        assert step.next_step == (0, 1)
        assert step.path_length == 4

    def test_equal_f_prefers_lower_h(self, open_board):
        """Among equal f, the node closer to a goal is expanded first."""
        finder = PathFinder(open_board)
        seen = []

        def record(pos):
            seen.append(pos)
            return False

        path = finder.find_path((0, 0), finder.goal_tiles((2, 2)), (2, 2), record)
        assert path == [(0, 0), (0, 1), (0, 2), (1, 2)]
        # (0, 2) has h 1 and beats (1, 0) with h 2 at f 3, so (1, 0) is never expanded
        assert seen == [(0, 1), (1, 0), (0, 2), (1, 1), (0, 3), (1, 2)]

    def test_goal_tiles(self, open_board):
        """Goals are the walkable, unblocked 4-neighbours of the player."""
        finder = PathFinder(open_board)
        assert finder.goal_tiles((2, 2)) == [(2, 3), (3, 2), (2, 1), (1, 2)]
        assert finder.goal_tiles((0, 0)) == [(0, 1), (1, 0)]
        assert finder.goal_tiles((2, 2), lambda c: c == (3, 2)) == [(2, 3), (2, 1), (1, 2)]

    def test_blocked_tile_is_routed_around(self, open_board):
        """A tile held by another unit is neither a goal nor a pass-through."""
        finder = PathFinder(open_board)
        step = finder.find_next_step((0, 2), (2, 2), lambda c: c == (1, 2))
        assert step.next_step == (0, 3)
        assert step.path_length == 4

    def test_already_adjacent_gives_no_step(self, open_board):
        """Standing on a goal reports no step."""
        finder = PathFinder(open_board)
        assert finder.find_next_step((1, 2), (2, 2)) is None

    def test_no_goals(self):
        """A player boxed in by walls has no goal tiles."""
        tiles = [((1, 1), make_tile()), ((3, 3), make_tile())]
        for coord in ((1, 2), (2, 1), (1, 0), (0, 1)):
            tiles.append((coord, wall_tile()))
        finder = PathFinder(Board(tiles))
        assert finder.goal_tiles((1, 1)) == []
        assert finder.find_next_step((3, 3), (1, 1)) is None

    def test_never_passes_through_player(self):
        """The player's tile is not a pass-through, even on the only route."""
        finder = PathFinder(Board.open_grid(5, 1))
        assert finder.find_path((0, 0), [(4, 0)], player_pos=(2, 0)) is None

    def test_unreachable_goal(self):
        """A walled-off enemy finds no path."""
        tiles = [((x, 0), make_tile()) for x in range(3)]
        tiles += [((3, 0), wall_tile()), ((4, 0), make_tile())]
        finder = PathFinder(Board(tiles))
        assert finder.find_next_step((4, 0), (0, 0)) is None

    def test_find_path_empty_goals(self, open_board):
        """No goals, no path."""
        assert PathFinder(open_board).find_path((0, 0), [], (2, 2)) is None

    @pytest.mark.parametrize("seed", range(40))
    def test_matches_bfs_on_random_grids(self, seed):
        """Path length equals the brute-force BFS distance; the step is always legal."""
        rng = random.Random(seed)
        width, height = rng.randint(3, 8), rng.randint(3, 8)
        board = _random_board(rng, width, height, wall_chance=0.25)

        walkable = [c for c in board if board.is_walkable(c)]
        if len(walkable) < 2:
            pytest.skip("degenerate board")
        player_pos, start = rng.sample(walkable, 2)
        others = [c for c in walkable if c not in (player_pos, start)]
        blocked = set(rng.sample(others, min(len(others), rng.randint(0, 3))))

        finder = PathFinder(board)
        is_blocked = blocked.__contains__
        goals = finder.goal_tiles(player_pos, is_blocked)
        step = finder.find_next_step(start, player_pos, is_blocked)

        dist = _bfs_distance(board, start, goals, player_pos, blocked) if goals else None
        if dist is None or dist == 0:
            assert step is None
            return

        assert step is not None
        assert step.path_length == dist + 1
        assert step.next_step != player_pos
        assert step.next_step not in blocked
        assert board.is_walkable(step.next_step)
        assert Board.is_adjacent4(start, step.next_step)
        assert _bfs_distance(board, step.next_step, goals, player_pos, blocked) == dist - 1
