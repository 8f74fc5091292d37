# world/board.py

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from engine.error_handler import BoardError, get_logger
from world.tiles import Coord, DIRS_4, DIRS_8, Tile

log = get_logger("board")


class Board:
    """
    Static grid of tiles keyed by coordinate.

    The set of coordinates never changes after construction; only tile
    flags (``consumed``) mutate during a run. Coordinates missing from the
    mapping are treated as outside the board.
    """

    def __init__(self, tiles: Iterable[Tuple[Coord, Tile]]) -> None:
        self._tiles: Dict[Coord, Tile] = {}
        for coord, tile in tiles:
            coord = (int(coord[0]), int(coord[1]))
            if coord in self._tiles:
                raise BoardError(
                    f"Duplicate tile coordinate {coord}",
                    user_message="The level has two tiles on the same cell.",
                )
            self._tiles[coord] = tile
        log.debug("Board built with %d tiles", len(self._tiles))

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def open_grid(cls, width: int, height: int) -> "Board":
        """Rectangular board of walkable Normal tiles (handy for tests)."""
        from world.tiles import make_tile
        return cls(
            ((x, y), make_tile())
            for y in range(height)
            for x in range(width)
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_tile(self, coord: Coord) -> Optional[Tile]:
        return self._tiles.get(coord)

    def __contains__(self, coord: object) -> bool:
        return coord in self._tiles

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[Coord]:
        return iter(self._tiles)

    def items(self) -> Iterable[Tuple[Coord, Tile]]:
        return self._tiles.items()

    def is_walkable(self, coord: Coord) -> bool:
        """Outside the board = not walkable."""
        tile = self._tiles.get(coord)
        return tile is not None and tile.walkable

    def neighbors4(self, coord: Coord) -> List[Coord]:
        """Existing orthogonal neighbours, in N/E/S/W order."""
        x, y = coord
        return [
            (x + dx, y + dy)
            for dx, dy in DIRS_4
            if (x + dx, y + dy) in self._tiles
        ]

    @staticmethod
    def is_adjacent4(a: Coord, b: Coord) -> bool:
        """Manhattan distance of exactly one (no diagonals)."""
        return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1

    @staticmethod
    def is_adjacent8(a: Coord, b: Coord) -> bool:
        """Touching, diagonals included."""
        return (b[0] - a[0], b[1] - a[1]) in DIRS_8

    def bounds(self) -> Tuple[int, int, int, int]:
        """(min_x, min_y, max_x, max_y) over all tiles."""
        if not self._tiles:
            return 0, 0, -1, -1
        xs = [c[0] for c in self._tiles]
        ys = [c[1] for c in self._tiles]
        return min(xs), min(ys), max(xs), max(ys)

    # ------------------------------------------------------------------
    # Run reset
    # ------------------------------------------------------------------

    def reset_tiles(self) -> None:
        """Un-consume every Shade/Drink tile."""
        for tile in self._tiles.values():
            tile.reset()
