"""
Text level layouts.

A layout is a block of characters, one per tile:

    .  normal floor        #  wall
    B  burn                S  shade (one-shot)
    D  drink (one-shot)    P  player start
    G  goal                E  enemy spawn
    (space) no tile

The first text row is the top of the board. y grows upwards, so the last
row is y = 0.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from engine.error_handler import BoardError
from world.tiles import Coord, Tile, TileType, make_tile, wall_tile


_TILE_CHARS: Dict[str, TileType] = {
    ".": TileType.NORMAL,
    "B": TileType.BURN,
    "S": TileType.SHADE,
    "D": TileType.DRINK,
    "P": TileType.NORMAL,
    "G": TileType.NORMAL,
    "E": TileType.NORMAL,
}


@dataclass
class LevelLayout:
    tiles: List[Tuple[Coord, Tile]]
    start: Coord
    goal: Coord
    enemy_spawns: List[Coord] = field(default_factory=list)
    name: str = "level"


def parse_layout(text: str, name: str = "level") -> LevelLayout:
    """
    Parse a text layout into tile pairs, start/goal and enemy spawns.
    Enemy spawns are returned in reading order (top row first, left to right).
    """
    rows = [row.rstrip() for row in text.strip("\n").splitlines()]
    rows = [row for row in rows if row.strip()]
    if not rows:
        raise BoardError(f"Layout '{name}' is empty")

    height = len(rows)
    tiles: List[Tuple[Coord, Tile]] = []
    start: Optional[Coord] = None
    goal: Optional[Coord] = None
    spawns: List[Coord] = []

    for row_index, row in enumerate(rows):
        y = height - 1 - row_index
        for x, ch in enumerate(row):
            if ch == " ":
                continue
            coord = (x, y)
            if ch == "#":
                tiles.append((coord, wall_tile()))
                continue
            tile_type = _TILE_CHARS.get(ch)
            if tile_type is None:
                raise BoardError(f"Layout '{name}': unknown character {ch!r} at {coord}")
            tiles.append((coord, make_tile(tile_type)))

            if ch == "P":
                if start is not None:
                    raise BoardError(f"Layout '{name}' has more than one start tile")
                start = coord
            elif ch == "G":
                if goal is not None:
                    raise BoardError(f"Layout '{name}' has more than one goal tile")
                goal = coord
            elif ch == "E":
                spawns.append(coord)

    if start is None:
        raise BoardError(f"Layout '{name}' has no start tile (P)")
    if goal is None:
        raise BoardError(f"Layout '{name}' has no goal tile (G)")

    return LevelLayout(tiles=tiles, start=start, goal=goal, enemy_spawns=spawns, name=name)


# Default level used by main.py
DESERT_CROSSING = """
#########
#P..B.S.#
#.#.BB..#
#.#..#E.#
#..D.#..#
#B.#...E#
#..B..#G#
#########
"""
