# world/tiles.py

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

# Grid coordinate (x, y). Plain tuples hash and compare by value.
Coord = Tuple[int, int]

# 4-neighbourhood in N/E/S/W order. Pathfinding expands in this order.
DIRS_4: Tuple[Coord, ...] = (
    (0, 1),
    (1, 0),
    (0, -1),
    (-1, 0),
)

# 8-neighbourhood, only used for the end-of-turn tag check.
DIRS_8: Tuple[Coord, ...] = DIRS_4 + (
    (1, 1),
    (1, -1),
    (-1, -1),
    (-1, 1),
)


class TileType(Enum):
    NORMAL = "normal"
    BURN = "burn"
    SHADE = "shade"
    DRINK = "drink"


# Heat applied when the player steps on a tile of each type.
TILE_HEAT_DELTAS: Dict[TileType, int] = {
    TileType.NORMAL: 5,
    TileType.BURN: 15,
    TileType.SHADE: -10,
    TileType.DRINK: -20,
}

# Base colors
NORMAL_COLOR = (200, 180, 140)
WALL_COLOR = (90, 90, 120)
BURN_COLOR = (210, 90, 50)
SHADE_COLOR = (70, 110, 150)
DRINK_COLOR = (80, 170, 200)
CONSUMED_COLOR = (150, 140, 120)

TILE_COLORS: Dict[TileType, Tuple[int, int, int]] = {
    TileType.NORMAL: NORMAL_COLOR,
    TileType.BURN: BURN_COLOR,
    TileType.SHADE: SHADE_COLOR,
    TileType.DRINK: DRINK_COLOR,
}

CONSUMABLE_TYPES = (TileType.SHADE, TileType.DRINK)


@dataclass
class Tile:
    """
    One board cell.

    Only ``consumed`` changes during a run; everything else is fixed when
    the board is built.
    """
    walkable: bool = True
    type: TileType = TileType.NORMAL
    heat_delta_on_enter: int = TILE_HEAT_DELTAS[TileType.NORMAL]
    consumed: bool = False

    @property
    def is_consumable(self) -> bool:
        return self.type in CONSUMABLE_TYPES

    @property
    def effective_heat_delta(self) -> int:
        """Heat applied on entry; a spent Shade/Drink tile applies nothing."""
        if self.is_consumable and self.consumed:
            return 0
        return self.heat_delta_on_enter

    @property
    def color(self) -> Tuple[int, int, int]:
        if not self.walkable:
            return WALL_COLOR
        if self.is_consumable and self.consumed:
            return CONSUMED_COLOR
        return TILE_COLORS[self.type]

    def consume_if_needed(self) -> bool:
        """Flip ``consumed`` the first time a Shade/Drink tile is entered."""
        if not self.is_consumable or self.consumed:
            return False
        self.consumed = True
        return True

    def reset(self) -> None:
        self.consumed = False


def make_tile(
    tile_type: TileType = TileType.NORMAL,
    walkable: bool = True,
    heat_delta: Optional[int] = None,
) -> Tile:
    """Build a tile using the default heat delta for its type."""
    if heat_delta is None:
        heat_delta = TILE_HEAT_DELTAS[tile_type]
    return Tile(walkable=walkable, type=tile_type, heat_delta_on_enter=heat_delta)


def wall_tile() -> Tile:
    return make_tile(TileType.NORMAL, walkable=False, heat_delta=0)
