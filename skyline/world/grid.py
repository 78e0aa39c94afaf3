"""Grid — the authoritative tile store for a city.

The Grid owns exactly ``size * size`` tiles for the lifetime of a game and
provides lookup by coordinates or id, zone counting for the tick engine,
and the low-level mutation primitives (set, clear, swap) that the game
rules in ``skyline.simulation.actions`` are built on.  The primitives
themselves enforce no rules beyond "terrain is immovable".
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass, field

from skyline.world.tile import Tile, parse_tile_id
from skyline.world.zones import ZoneType


@dataclass
class Grid:
    """A square grid of tiles.

    Attributes:
        size: Number of columns (and rows).
        cells: 2D list of Tile objects indexed as ``cells[y][x]``.
    """

    size: int
    cells: list[list[Tile]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialise the grid with empty tiles."""
        self.cells = [
            [Tile(x=x, y=y) for x in range(self.size)] for y in range(self.size)
        ]

    def __len__(self) -> int:
        return self.size * self.size

    def __iter__(self) -> Iterator[Tile]:
        for row in self.cells:
            yield from row

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def tile_at(self, x: int, y: int) -> Tile:
        """Return the tile at grid coordinates ``(x, y)``.

        Args:
            x: Column index.
            y: Row index.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not self.in_bounds(x, y):
            msg = f"({x}, {y}) out of bounds for {self.size}x{self.size}"
            raise IndexError(msg)
        return self.cells[y][x]

    def get(self, tid: str) -> Tile | None:
        """Return the tile with id ``tid``, or ``None`` if no such tile exists."""
        coords = parse_tile_id(tid)
        if coords is None or not self.in_bounds(*coords):
            return None
        return self.cells[coords[1]][coords[0]]

    def tiles(self) -> list[Tile]:
        """Return all tiles in row-major order."""
        return list(self)

    def zone_counts(self) -> Counter[ZoneType]:
        """Count how many tiles hold each zone type."""
        return Counter(tile.zone for tile in self)

    def set_zone(self, tile: Tile, zone: ZoneType) -> None:
        """Assign ``zone`` to ``tile`` and reset its growth level."""
        tile.zone = zone
        tile.level = 0

    def clear(self, tile: Tile) -> None:
        """Return ``tile`` to empty land."""
        self.set_zone(tile, ZoneType.EMPTY)

    def swap(self, source: Tile, target: Tile) -> None:
        """Exchange zone and level between two tiles.

        Coverage flags and density stay with the location, not the building.
        """
        source.zone, target.zone = target.zone, source.zone
        source.level, target.level = target.level, source.level
