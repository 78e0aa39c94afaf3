"""Tile — a single square of the city grid.

A tile's identity is derived from its coordinates and never changes; only
its zone and the growth attributes travel with it.  ``level``, ``density``,
``is_powered`` and ``has_water`` are carried for forward compatibility and
persisted, but the tick engine does not compute them.
"""

from __future__ import annotations

from dataclasses import dataclass

from skyline.world.zones import ZoneType


def tile_id(x: int, y: int) -> str:
    """Return the stable identifier for the tile at ``(x, y)``."""
    return f"{x}-{y}"


def parse_tile_id(value: str) -> tuple[int, int] | None:
    """Invert :func:`tile_id`, returning ``None`` for malformed ids."""
    parts = value.split("-")
    if len(parts) != 2:
        return None
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return None


@dataclass
class Tile:
    """A single tile in the city grid.

    Attributes:
        x: Column position.
        y: Row position.
        zone: What currently occupies the tile.
        level: Growth level (0-3), reset whenever the zone changes.
        density: Reserved simulation density.
        is_powered: Reserved power-coverage flag.
        has_water: Reserved water-coverage flag.
    """

    x: int
    y: int
    zone: ZoneType = ZoneType.EMPTY
    level: int = 0
    density: float = 0.0
    is_powered: bool = False
    has_water: bool = False

    @property
    def id(self) -> str:
        return tile_id(self.x, self.y)

    @property
    def is_terrain(self) -> bool:
        return self.zone.is_terrain
