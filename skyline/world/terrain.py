"""Terrain — one-shot generation of the starting landscape.

A new city starts as open land crossed by a meandering river, with a light
scattering of rock outcrops.  The river is a sine wave running roughly
horizontally through the middle of the map:

    center(x) = sin((x + offset) / period) * amplitude + size / 2

where ``offset`` is drawn once per map.  Any tile within ``half_width`` rows
of the centreline becomes WATER; every other tile independently becomes
ROCK with probability ``rock_probability``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from numpy.random import Generator

from skyline.world.grid import Grid
from skyline.world.zones import ZoneType

logger = logging.getLogger(__name__)


def river_centerline(
    size: int,
    offset: float,
    *,
    period: float = 5.0,
    amplitude: float = 2.5,
) -> np.ndarray:
    """Return the river's centre row for every column of the map."""
    xs = np.arange(size, dtype=np.float64)
    return np.sin((xs + offset) / period) * amplitude + size / 2


def generate_terrain(
    size: int,
    rng: Generator,
    *,
    river_period: float = 5.0,
    river_amplitude: float = 2.5,
    river_half_width: float = 1.3,
    rock_probability: float = 0.03,
) -> Grid:
    """Build a fresh grid with a river and scattered rocks.

    Args:
        size: Side length of the square grid.
        rng: Random source; the same seed always yields the same map.
        river_period: Horizontal stretch of the river's sine wave.
        river_amplitude: How far (in rows) the river meanders.
        river_half_width: Rows either side of the centreline that are water.
        rock_probability: Chance that a dry tile becomes rock.

    Returns:
        A Grid with exactly ``size * size`` tiles.
    """
    grid = Grid(size=size)
    offset = float(rng.uniform(0.0, 100.0))
    centers = river_centerline(
        size,
        offset,
        period=river_period,
        amplitude=river_amplitude,
    )

    ys = np.arange(size, dtype=np.float64)[:, np.newaxis]
    water = np.abs(ys - centers[np.newaxis, :]) < river_half_width
    rock = ~water & (rng.random((size, size)) < rock_probability)

    for tile in grid:
        if water[tile.y, tile.x]:
            tile.zone = ZoneType.WATER
        elif rock[tile.y, tile.x]:
            tile.zone = ZoneType.ROCK

    logger.debug(
        "Generated %dx%d terrain: %d water, %d rock (offset=%.2f)",
        size,
        size,
        int(water.sum()),
        int(rock.sum()),
        offset,
    )
    return grid
