"""Config — load game parameters from YAML files.

Grid and chunk dimensions, starting funds, tick rate, the zone cost table,
sector prices and terrain-generation knobs live in YAML and are parsed
into a typed dataclass here.  Every field has a default matching the
shipped ``config/default.yaml``, so ``SimulationConfig()`` is a complete
configuration on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from skyline.world.territory import (
    DEFAULT_SECTOR_PRICE,
    SECTOR_PRICES,
    STARTING_CHUNK,
    chunk_price,
)
from skyline.world.zones import ZONE_COSTS, ZoneType

logger = logging.getLogger(__name__)

SAVE_LIST_KEY = "skyline-city-saves-v1"


@dataclass
class SimulationConfig:
    """Top-level game configuration.

    Attributes:
        seed: RNG seed for terrain and names; ``None`` draws fresh entropy.
        grid_size: Side length of the square city grid.
        chunk_size: Side length of a purchasable sector.
        initial_money: Treasury at the start of a new game.
        tick_rate_ms: Simulated milliseconds per day.
        starting_chunk: Sector owned from the start.
        default_sector_price: Price of sectors missing from ``sector_prices``.
        sector_prices: Purchase price per chunk id.
        zone_costs: Build cost per zone type.
        river_period: Horizontal stretch of the river sine wave.
        river_amplitude: Meander amplitude of the river in rows.
        river_half_width: Rows either side of the river centre that are water.
        rock_probability: Chance a dry tile starts as rock.
        save_dir: Directory backing the local save store.
        save_key: Store key holding the list of saved cities.
    """

    seed: int | None = None
    grid_size: int = 30
    chunk_size: int = 10
    initial_money: int = 150000
    tick_rate_ms: int = 1000
    starting_chunk: str = STARTING_CHUNK
    default_sector_price: int = DEFAULT_SECTOR_PRICE
    sector_prices: dict[str, int] = field(default_factory=lambda: dict(SECTOR_PRICES))
    zone_costs: dict[ZoneType, int] = field(default_factory=lambda: dict(ZONE_COSTS))

    # Terrain generation
    river_period: float = 5.0
    river_amplitude: float = 2.5
    river_half_width: float = 1.3
    rock_probability: float = 0.03

    # Persistence
    save_dir: str = "saves"
    save_key: str = SAVE_LIST_KEY

    def zone_cost(self, zone: ZoneType) -> int:
        """Return the build cost of ``zone`` (zero for unlisted zones)."""
        return self.zone_costs.get(zone, 0)

    def sector_price(self, cid: str) -> int:
        """Return the purchase price of chunk ``cid``."""
        return chunk_price(cid, self.sector_prices, self.default_sector_price)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Missing keys keep their defaults.  ``zone_costs`` and
        ``sector_prices`` are merged over the default tables, so a file
        only needs to list the entries it changes.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        sector_prices = dict(SECTOR_PRICES)
        sector_prices.update(
            {str(k): int(v) for k, v in (data.get("sector_prices") or {}).items()},
        )

        return cls(
            seed=data.get("seed", cls.seed),
            grid_size=data.get("grid_size", cls.grid_size),
            chunk_size=data.get("chunk_size", cls.chunk_size),
            initial_money=data.get("initial_money", cls.initial_money),
            tick_rate_ms=data.get("tick_rate_ms", cls.tick_rate_ms),
            starting_chunk=data.get("starting_chunk", cls.starting_chunk),
            default_sector_price=data.get(
                "default_sector_price",
                cls.default_sector_price,
            ),
            sector_prices=sector_prices,
            zone_costs=_parse_zone_costs(data.get("zone_costs") or {}),
            river_period=data.get("river_period", cls.river_period),
            river_amplitude=data.get("river_amplitude", cls.river_amplitude),
            river_half_width=data.get(
                "river_half_width",
                cls.river_half_width,
            ),
            rock_probability=data.get(
                "rock_probability",
                cls.rock_probability,
            ),
            save_dir=data.get("save_dir", cls.save_dir),
            save_key=data.get("save_key", cls.save_key),
        )


def _parse_zone_costs(raw: dict[str, Any]) -> dict[ZoneType, int]:
    """Merge YAML cost overrides (keyed by zone name) over the defaults."""
    costs = dict(ZONE_COSTS)
    for name, cost in raw.items():
        zone = ZoneType.parse(str(name).upper())
        if zone is None:
            logger.warning("Ignoring cost for unknown zone %r", name)
            continue
        if not zone.is_placeable:
            logger.warning("Ignoring cost for non-purchasable zone %s", zone.name)
            continue
        costs[zone] = int(cost)
    return costs
