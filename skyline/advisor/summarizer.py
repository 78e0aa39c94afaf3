"""Advisor — a short, rule-based brief on the state of the city.

The brief is a pure function of the current stats and the tile list.
Notices are considered in priority order and at most three sentences are
returned:

1. Growth-phase notice every tenth day
2. Low morale (happiness below 40)
3. Thin treasury (below 1,000)
4. High pressure, when at least three of: power, water or sewage shortage,
   negative net income, low morale
5. Otherwise a stable-state summary plus a park hint
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from skyline.simulation.stats import CityStats
from skyline.world.tile import Tile
from skyline.world.zones import ZoneType

LOW_HAPPINESS = 40
LOW_TREASURY = 1000
PRESSURE_THRESHOLD = 3
GROWTH_PHASE_DAYS = 10
MAX_SENTENCES = 3


def build_advisor_message(stats: CityStats, tiles: Iterable[Tile]) -> str:
    """Summarise city health in at most three sentences."""
    counts = Counter(tile.zone for tile in tiles)
    res = stats.resources

    low_morale = stats.happiness < LOW_HAPPINESS
    low_funds = stats.money < LOW_TREASURY
    pressures = [
        res.power_usage > res.power,
        res.water_usage > res.water,
        res.sewage_usage > res.sewage,
        stats.net_income < 0,
        low_morale,
    ]
    high_pressure = sum(pressures) >= PRESSURE_THRESHOLD

    sentences: list[str] = []
    if stats.day % GROWTH_PHASE_DAYS == 0:
        sentences.append(
            f"Day {stats.day} marks a new growth phase. "
            "Expect faster demands and higher strain on utilities.",
        )
    if low_morale:
        sentences.append(
            "City morale is low. Add parks, services, or stabilize "
            "utilities to recover happiness.",
        )
    if low_funds:
        sentences.append(
            "Treasury is thin. Expand revenue zones or reduce costly "
            "infrastructure for a few days.",
        )
    if high_pressure:
        sentences.append(
            "City pressure is high due to shortages or deficits. Resolve "
            "power, water, or sewage bottlenecks first.",
        )

    if not sentences:
        sentences.append(
            f"Systems are stable. Population {stats.population:,} and "
            "treasury are trending steady.",
        )
        if counts[ZoneType.PARK] == 0:
            sentences.append(
                "Consider adding green space to preserve long-term happiness.",
            )
        else:
            sentences.append(
                "Maintain balance between residential growth and utility capacity.",
            )

    return " ".join(sentences[:MAX_SENTENCES])
