"""Economy — the once-per-day aggregation of the grid into city stats.

The tick reads nothing but zone counts and the previous day's stats, so it
is a pure function and can be exercised with synthetic count vectors.
Order of evaluation:

1. Population from residential tiles
2. Utility capacity from utility buildings
3. Utility usage from population and low-density business
4. Tax revenue
5. Maintenance
6. Net income (floored) applied to the treasury
7. Happiness with an itemised trace, clamped to 0-100
8. Day counter

Demand and service coverage are display inputs and are carried over
unchanged.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from skyline.simulation.stats import CityStats, Resources
from skyline.world.zones import ZoneType

POPULATION_PER_TILE: dict[ZoneType, int] = {
    ZoneType.RESIDENTIAL_LOW: 10,
    ZoneType.RESIDENTIAL_MED: 50,
    ZoneType.RESIDENTIAL_HIGH: 200,
}

POWER_CAPACITY: dict[ZoneType, int] = {
    ZoneType.POWER_PLANT: 1000,
    ZoneType.WIND_TURBINE: 200,
}
WATER_CAPACITY: dict[ZoneType, int] = {ZoneType.WATER_TOWER: 500}
SEWAGE_CAPACITY: dict[ZoneType, int] = {ZoneType.SEWAGE_PLANT: 800}

POWER_PER_RESIDENT = 0.5
WATER_PER_RESIDENT = 0.4
SEWAGE_PER_RESIDENT = 0.3
BUSINESS_POWER: dict[ZoneType, int] = {
    ZoneType.COMMERCIAL_LOW: 20,
    ZoneType.INDUSTRIAL_LOW: 50,
}

TAX_PER_RESIDENT = 1.5
BUSINESS_TAX: dict[ZoneType, int] = {
    ZoneType.COMMERCIAL_LOW: 30,
    ZoneType.INDUSTRIAL_LOW: 40,
}

MAINTENANCE: dict[ZoneType, int] = {
    ZoneType.POWER_PLANT: 100,
    ZoneType.WIND_TURBINE: 20,
    ZoneType.WATER_TOWER: 50,
    ZoneType.SEWAGE_PLANT: 60,
    ZoneType.ROAD: 1,
}

BASE_HAPPINESS = 70
PARK_BONUS_PER_PARK = 2
PARK_BONUS_CAP = 20
POLICE_BONUS = 5
POLICE_MIN_POPULATION = 100
POWER_OUTAGE_PENALTY = 20
WATER_SHORTAGE_PENALTY = 20
SEWAGE_OVERFLOW_PENALTY = 10
BANKRUPTCY_PENALTY = 10
NO_GREEN_SPACE_PENALTY = 5
CROWDED_POPULATION = 1000


def _weighted(counts: Mapping[ZoneType, int], weights: Mapping[ZoneType, float]) -> float:
    return sum(counts.get(zone, 0) * w for zone, w in weights.items())


@dataclass
class Happiness:
    """A happiness score built up from signed, labelled contributions."""

    score: int = BASE_HAPPINESS
    details: list[str] = field(
        default_factory=lambda: [f"Base Happiness (+{BASE_HAPPINESS})"],
    )

    def add(self, amount: int, label: str) -> None:
        self.score += amount
        sign = "+" if amount >= 0 else "-"
        self.details.append(f"{label} ({sign}{abs(amount)})")

    @property
    def clamped(self) -> int:
        return max(0, min(100, self.score))


@dataclass
class TickReport:
    """Every intermediate quantity computed by one tick.

    The unrounded usages are kept so shortage checks see exact values;
    the published stats store them floored.
    """

    population: int
    power_capacity: int
    water_capacity: int
    sewage_capacity: int
    power_usage: float
    water_usage: float
    sewage_usage: float
    tax: float
    maintenance: float
    net_income: int
    happiness: Happiness

    @property
    def power_short(self) -> bool:
        return self.power_usage > self.power_capacity

    @property
    def water_short(self) -> bool:
        return self.water_usage > self.water_capacity

    @property
    def sewage_short(self) -> bool:
        return self.sewage_usage > self.sewage_capacity


def evaluate(counts: Mapping[ZoneType, int], prev: CityStats) -> TickReport:
    """Compute one day's economy from zone counts and the previous stats.

    Args:
        counts: Number of tiles per zone type.
        prev: Stats at the end of the previous day.

    Returns:
        The full breakdown for this tick.
    """
    population = int(_weighted(counts, POPULATION_PER_TILE))

    power_capacity = int(_weighted(counts, POWER_CAPACITY))
    water_capacity = int(_weighted(counts, WATER_CAPACITY))
    sewage_capacity = int(_weighted(counts, SEWAGE_CAPACITY))

    power_usage = population * POWER_PER_RESIDENT + _weighted(counts, BUSINESS_POWER)
    water_usage = population * WATER_PER_RESIDENT
    sewage_usage = population * SEWAGE_PER_RESIDENT

    tax = population * TAX_PER_RESIDENT + _weighted(counts, BUSINESS_TAX)
    maintenance = _weighted(counts, MAINTENANCE)
    net_income = math.floor(tax - maintenance)

    happiness = Happiness()
    parks = counts.get(ZoneType.PARK, 0)
    if parks > 0:
        happiness.add(
            min(PARK_BONUS_CAP, parks * PARK_BONUS_PER_PARK),
            "Parks & Recreation",
        )
    if counts.get(ZoneType.POLICE_STATION, 0) > 0 and population > POLICE_MIN_POPULATION:
        happiness.add(POLICE_BONUS, "Police Coverage")
    if power_usage > power_capacity:
        happiness.add(-POWER_OUTAGE_PENALTY, "Power Outages")
    if water_usage > water_capacity:
        happiness.add(-WATER_SHORTAGE_PENALTY, "Water Shortage")
    if sewage_usage > sewage_capacity:
        happiness.add(-SEWAGE_OVERFLOW_PENALTY, "Sewage Overflow")
    if prev.money < 0:
        happiness.add(-BANKRUPTCY_PENALTY, "City Bankruptcy")
    if population > CROWDED_POPULATION and parks == 0:
        happiness.add(-NO_GREEN_SPACE_PENALTY, "No Green Space")

    return TickReport(
        population=population,
        power_capacity=power_capacity,
        water_capacity=water_capacity,
        sewage_capacity=sewage_capacity,
        power_usage=power_usage,
        water_usage=water_usage,
        sewage_usage=sewage_usage,
        tax=tax,
        maintenance=maintenance,
        net_income=net_income,
        happiness=happiness,
    )


def advance_day(counts: Mapping[ZoneType, int], prev: CityStats) -> CityStats:
    """Return the stats for the next day.

    ``prev`` is left untouched; the result is a new snapshot.
    """
    report = evaluate(counts, prev)
    return replace(
        prev,
        money=prev.money + report.net_income,
        net_income=report.net_income,
        population=report.population,
        happiness=report.happiness.clamped,
        happiness_details=list(report.happiness.details),
        resources=Resources(
            power=report.power_capacity,
            water=report.water_capacity,
            sewage=report.sewage_capacity,
            power_usage=math.floor(report.power_usage),
            water_usage=math.floor(report.water_usage),
            sewage_usage=math.floor(report.sewage_usage),
        ),
        day=prev.day + 1,
    )
