"""CityStats — the per-day aggregate snapshot of the city.

Stats are replaced wholesale by the tick engine once per day and by
new-game/load.  The only other writer is the treasury debit performed by
placement and sector purchases.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Demand:
    """Sector pressure indicators shown in the UI (not simulated)."""

    residential: int = 50
    commercial: int = 20
    industrial: int = 10


@dataclass
class Resources:
    """Utility capacities and current usage."""

    power: int = 0
    water: int = 0
    sewage: int = 0
    power_usage: int = 0
    water_usage: int = 0
    sewage_usage: int = 0


@dataclass
class Services:
    """Service coverage percentages (reserved, not simulated)."""

    police: int = 0
    fire: int = 0
    health: int = 0
    education: int = 0


@dataclass
class CityStats:
    """Aggregate state of the city for the current day.

    Attributes:
        name: City name.
        money: Treasury; may go negative.
        net_income: Cash flow produced by the last tick.
        population: Current population.
        happiness: Score clamped to 0-100.
        happiness_details: Signed contributions, in evaluation order.
        demand: Residential/commercial/industrial pressure.
        resources: Utility capacity and usage.
        services: Service coverage.
        day: Day counter, starting at 1.
    """

    name: str = "New City"
    money: int = 150000
    net_income: int = 0
    population: int = 0
    happiness: int = 80
    happiness_details: list[str] = field(
        default_factory=lambda: ["Base Happiness (+80)"],
    )
    demand: Demand = field(default_factory=Demand)
    resources: Resources = field(default_factory=Resources)
    services: Services = field(default_factory=Services)
    day: int = 1
