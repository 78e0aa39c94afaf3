"""Tests for skyline.simulation.economy - the daily tick."""

from collections import Counter

import numpy as np
import pytest

from skyline.simulation.economy import advance_day, evaluate
from skyline.simulation.stats import CityStats
from skyline.world.zones import ZoneType


def _stats(**kwargs) -> CityStats:
    return CityStats(**kwargs)


class TestEmptyCity:
    """An empty grid costs nothing and earns nothing."""

    def test_empty_city(self) -> None:
        stats = advance_day(Counter({ZoneType.EMPTY: 900}), _stats(money=150000))
        assert stats.population == 0
        assert stats.net_income == 0
        assert stats.money == 150000
        assert stats.happiness == 70
        assert stats.happiness_details == ["Base Happiness (+70)"]

    def test_roads_only_cost_upkeep(self) -> None:
        stats = advance_day(Counter({ZoneType.ROAD: 12}), _stats(money=1000))
        assert stats.net_income == -12
        assert stats.money == 988


class TestFormulas:
    """Tests for each aggregate in the tick."""

    def test_population_weights(self) -> None:
        counts = Counter({
            ZoneType.RESIDENTIAL_LOW: 3,
            ZoneType.RESIDENTIAL_MED: 2,
            ZoneType.RESIDENTIAL_HIGH: 1,
        })
        assert evaluate(counts, _stats()).population == 30 + 100 + 200

    def test_capacity(self) -> None:
        counts = Counter({
            ZoneType.POWER_PLANT: 2,
            ZoneType.WIND_TURBINE: 3,
            ZoneType.WATER_TOWER: 1,
            ZoneType.SEWAGE_PLANT: 2,
        })
        stats = advance_day(counts, _stats())
        assert stats.resources.power == 2600
        assert stats.resources.water == 500
        assert stats.resources.sewage == 1600

    def test_usage_is_floored(self) -> None:
        counts = Counter({
            ZoneType.RESIDENTIAL_LOW: 1,
            ZoneType.COMMERCIAL_LOW: 1,
            ZoneType.INDUSTRIAL_LOW: 1,
        })
        stats = advance_day(counts, _stats())
        # pop 10: power 5 + 20 + 50, water 4, sewage 3
        assert stats.resources.power_usage == 75
        assert stats.resources.water_usage == 4
        assert stats.resources.sewage_usage == 3

    def test_tax_and_maintenance(self) -> None:
        counts = Counter({
            ZoneType.RESIDENTIAL_MED: 1,
            ZoneType.COMMERCIAL_LOW: 2,
            ZoneType.INDUSTRIAL_LOW: 1,
            ZoneType.POWER_PLANT: 1,
            ZoneType.WIND_TURBINE: 1,
            ZoneType.WATER_TOWER: 1,
            ZoneType.SEWAGE_PLANT: 1,
            ZoneType.ROAD: 5,
        })
        report = evaluate(counts, _stats())
        assert report.tax == pytest.approx(75 + 60 + 40)
        assert report.maintenance == pytest.approx(100 + 20 + 50 + 60 + 5)
        assert report.net_income == 175 - 235

    def test_net_income_is_integer(self) -> None:
        # pop 10 -> tax 15.0, one road -> 14
        counts = Counter({ZoneType.RESIDENTIAL_LOW: 1, ZoneType.ROAD: 1})
        net = evaluate(counts, _stats()).net_income
        assert net == 14
        assert isinstance(net, int)

    def test_negative_income_may_bankrupt(self) -> None:
        stats = advance_day(Counter({ZoneType.POWER_PLANT: 3}), _stats(money=100))
        assert stats.money == -200

    def test_demand_and_services_carried_over(self) -> None:
        prev = _stats()
        prev.demand.residential = 77
        prev.services.police = 12
        stats = advance_day(Counter(), prev)
        assert stats.demand.residential == 77
        assert stats.services.police == 12


class TestHappiness:
    """Tests for the itemised happiness trace."""

    def test_single_house_triggers_power_outage(self) -> None:
        stats = advance_day(Counter({ZoneType.RESIDENTIAL_LOW: 1}), _stats())
        assert stats.population == 10
        assert stats.resources.power_usage == 5
        assert stats.resources.power == 0
        assert "Power Outages (-20)" in stats.happiness_details
        assert "Water Shortage (-20)" in stats.happiness_details
        assert "Sewage Overflow (-10)" in stats.happiness_details
        assert stats.happiness == 20

    def test_fractional_usage_still_counts_as_shortage(self) -> None:
        # 1 house uses 3 sewage (0.3 * 10); capacity 0 -> shortage
        report = evaluate(Counter({ZoneType.RESIDENTIAL_LOW: 1}), _stats())
        assert report.sewage_short

    def test_parks_bonus_capped(self) -> None:
        few = advance_day(Counter({ZoneType.PARK: 3}), _stats())
        many = advance_day(Counter({ZoneType.PARK: 40}), _stats())
        assert few.happiness == 76
        assert "Parks & Recreation (+6)" in few.happiness_details
        assert many.happiness == 90

    def test_police_needs_population(self) -> None:
        counts = Counter({
            ZoneType.POLICE_STATION: 1,
            ZoneType.RESIDENTIAL_MED: 3,
            ZoneType.POWER_PLANT: 1,
            ZoneType.WATER_TOWER: 1,
            ZoneType.SEWAGE_PLANT: 1,
        })
        stats = advance_day(counts, _stats())
        assert stats.population == 150
        assert stats.happiness_details == [
            "Base Happiness (+70)",
            "Police Coverage (+5)",
        ]
        quiet = advance_day(Counter({ZoneType.POLICE_STATION: 1}), _stats())
        assert "Police Coverage (+5)" not in quiet.happiness_details

    def test_bankruptcy_uses_pre_tick_treasury(self) -> None:
        stats = advance_day(Counter(), _stats(money=-1))
        assert "City Bankruptcy (-10)" in stats.happiness_details
        assert stats.happiness == 60

    def test_no_green_space(self) -> None:
        counts = Counter({
            ZoneType.RESIDENTIAL_HIGH: 6,
            ZoneType.POWER_PLANT: 1,
            ZoneType.WATER_TOWER: 1,
            ZoneType.SEWAGE_PLANT: 1,
        })
        stats = advance_day(counts, _stats())
        assert stats.population == 1200
        assert stats.happiness_details[-1] == "No Green Space (-5)"

    def test_details_in_evaluation_order(self) -> None:
        counts = Counter({ZoneType.PARK: 1, ZoneType.RESIDENTIAL_LOW: 1})
        stats = advance_day(counts, _stats(money=-5))
        assert stats.happiness_details == [
            "Base Happiness (+70)",
            "Parks & Recreation (+2)",
            "Power Outages (-20)",
            "Water Shortage (-20)",
            "Sewage Overflow (-10)",
            "City Bankruptcy (-10)",
        ]

    def test_clamped_for_random_inputs(self) -> None:
        rng = np.random.default_rng(2024)
        zones = list(ZoneType)
        for _ in range(300):
            counts = Counter({
                zone: int(n) for zone, n in zip(zones, rng.integers(0, 60, size=len(zones)))
            })
            money = int(rng.integers(-50000, 50000))
            stats = advance_day(counts, _stats(money=money))
            assert 0 <= stats.happiness <= 100


class TestDayCounter:
    """Tests for the day counter and snapshot replacement."""

    def test_day_increments_by_one(self) -> None:
        stats = _stats()
        for expected in range(2, 12):
            stats = advance_day(Counter(), stats)
            assert stats.day == expected

    def test_previous_snapshot_untouched(self) -> None:
        prev = _stats(money=500)
        advance_day(Counter({ZoneType.ROAD: 3}), prev)
        assert prev.money == 500
        assert prev.day == 1
