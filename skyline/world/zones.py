"""Zones — the closed catalogue of tile types.

Every tile carries exactly one ``ZoneType``.  Buildable structures,
natural terrain, and the two tool markers (clear land and move) share the
enumeration so the toolbar, the grid, and the save format all speak the
same vocabulary.  Static per-zone metadata (category, display name, cost)
lives here as read-only tables.
"""

from __future__ import annotations

from enum import Enum


class ZoneType(Enum):
    """Every kind of tile content, including terrain and tool markers."""

    EMPTY = "EMPTY"
    RESIDENTIAL_LOW = "RESIDENTIAL_LOW"
    RESIDENTIAL_MED = "RESIDENTIAL_MED"
    RESIDENTIAL_HIGH = "RESIDENTIAL_HIGH"
    COMMERCIAL_LOW = "COMMERCIAL_LOW"
    COMMERCIAL_MED = "COMMERCIAL_MED"
    COMMERCIAL_HIGH = "COMMERCIAL_HIGH"
    INDUSTRIAL_LOW = "INDUSTRIAL_LOW"
    INDUSTRIAL_MED = "INDUSTRIAL_MED"
    INDUSTRIAL_HIGH = "INDUSTRIAL_HIGH"
    ROAD = "ROAD"
    POWER_PLANT = "POWER_PLANT"
    WIND_TURBINE = "WIND_TURBINE"
    WATER_TOWER = "WATER_TOWER"
    SEWAGE_PLANT = "SEWAGE_PLANT"
    POLICE_STATION = "POLICE_STATION"
    FIRE_STATION = "FIRE_STATION"
    HOSPITAL = "HOSPITAL"
    SCHOOL = "SCHOOL"
    PARK = "PARK"
    MOVE = "MOVE"
    WATER = "WATER"
    ROCK = "ROCK"

    @property
    def category(self) -> ZoneCategory:
        """Return the category this zone belongs to."""
        return ZONE_CATEGORIES[self]

    @property
    def display_name(self) -> str:
        """Human-readable name shown in the toolbar and info panel."""
        return ZONE_NAMES[self]

    @property
    def is_terrain(self) -> bool:
        """True for natural terrain that can never be built on or moved."""
        return self.category is ZoneCategory.TERRAIN

    @property
    def is_placeable(self) -> bool:
        """True if the zone can be selected as a placement tool."""
        return self.category not in (ZoneCategory.TERRAIN, ZoneCategory.TOOL)

    @classmethod
    def parse(cls, value: object, default: ZoneType | None = None) -> ZoneType | None:
        """Look up a zone by its persisted name, returning ``default`` if unknown."""
        try:
            return cls(value)
        except ValueError:
            return default


class ZoneCategory(Enum):
    """Coarse grouping used by the tick engine and the viewer."""

    CLEAR = "clear"
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"
    INDUSTRIAL = "industrial"
    INFRASTRUCTURE = "infrastructure"
    UTILITY = "utility"
    SERVICE = "service"
    RECREATION = "recreation"
    TOOL = "tool"
    TERRAIN = "terrain"


# Must cover every ZoneType; tests enforce exhaustiveness.
ZONE_CATEGORIES: dict[ZoneType, ZoneCategory] = {
    ZoneType.EMPTY: ZoneCategory.CLEAR,
    ZoneType.RESIDENTIAL_LOW: ZoneCategory.RESIDENTIAL,
    ZoneType.RESIDENTIAL_MED: ZoneCategory.RESIDENTIAL,
    ZoneType.RESIDENTIAL_HIGH: ZoneCategory.RESIDENTIAL,
    ZoneType.COMMERCIAL_LOW: ZoneCategory.COMMERCIAL,
    ZoneType.COMMERCIAL_MED: ZoneCategory.COMMERCIAL,
    ZoneType.COMMERCIAL_HIGH: ZoneCategory.COMMERCIAL,
    ZoneType.INDUSTRIAL_LOW: ZoneCategory.INDUSTRIAL,
    ZoneType.INDUSTRIAL_MED: ZoneCategory.INDUSTRIAL,
    ZoneType.INDUSTRIAL_HIGH: ZoneCategory.INDUSTRIAL,
    ZoneType.ROAD: ZoneCategory.INFRASTRUCTURE,
    ZoneType.POWER_PLANT: ZoneCategory.UTILITY,
    ZoneType.WIND_TURBINE: ZoneCategory.UTILITY,
    ZoneType.WATER_TOWER: ZoneCategory.UTILITY,
    ZoneType.SEWAGE_PLANT: ZoneCategory.UTILITY,
    ZoneType.POLICE_STATION: ZoneCategory.SERVICE,
    ZoneType.FIRE_STATION: ZoneCategory.SERVICE,
    ZoneType.HOSPITAL: ZoneCategory.SERVICE,
    ZoneType.SCHOOL: ZoneCategory.SERVICE,
    ZoneType.PARK: ZoneCategory.RECREATION,
    ZoneType.MOVE: ZoneCategory.TOOL,
    ZoneType.WATER: ZoneCategory.TERRAIN,
    ZoneType.ROCK: ZoneCategory.TERRAIN,
}

ZONE_NAMES: dict[ZoneType, str] = {
    ZoneType.EMPTY: "Clear Land",
    ZoneType.RESIDENTIAL_LOW: "Low Density Housing",
    ZoneType.RESIDENTIAL_MED: "Medium Density Housing",
    ZoneType.RESIDENTIAL_HIGH: "High Density Housing",
    ZoneType.COMMERCIAL_LOW: "Low Density Commerce",
    ZoneType.COMMERCIAL_MED: "Medium Density Commerce",
    ZoneType.COMMERCIAL_HIGH: "High Density Commerce",
    ZoneType.INDUSTRIAL_LOW: "Light Industry",
    ZoneType.INDUSTRIAL_MED: "Medium Industry",
    ZoneType.INDUSTRIAL_HIGH: "Heavy Industry",
    ZoneType.ROAD: "Road",
    ZoneType.POWER_PLANT: "Power Plant",
    ZoneType.WIND_TURBINE: "Wind Turbine",
    ZoneType.WATER_TOWER: "Water Tower",
    ZoneType.SEWAGE_PLANT: "Sewage Plant",
    ZoneType.POLICE_STATION: "Police Station",
    ZoneType.FIRE_STATION: "Fire Station",
    ZoneType.HOSPITAL: "Hospital",
    ZoneType.SCHOOL: "School",
    ZoneType.PARK: "Park",
    ZoneType.MOVE: "Move Tool",
    ZoneType.WATER: "Water (Terrain)",
    ZoneType.ROCK: "Rock (Terrain)",
}

# Fixed build cost per zone.  Terrain and tool markers are free and are
# never charged for.
ZONE_COSTS: dict[ZoneType, int] = {
    ZoneType.EMPTY: 0,
    ZoneType.RESIDENTIAL_LOW: 100,
    ZoneType.RESIDENTIAL_MED: 500,
    ZoneType.RESIDENTIAL_HIGH: 2500,
    ZoneType.COMMERCIAL_LOW: 200,
    ZoneType.COMMERCIAL_MED: 1000,
    ZoneType.COMMERCIAL_HIGH: 5000,
    ZoneType.INDUSTRIAL_LOW: 300,
    ZoneType.INDUSTRIAL_MED: 1500,
    ZoneType.INDUSTRIAL_HIGH: 7500,
    ZoneType.ROAD: 50,
    ZoneType.POWER_PLANT: 8000,
    ZoneType.WIND_TURBINE: 4000,
    ZoneType.WATER_TOWER: 3000,
    ZoneType.SEWAGE_PLANT: 5000,
    ZoneType.POLICE_STATION: 10000,
    ZoneType.FIRE_STATION: 10000,
    ZoneType.HOSPITAL: 15000,
    ZoneType.SCHOOL: 12000,
    ZoneType.PARK: 1500,
    ZoneType.MOVE: 0,
    ZoneType.WATER: 0,
    ZoneType.ROCK: 0,
}
