"""Saves — JSON snapshots of a city session.

All saved cities live as one JSON array under a single store key, most
recent first.  Each entry looks like::

    {
      "id": "1718000000000-k3j9xq",
      "name": "Harbor Vale",
      "savedAt": "2024-06-10T06:13:20.000Z",
      "data": {
        "version": 1,
        "tiles": [...],
        "stats": {...},
        "unlockedChunks": ["1-1", "0-1"],
        "messages": [...],
        "camera": {"rotation": 0, "tilt": 0, "zoom": 1, "x": 0, "y": 0},
        "ui": {"showLeftPanel": true, "showRightPanel": true,
               "selectedTool": "ROAD", "isPaused": false}
      }
    }

Reading is forgiving: a missing or corrupt list reads as empty, and any
missing or malformed optional field in a payload falls back to its
new-game default.  Decoding always yields a complete grid.
"""

from __future__ import annotations

import json
import logging
import math
import string
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from numpy.random import Generator

    from skyline.persistence.store import KeyValueStore
    from skyline.simulation.config import SimulationConfig

from skyline.simulation.messages import AdvisorMessage, Sender, Severity, utcnow
from skyline.simulation.state import Camera, GameState, UiFlags
from skyline.simulation.stats import CityStats, Demand, Resources, Services
from skyline.world.grid import Grid
from skyline.world.territory import Territory
from skyline.world.tile import parse_tile_id
from skyline.world.zones import ZoneType

logger = logging.getLogger(__name__)

SAVE_VERSION = 1
_ID_ALPHABET = string.digits + string.ascii_lowercase


# ── Field coercion ───────────────────────────────────────────────────


def _obj(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _number(value: Any) -> bool:
    """True for JSON numbers that fit a finite float (no NaN or Infinity)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _int(value: Any, default: int) -> int:
    return int(value) if _number(value) else default


def _float(value: Any, default: float) -> float:
    return float(value) if _number(value) else default


def _bool(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _str(value: Any, default: str) -> str:
    return value if isinstance(value, str) else default


def format_timestamp(moment: datetime) -> str:
    """Render an instant as ISO-8601 UTC with millisecond precision."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string, treating naive values as UTC."""
    if not isinstance(value, str):
        return None
    try:
        moment = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


# ── Encoding ─────────────────────────────────────────────────────────


def encode_state(state: GameState) -> dict[str, Any]:
    """Build the versioned JSON-ready payload for ``state``."""
    stats = state.stats
    return {
        "version": SAVE_VERSION,
        "tiles": [
            {
                "id": tile.id,
                "x": tile.x,
                "y": tile.y,
                "type": tile.zone.value,
                "level": tile.level,
                "density": tile.density,
                "isPowered": tile.is_powered,
                "hasWater": tile.has_water,
            }
            for tile in state.grid
        ],
        "stats": {
            "name": stats.name,
            "money": stats.money,
            "netIncome": stats.net_income,
            "population": stats.population,
            "happiness": stats.happiness,
            "happinessDetails": list(stats.happiness_details),
            "demand": {
                "residential": stats.demand.residential,
                "commercial": stats.demand.commercial,
                "industrial": stats.demand.industrial,
            },
            "resources": {
                "power": stats.resources.power,
                "water": stats.resources.water,
                "sewage": stats.resources.sewage,
                "powerUsage": stats.resources.power_usage,
                "waterUsage": stats.resources.water_usage,
                "sewageUsage": stats.resources.sewage_usage,
            },
            "services": {
                "police": stats.services.police,
                "fire": stats.services.fire,
                "health": stats.services.health,
                "education": stats.services.education,
            },
            "day": stats.day,
        },
        "unlockedChunks": sorted(state.territory.unlocked),
        "messages": [
            {
                "id": msg.id,
                "sender": msg.sender.value,
                "text": msg.text,
                "timestamp": format_timestamp(msg.timestamp),
                "type": msg.severity.value,
            }
            for msg in state.messages
        ],
        "camera": {
            "rotation": state.camera.rotation,
            "tilt": state.camera.tilt,
            "zoom": state.camera.zoom,
            "x": state.camera.x,
            "y": state.camera.y,
        },
        "ui": {
            "showLeftPanel": state.ui.show_left_panel,
            "showRightPanel": state.ui.show_right_panel,
            "selectedTool": state.ui.selected_tool.value,
            "isPaused": state.ui.is_paused,
        },
    }


# ── Decoding ─────────────────────────────────────────────────────────


def _decode_grid(raw: Any, size: int) -> Grid:
    grid = Grid(size=size)
    if not isinstance(raw, list):
        logger.warning("Save has no tile list; starting from an empty grid")
        return grid

    skipped = 0
    for record in raw:
        if not isinstance(record, dict):
            skipped += 1
            continue
        x, y = record.get("x"), record.get("y")
        if not (isinstance(x, int) and isinstance(y, int)):
            coords = parse_tile_id(_str(record.get("id"), ""))
            if coords is None:
                skipped += 1
                continue
            x, y = coords
        if not grid.in_bounds(x, y):
            skipped += 1
            continue
        tile = grid.cells[y][x]
        zone = ZoneType.parse(record.get("type"), ZoneType.EMPTY)
        tile.zone = ZoneType.EMPTY if zone is ZoneType.MOVE else zone
        tile.level = _int(record.get("level"), 0)
        tile.density = _float(record.get("density"), 0.0)
        tile.is_powered = _bool(record.get("isPowered"), False)
        tile.has_water = _bool(record.get("hasWater"), False)

    if skipped:
        logger.warning("Skipped %d malformed tile record(s)", skipped)
    return grid


def _decode_stats(raw: Any, initial_money: int) -> CityStats:
    data = _obj(raw)
    default = CityStats(money=initial_money)
    demand = _obj(data.get("demand"))
    res = _obj(data.get("resources"))
    services = _obj(data.get("services"))
    details = data.get("happinessDetails")
    return CityStats(
        name=_str(data.get("name"), default.name),
        money=_int(data.get("money"), default.money),
        net_income=_int(data.get("netIncome"), 0),
        population=_int(data.get("population"), 0),
        happiness=max(0, min(100, _int(data.get("happiness"), default.happiness))),
        happiness_details=(
            [d for d in details if isinstance(d, str)]
            if isinstance(details, list)
            else list(default.happiness_details)
        ),
        demand=Demand(
            residential=_int(demand.get("residential"), default.demand.residential),
            commercial=_int(demand.get("commercial"), default.demand.commercial),
            industrial=_int(demand.get("industrial"), default.demand.industrial),
        ),
        resources=Resources(
            power=_int(res.get("power"), 0),
            water=_int(res.get("water"), 0),
            sewage=_int(res.get("sewage"), 0),
            power_usage=_int(res.get("powerUsage"), 0),
            water_usage=_int(res.get("waterUsage"), 0),
            sewage_usage=_int(res.get("sewageUsage"), 0),
        ),
        services=Services(
            police=_int(services.get("police"), 0),
            fire=_int(services.get("fire"), 0),
            health=_int(services.get("health"), 0),
            education=_int(services.get("education"), 0),
        ),
        day=max(1, _int(data.get("day"), 1)),
    )


def _decode_messages(raw: Any) -> list[AdvisorMessage]:
    if not isinstance(raw, list):
        return []
    messages: list[AdvisorMessage] = []
    for record in raw:
        if not isinstance(record, dict) or not isinstance(record.get("text"), str):
            continue
        try:
            sender = Sender(record.get("sender"))
        except ValueError:
            sender = Sender.SYSTEM
        try:
            severity = Severity(record.get("type"))
        except ValueError:
            severity = Severity.INFO
        messages.append(
            AdvisorMessage(
                text=record["text"],
                sender=sender,
                severity=severity,
                timestamp=parse_timestamp(record.get("timestamp")) or utcnow(),
                id=_str(record.get("id"), "") or uuid.uuid4().hex,
            ),
        )
    return messages


def _decode_camera(raw: Any) -> Camera:
    data = _obj(raw)
    camera = Camera(
        rotation=_float(data.get("rotation"), 0.0),
        tilt=_float(data.get("tilt"), 0.0),
    )
    camera.pan(_float(data.get("x"), 0.0), _float(data.get("y"), 0.0))
    camera.zoom_by(_float(data.get("zoom"), 1.0) - camera.zoom)
    return camera


def _decode_ui(raw: Any) -> UiFlags:
    data = _obj(raw)
    tool = ZoneType.parse(data.get("selectedTool"), ZoneType.ROAD)
    if tool.is_terrain:
        tool = ZoneType.ROAD
    return UiFlags(
        show_left_panel=_bool(data.get("showLeftPanel"), True),
        show_right_panel=_bool(data.get("showRightPanel"), True),
        selected_tool=tool,
        is_paused=_bool(data.get("isPaused"), False),
    )


def decode_state(data: dict[str, Any], config: SimulationConfig) -> GameState:
    """Rebuild a GameState from a saved payload.

    Transient selection and purchase-prompt state always start cleared.
    """
    version = data.get("version")
    if version != SAVE_VERSION:
        logger.warning("Loading save with unexpected version %r", version)

    chunks = data.get("unlockedChunks")
    if isinstance(chunks, list):
        ids = [c for c in chunks if isinstance(c, str)]
    else:
        ids = [config.starting_chunk]

    return GameState(
        grid=_decode_grid(data.get("tiles"), config.grid_size),
        stats=_decode_stats(data.get("stats"), config.initial_money),
        territory=Territory.from_ids(ids, starting_chunk=config.starting_chunk),
        chunk_size=config.chunk_size,
        messages=_decode_messages(data.get("messages")),
        camera=_decode_camera(data.get("camera")),
        ui=_decode_ui(data.get("ui")),
    )


# ── Save list ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SaveEntry:
    """One named snapshot in the save list."""

    id: str
    name: str
    saved_at: str
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "savedAt": self.saved_at,
            "data": self.data,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SaveEntry | None:
        """Build an entry from a stored record, or ``None`` if it has no payload."""
        data = raw.get("data")
        if not isinstance(data, dict):
            return None
        return cls(
            id=_str(raw.get("id"), ""),
            name=_str(raw.get("name"), "Untitled"),
            saved_at=_str(raw.get("savedAt"), ""),
            data=data,
        )


class SaveManager:
    """Reads and appends to the save list held under one store key."""

    def __init__(self, store: KeyValueStore, key: str, rng: Generator) -> None:
        self.store = store
        self.key = key
        self.rng = rng

    def _read_raw(self) -> list[Any]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Save list under %r is corrupt, ignoring: %s", self.key, exc)
            return []
        if not isinstance(parsed, list):
            logger.warning("Save list under %r is not a list, ignoring", self.key)
            return []
        return parsed

    def list_entries(self) -> list[SaveEntry]:
        """Return saved cities, most recent first.  Never raises."""
        entries: list[SaveEntry] = []
        for record in self._read_raw():
            if not isinstance(record, dict):
                continue
            entry = SaveEntry.from_dict(record)
            if entry is not None:
                entries.append(entry)
        return entries

    def new_id(self) -> str:
        suffix = "".join(
            _ID_ALPHABET[int(i)] for i in self.rng.integers(len(_ID_ALPHABET), size=6)
        )
        return f"{int(time.time() * 1000)}-{suffix}"

    def save(self, state: GameState, name: str) -> SaveEntry | None:
        """Snapshot ``state`` under ``name`` and prepend it to the list.

        Returns:
            The written entry, or ``None`` if the trimmed name is empty.
        """
        trimmed = name.strip()
        if not trimmed:
            logger.info("Save skipped: empty name")
            return None
        entry = SaveEntry(
            id=self.new_id(),
            name=trimmed,
            saved_at=format_timestamp(utcnow()),
            data=encode_state(state),
        )
        # Keep unreadable records as they are rather than dropping them
        records = [entry.to_dict(), *self._read_raw()]
        self.store.set(self.key, json.dumps(records))
        logger.info("Saved city %r as entry %s", trimmed, entry.id)
        return entry
