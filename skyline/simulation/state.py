"""GameState — the single container for everything a city session owns.

Grid, stats, territory, the message feed, the camera pose and UI flags all
live on one object that is passed explicitly to the transition functions
in ``skyline.simulation.actions`` and to the tick.  Restart and load build
a new GameState rather than patching the old one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator

    from skyline.simulation.config import SimulationConfig

from skyline.simulation.messages import AdvisorMessage, Sender, Severity
from skyline.simulation.stats import CityStats
from skyline.world.grid import Grid
from skyline.world.terrain import generate_terrain
from skyline.world.territory import Territory, chunk_id
from skyline.world.tile import Tile
from skyline.world.zones import ZoneType

CITY_NAME_PREFIXES = [
    "Neo",
    "Aurora",
    "Iron",
    "Silver",
    "Verdant",
    "Nova",
    "Crystal",
    "Harbor",
    "Sunset",
    "Atlas",
]

CITY_NAME_SUFFIXES = [
    "Haven",
    "Bay",
    "Heights",
    "Crossing",
    "Vale",
    "Point",
    "City",
    "Reach",
    "District",
    "Harbor",
]

WELCOME_TEXT = (
    "Welcome, Mayor. System ready. Zoning commercial and industrial "
    "blocks generates city revenue."
)
RESTART_TEXT = "Game Restarted. Welcome, Mayor. A new city awaits your command."

# Camera limits
PAN_LIMIT = 2000.0
MIN_ZOOM = 0.2
MAX_ZOOM = 4.0


def generate_city_name(rng: Generator) -> str:
    prefix = CITY_NAME_PREFIXES[int(rng.integers(len(CITY_NAME_PREFIXES)))]
    suffix = CITY_NAME_SUFFIXES[int(rng.integers(len(CITY_NAME_SUFFIXES)))]
    return f"{prefix} {suffix}"


@dataclass
class Camera:
    """View pose over the map; identity is top-down, unzoomed, centred."""

    rotation: float = 0.0
    tilt: float = 0.0
    zoom: float = 1.0
    x: float = 0.0
    y: float = 0.0

    def pan(self, dx: float, dy: float) -> None:
        self.x = max(-PAN_LIMIT, min(PAN_LIMIT, self.x + dx))
        self.y = max(-PAN_LIMIT, min(PAN_LIMIT, self.y + dy))

    def zoom_by(self, delta: float) -> None:
        self.zoom = max(MIN_ZOOM, min(MAX_ZOOM, self.zoom + delta))

    def reset(self) -> None:
        self.rotation = 0.0
        self.tilt = 0.0
        self.zoom = 1.0
        self.x = 0.0
        self.y = 0.0


@dataclass
class UiFlags:
    """Persisted UI preferences."""

    show_left_panel: bool = True
    show_right_panel: bool = True
    selected_tool: ZoneType = ZoneType.ROAD
    is_paused: bool = False


@dataclass(frozen=True)
class PurchasePrompt:
    """An open offer to buy a locked sector."""

    chunk_id: str
    cost: int


@dataclass
class GameState:
    """All mutable state of one city session.

    Attributes:
        grid: Tile store.
        stats: Current day's aggregate stats.
        territory: Owned chunks.
        chunk_size: Side length of a chunk, needed to map tiles to chunks.
        messages: Feed entries, newest first.
        camera: View pose.
        ui: Persisted UI flags.
        selected_move_tile: Tile picked up by the move tool (transient).
        purchase_prompt: Pending sector purchase offer (transient).
    """

    grid: Grid
    stats: CityStats
    territory: Territory
    chunk_size: int = 10
    messages: list[AdvisorMessage] = field(default_factory=list)
    camera: Camera = field(default_factory=Camera)
    ui: UiFlags = field(default_factory=UiFlags)
    selected_move_tile: str | None = None
    purchase_prompt: PurchasePrompt | None = None

    def chunk_of(self, tile: Tile) -> str:
        return chunk_id(tile.x, tile.y, self.chunk_size)

    def is_owned(self, tile: Tile) -> bool:
        """True if the chunk containing ``tile`` is unlocked."""
        return self.territory.is_unlocked(self.chunk_of(tile))

    def post(
        self,
        text: str,
        severity: Severity = Severity.INFO,
        sender: Sender = Sender.SYSTEM,
    ) -> AdvisorMessage:
        """Prepend a message to the feed and return it."""
        message = AdvisorMessage(text=text, sender=sender, severity=severity)
        self.messages.insert(0, message)
        return message

    def clear_transient(self) -> None:
        """Drop selection and modal state that is never persisted."""
        self.selected_move_tile = None
        self.purchase_prompt = None


def new_game_state(
    config: SimulationConfig,
    rng: Generator,
    *,
    grid: Grid | None = None,
    welcome: str = WELCOME_TEXT,
) -> GameState:
    """Create the state for a brand-new city.

    Args:
        config: Game configuration.
        rng: Random source for terrain and the city name.
        grid: Pre-built grid to use instead of generating terrain.
        welcome: Text of the first system message.

    Returns:
        A fresh GameState owning only the starting chunk.
    """
    if grid is None:
        grid = generate_terrain(
            config.grid_size,
            rng,
            river_period=config.river_period,
            river_amplitude=config.river_amplitude,
            river_half_width=config.river_half_width,
            rock_probability=config.rock_probability,
        )
    state = GameState(
        grid=grid,
        stats=CityStats(name=generate_city_name(rng), money=config.initial_money),
        territory=Territory(starting_chunk=config.starting_chunk),
        chunk_size=config.chunk_size,
    )
    state.post(welcome)
    return state
