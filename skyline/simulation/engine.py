"""SimulationEngine — one city session and its tick loop.

Owns the current GameState together with the RNG, the tick scheduler and
the save list, and exposes every player action as a method.  The engine
is the only place that replaces the state: new game, restart and load all
build a fresh GameState and re-bind the scheduler to it, so a pending tick
for the old city can never write into the new one.

Each tick:

1. Count zones on the grid
2. Compute the next day's stats (``skyline.simulation.economy``)
3. Replace the stats snapshot
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial

import numpy as np
from numpy.random import Generator

from skyline.advisor.summarizer import build_advisor_message
from skyline.persistence.saves import SaveEntry, SaveManager, decode_state
from skyline.persistence.store import KeyValueStore, MemoryStore
from skyline.simulation import actions
from skyline.simulation.actions import Outcome
from skyline.simulation.config import SimulationConfig
from skyline.simulation.economy import advance_day
from skyline.simulation.messages import Sender, Severity
from skyline.simulation.scheduler import TickScheduler
from skyline.simulation.state import (
    RESTART_TEXT,
    WELCOME_TEXT,
    GameState,
    new_game_state,
)
from skyline.simulation.stats import CityStats
from skyline.world.grid import Grid
from skyline.world.zones import ZoneType

logger = logging.getLogger(__name__)

LOADED_TEXT = "City loaded from local storage."


@dataclass
class SimulationEngine:
    """Drives a city session forward and applies player actions.

    Attributes:
        config: Loaded game configuration.
        store: Local key-value store backing the save list.
        state: The current city.
        rng: Master random generator (terrain, names, save ids).
        scheduler: Fixed-period tick scheduler bound to ``state``.
        saves: Save list reader/writer.
    """

    config: SimulationConfig
    store: KeyValueStore = field(default_factory=MemoryStore)
    state: GameState = field(init=False)
    rng: Generator = field(init=False)
    scheduler: TickScheduler = field(init=False)
    saves: SaveManager = field(init=False)

    def __post_init__(self) -> None:
        """Seed the RNG and start a new city."""
        self.rng = np.random.default_rng(self.config.seed)
        self.scheduler = TickScheduler(self.config.tick_rate_ms)
        self.saves = SaveManager(self.store, self.config.save_key, self.rng)
        self._install(new_game_state(self.config, self.rng))

    # ── State replacement ────────────────────────────────────────────

    def _install(self, state: GameState) -> None:
        """Make ``state`` current and re-bind the tick schedule to it."""
        self.state = state
        self.scheduler.rebind(partial(self._scheduled_tick, state))
        if state.ui.is_paused:
            self.scheduler.pause()
        else:
            self.scheduler.resume()

    def _scheduled_tick(self, state: GameState) -> None:
        if state is not self.state:
            logger.warning("Dropping tick for a replaced city")
            return
        self.step()

    def new_game(self, *, grid: Grid | None = None, welcome: str = WELCOME_TEXT) -> GameState:
        """Discard the current city and start a fresh one.

        Args:
            grid: Pre-built grid; terrain is generated when omitted.
            welcome: Text of the opening system message.
        """
        self._install(new_game_state(self.config, self.rng, grid=grid, welcome=welcome))
        logger.info("Started new city %r", self.state.stats.name)
        return self.state

    def restart(self) -> GameState:
        return self.new_game(welcome=RESTART_TEXT)

    # ── Ticking ──────────────────────────────────────────────────────

    def step(self) -> CityStats:
        """Advance the city by one day."""
        counts = self.state.grid.zone_counts()
        self.state.stats = advance_day(counts, self.state.stats)
        stats = self.state.stats
        logger.debug(
            "Day %d: pop=%d money=%d net=%d happiness=%d",
            stats.day,
            stats.population,
            stats.money,
            stats.net_income,
            stats.happiness,
        )
        return stats

    def run(self, ticks: int) -> None:
        """Advance a fixed number of days, ignoring the pause flag.

        Args:
            ticks: Number of days to simulate.
        """
        for _ in range(ticks):
            self.step()

    def advance(self, elapsed_ms: float) -> int:
        """Feed simulated time to the scheduler; returns ticks fired."""
        return self.scheduler.advance(elapsed_ms)

    @property
    def is_paused(self) -> bool:
        return self.state.ui.is_paused

    def set_paused(self, paused: bool) -> None:
        self.state.ui.is_paused = paused
        if paused:
            self.scheduler.pause()
        else:
            self.scheduler.resume()

    def toggle_pause(self) -> bool:
        self.set_paused(not self.is_paused)
        return self.is_paused

    def toggle_left_panel(self) -> bool:
        ui = self.state.ui
        ui.show_left_panel = not ui.show_left_panel
        return ui.show_left_panel

    def toggle_right_panel(self) -> bool:
        ui = self.state.ui
        ui.show_right_panel = not ui.show_right_panel
        return ui.show_right_panel

    # ── Player actions ───────────────────────────────────────────────

    def select_tool(self, zone: ZoneType) -> None:
        if zone.is_terrain:
            logger.warning("Ignoring terrain tool %s", zone.name)
            return
        self.state.ui.selected_tool = zone
        if zone is not ZoneType.MOVE:
            self.state.selected_move_tile = None

    def place(self, tid: str, zone: ZoneType | None = None) -> Outcome:
        """Apply ``zone`` (default: the selected tool) to tile ``tid``."""
        if zone is None:
            zone = self.state.ui.selected_tool
        return actions.place(self.state, tid, zone, self.config)

    def demolish(self, tid: str) -> Outcome:
        return actions.demolish(self.state, tid)

    def swap(self, tid: str, dx: int, dy: int) -> Outcome:
        return actions.swap(self.state, tid, dx, dy)

    def nudge(self, dx: int, dy: int) -> Outcome:
        """Move the building currently picked up by the move tool."""
        selected = self.state.selected_move_tile
        if selected is None:
            return Outcome.UNCHANGED
        return actions.swap(self.state, selected, dx, dy)

    def purchase(self, cid: str | None = None) -> Outcome:
        """Buy ``cid``, or the sector of the open purchase prompt."""
        if cid is None:
            prompt = self.state.purchase_prompt
            if prompt is None:
                return Outcome.UNCHANGED
            cid = prompt.chunk_id
        return actions.purchase_chunk(self.state, cid, self.config)

    def cancel_purchase(self) -> None:
        self.state.purchase_prompt = None

    def rename(self, name: str) -> Outcome:
        return actions.rename_city(self.state, name)

    def ask_advisor(self) -> str:
        """Post the advisor's current brief to the feed and return it."""
        text = build_advisor_message(self.state.stats, self.state.grid)
        self.state.post(text, Severity.INFO, Sender.ADVISOR)
        return text

    # ── Persistence ──────────────────────────────────────────────────

    def list_saves(self) -> list[SaveEntry]:
        return self.saves.list_entries()

    def save(self, name: str) -> SaveEntry | None:
        """Save the current city under ``name``; blank names are skipped."""
        entry = self.saves.save(self.state, name)
        if entry is not None:
            self.state.post(f"City saved as “{entry.name}”.", Severity.SUCCESS)
        return entry

    def load(self, entry: SaveEntry) -> bool:
        """Replace the current city with the snapshot in ``entry``."""
        if not isinstance(entry.data, dict):
            return False
        state = decode_state(entry.data, self.config)
        state.post(LOADED_TEXT, Severity.SUCCESS)
        self._install(state)
        logger.info("Loaded city %r from entry %s", state.stats.name, entry.id)
        return True

    def load_latest(self) -> bool:
        entries = self.list_saves()
        if not entries:
            return False
        return self.load(entries[0])
