"""Shared fixtures for the Skyline test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from skyline.simulation.config import SimulationConfig
from skyline.simulation.engine import SimulationEngine
from skyline.simulation.state import GameState, new_game_state
from skyline.world.grid import Grid


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default game config (no YAML file needed)."""
    return SimulationConfig(seed=7)


@pytest.fixture
def blank_grid(default_config: SimulationConfig) -> Grid:
    """A full-size grid with no terrain."""
    return Grid(size=default_config.grid_size)


@pytest.fixture
def blank_state(
    default_config: SimulationConfig,
    blank_grid: Grid,
    rng: Generator,
) -> GameState:
    """A new-game state on a terrain-free grid."""
    return new_game_state(default_config, rng, grid=blank_grid)


@pytest.fixture
def engine(default_config: SimulationConfig) -> SimulationEngine:
    """An engine whose current city sits on a terrain-free grid."""
    eng = SimulationEngine(config=default_config)
    eng.new_game(grid=Grid(size=default_config.grid_size))
    return eng
