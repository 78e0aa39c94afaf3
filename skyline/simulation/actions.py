"""Actions — rule-checked transitions on a GameState.

Every player action is a plain function taking the state (and config where
prices matter) and returning an :class:`Outcome`.  Rule violations are
never raised: the state is left unchanged, the refusal is logged, and
where the player needs to know, a message is posted to the feed.

Placement checks run in a fixed order, and the first rule that applies
decides the outcome:

1. Unknown tile
2. Locked sector (opens a purchase prompt)
3. Natural terrain
4. Move tool (selects instead of building)
5. Insufficient funds
6. Zone already present
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from skyline.simulation.config import SimulationConfig
    from skyline.simulation.state import GameState

from skyline.simulation.messages import Severity
from skyline.simulation.state import PurchasePrompt
from skyline.world.tile import tile_id
from skyline.world.zones import ZoneType

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """Result of a player action."""

    PLACED = auto()
    CLEARED = auto()
    MOVED = auto()
    SELECTED = auto()
    DESELECTED = auto()
    PURCHASED = auto()
    RENAMED = auto()
    UNCHANGED = auto()
    UNKNOWN_TILE = auto()
    INVALID_ZONE = auto()
    LOCKED = auto()
    TERRAIN = auto()
    OUT_OF_BOUNDS = auto()
    INSUFFICIENT_FUNDS = auto()
    ALREADY_UNLOCKED = auto()
    INVALID_NAME = auto()


def place(
    state: GameState,
    tid: str,
    zone: ZoneType,
    config: SimulationConfig,
) -> Outcome:
    """Build ``zone`` on tile ``tid``, debiting its cost from the treasury."""
    tile = state.grid.get(tid)
    if tile is None:
        return Outcome.UNKNOWN_TILE

    if not state.is_owned(tile):
        cid = state.chunk_of(tile)
        cost = config.sector_price(cid)
        state.purchase_prompt = PurchasePrompt(chunk_id=cid, cost=cost)
        state.post(f"Sector {cid} is not owned yet. Purchase it for ${cost:,} to build here.")
        logger.info("Placement on %s blocked: sector %s locked", tid, cid)
        return Outcome.LOCKED

    if tile.is_terrain:
        state.post("Cannot build on natural terrain.", Severity.WARNING)
        return Outcome.TERRAIN

    if zone is ZoneType.MOVE:
        if tile.zone is ZoneType.EMPTY:
            return Outcome.UNCHANGED
        state.selected_move_tile = tid
        return Outcome.SELECTED

    if not zone.is_placeable:
        logger.warning("Refusing to place non-buildable zone %s", zone.name)
        return Outcome.INVALID_ZONE

    cost = config.zone_cost(zone)
    if state.stats.money < cost:
        state.post("Insufficient funds!", Severity.WARNING)
        return Outcome.INSUFFICIENT_FUNDS

    if tile.zone is zone:
        return Outcome.UNCHANGED

    state.grid.set_zone(tile, zone)
    state.stats.money -= cost
    logger.debug("Placed %s on %s for $%d", zone.name, tid, cost)
    return Outcome.PLACED


def demolish(state: GameState, tid: str) -> Outcome:
    """Clear tile ``tid`` back to empty land; nothing is refunded.

    With the move tool active this only drops the current move selection.
    """
    if state.ui.selected_tool is ZoneType.MOVE:
        state.selected_move_tile = None
        return Outcome.DESELECTED

    tile = state.grid.get(tid)
    if tile is None:
        return Outcome.UNKNOWN_TILE
    if tile.is_terrain:
        return Outcome.TERRAIN
    if not state.is_owned(tile):
        logger.info("Demolition on %s blocked: sector locked", tid)
        return Outcome.LOCKED
    if tile.zone is ZoneType.EMPTY and tile.level == 0:
        return Outcome.UNCHANGED

    state.grid.clear(tile)
    return Outcome.CLEARED


def swap(state: GameState, tid: str, dx: int, dy: int) -> Outcome:
    """Move the building on ``tid`` by ``(dx, dy)``, swapping with the target.

    On success the moved building's new tile becomes the move selection.
    """
    source = state.grid.get(tid)
    if source is None:
        return Outcome.UNKNOWN_TILE

    tx, ty = source.x + dx, source.y + dy
    if not state.grid.in_bounds(tx, ty):
        logger.info("Move from %s blocked: (%d, %d) off the map", tid, tx, ty)
        return Outcome.OUT_OF_BOUNDS
    target = state.grid.get(tile_id(tx, ty))
    if target is None:
        return Outcome.UNKNOWN_TILE

    if source.is_terrain or target.is_terrain:
        logger.info("Move from %s blocked: terrain at %s", tid, target.id)
        return Outcome.TERRAIN
    if not (state.is_owned(source) and state.is_owned(target)):
        logger.info("Move from %s blocked: sector locked", tid)
        return Outcome.LOCKED

    state.grid.swap(source, target)
    state.selected_move_tile = target.id
    return Outcome.MOVED


def purchase_chunk(
    state: GameState,
    cid: str,
    config: SimulationConfig,
) -> Outcome:
    """Buy sector ``cid``.  Buying an owned sector is refused without charge."""
    if state.territory.is_unlocked(cid):
        state.purchase_prompt = None
        return Outcome.ALREADY_UNLOCKED

    cost = config.sector_price(cid)
    if state.stats.money < cost:
        state.post("Insufficient treasury funds!", Severity.WARNING)
        return Outcome.INSUFFICIENT_FUNDS

    state.territory.unlock(cid)
    state.stats.money -= cost
    state.purchase_prompt = None
    state.post(f"Sector {cid} purchased for ${cost:,}.", Severity.SUCCESS)
    logger.info("Purchased sector %s for $%d", cid, cost)
    return Outcome.PURCHASED


def rename_city(state: GameState, name: str) -> Outcome:
    trimmed = name.strip()
    if not trimmed:
        return Outcome.INVALID_NAME
    state.stats.name = trimmed
    return Outcome.RENAMED
