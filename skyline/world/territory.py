"""Territory — chunk partitioning and ownership of the city grid.

The grid is split into square sectors ("chunks") of ``chunk_size`` tiles.
The city starts owning one chunk; every other chunk must be purchased
before anything inside it can be built, cleared, or moved.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

# Sector prices by chunk id for the default 3x3 chunk layout.  The centre
# sector is the free starting territory.
SECTOR_PRICES: dict[str, int] = {
    "0-0": 75000,
    "1-0": 25000,
    "2-0": 75000,
    "0-1": 40000,
    "1-1": 0,
    "2-1": 40000,
    "0-2": 90000,
    "1-2": 25000,
    "2-2": 120000,
}

DEFAULT_SECTOR_PRICE = 50000
STARTING_CHUNK = "1-1"


def chunk_id(x: int, y: int, chunk_size: int) -> str:
    """Return the id of the chunk containing tile ``(x, y)``."""
    return f"{x // chunk_size}-{y // chunk_size}"


def all_chunk_ids(grid_size: int, chunk_size: int) -> list[str]:
    """List every chunk id covering a ``grid_size`` square grid."""
    per_side = -(-grid_size // chunk_size)
    return [f"{cx}-{cy}" for cy in range(per_side) for cx in range(per_side)]


def chunk_price(
    cid: str,
    prices: Mapping[str, int],
    default: int = DEFAULT_SECTOR_PRICE,
) -> int:
    """Look up the purchase price of a chunk, falling back to ``default``.

    A price of zero is treated like a missing entry so that a free chunk
    can never be bought by accident.
    """
    return prices.get(cid) or default


@dataclass
class Territory:
    """The set of chunks the city currently owns.

    Attributes:
        starting_chunk: Chunk owned unconditionally from game creation.
        unlocked: Ids of all owned chunks, always including the start.
    """

    starting_chunk: str = STARTING_CHUNK
    unlocked: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.unlocked.add(self.starting_chunk)

    @classmethod
    def from_ids(
        cls,
        ids: Iterable[str],
        starting_chunk: str = STARTING_CHUNK,
    ) -> Territory:
        return cls(starting_chunk=starting_chunk, unlocked=set(ids))

    def is_unlocked(self, cid: str) -> bool:
        return cid in self.unlocked

    def unlock(self, cid: str) -> bool:
        """Add ``cid`` to the owned set.

        Returns:
            True if the chunk was newly unlocked, False if already owned.
        """
        if cid in self.unlocked:
            return False
        self.unlocked.add(cid)
        return True
