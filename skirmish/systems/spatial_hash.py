"""Tile index: which living units stand on which tile."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from typing import TYPE_CHECKING

from skirmish.core.errors import InvariantViolation

if TYPE_CHECKING:
    from skirmish.core.grid import Grid
    from skirmish.core.models import Position, Unit


class TileIndex:
    """Maps tile -> set of living unit IDs and enforces tile occupancy rules.

    All units on a tile share one side, and the living count and total size
    stay within the per-tile caps.  ``can_enter`` answers the question for a
    prospective move without side effects; ``verify_tiles`` re-checks the
    invariant after a mutation and raises ``InvariantViolation`` if the
    policy layer let something illegal through.
    """

    __slots__ = ("_grid", "_max_units", "_max_size", "_units", "_tiles")

    def __init__(
        self,
        grid: Grid,
        max_units: int,
        max_size: int,
        units: dict[int, Unit],
    ) -> None:
        self._grid = grid
        self._max_units = max_units
        self._max_size = max_size
        self._units = units
        self._tiles: dict[Position, set[int]] = defaultdict(set)

    # -- mutation --------------------------------------------------------

    def insert(self, unit: Unit, pos: Position) -> None:
        self._tiles[pos].add(unit.id)

    def remove(self, unit: Unit) -> None:
        bucket = self._tiles.get(unit.position)
        if bucket is not None:
            bucket.discard(unit.id)
            if not bucket:
                del self._tiles[unit.position]

    def move(self, unit: Unit, old_pos: Position, new_pos: Position) -> None:
        if old_pos == new_pos:
            return
        bucket = self._tiles.get(old_pos)
        if bucket is not None:
            bucket.discard(unit.id)
            if not bucket:
                del self._tiles[old_pos]
        self._tiles[new_pos].add(unit.id)

    # -- queries ---------------------------------------------------------

    def occupants_of(self, pos: Position) -> list[Unit]:
        """Living units on *pos*, ascending by id."""
        bucket = self._tiles.get(pos)
        if not bucket:
            return []
        return [self._units[uid] for uid in sorted(bucket) if self._units[uid].alive]

    def is_empty(self, pos: Position) -> bool:
        return not self._tiles.get(pos)

    def occupied_tiles(self) -> list[Position]:
        """All non-empty tiles in row-major order."""
        return sorted(
            (pos for pos, bucket in self._tiles.items() if bucket),
            key=lambda p: p.row_major_key(),
        )

    def can_enter(self, unit: Unit, pos: Position) -> bool:
        """Whether *unit* may step onto *pos* without breaking a tile rule."""
        if not self._grid.in_bounds(pos):
            return False
        occupants = [u for u in self.occupants_of(pos) if u.id != unit.id]
        if not occupants:
            return True
        if any(u.side != unit.side for u in occupants):
            return False
        if len(occupants) + 1 > self._max_units:
            return False
        return sum(u.size for u in occupants) + unit.size <= self._max_size

    # -- invariants ------------------------------------------------------

    def verify_tiles(self, positions: Iterable[Position]) -> None:
        """Re-check the occupancy invariant on every tile in *positions*."""
        for pos in positions:
            occupants = self.occupants_of(pos)
            if not occupants:
                continue
            sides = {u.side for u in occupants}
            if len(sides) > 1:
                raise InvariantViolation(f"Tile {pos} holds units of both sides")
            if len(occupants) > self._max_units:
                raise InvariantViolation(
                    f"Tile {pos} holds {len(occupants)} units (cap {self._max_units})"
                )
            total = sum(u.size for u in occupants)
            if total > self._max_size:
                raise InvariantViolation(
                    f"Tile {pos} holds total size {total} (cap {self._max_size})"
                )

    def verify_all(self) -> None:
        self.verify_tiles(list(self._tiles))
