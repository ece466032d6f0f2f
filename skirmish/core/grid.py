"""Grid / board geometry."""

from __future__ import annotations

from collections.abc import Iterator

from skirmish.core.models import Position

# Cardinal neighbor order: +x, -x, +y, -y.  Resolution depends on it.
NEIGHBOR_OFFSETS: tuple[Position, ...] = (
    Position(1, 0),
    Position(-1, 0),
    Position(0, 1),
    Position(0, -1),
)


class Grid:
    """Fixed width x height tile space. Holds no terrain, only bounds."""

    __slots__ = ("width", "height")

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def neighbors(self, pos: Position) -> Iterator[Position]:
        """Yield the in-bounds cardinal neighbors of *pos* in fixed order."""
        for d in NEIGHBOR_OFFSETS:
            n = pos + d
            if self.in_bounds(n):
                yield n

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height})"
