"""Pre-battle setup board and the placement command relay.

The setup board is where units are placed before a battle is resolved.
It applies the same deployment rules as input validation, one placement at
a time, so a board that accepted every placement always builds a valid
``BattleInput``.

External agents drive it with relay commands of the form::

    {"action": "placeUnit", "payload": {"side": "red", "type": "archer", "x": 1, "y": 3}}
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from skirmish.core.enums import Side, UnitType
from skirmish.core.errors import PlacementRejected
from skirmish.core.models import BattleInput, Position, UnitSpec
from skirmish.core.unit_types import expected_size

if TYPE_CHECKING:
    from skirmish.config import BattleConfig

logger = logging.getLogger(__name__)

_SIDE_ALIASES: dict[str, Side] = {s.value.lower(): s for s in Side}
_TYPE_ALIASES: dict[str, UnitType] = {t.value.lower(): t for t in UnitType}


def parse_side(value: Any) -> Side:
    if isinstance(value, str):
        side = _SIDE_ALIASES.get(value.strip().lower())
        if side is not None:
            return side
    raise PlacementRejected("Invalid side.")


def parse_unit_type(value: Any) -> UnitType:
    if isinstance(value, str):
        unit_type = _TYPE_ALIASES.get(value.strip().lower())
        if unit_type is not None:
            return unit_type
    raise PlacementRejected("Invalid unit type.")


def parse_grid_index(value: Any) -> int:
    """Accept ints and integral strings/floats; reject anything else."""
    if isinstance(value, bool):
        raise PlacementRejected("Invalid coordinates.")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise PlacementRejected("Invalid coordinates.")


class SetupBoard:
    """Mutable placement state: board shape, limits, seed, time limit, units.

    Thread-safe via a simple lock; the HTTP layer and the command relay may
    both write to it.
    """

    def __init__(self, config: BattleConfig, seed: int = 1, time_limit: int | None = None) -> None:
        self._config = config
        self.width = config.grid_width
        self.height = config.grid_height
        self.max_units_per_tile = config.max_units_per_tile
        self.max_size_per_tile = config.max_size_per_tile
        self.seed = seed
        self.time_limit = time_limit if time_limit is not None else config.time_limit
        self._units: list[UnitSpec] = []
        self._lock = threading.Lock()

    @property
    def units(self) -> list[UnitSpec]:
        with self._lock:
            return list(self._units)

    def tile_units(self, pos: Position) -> list[UnitSpec]:
        with self._lock:
            return [u for u in self._units if u.position == pos]

    def check_placement(self, side: Side, unit_type: UnitType, pos: Position) -> str | None:
        """Return a rejection reason, or None if the placement is legal."""
        if not (0 <= pos.x < self.width and 0 <= pos.y < self.height):
            return "Outside grid."
        start, end = self._config.deployment_columns(side)
        if pos.x < start or pos.x > end:
            return "Outside deployment zone."
        occupants = [u for u in self._units if u.position == pos]
        if any(u.side != side for u in occupants):
            return "Tile already occupied by enemy side."
        if len(occupants) + 1 > self.max_units_per_tile:
            return "Tile unit limit reached."
        if sum(u.size for u in occupants) + expected_size(unit_type) > self.max_size_per_tile:
            return "Tile size limit exceeded."
        return None

    def place(self, side: Side, unit_type: UnitType, x: int, y: int) -> UnitSpec:
        """Place one unit; raise ``PlacementRejected`` with the reason if illegal."""
        pos = Position(x, y)
        with self._lock:
            reason = self.check_placement(side, unit_type, pos)
            if reason is not None:
                raise PlacementRejected(reason)
            spec = UnitSpec(
                id=max((u.id for u in self._units), default=0) + 1,
                side=side,
                type=unit_type,
                size=expected_size(unit_type),
                position=pos,
            )
            self._units.append(spec)
        logger.debug("Placed %s %s #%d at %s", side.value, unit_type.value, spec.id, pos)
        return spec

    def remove_at(self, x: int, y: int) -> UnitSpec | None:
        """Remove the most recently placed unit on (x, y), if any."""
        pos = Position(x, y)
        with self._lock:
            for i in range(len(self._units) - 1, -1, -1):
                if self._units[i].position == pos:
                    return self._units.pop(i)
        return None

    def clear(self) -> None:
        with self._lock:
            self._units.clear()

    def build_input(self) -> BattleInput:
        with self._lock:
            return BattleInput(
                width=self.width,
                height=self.height,
                max_units_per_tile=self.max_units_per_tile,
                max_size_per_tile=self.max_size_per_tile,
                seed=self.seed,
                time_limit=self.time_limit,
                units=tuple(self._units),
            )

    def load(self, battle_input: BattleInput) -> None:
        """Replace the whole board with the contents of *battle_input*."""
        with self._lock:
            self.width = battle_input.width
            self.height = battle_input.height
            self.max_units_per_tile = battle_input.max_units_per_tile
            self.max_size_per_tile = battle_input.max_size_per_tile
            self.seed = battle_input.seed
            self.time_limit = battle_input.time_limit
            self._units = list(battle_input.units)

    def parse_command(self, action: str, payload: dict[str, Any] | None) -> UnitSpec:
        """Apply one relay command. Only ``placeUnit`` is understood."""
        if action != "placeUnit":
            raise PlacementRejected(f"Unknown action {action!r}.")
        if not isinstance(payload, dict):
            raise PlacementRejected("Invalid request.")
        side = parse_side(payload.get("side"))
        unit_type = parse_unit_type(payload.get("type"))
        x = parse_grid_index(payload.get("x"))
        y = parse_grid_index(payload.get("y"))
        return self.place(side, unit_type, x, y)


# (side, type, x, y) for the built-in demo battle; Blue mirrors Red.
_DEMO_LINEUP: tuple[tuple[UnitType, int, int], ...] = (
    (UnitType.INFANTRY, 2, 2),
    (UnitType.INFANTRY, 2, 3),
    (UnitType.INFANTRY, 2, 3),
    (UnitType.CAVALRY, 2, 5),
    (UnitType.ARCHER, 1, 2),
    (UnitType.ARCHER, 1, 5),
    (UnitType.MAGE, 0, 4),
)


def demo_board(config: BattleConfig, seed: int = 1) -> SetupBoard:
    """A symmetric two-sided lineup used by ``python -m skirmish demo``."""
    board = SetupBoard(config, seed=seed)
    red_start, _ = config.deployment_columns(Side.RED)
    _, blue_end = config.deployment_columns(Side.BLUE)
    for unit_type, x, y in _DEMO_LINEUP:
        board.place(Side.RED, unit_type, red_start + x, y)
    for unit_type, x, y in _DEMO_LINEUP:
        board.place(Side.BLUE, unit_type, blue_end - x, y)
    return board
