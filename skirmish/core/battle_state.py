"""Mutable authoritative battle state — only mutated by the TickScheduler."""

from __future__ import annotations

from typing import TYPE_CHECKING

from skirmish.core.enums import Side
from skirmish.core.events import BattleEvent, EventPayload
from skirmish.core.models import Unit

if TYPE_CHECKING:
    from skirmish.config import BattleConfig
    from skirmish.core.grid import Grid
    from skirmish.core.models import BattleInput, Position
    from skirmish.engine.projectile_schedule import ProjectileSchedule
    from skirmish.systems.rng import DeterministicRNG
    from skirmish.systems.spatial_hash import TileIndex
    from skirmish.utils.event_log import EventLog


class BattleState:
    """The single source of truth for one battle.

    Owns the unit table, tile index, projectile schedule, RNG and event log.
    Nothing here is shared between battles.
    """

    __slots__ = (
        "tick",
        "input",
        "config",
        "grid",
        "units",
        "tiles",
        "projectiles",
        "rng",
        "log",
        "unit_order",
        "last_activity_tick",
    )

    def __init__(
        self,
        battle_input: BattleInput,
        config: BattleConfig,
        grid: Grid,
        units: dict[int, Unit],
        tiles: TileIndex,
        projectiles: ProjectileSchedule,
        rng: DeterministicRNG,
        log: EventLog,
    ) -> None:
        self.tick: int = 0
        self.input = battle_input
        self.config = config
        self.grid = grid
        self.units = units
        self.tiles = tiles
        self.projectiles = projectiles
        self.rng = rng
        self.log = log
        self.unit_order: tuple[int, ...] = tuple(sorted(units))
        self.last_activity_tick: int = 0

    def emit(self, seq: int, payload: EventPayload) -> BattleEvent:
        event = BattleEvent(tick=self.tick, seq=seq, payload=payload)
        self.log.append(event)
        return event

    def add_unit(self, unit: Unit) -> None:
        self.units[unit.id] = unit
        self.tiles.insert(unit, unit.position)

    def move_unit(self, unit: Unit, new_pos: Position) -> Position:
        """Relocate *unit* and re-verify both touched tiles. Returns the old tile."""
        old_pos = unit.position
        self.tiles.move(unit, old_pos, new_pos)
        unit.position = new_pos
        self.tiles.verify_tiles((old_pos, new_pos))
        return old_pos

    def remove_unit(self, unit: Unit) -> None:
        """Flip *unit* to dead and revoke its tile membership."""
        self.tiles.remove(unit)
        unit.alive = False
        self.tiles.verify_tiles((unit.position,))

    def living(self, side: Side | None = None) -> list[Unit]:
        """Living units in ascending id order, optionally of one side."""
        return [
            self.units[uid]
            for uid in self.unit_order
            if self.units[uid].alive and (side is None or self.units[uid].side == side)
        ]

    def living_enemies(self, unit: Unit) -> list[Unit]:
        return self.living(unit.side.opponent)

    def survivors(self) -> tuple[int, int]:
        red = blue = 0
        for unit in self.units.values():
            if not unit.alive:
                continue
            if unit.side == Side.RED:
                red += 1
            else:
                blue += 1
        return red, blue

    def mark_activity(self) -> None:
        self.last_activity_tick = self.tick
