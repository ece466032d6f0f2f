"""Core data models: Position, UnitSpec, Unit, Projectile, BattleInput, BattleResult."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from skirmish.core.enums import EndReason, ProjectileKind, Side, UnitType, Winner

if TYPE_CHECKING:
    from skirmish.core.events import BattleEvent


@dataclass(frozen=True, slots=True)
class Position:
    """Immutable 2D integer tile coordinate."""

    x: int = 0
    y: int = 0

    def __add__(self, other: Position) -> Position:
        return Position(self.x + other.x, self.y + other.y)

    def manhattan(self, other: Position) -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def row_major_key(self) -> tuple[int, int]:
        """Sort key: ascending row, then ascending column."""
        return self.y, self.x

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y}

    def __repr__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True, slots=True)
class UnitSpec:
    """A unit as placed at setup time; the input-side view of a unit."""

    id: int
    side: Side
    type: UnitType
    size: int
    position: Position

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "side": self.side.value,
            "type": self.type.value,
            "size": self.size,
            "position": self.position.to_dict(),
        }


@dataclass(slots=True)
class Unit:
    """Mutable per-battle unit state. Never deleted; death flips ``alive``."""

    id: int
    side: Side
    type: UnitType
    size: int
    position: Position
    alive: bool = True
    next_available_tick: int = 0

    @classmethod
    def from_spec(cls, spec: UnitSpec) -> Unit:
        return cls(
            id=spec.id,
            side=spec.side,
            type=spec.type,
            size=spec.size,
            position=spec.position,
        )

    def is_ready(self, tick: int) -> bool:
        return self.alive and self.next_available_tick <= tick

    def is_enemy_of(self, other: Unit) -> bool:
        return self.side != other.side

    def __repr__(self) -> str:
        state = "alive" if self.alive else "dead"
        return f"Unit(#{self.id} {self.side.value} {self.type.value} @{self.position} {state})"


@dataclass(frozen=True, slots=True)
class Projectile:
    """A projectile in flight. Target tile is frozen at fire time."""

    id: int
    kind: ProjectileKind
    source_id: int
    source_side: Side
    origin: Position
    target: Position
    fire_tick: int
    impact_tick: int

    @property
    def distance(self) -> int:
        return self.origin.manhattan(self.target)

    def order_key(self) -> tuple[int, int]:
        """Impact ordering within one tick: source unit id, then projectile id."""
        return self.source_id, self.id


@dataclass(frozen=True, slots=True)
class BattleInput:
    """The complete, immutable input of one battle."""

    width: int
    height: int
    max_units_per_tile: int
    max_size_per_tile: int
    seed: int
    time_limit: int
    units: tuple[UnitSpec, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "grid": {"width": self.width, "height": self.height},
            "limits": {
                "maxUnitsPerTile": self.max_units_per_tile,
                "maxSizePerTile": self.max_size_per_tile,
            },
            "seed": self.seed,
            "timeLimit": self.time_limit,
            "units": [u.to_dict() for u in self.units],
        }


@dataclass(frozen=True, slots=True)
class BattleResult:
    """Terminal summary of a battle."""

    winner: Winner
    reason: EndReason
    tick: int
    survivors_red: int
    survivors_blue: int

    @property
    def survivors(self) -> dict[Side, int]:
        return {Side.RED: self.survivors_red, Side.BLUE: self.survivors_blue}

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner": self.winner.value,
            "reason": self.reason.value,
            "tick": self.tick,
            "survivors": {
                Side.RED.value: self.survivors_red,
                Side.BLUE.value: self.survivors_blue,
            },
        }


@dataclass(frozen=True, slots=True)
class BattleOutput:
    """Input echo + full event log + result. Safe to hand across threads."""

    input: BattleInput
    events: tuple[BattleEvent, ...]
    result: BattleResult

    def to_dict(self) -> dict[str, Any]:
        return {
            "input": self.input.to_dict(),
            "events": [e.to_dict() for e in self.events],
            "result": self.result.to_dict(),
        }
