"""Battle events — the only channel through which state changes are observable.

Each event type has its own frozen payload dataclass carrying exactly the
fields of that type.  ``BattleEvent`` wraps a payload with its tick and seq.
``seq`` is the acting or source unit id, or 0 for global events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union

from skirmish.core.enums import EventType, ProjectileKind, RemovalCause, Side
from skirmish.core.models import BattleInput, BattleResult, Position, UnitSpec


@dataclass(frozen=True, slots=True)
class BattleInit:
    TYPE: ClassVar[EventType] = EventType.BATTLE_INIT

    input: BattleInput

    def to_dict(self) -> dict[str, Any]:
        return {"input": self.input.to_dict()}


@dataclass(frozen=True, slots=True)
class UnitSpawned:
    TYPE: ClassVar[EventType] = EventType.UNIT_SPAWNED

    unit: UnitSpec

    def to_dict(self) -> dict[str, Any]:
        return {"unit": self.unit.to_dict()}


@dataclass(frozen=True, slots=True)
class UnitMoved:
    TYPE: ClassVar[EventType] = EventType.UNIT_MOVED

    unit_id: int
    from_pos: Position
    to_pos: Position

    def to_dict(self) -> dict[str, Any]:
        return {
            "unitId": self.unit_id,
            "from": self.from_pos.to_dict(),
            "to": self.to_pos.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class MeleeAttackResolved:
    TYPE: ClassVar[EventType] = EventType.MELEE_ATTACK_RESOLVED

    attacker_id: int
    target_id: int
    hit: bool

    def to_dict(self) -> dict[str, Any]:
        return {"attackerId": self.attacker_id, "targetId": self.target_id, "hit": self.hit}


@dataclass(frozen=True, slots=True)
class ProjectileFired:
    TYPE: ClassVar[EventType] = EventType.PROJECTILE_FIRED

    source_id: int
    source_side: Side
    projectile: ProjectileKind
    from_pos: Position
    target: Position
    fire_tick: int
    impact_tick: int
    distance: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "sourceId": self.source_id,
            "sourceSide": self.source_side.value,
            "projectile": self.projectile.value,
            "from": self.from_pos.to_dict(),
            "target": self.target.to_dict(),
            "fireTick": self.fire_tick,
            "impactTick": self.impact_tick,
            "distance": self.distance,
        }


@dataclass(frozen=True, slots=True)
class ProjectileImpacted:
    TYPE: ClassVar[EventType] = EventType.PROJECTILE_IMPACTED

    source_id: int
    source_side: Side
    projectile: ProjectileKind
    target: Position
    impact_tick: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "sourceId": self.source_id,
            "sourceSide": self.source_side.value,
            "projectile": self.projectile.value,
            "target": self.target.to_dict(),
            "impactTick": self.impact_tick,
        }


@dataclass(frozen=True, slots=True)
class UnitRemoved:
    TYPE: ClassVar[EventType] = EventType.UNIT_REMOVED

    unit_id: int
    side: Side
    cause: RemovalCause
    source_id: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "unitId": self.unit_id,
            "side": self.side.value,
            "cause": self.cause.value,
            "sourceId": self.source_id,
        }


@dataclass(frozen=True, slots=True)
class BattleEnded:
    TYPE: ClassVar[EventType] = EventType.BATTLE_ENDED

    result: BattleResult

    def to_dict(self) -> dict[str, Any]:
        return self.result.to_dict()


EventPayload = Union[
    BattleInit,
    UnitSpawned,
    UnitMoved,
    MeleeAttackResolved,
    ProjectileFired,
    ProjectileImpacted,
    UnitRemoved,
    BattleEnded,
]


@dataclass(frozen=True, slots=True)
class BattleEvent:
    """An immutable ``{tick, seq, type, payload}`` record."""

    tick: int
    seq: int
    payload: EventPayload

    @property
    def type(self) -> EventType:
        return self.payload.TYPE

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick": self.tick,
            "seq": self.seq,
            "type": self.type.value,
            "payload": self.payload.to_dict(),
        }

    def __repr__(self) -> str:
        return f"Event(t={self.tick}, seq={self.seq}, {self.type.value})"
