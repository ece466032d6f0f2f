"""Pydantic models for battle documents on the wire (HTTP bodies and replay files).

Field names are snake_case in Python and camelCase on the wire.  Every
schema that mirrors a core type has a ``to_core()`` converter; parsing a
document therefore validates its shape once, here, and the engine only
ever sees frozen core dataclasses.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from skirmish.core.enums import EndReason, EventType, ProjectileKind, RemovalCause, Side, UnitType, Winner
from skirmish.core.events import (
    BattleEnded,
    BattleEvent,
    BattleInit,
    EventPayload,
    MeleeAttackResolved,
    ProjectileFired,
    ProjectileImpacted,
    UnitMoved,
    UnitRemoved,
    UnitSpawned,
)
from skirmish.core.models import BattleInput, BattleOutput, BattleResult, Position, UnitSpec


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# --- Battle input ---

class PositionSchema(WireModel):
    x: int
    y: int

    def to_core(self) -> Position:
        return Position(self.x, self.y)


class UnitInputSchema(WireModel):
    id: int
    side: Side
    type: UnitType
    size: int
    position: PositionSchema

    def to_core(self) -> UnitSpec:
        return UnitSpec(
            id=self.id,
            side=self.side,
            type=self.type,
            size=self.size,
            position=self.position.to_core(),
        )


class GridSchema(WireModel):
    width: int
    height: int


class LimitsSchema(WireModel):
    max_units_per_tile: int = Field(4, alias="maxUnitsPerTile")
    max_size_per_tile: int = Field(10, alias="maxSizePerTile")


class BattleInputSchema(WireModel):
    grid: GridSchema
    limits: LimitsSchema = Field(default_factory=LimitsSchema)
    seed: int = 1
    time_limit: int = Field(2000, alias="timeLimit")
    units: list[UnitInputSchema] = Field(default_factory=list)

    def to_core(self) -> BattleInput:
        return BattleInput(
            width=self.grid.width,
            height=self.grid.height,
            max_units_per_tile=self.limits.max_units_per_tile,
            max_size_per_tile=self.limits.max_size_per_tile,
            seed=self.seed,
            time_limit=self.time_limit,
            units=tuple(u.to_core() for u in self.units),
        )

    @classmethod
    def from_core(cls, battle_input: BattleInput) -> BattleInputSchema:
        return cls.model_validate(battle_input.to_dict())


# --- Result ---

class BattleResultSchema(WireModel):
    winner: Winner
    reason: EndReason
    tick: int
    survivors: dict[str, int]

    def to_core(self) -> BattleResult:
        return BattleResult(
            winner=self.winner,
            reason=self.reason,
            tick=self.tick,
            survivors_red=self.survivors.get(Side.RED.value, 0),
            survivors_blue=self.survivors.get(Side.BLUE.value, 0),
        )


# --- Event payloads ---

class BattleInitPayload(WireModel):
    input: BattleInputSchema

    def to_core(self) -> BattleInit:
        return BattleInit(input=self.input.to_core())


class UnitSpawnedPayload(WireModel):
    unit: UnitInputSchema

    def to_core(self) -> UnitSpawned:
        return UnitSpawned(unit=self.unit.to_core())


class UnitMovedPayload(WireModel):
    unit_id: int = Field(alias="unitId")
    from_: PositionSchema = Field(alias="from")
    to: PositionSchema

    def to_core(self) -> UnitMoved:
        return UnitMoved(unit_id=self.unit_id, from_pos=self.from_.to_core(), to_pos=self.to.to_core())


class MeleeAttackPayload(WireModel):
    attacker_id: int = Field(alias="attackerId")
    target_id: int = Field(alias="targetId")
    hit: bool

    def to_core(self) -> MeleeAttackResolved:
        return MeleeAttackResolved(attacker_id=self.attacker_id, target_id=self.target_id, hit=self.hit)


class ProjectileFiredPayload(WireModel):
    source_id: int = Field(alias="sourceId")
    source_side: Side = Field(alias="sourceSide")
    projectile: ProjectileKind
    from_: PositionSchema = Field(alias="from")
    target: PositionSchema
    fire_tick: int = Field(alias="fireTick")
    impact_tick: int = Field(alias="impactTick")
    distance: int

    def to_core(self) -> ProjectileFired:
        return ProjectileFired(
            source_id=self.source_id,
            source_side=self.source_side,
            projectile=self.projectile,
            from_pos=self.from_.to_core(),
            target=self.target.to_core(),
            fire_tick=self.fire_tick,
            impact_tick=self.impact_tick,
            distance=self.distance,
        )


class ProjectileImpactedPayload(WireModel):
    source_id: int = Field(alias="sourceId")
    source_side: Side = Field(alias="sourceSide")
    projectile: ProjectileKind
    target: PositionSchema
    impact_tick: int = Field(alias="impactTick")

    def to_core(self) -> ProjectileImpacted:
        return ProjectileImpacted(
            source_id=self.source_id,
            source_side=self.source_side,
            projectile=self.projectile,
            target=self.target.to_core(),
            impact_tick=self.impact_tick,
        )


class UnitRemovedPayload(WireModel):
    unit_id: int = Field(alias="unitId")
    side: Side
    cause: RemovalCause
    source_id: int = Field(alias="sourceId")

    def to_core(self) -> UnitRemoved:
        return UnitRemoved(unit_id=self.unit_id, side=self.side, cause=self.cause, source_id=self.source_id)


class BattleEndedPayload(BattleResultSchema):
    def to_core(self) -> BattleEnded:  # type: ignore[override]
        return BattleEnded(result=BattleResultSchema.to_core(self))


PAYLOAD_SCHEMAS: dict[EventType, type[WireModel]] = {
    EventType.BATTLE_INIT: BattleInitPayload,
    EventType.UNIT_SPAWNED: UnitSpawnedPayload,
    EventType.UNIT_MOVED: UnitMovedPayload,
    EventType.MELEE_ATTACK_RESOLVED: MeleeAttackPayload,
    EventType.PROJECTILE_FIRED: ProjectileFiredPayload,
    EventType.PROJECTILE_IMPACTED: ProjectileImpactedPayload,
    EventType.UNIT_REMOVED: UnitRemovedPayload,
    EventType.BATTLE_ENDED: BattleEndedPayload,
}


class EventSchema(WireModel):
    tick: int
    seq: int
    type: EventType
    payload: dict[str, Any]

    def to_core(self) -> BattleEvent:
        payload: EventPayload = PAYLOAD_SCHEMAS[self.type].model_validate(self.payload).to_core()
        return BattleEvent(tick=self.tick, seq=self.seq, payload=payload)

    @classmethod
    def from_core(cls, event: BattleEvent) -> EventSchema:
        return cls.model_validate(event.to_dict())


class BattleOutputSchema(WireModel):
    input: BattleInputSchema
    events: list[EventSchema]
    result: BattleResultSchema
    version: str | None = None
    digest: str | None = None

    def to_core(self) -> BattleOutput:
        return BattleOutput(
            input=self.input.to_core(),
            events=tuple(e.to_core() for e in self.events),
            result=self.result.to_core(),
        )
