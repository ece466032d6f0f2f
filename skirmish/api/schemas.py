"""Pydantic response and request bodies for the HTTP API.

Battle documents themselves (inputs, events, outputs) live in
``skirmish.core.wire``; the models here wrap them for individual routes.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from skirmish.core.enums import ProjectileKind, Side
from skirmish.core.wire import (
    BattleOutputSchema,
    BattleResultSchema,
    EventSchema,
    GridSchema,
    PositionSchema,
    UnitInputSchema,
    WireModel,
)


# --- Battles API ---

class BattleSummary(WireModel):
    id: str
    seed: int
    unit_count: int = Field(alias="unitCount")
    event_count: int = Field(alias="eventCount")
    digest: str
    result: BattleResultSchema


class BattleDetailResponse(BattleOutputSchema):
    id: str


class EventsResponse(WireModel):
    battle_id: str = Field(alias="battleId")
    since_tick: int = Field(alias="sinceTick")
    total: int
    events: list[EventSchema]


class ErrorResponse(WireModel):
    kind: str
    message: str


# --- Board state ---

class UnitViewSchema(UnitInputSchema):
    alive: bool


class ProjectileViewSchema(WireModel):
    projectile: ProjectileKind
    source_id: int = Field(alias="sourceId")
    source_side: Side = Field(alias="sourceSide")
    from_: PositionSchema = Field(alias="from")
    target: PositionSchema
    fire_tick: int = Field(alias="fireTick")
    impact_tick: int = Field(alias="impactTick")


class BoardStateResponse(WireModel):
    tick: int
    grid: GridSchema
    units: list[UnitViewSchema]
    projectiles: list[ProjectileViewSchema] = Field(default_factory=list)
    result: BattleResultSchema | None = None


# --- Playback ---

class PlaybackResponse(WireModel):
    status: str
    message: str
    battle_id: str | None = Field(None, alias="battleId")
    tick: int = 0


class PlaybackStatus(WireModel):
    battle_id: str | None = Field(None, alias="battleId")
    tick: int
    final_tick: int = Field(alias="finalTick")
    running: bool
    paused: bool
    finished: bool
    tps: int


# --- Setup ---

class PlacementRequest(WireModel):
    side: str
    type: str
    x: int
    y: int


class RelayCommand(WireModel):
    action: str
    payload: dict[str, Any] | None = None


class PlacementResult(WireModel):
    ok: bool
    unit_id: int | None = Field(None, alias="unitId")
    reason: str | None = None


class SetupOptions(WireModel):
    seed: int | None = None
    time_limit: int | None = Field(None, alias="timeLimit")


# --- Config ---

class BattleConfigResponse(WireModel):
    grid_width: int
    grid_height: int
    max_units_per_tile: int
    max_size_per_tile: int
    red_columns: tuple[int, int]
    blue_columns: tuple[int, int]
    time_limit: int
    stall_ticks: int
    max_iterations: int
    min_ranged_distance: int
    melee_hit_chance: float
    tick_speeds: list[int]
    num_workers: int
