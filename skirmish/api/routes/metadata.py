"""Metadata endpoints — expose the fixed unit table and enum vocabularies.

``UnitTypeDef`` is a pydantic dataclass defined in skirmish/core/; it is the
single source of truth for both the engine and API clients, serialized here
through a TypeAdapter.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, TypeAdapter

from skirmish.core.enums import EndReason, EventType, ProjectileKind, RemovalCause, Side, UnitType, Winner
from skirmish.core.unit_types import PROJECTILE_SPEED, UNIT_TYPES, UnitTypeDef

router = APIRouter(prefix="/metadata", tags=["Metadata"])

_unit_type_ta = TypeAdapter(UnitTypeDef)


class UnitTypesResponse(BaseModel):
    unit_types: list[dict[str, Any]]
    projectile_speeds: dict[str, int]


class EnumsResponse(BaseModel):
    sides: list[str]
    unit_types: list[str]
    projectiles: list[str]
    event_types: list[str]
    removal_causes: list[str]
    winners: list[str]
    end_reasons: list[str]


@router.get("/unit-types", response_model=UnitTypesResponse)
def get_unit_types() -> UnitTypesResponse:
    return UnitTypesResponse(
        unit_types=[_unit_type_ta.dump_python(d, mode="json") for d in UNIT_TYPES.values()],
        projectile_speeds={k.value: v for k, v in PROJECTILE_SPEED.items()},
    )


@router.get("/enums", response_model=EnumsResponse)
def get_enums() -> EnumsResponse:
    return EnumsResponse(
        sides=[s.value for s in Side],
        unit_types=[t.value for t in UnitType],
        projectiles=[p.value for p in ProjectileKind],
        event_types=[e.value for e in EventType],
        removal_causes=[c.value for c in RemovalCause],
        winners=[w.value for w in Winner],
        end_reasons=[r.value for r in EndReason],
    )
