"""Immutable board snapshot for observers (replay, API, tests)."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping

from skirmish.core.enums import ProjectileKind, Side, UnitType
from skirmish.core.models import BattleResult, Position

if TYPE_CHECKING:
    from skirmish.core.battle_state import BattleState


@dataclass(frozen=True, slots=True)
class UnitView:
    """Read-only view of one unit at a point in time."""

    id: int
    side: Side
    type: UnitType
    size: int
    position: Position
    alive: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "side": self.side.value,
            "type": self.type.value,
            "size": self.size,
            "position": self.position.to_dict(),
            "alive": self.alive,
        }


@dataclass(frozen=True, slots=True)
class ProjectileView:
    """A projectile in flight as seen from the event log (no internal id)."""

    kind: ProjectileKind
    source_id: int
    source_side: Side
    origin: Position
    target: Position
    fire_tick: int
    impact_tick: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "projectile": self.kind.value,
            "sourceId": self.source_id,
            "sourceSide": self.source_side.value,
            "from": self.origin.to_dict(),
            "target": self.target.to_dict(),
            "fireTick": self.fire_tick,
            "impactTick": self.impact_tick,
        }


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    """Read-only board view, safe to share across threads.

    Uses a MappingProxyType for the unit table to enforce immutability at
    runtime.
    """

    tick: int
    width: int
    height: int
    units: Mapping[int, UnitView]
    projectiles: tuple[ProjectileView, ...] = ()
    result: BattleResult | None = None

    @classmethod
    def from_state(cls, state: BattleState) -> BoardSnapshot:
        views = {
            uid: UnitView(u.id, u.side, u.type, u.size, u.position, u.alive)
            for uid, u in sorted(state.units.items())
        }
        flying = tuple(
            ProjectileView(
                kind=p.kind,
                source_id=p.source_id,
                source_side=p.source_side,
                origin=p.origin,
                target=p.target,
                fire_tick=p.fire_tick,
                impact_tick=p.impact_tick,
            )
            for p in state.projectiles.in_flight()
        )
        return cls(
            tick=state.tick,
            width=state.grid.width,
            height=state.grid.height,
            units=MappingProxyType(views),
            projectiles=flying,
        )

    @property
    def ended(self) -> bool:
        return self.result is not None

    def living(self, side: Side | None = None) -> list[UnitView]:
        return [
            u for u in self.units.values()
            if u.alive and (side is None or u.side == side)
        ]

    def occupants(self, pos: Position) -> list[UnitView]:
        return sorted(
            (u for u in self.units.values() if u.alive and u.position == pos),
            key=lambda u: u.id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick": self.tick,
            "grid": {"width": self.width, "height": self.height},
            "units": [u.to_dict() for u in self.units.values()],
            "projectiles": [p.to_dict() for p in self.projectiles],
            "result": self.result.to_dict() if self.result else None,
        }
