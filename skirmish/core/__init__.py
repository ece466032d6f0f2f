"""Core data models and battle representation."""

from skirmish.core.enums import (
    ActionType,
    EndReason,
    EventType,
    ProjectileKind,
    RemovalCause,
    Side,
    UnitType,
    Winner,
)
from skirmish.core.errors import BattleError, InvalidBattleInput, InvariantViolation, PlacementRejected
from skirmish.core.grid import Grid
from skirmish.core.models import BattleInput, BattleOutput, BattleResult, Position, Projectile, Unit, UnitSpec
from skirmish.core.battle_state import BattleState
from skirmish.core.snapshot import BoardSnapshot

__all__ = [
    "ActionType",
    "BattleError",
    "BattleInput",
    "BattleOutput",
    "BattleResult",
    "BattleState",
    "BoardSnapshot",
    "EndReason",
    "EventType",
    "Grid",
    "InvalidBattleInput",
    "InvariantViolation",
    "PlacementRejected",
    "Position",
    "Projectile",
    "ProjectileKind",
    "RemovalCause",
    "Side",
    "Unit",
    "UnitSpec",
    "UnitType",
    "Winner",
]
