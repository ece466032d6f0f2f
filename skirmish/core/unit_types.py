"""Fixed unit archetype table.

Every archetype has a fixed size, fixed readiness costs, and a range.
Ranged archetypes map to exactly one projectile kind.

Key types:
  UnitTypeDef   — immutable blueprint for one archetype
  UNIT_TYPES    — registry keyed by UnitType
  PROJECTILE_SPEED — ticks of flight per tile of Manhattan distance
"""

from __future__ import annotations

from pydantic.dataclasses import dataclass as pydantic_dataclass

from skirmish.core.enums import ProjectileKind, UnitType


@pydantic_dataclass(frozen=True)
class UnitTypeDef:
    """Immutable blueprint describing one archetype."""

    unit_type: UnitType
    size: int
    move_cost: int          # Ticks until ready again after a move
    attack_cost: int        # ... after a melee attack or a shot
    wait_cost: int          # ... after doing nothing (always >= 1)
    range: int              # Melee archetypes have range 1
    projectile: ProjectileKind | None = None
    description: str = ""


UNIT_TYPES: dict[UnitType, UnitTypeDef] = {
    UnitType.INFANTRY: UnitTypeDef(
        unit_type=UnitType.INFANTRY, size=2,
        move_cost=6, attack_cost=12, wait_cost=1, range=1,
        description="Line melee. Attacks the lowest-id adjacent enemy.",
    ),
    UnitType.ARCHER: UnitTypeDef(
        unit_type=UnitType.ARCHER, size=2,
        move_cost=6, attack_cost=14, wait_cost=1, range=5,
        projectile=ProjectileKind.ARROW,
        description="Fires arrows at the nearest enemy tile; one random occupant falls.",
    ),
    UnitType.CAVALRY: UnitTypeDef(
        unit_type=UnitType.CAVALRY, size=3,
        move_cost=4, attack_cost=12, wait_cost=1, range=1,
        description="Fast melee. Moves every 4 ticks.",
    ),
    UnitType.MAGE: UnitTypeDef(
        unit_type=UnitType.MAGE, size=2,
        move_cost=6, attack_cost=16, wait_cost=1, range=6,
        projectile=ProjectileKind.FIREBALL,
        description="Lobs fireballs at the most crowded enemy tile; clears it.",
    ),
}

PROJECTILE_SPEED: dict[ProjectileKind, int] = {
    ProjectileKind.ARROW: 2,
    ProjectileKind.FIREBALL: 3,
}


def unit_def(unit_type: UnitType) -> UnitTypeDef:
    return UNIT_TYPES[unit_type]


def expected_size(unit_type: UnitType) -> int:
    return UNIT_TYPES[unit_type].size
