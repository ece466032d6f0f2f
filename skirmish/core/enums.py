"""Enumerations used throughout the engine.

String-valued so they serialize to the wire names used in exported logs.
"""

from __future__ import annotations

from enum import Enum, unique


@unique
class Side(str, Enum):
    """The two factions."""

    RED = "Red"
    BLUE = "Blue"

    @property
    def opponent(self) -> Side:
        return Side.BLUE if self is Side.RED else Side.RED


@unique
class UnitType(str, Enum):
    """The four fixed unit archetypes."""

    INFANTRY = "Infantry"
    ARCHER = "Archer"
    CAVALRY = "Cavalry"
    MAGE = "Mage"


@unique
class ProjectileKind(str, Enum):
    """Projectiles fired by ranged archetypes."""

    ARROW = "Arrow"
    FIREBALL = "Fireball"


@unique
class ActionType(str, Enum):
    """Actions a unit policy can choose, in priority order."""

    MELEE = "melee"
    FIRE = "fire"
    MOVE = "move"
    WAIT = "wait"


@unique
class EventType(str, Enum):
    """Tags of the event taxonomy."""

    BATTLE_INIT = "BattleInit"
    UNIT_SPAWNED = "UnitSpawned"
    UNIT_MOVED = "UnitMoved"
    MELEE_ATTACK_RESOLVED = "MeleeAttackResolved"
    PROJECTILE_FIRED = "ProjectileFired"
    PROJECTILE_IMPACTED = "ProjectileImpacted"
    UNIT_REMOVED = "UnitRemoved"
    BATTLE_ENDED = "BattleEnded"


@unique
class RemovalCause(str, Enum):
    """Why a unit was removed from the board."""

    MELEE = "melee"
    ARROW = "arrow"
    FIREBALL = "fireball"


@unique
class Winner(str, Enum):
    """Battle outcome."""

    RED = "Red"
    BLUE = "Blue"
    DRAW = "Draw"


@unique
class EndReason(str, Enum):
    """Why the battle terminated."""

    ELIMINATED = "eliminated"
    TIME_LIMIT = "time_limit"
    STALLED = "stalled"
