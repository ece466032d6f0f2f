"""Engine layer: tick scheduler, combat resolution, projectile schedule, resolver pool."""

from skirmish.engine.combat_resolver import CombatResolver
from skirmish.engine.projectile_schedule import ProjectileSchedule
from skirmish.engine.tick_scheduler import TickScheduler, create_battle_state, resolve_battle
from skirmish.engine.worker_pool import ResolveFailure, ResolverPool

__all__ = [
    "CombatResolver",
    "ProjectileSchedule",
    "ResolveFailure",
    "ResolverPool",
    "TickScheduler",
    "create_battle_state",
    "resolve_battle",
]
