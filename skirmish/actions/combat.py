"""MeleeAction and FireAction — the two attacking verbs.

A melee attack is resolved immediately with one RNG draw against the hit
threshold.  A shot only creates a projectile; its effect lands later, in
the impact phase of the projectile's impact tick (see ``actions.impact``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from skirmish.core.enums import ActionType, RemovalCause
from skirmish.core.events import MeleeAttackResolved, ProjectileFired, UnitRemoved
from skirmish.core.models import Projectile
from skirmish.core.unit_types import PROJECTILE_SPEED, unit_def

if TYPE_CHECKING:
    from skirmish.actions.base import ActionProposal
    from skirmish.core.battle_state import BattleState

logger = logging.getLogger(__name__)


class MeleeAction:
    """Stateless handler for MELEE proposals."""

    @staticmethod
    def validate(proposal: ActionProposal, state: BattleState) -> bool:
        if proposal.verb != ActionType.MELEE:
            return False
        attacker = state.units.get(proposal.actor_id)
        defender = state.units.get(proposal.target)
        if attacker is None or defender is None:
            return False
        if not (attacker.alive and defender.alive):
            return False
        if not attacker.is_enemy_of(defender):
            return False
        return attacker.position.manhattan(defender.position) == 1

    @staticmethod
    def apply(proposal: ActionProposal, state: BattleState) -> None:
        attacker = state.units[proposal.actor_id]
        defender = state.units[proposal.target]
        tick = state.tick

        hit = state.rng.next_float() < state.config.melee_hit_chance
        state.emit(attacker.id, MeleeAttackResolved(
            attacker_id=attacker.id, target_id=defender.id, hit=hit,
        ))
        if hit:
            state.remove_unit(defender)
            state.emit(attacker.id, UnitRemoved(
                unit_id=defender.id,
                side=defender.side,
                cause=RemovalCause.MELEE,
                source_id=attacker.id,
            ))
            logger.debug("Tick %d: unit %d cut down unit %d", tick, attacker.id, defender.id)
        else:
            logger.debug("Tick %d: unit %d missed unit %d", tick, attacker.id, defender.id)

        attacker.next_available_tick = tick + unit_def(attacker.type).attack_cost


class FireAction:
    """Stateless handler for FIRE proposals."""

    @staticmethod
    def validate(proposal: ActionProposal, state: BattleState) -> bool:
        if proposal.verb != ActionType.FIRE:
            return False
        shooter = state.units.get(proposal.actor_id)
        if shooter is None or not shooter.alive:
            return False
        spec = unit_def(shooter.type)
        if spec.projectile is None:
            return False
        distance = shooter.position.manhattan(proposal.target)
        return state.config.min_ranged_distance <= distance <= spec.range

    @staticmethod
    def apply(proposal: ActionProposal, state: BattleState) -> Projectile:
        shooter = state.units[proposal.actor_id]
        spec = unit_def(shooter.type)
        kind = spec.projectile
        tick = state.tick
        distance = shooter.position.manhattan(proposal.target)

        projectile = Projectile(
            id=state.projectiles.allocate_id(),
            kind=kind,
            source_id=shooter.id,
            source_side=shooter.side,
            origin=shooter.position,
            target=proposal.target,
            fire_tick=tick,
            impact_tick=tick + PROJECTILE_SPEED[kind] * distance,
        )
        state.projectiles.schedule(projectile)
        state.emit(shooter.id, ProjectileFired(
            source_id=shooter.id,
            source_side=shooter.side,
            projectile=kind,
            from_pos=projectile.origin,
            target=projectile.target,
            fire_tick=projectile.fire_tick,
            impact_tick=projectile.impact_tick,
            distance=distance,
        ))
        logger.debug(
            "Tick %d: unit %d fired %s #%d at %s (impact %d)",
            tick, shooter.id, kind.value, projectile.id, projectile.target, projectile.impact_tick,
        )

        shooter.next_available_tick = tick + spec.attack_cost
        return projectile
