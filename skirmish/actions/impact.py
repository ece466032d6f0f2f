"""ImpactAction — resolves a projectile against its frozen target tile.

Enemy is always relative to the projectile's source side, not to whoever
now stands on the tile.  A tile since taken by the source's own side is
left untouched.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from skirmish.core.enums import ProjectileKind, RemovalCause
from skirmish.core.events import ProjectileImpacted, UnitRemoved

if TYPE_CHECKING:
    from skirmish.core.battle_state import BattleState
    from skirmish.core.models import Projectile, Unit

logger = logging.getLogger(__name__)


class ImpactAction:
    """Stateless handler for a projectile reaching its impact tick."""

    @staticmethod
    def apply(projectile: Projectile, state: BattleState) -> list[Unit]:
        """Emit the impact and any removals. Returns the removed units."""
        state.emit(projectile.source_id, ProjectileImpacted(
            source_id=projectile.source_id,
            source_side=projectile.source_side,
            projectile=projectile.kind,
            target=projectile.target,
            impact_tick=projectile.impact_tick,
        ))

        enemies = [
            u for u in state.tiles.occupants_of(projectile.target)
            if u.side != projectile.source_side
        ]
        if not enemies:
            logger.debug(
                "Tick %d: %s #%d landed on %s with no enemy present",
                state.tick, projectile.kind.value, projectile.id, projectile.target,
            )
            return []

        match projectile.kind:
            case ProjectileKind.ARROW:
                # Indexed over occupants in id order, not arrival order
                victims = [enemies[state.rng.next_int(len(enemies))]]
                cause = RemovalCause.ARROW
            case ProjectileKind.FIREBALL:
                victims = enemies
                cause = RemovalCause.FIREBALL
            case _:
                raise ValueError(f"Unknown projectile kind {projectile.kind!r}")

        for victim in victims:
            state.remove_unit(victim)
            state.emit(projectile.source_id, UnitRemoved(
                unit_id=victim.id,
                side=victim.side,
                cause=cause,
                source_id=projectile.source_id,
            ))
        logger.debug(
            "Tick %d: %s #%d from unit %d removed %s",
            state.tick, projectile.kind.value, projectile.id,
            projectile.source_id, [v.id for v in victims],
        )
        return victims
