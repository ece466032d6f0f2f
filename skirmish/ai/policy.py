"""UnitPolicy — per-archetype action selection.

Priority order, first applicable action wins:
  1. Melee archetypes attack the lowest-id adjacent enemy.
  2. Ranged archetypes shoot at an enemy tile in range, chosen by the
     projectile's tie-break (arrows: nearest; fireballs: most crowded).
  3. Anything that did not attack steps toward the nearest enemy.
  4. Otherwise, wait.

The policy only reads state; the CombatResolver applies what it proposes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from skirmish.actions.base import ActionProposal
from skirmish.ai.pathfinding import Pathfinder
from skirmish.core.enums import ActionType, ProjectileKind
from skirmish.core.unit_types import unit_def

if TYPE_CHECKING:
    from skirmish.core.battle_state import BattleState
    from skirmish.core.models import Position, Unit


class UnitPolicy:
    """Decides one action for a ready unit. Holds no per-unit memory."""

    __slots__ = ("_state", "_pathfinder")

    def __init__(self, state: BattleState, pathfinder: Pathfinder | None = None) -> None:
        self._state = state
        self._pathfinder = pathfinder or Pathfinder(state)

    def decide(self, unit: Unit) -> ActionProposal:
        spec = unit_def(unit.type)

        match spec.projectile:
            case None:
                target = self.adjacent_enemy(unit)
                if target is not None:
                    return ActionProposal(unit.id, ActionType.MELEE, target.id, "adjacent enemy")
            case ProjectileKind.ARROW | ProjectileKind.FIREBALL:
                tile = self.choose_target_tile(unit, spec.range, spec.projectile)
                if tile is not None:
                    return ActionProposal(unit.id, ActionType.FIRE, tile, f"{spec.projectile.value} target")

        step = self._pathfinder.next_step(unit)
        if step is not None:
            return ActionProposal(unit.id, ActionType.MOVE, step, "advance")
        return ActionProposal(unit.id, ActionType.WAIT, None, "no target")

    # -- melee -------------------------------------------------------------

    def adjacent_enemy(self, unit: Unit) -> Unit | None:
        """Lowest-id living enemy exactly one step away."""
        candidates: list[Unit] = []
        for pos in self._state.grid.neighbors(unit.position):
            candidates.extend(u for u in self._state.tiles.occupants_of(pos) if u.is_enemy_of(unit))
        if not candidates:
            return None
        return min(candidates, key=lambda u: u.id)

    # -- ranged ------------------------------------------------------------

    def enemy_tiles_in_range(self, unit: Unit, max_range: int) -> dict[Position, int]:
        """Enemy-held tiles within [min_ranged_distance, max_range], with occupant counts."""
        min_range = self._state.config.min_ranged_distance
        tiles: dict[Position, int] = {}
        for enemy in self._state.living_enemies(unit):
            distance = unit.position.manhattan(enemy.position)
            if min_range <= distance <= max_range:
                tiles[enemy.position] = tiles.get(enemy.position, 0) + 1
        return tiles

    def choose_target_tile(self, unit: Unit, max_range: int, kind: ProjectileKind) -> Position | None:
        tiles = self.enemy_tiles_in_range(unit, max_range)
        if not tiles:
            return None
        origin = unit.position

        match kind:
            case ProjectileKind.ARROW:
                # Nearest, then row, then column
                return min(tiles, key=lambda p: (origin.manhattan(p), p.y, p.x))
            case ProjectileKind.FIREBALL:
                # Most occupants, then nearest, then row, then column
                return min(tiles, key=lambda p: (-tiles[p], origin.manhattan(p), p.y, p.x))
        raise ValueError(f"Unknown projectile kind {kind!r}")
