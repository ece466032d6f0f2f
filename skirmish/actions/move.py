"""MoveAction — validates and applies single-tile moves."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from skirmish.core.enums import ActionType
from skirmish.core.events import UnitMoved
from skirmish.core.models import Position
from skirmish.core.unit_types import unit_def

if TYPE_CHECKING:
    from skirmish.actions.base import ActionProposal
    from skirmish.core.battle_state import BattleState

logger = logging.getLogger(__name__)


class MoveAction:
    """Stateless handler for MOVE proposals."""

    @staticmethod
    def validate(proposal: ActionProposal, state: BattleState) -> bool:
        if proposal.verb != ActionType.MOVE:
            return False

        unit = state.units.get(proposal.actor_id)
        if unit is None or not unit.alive:
            return False

        target: Position = proposal.target
        if unit.position.manhattan(target) != 1:
            logger.debug("Unit %d cannot jump from %s to %s", unit.id, unit.position, target)
            return False

        if not state.tiles.can_enter(unit, target):
            logger.debug("Unit %d blocked at %s", unit.id, target)
            return False

        return True

    @staticmethod
    def apply(proposal: ActionProposal, state: BattleState) -> None:
        unit = state.units[proposal.actor_id]
        target: Position = proposal.target
        old_pos = state.move_unit(unit, target)
        state.emit(unit.id, UnitMoved(unit_id=unit.id, from_pos=old_pos, to_pos=target))
        logger.debug("Tick %d: unit %d moved %s -> %s", state.tick, unit.id, old_pos, target)
        unit.next_available_tick = state.tick + unit_def(unit.type).move_cost
