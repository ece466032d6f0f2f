"""WaitAction — the unit does nothing observable this turn."""

from __future__ import annotations

from typing import TYPE_CHECKING

from skirmish.core.enums import ActionType
from skirmish.core.unit_types import unit_def

if TYPE_CHECKING:
    from skirmish.actions.base import ActionProposal
    from skirmish.core.battle_state import BattleState


class WaitAction:
    """Stateless handler for WAIT proposals. Emits no event."""

    @staticmethod
    def validate(proposal: ActionProposal, state: BattleState) -> bool:
        if proposal.verb != ActionType.WAIT:
            return False
        unit = state.units.get(proposal.actor_id)
        return unit is not None and unit.alive

    @staticmethod
    def apply(proposal: ActionProposal, state: BattleState) -> None:
        unit = state.units[proposal.actor_id]
        unit.next_available_tick = state.tick + unit_def(unit.type).wait_cost
