"""Applies policy proposals and projectile impacts to battle state."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from skirmish.actions.combat import FireAction, MeleeAction
from skirmish.actions.impact import ImpactAction
from skirmish.actions.move import MoveAction
from skirmish.actions.wait import WaitAction
from skirmish.core.enums import ActionType
from skirmish.core.errors import InvariantViolation

if TYPE_CHECKING:
    from skirmish.actions.base import ActionProposal
    from skirmish.core.battle_state import BattleState
    from skirmish.core.models import Projectile

logger = logging.getLogger(__name__)


class CombatResolver:
    """Validates and applies proposals one at a time, in the caller's order.

    The policy only proposes legal actions, so a proposal that fails
    validation means the two layers disagree about the rules.  That is a
    fatal ``InvariantViolation``, never a silently skipped turn.
    """

    __slots__ = ()

    def apply(self, proposal: ActionProposal, state: BattleState) -> bool:
        """Apply *proposal*. Returns True if it produced observable activity."""
        match proposal.verb:
            case ActionType.MELEE:
                self._check(MeleeAction.validate(proposal, state), proposal)
                MeleeAction.apply(proposal, state)
                return True

            case ActionType.FIRE:
                self._check(FireAction.validate(proposal, state), proposal)
                FireAction.apply(proposal, state)
                return True

            case ActionType.MOVE:
                self._check(MoveAction.validate(proposal, state), proposal)
                MoveAction.apply(proposal, state)
                return True

            case ActionType.WAIT:
                self._check(WaitAction.validate(proposal, state), proposal)
                WaitAction.apply(proposal, state)
                return False

        raise InvariantViolation(f"Unknown action verb in {proposal!r}")

    def resolve_impacts(self, projectiles: list[Projectile], state: BattleState) -> bool:
        """Land every projectile in *projectiles*, already in impact order."""
        for projectile in projectiles:
            ImpactAction.apply(projectile, state)
        return bool(projectiles)

    @staticmethod
    def _check(valid: bool, proposal: ActionProposal) -> None:
        if not valid:
            logger.debug("Rejected: %s", proposal)
            raise InvariantViolation(f"Policy proposed an illegal action: {proposal!r}")
