"""Base action proposal — the universal currency between policy and resolver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from skirmish.core.enums import ActionType


@dataclass(frozen=True, slots=True)
class ActionProposal:
    """An intent produced by the unit policy.

    ``target`` is an enemy unit id for MELEE, a tile Position for FIRE and
    MOVE, and None for WAIT.  The CombatResolver applies each proposal.
    """

    actor_id: int
    verb: ActionType
    target: Any = None
    reason: str = ""

    def __repr__(self) -> str:
        return f"Proposal(unit={self.actor_id}, {self.verb.name}, target={self.target}, reason={self.reason!r})"
