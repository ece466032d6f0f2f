"""Action system: proposals and their application to battle state."""

from skirmish.actions.base import ActionProposal
from skirmish.actions.combat import FireAction, MeleeAction
from skirmish.actions.impact import ImpactAction
from skirmish.actions.move import MoveAction
from skirmish.actions.wait import WaitAction

__all__ = [
    "ActionProposal",
    "FireAction",
    "ImpactAction",
    "MeleeAction",
    "MoveAction",
    "WaitAction",
]
