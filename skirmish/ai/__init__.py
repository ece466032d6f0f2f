"""Decision layer: per-archetype policy and pathfinding."""

from skirmish.ai.pathfinding import Pathfinder
from skirmish.ai.policy import UnitPolicy

__all__ = ["Pathfinder", "UnitPolicy"]
