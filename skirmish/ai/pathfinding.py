"""Breadth-first pathfinding toward the nearest enemy-adjacent tile.

Provides a `Pathfinder` that answers a single question per call: which
neighboring tile should this unit step onto to get closer to an enemy?

Usage:
    pf = Pathfinder(state)
    step = pf.next_step(unit)        # Position or None
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from skirmish.core.battle_state import BattleState
    from skirmish.core.models import Position, Unit


class Pathfinder:
    """BFS pathfinder over the battle grid.

    Goal tiles are enemy-adjacent tiles the unit may legally enter.  Only
    enterable tiles are expanded, in the fixed neighbor order +x, -x, +y, -y,
    so ties between equally short paths resolve by visitation order.  The
    search visits each tile at most once and is bounded by the tile count.
    """

    __slots__ = ("_state",)

    def __init__(self, state: BattleState) -> None:
        self._state = state

    def goal_tiles(self, unit: Unit) -> set[Position]:
        """Enterable tiles one step from any living enemy."""
        state = self._state
        goals: set[Position] = set()
        for enemy in state.living_enemies(unit):
            for pos in state.grid.neighbors(enemy.position):
                if state.tiles.can_enter(unit, pos):
                    goals.add(pos)
        return goals

    def next_step(self, unit: Unit) -> Position | None:
        """First step of a shortest path to a goal tile, or None."""
        goals = self.goal_tiles(unit)
        if not goals:
            return None

        state = self._state
        start = unit.position
        visited: set[Position] = {start}
        frontier: deque[tuple[Position, Position | None]] = deque([(start, None)])

        while frontier:
            pos, first_step = frontier.popleft()
            if pos != start and pos in goals:
                return first_step
            for nxt in state.grid.neighbors(pos):
                if nxt in visited:
                    continue
                if not state.tiles.can_enter(unit, nxt):
                    continue
                visited.add(nxt)
                frontier.append((nxt, first_step if first_step is not None else nxt))

        return None
