"""Tests for BFS stepping toward the nearest enemy-adjacent tile."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from skirmish.ai.pathfinding import Pathfinder
from skirmish.core.enums import UnitType
from skirmish.core.models import Position
from tests.helpers.battle_arena import BattleArena


def _step(arena: BattleArena, uid: int):
    arena.start()
    return Pathfinder(arena.state).next_step(arena.unit(uid))


class TestNextStep:
    def test_straight_line(self):
        arena = BattleArena()
        arena.red(UnitType.INFANTRY, 0, 0)
        arena.blue(UnitType.INFANTRY, 5, 0)
        assert _step(arena, 1) == Position(1, 0)

    def test_vertical_approach(self):
        arena = BattleArena()
        arena.red(UnitType.INFANTRY, 3, 3)
        arena.blue(UnitType.INFANTRY, 3, 0)
        assert _step(arena, 1) == Position(3, 2)

    def test_diagonal_prefers_positive_x_first(self):
        arena = BattleArena()
        arena.red(UnitType.INFANTRY, 2, 2)
        arena.blue(UnitType.INFANTRY, 4, 4)
        assert _step(arena, 1) == Position(3, 2)

    def test_blocked_by_full_friendly_tile(self):
        arena = BattleArena(width=4, height=1, max_units_per_tile=1)
        arena.red(UnitType.INFANTRY, 0, 0)
        arena.red(UnitType.INFANTRY, 1, 0)
        arena.blue(UnitType.INFANTRY, 3, 0)
        assert _step(arena, 1) is None

    def test_adjacent_goal_one_step_away(self):
        arena = BattleArena(width=5, height=3)
        arena.red(UnitType.INFANTRY, 0, 0)
        arena.blue(UnitType.INFANTRY, 2, 0)
        arena.blue(UnitType.INFANTRY, 2, 1)
        arena.blue(UnitType.INFANTRY, 4, 0)
        arena.start()
        pf = Pathfinder(arena.state)
        assert pf.next_step(arena.unit(1)) == Position(1, 0)

    def test_detours_around_full_friendly_tile(self):
        arena = BattleArena(width=3, height=3, max_units_per_tile=1)
        arena.red(UnitType.INFANTRY, 0, 0)
        arena.red(UnitType.INFANTRY, 1, 0)
        arena.blue(UnitType.INFANTRY, 2, 0)
        arena.start()
        pf = Pathfinder(arena.state)
        assert pf.next_step(arena.unit(1)) == Position(0, 1)

    def test_no_enemies(self):
        arena = BattleArena()
        arena.red(UnitType.INFANTRY, 0, 0)
        arena.red(UnitType.ARCHER, 4, 4)
        assert _step(arena, 1) is None

    def test_already_adjacent_looks_elsewhere(self):
        # Standing on a goal tile does not count as reaching it
        arena = BattleArena(width=3, height=1)
        arena.red(UnitType.INFANTRY, 0, 0)
        arena.blue(UnitType.INFANTRY, 1, 0)
        assert _step(arena, 1) is None


class TestGoalTiles:
    def test_goal_tiles_skip_enemy_and_full_tiles(self):
        arena = BattleArena(width=5, height=5, max_units_per_tile=1)
        arena.red(UnitType.INFANTRY, 0, 0)
        arena.blue(UnitType.INFANTRY, 2, 2)
        arena.blue(UnitType.INFANTRY, 3, 2)
        arena.red(UnitType.INFANTRY, 2, 1)
        arena.start()
        goals = Pathfinder(arena.state).goal_tiles(arena.unit(1))
        assert Position(3, 2) not in goals
        assert Position(2, 1) not in goals
        assert goals == {Position(1, 2), Position(2, 3), Position(4, 2), Position(3, 3), Position(3, 1)}
