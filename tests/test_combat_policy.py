"""Tests for per-archetype action selection and projectile impacts."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from skirmish.actions.impact import ImpactAction
from skirmish.ai.policy import UnitPolicy
from skirmish.core.enums import ActionType, EventType, ProjectileKind, Side, UnitType
from skirmish.core.models import Position, Projectile
from tests.helpers.battle_arena import BattleArena, logged


def _decide(arena: BattleArena, uid: int):
    arena.start()
    return UnitPolicy(arena.state).decide(arena.unit(uid))


class TestMeleePolicy:
    def test_attacks_lowest_id_adjacent_enemy(self):
        arena = BattleArena()
        arena.red(UnitType.INFANTRY, 2, 2, uid=5)
        arena.blue(UnitType.INFANTRY, 3, 2, uid=7)
        arena.blue(UnitType.INFANTRY, 2, 3, uid=6)
        proposal = _decide(arena, 5)
        assert proposal.verb == ActionType.MELEE
        assert proposal.target == 6

    def test_ignores_diagonal_enemy(self):
        arena = BattleArena()
        arena.red(UnitType.CAVALRY, 2, 2)
        arena.blue(UnitType.INFANTRY, 3, 3)
        proposal = _decide(arena, 1)
        assert proposal.verb == ActionType.MOVE

    def test_waits_without_enemies(self):
        arena = BattleArena()
        arena.red(UnitType.INFANTRY, 2, 2)
        proposal = _decide(arena, 1)
        assert proposal.verb == ActionType.WAIT
        assert proposal.target is None


class TestArcherPolicy:
    def test_tie_on_distance_prefers_lower_row(self):
        arena = BattleArena()
        arena.red(UnitType.ARCHER, 0, 0)
        arena.blue(UnitType.INFANTRY, 0, 3)
        arena.blue(UnitType.INFANTRY, 3, 0)
        proposal = _decide(arena, 1)
        assert proposal.verb == ActionType.FIRE
        assert proposal.target == Position(3, 0)

    def test_tie_on_distance_mixed_rows(self):
        arena = BattleArena()
        arena.red(UnitType.ARCHER, 0, 0)
        arena.blue(UnitType.INFANTRY, 1, 2)
        arena.blue(UnitType.INFANTRY, 2, 1)
        assert _decide(arena, 1).target == Position(2, 1)

    def test_nearest_wins_over_crowded(self):
        arena = BattleArena()
        arena.red(UnitType.ARCHER, 0, 0)
        arena.blue(UnitType.INFANTRY, 4, 0)
        arena.blue(UnitType.INFANTRY, 4, 0)
        arena.blue(UnitType.INFANTRY, 2, 0)
        assert _decide(arena, 1).target == Position(2, 0)

    def test_out_of_range_moves(self):
        arena = BattleArena()
        arena.red(UnitType.ARCHER, 0, 0)
        arena.blue(UnitType.INFANTRY, 11, 7)
        proposal = _decide(arena, 1)
        assert proposal.verb == ActionType.MOVE
        assert proposal.target == Position(1, 0)

    def test_adjacent_enemy_is_in_range(self):
        arena = BattleArena()
        arena.red(UnitType.ARCHER, 0, 0)
        arena.blue(UnitType.INFANTRY, 1, 0)
        proposal = _decide(arena, 1)
        assert proposal.verb == ActionType.FIRE
        assert proposal.target == Position(1, 0)


class TestMagePolicy:
    def test_prefers_most_crowded_tile(self):
        arena = BattleArena()
        arena.red(UnitType.MAGE, 0, 0)
        arena.blue(UnitType.INFANTRY, 1, 0)
        arena.blue(UnitType.INFANTRY, 3, 0)
        arena.blue(UnitType.INFANTRY, 3, 0)
        proposal = _decide(arena, 1)
        assert proposal.verb == ActionType.FIRE
        assert proposal.target == Position(3, 0)

    def test_equal_crowds_prefer_nearest(self):
        arena = BattleArena()
        arena.red(UnitType.MAGE, 0, 0)
        arena.blue(UnitType.INFANTRY, 5, 0)
        arena.blue(UnitType.INFANTRY, 2, 0)
        assert _decide(arena, 1).target == Position(2, 0)


def _arrow(source_id=1, side=Side.RED, target=Position(5, 0), kind=ProjectileKind.ARROW):
    return Projectile(
        id=0, kind=kind, source_id=source_id, source_side=side,
        origin=Position(0, 0), target=target, fire_tick=0, impact_tick=0,
    )


def _crowded_tile(seed: int) -> BattleArena:
    arena = BattleArena(seed=seed)
    arena.red(UnitType.ARCHER, 0, 0)
    arena.blue(UnitType.INFANTRY, 5, 0)
    arena.blue(UnitType.INFANTRY, 5, 0)
    arena.blue(UnitType.INFANTRY, 5, 0)
    arena.start()
    return arena


class TestImpact:
    def test_arrow_victim_seed_zero(self):
        arena = _crowded_tile(seed=0)
        victims = ImpactAction.apply(_arrow(), arena.state)
        # first draw 0.236 * 3 -> index 0
        assert [v.id for v in victims] == [2]
        assert not arena.unit(2).alive

    def test_arrow_victim_seed_1000(self):
        arena = _crowded_tile(seed=1000)
        victims = ImpactAction.apply(_arrow(), arena.state)
        # first draw 0.624 * 3 -> index 1
        assert [v.id for v in victims] == [3]

    def test_fireball_clears_tile(self):
        arena = _crowded_tile(seed=0)
        victims = ImpactAction.apply(_arrow(kind=ProjectileKind.FIREBALL), arena.state)
        assert [v.id for v in victims] == [2, 3, 4]
        assert arena.state.tiles.is_empty(Position(5, 0))
        assert arena.state.rng.draws == 0

    def test_friendly_tile_untouched(self):
        arena = _crowded_tile(seed=0)
        victims = ImpactAction.apply(_arrow(side=Side.BLUE), arena.state)
        assert victims == []
        assert len(arena.state.tiles.occupants_of(Position(5, 0))) == 3
        assert logged(arena, EventType.PROJECTILE_IMPACTED)
        assert not logged(arena, EventType.UNIT_REMOVED)

    def test_removal_seq_is_source(self):
        arena = _crowded_tile(seed=0)
        ImpactAction.apply(_arrow(), arena.state)
        removed = logged(arena, EventType.UNIT_REMOVED)
        assert len(removed) == 1
        assert removed[0].seq == 1
        assert removed[0].payload.source_id == 1

    def test_arrow_victim_indexed_by_id_not_arrival(self):
        arena = BattleArena(seed=0)
        arena.red(UnitType.ARCHER, 0, 0, uid=1)
        arena.blue(UnitType.INFANTRY, 4, 0, uid=3)
        arena.blue(UnitType.INFANTRY, 5, 0, uid=2)
        arena.start()
        arena.state.move_unit(arena.unit(2), Position(4, 0))
        victims = ImpactAction.apply(_arrow(target=Position(4, 0)), arena.state)
        # index 0 is the lowest id even though unit 2 arrived last
        assert [v.id for v in victims] == [2]
        assert arena.unit(3).alive
