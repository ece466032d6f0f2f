"""Tests for off-thread resolution via ResolverPool."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from skirmish.config import BattleConfig
from skirmish.core.enums import Side, UnitType, Winner
from skirmish.core.models import BattleInput, BattleOutput, Position, UnitSpec
from skirmish.engine.worker_pool import ResolveFailure, ResolverPool


def _duel(seed=0, blue_x=1):
    return BattleInput(
        width=4, height=1, max_units_per_tile=4, max_size_per_tile=10,
        seed=seed, time_limit=50,
        units=(
            UnitSpec(1, Side.RED, UnitType.INFANTRY, 2, Position(0, 0)),
            UnitSpec(2, Side.BLUE, UnitType.INFANTRY, 2, Position(blue_x, 0)),
        ),
    )


_OPEN = dict(red_columns=(0, 3), blue_columns=(0, 3))


class TestResolverPool:
    def test_threaded_resolution(self):
        pool = ResolverPool(BattleConfig(num_workers=2, **_OPEN))
        try:
            outcome = pool.resolve(_duel(), timeout=10)
        finally:
            pool.shutdown(wait=True)
        assert isinstance(outcome, BattleOutput)
        assert outcome.result.winner == Winner.RED

    def test_inline_resolution(self):
        pool = ResolverPool(BattleConfig(num_workers=1, **_OPEN))
        try:
            outcome = pool.resolve(_duel())
        finally:
            pool.shutdown()
        assert isinstance(outcome, BattleOutput)
        assert outcome.result.tick == 0

    def test_invalid_input_is_structured_failure(self):
        pool = ResolverPool(BattleConfig(num_workers=2, **_OPEN))
        try:
            outcome = pool.resolve(_duel(blue_x=0), timeout=10)
        finally:
            pool.shutdown(wait=True)
        assert isinstance(outcome, ResolveFailure)
        assert outcome.is_input_error
        assert "mixes sides" in outcome.message

    def test_many_battles_in_flight(self):
        pool = ResolverPool(BattleConfig(num_workers=3, **_OPEN))
        try:
            futures = [pool.submit(_duel(seed=s)) for s in range(10)]
            outcomes = [f.result(timeout=10) for f in futures]
        finally:
            pool.shutdown(wait=True)
        assert all(isinstance(o, BattleOutput) for o in outcomes)
        assert [o.input.seed for o in outcomes] == list(range(10))
