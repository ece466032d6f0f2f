"""Property-style checks over randomly placed battles.

Placements are drawn with Python's ``random`` (seeded, so the suite is
itself deterministic) and routed through the SetupBoard, which rejects
illegal ones.  Every battle is stepped tick by tick and the tile,
ordering, conservation and termination rules are checked as it runs.
"""

import sys
import os
import random

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from skirmish.config import BattleConfig
from skirmish.core.enums import EventType, Side, UnitType
from skirmish.core.errors import PlacementRejected
from skirmish.core.models import BattleOutput
from skirmish.core.setup import SetupBoard
from skirmish.core.snapshot import BoardSnapshot
from skirmish.core.validation import validate_input
from skirmish.engine.tick_scheduler import TickScheduler, create_battle_state
from skirmish.utils.replay import ReplayCursor

_CONFIG = BattleConfig()


def _random_input(case: int):
    rnd = random.Random(case)
    board = SetupBoard(_CONFIG, seed=rnd.randrange(2**32), time_limit=600)
    for _ in range(rnd.randint(2, 24)):
        side = rnd.choice(list(Side))
        start, end = _CONFIG.deployment_columns(side)
        try:
            board.place(
                side,
                rnd.choice(list(UnitType)),
                rnd.randint(start, end),
                rnd.randrange(_CONFIG.grid_height),
            )
        except PlacementRejected:
            continue
    return board.build_input()


def _check_tiles(state) -> None:
    by_tile: dict = {}
    for unit in state.units.values():
        if unit.alive:
            by_tile.setdefault(unit.position, []).append(unit)
    for pos, units in by_tile.items():
        assert state.grid.in_bounds(pos)
        assert len({u.side for u in units}) == 1, f"mixed sides at {pos}"
        assert len(units) <= state.input.max_units_per_tile
        assert sum(u.size for u in units) <= state.input.max_size_per_tile


def _flight_key(p):
    return (p.impact_tick, p.source_id, p.kind.value, p.target.x, p.target.y)


@pytest.mark.parametrize("case", range(12))
def test_random_battle_invariants(case):
    battle_input = _random_input(case)
    validate_input(battle_input, _CONFIG)
    state = create_battle_state(battle_input, _CONFIG)
    scheduler = TickScheduler(state, _CONFIG)
    scheduler.start()

    snapshots: dict[int, BoardSnapshot] = {}
    while not scheduler.finished:
        tick = state.tick
        scheduler.tick_once()
        _check_tiles(state)
        snapshots[tick] = BoardSnapshot.from_state(state)

    events = state.log.freeze()
    result = scheduler.result

    # Exactly one terminal event, last, within the time limit
    ended = [e for e in events if e.type == EventType.BATTLE_ENDED]
    assert len(ended) == 1
    assert events[-1] is ended[0]
    assert result.tick <= battle_input.time_limit

    # Ticks never decrease
    ticks = [e.tick for e in events]
    assert ticks == sorted(ticks)

    # Conservation: every unit spawns once and is removed at most once
    spawned = [e.payload.unit.id for e in events if e.type == EventType.UNIT_SPAWNED]
    removed = [e.payload.unit_id for e in events if e.type == EventType.UNIT_REMOVED]
    assert sorted(spawned) == sorted(u.id for u in battle_input.units)
    assert spawned == sorted(spawned)
    assert len(removed) == len(set(removed))
    survivors = len(spawned) - len(removed)
    assert survivors == result.survivors_red + result.survivors_blue

    # Every impact matches an earlier shot
    fired = [e for e in events if e.type == EventType.PROJECTILE_FIRED]
    impacted = [e for e in events if e.type == EventType.PROJECTILE_IMPACTED]
    assert len(impacted) <= len(fired)
    for hit in impacted:
        assert any(
            f.seq == hit.seq and f.payload.impact_tick == hit.tick and f.tick < hit.tick
            for f in fired
        )

    # The log alone rebuilds the live board at every tick
    cursor = ReplayCursor(BattleOutput(input=battle_input, events=events, result=result))
    for tick in sorted(snapshots):
        cursor.advance_to(tick)
        replayed = cursor.snapshot()
        live = snapshots[tick]
        assert dict(replayed.units) == dict(live.units), f"unit mismatch at tick {tick}"
        assert sorted(map(_flight_key, replayed.projectiles)) == sorted(map(_flight_key, live.projectiles))
