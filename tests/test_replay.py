"""Tests for replay files and event-log reconstruction."""

import sys
import os
import json

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from skirmish.config import BattleConfig
from skirmish.core.enums import Side, UnitType
from skirmish.core.errors import InvalidBattleInput
from skirmish.core.models import Position
from skirmish.core.setup import demo_board
from skirmish.core.wire import BattleOutputSchema
from skirmish.engine.tick_scheduler import resolve_battle
from skirmish.utils.event_log import digest_events
import skirmish.utils.replay as replay_module
from skirmish.utils.replay import (
    REPLAY_VERSION,
    ReplayCursor,
    load_input,
    load_output,
    save_output,
    state_at,
)
from tests.helpers.battle_arena import BattleArena


@pytest.fixture(scope="module")
def demo_output():
    return resolve_battle(demo_board(BattleConfig(), seed=11).build_input())


class TestReplayFiles:
    def test_round_trip_preserves_log(self, demo_output, tmp_path):
        path = save_output(demo_output, tmp_path / "replays" / "demo.json")
        loaded = load_output(path)
        assert loaded.input == demo_output.input
        assert loaded.result == demo_output.result
        assert digest_events(loaded.events) == digest_events(demo_output.events)

    def test_file_carries_version_and_digest(self, demo_output, tmp_path):
        path = save_output(demo_output, tmp_path / "demo.json")
        document = json.loads(path.read_text())
        assert document["version"] == REPLAY_VERSION
        assert document["digest"] == digest_events(demo_output.events)
        assert document["input"]["limits"]["maxUnitsPerTile"] == 4

    def test_document_parses_through_core_wire_models(self, demo_output, tmp_path):
        path = save_output(demo_output, tmp_path / "demo.json")
        schema = BattleOutputSchema.model_validate(json.loads(path.read_text()))
        assert digest_events(schema.to_core().events) == digest_events(demo_output.events)
        assert replay_module.BattleOutputSchema is BattleOutputSchema

    def test_tampered_log_rejected(self, demo_output, tmp_path):
        path = save_output(demo_output, tmp_path / "demo.json")
        document = json.loads(path.read_text())
        document["events"][1]["seq"] = 99
        path.write_text(json.dumps(document))
        with pytest.raises(InvalidBattleInput, match="digest mismatch"):
            load_output(path)

    def test_load_input_accepts_replay_or_input(self, demo_output, tmp_path):
        replay_path = save_output(demo_output, tmp_path / "demo.json")
        input_path = tmp_path / "input.json"
        input_path.write_text(json.dumps(demo_output.input.to_dict()))
        assert load_input(replay_path) == demo_output.input
        assert load_input(input_path) == demo_output.input

    def test_input_defaults(self, tmp_path):
        path = tmp_path / "input.json"
        path.write_text(json.dumps({"grid": {"width": 12, "height": 8}}))
        battle_input = load_input(path)
        assert battle_input.max_units_per_tile == 4
        assert battle_input.max_size_per_tile == 10
        assert battle_input.units == ()


class TestReplayCursor:
    def test_tick_zero_shows_spawned_board(self, demo_output):
        snap = state_at(demo_output, 0)
        assert snap.tick == 0
        assert len(snap.units) == len(demo_output.input.units)

    def test_final_tick_carries_result(self, demo_output):
        snap = state_at(demo_output, demo_output.result.tick)
        assert snap.result == demo_output.result
        red = len(snap.living(Side.RED))
        blue = len(snap.living(Side.BLUE))
        assert (red, blue) == (demo_output.result.survivors_red, demo_output.result.survivors_blue)

    def test_advance_clamps_to_final_tick(self, demo_output):
        cursor = ReplayCursor(demo_output)
        cursor.advance_to(10**6)
        assert cursor.current_tick == demo_output.result.tick
        assert cursor.finished

    def test_rewind_rebuilds_from_start(self, demo_output):
        cursor = ReplayCursor(demo_output)
        cursor.advance_to(5)
        early = cursor.snapshot()
        cursor.advance_to(demo_output.result.tick)
        cursor.advance_to(5)
        assert dict(cursor.snapshot().units) == dict(early.units)

    def test_step_advances_one_tick(self, demo_output):
        cursor = ReplayCursor(demo_output)
        assert cursor.step() == 0
        assert cursor.step() == 1

    def test_projectile_visible_in_flight(self):
        arena = BattleArena()
        arena.red(UnitType.ARCHER, 0, 0)
        arena.blue(UnitType.ARCHER, 3, 0)
        output = arena.resolve()

        in_flight = state_at(output, 3)
        assert len(in_flight.projectiles) == 2
        assert in_flight.projectiles[0].target == Position(3, 0)

        landed = state_at(output, 6)
        assert landed.projectiles == ()
        assert landed.living() == []

    def test_move_reflected(self):
        arena = BattleArena(time_limit=2)
        arena.red(UnitType.INFANTRY, 0, 0)
        arena.blue(UnitType.INFANTRY, 11, 0)
        output = arena.resolve()
        snap = state_at(output, 0)
        assert snap.units[1].position == Position(1, 0)
        assert snap.units[2].position == Position(10, 0)
