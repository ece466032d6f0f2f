"""Tests for the setup board and placement command relay."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from skirmish.config import BattleConfig
from skirmish.core.enums import Side, UnitType
from skirmish.core.errors import PlacementRejected
from skirmish.core.models import Position
from skirmish.core.setup import SetupBoard, demo_board, parse_grid_index
from skirmish.core.validation import validate_input

_CONFIG = BattleConfig()


@pytest.fixture
def board():
    return SetupBoard(_CONFIG, seed=7, time_limit=300)


class TestPlacement:
    def test_place_assigns_increasing_ids(self, board):
        a = board.place(Side.RED, UnitType.INFANTRY, 0, 0)
        b = board.place(Side.BLUE, UnitType.ARCHER, 11, 0)
        assert (a.id, b.id) == (1, 2)
        assert b.size == 2

    def test_rejects_outside_zone(self, board):
        with pytest.raises(PlacementRejected, match="deployment zone"):
            board.place(Side.RED, UnitType.INFANTRY, 5, 0)

    def test_rejects_outside_grid(self, board):
        with pytest.raises(PlacementRejected, match="Outside grid"):
            board.place(Side.RED, UnitType.INFANTRY, 0, 8)

    def test_rejects_size_overflow(self, board):
        for _ in range(3):
            board.place(Side.RED, UnitType.CAVALRY, 1, 1)
        with pytest.raises(PlacementRejected, match="size limit"):
            board.place(Side.RED, UnitType.INFANTRY, 1, 1)

    def test_rejects_count_overflow(self, board):
        for _ in range(4):
            board.place(Side.RED, UnitType.INFANTRY, 2, 2)
        with pytest.raises(PlacementRejected, match="unit limit"):
            board.place(Side.RED, UnitType.INFANTRY, 2, 2)

    def test_remove_at_takes_latest(self, board):
        board.place(Side.RED, UnitType.INFANTRY, 0, 0)
        board.place(Side.RED, UnitType.ARCHER, 0, 0)
        removed = board.remove_at(0, 0)
        assert removed.type == UnitType.ARCHER
        assert [u.type for u in board.tile_units(Position(0, 0))] == [UnitType.INFANTRY]
        assert board.remove_at(5, 5) is None

    def test_ids_continue_after_removal(self, board):
        board.place(Side.RED, UnitType.INFANTRY, 0, 0)
        board.place(Side.RED, UnitType.INFANTRY, 0, 1)
        board.remove_at(0, 0)
        assert board.place(Side.RED, UnitType.INFANTRY, 0, 2).id == 3

    def test_build_input_carries_options(self, board):
        board.place(Side.RED, UnitType.MAGE, 0, 0)
        battle_input = board.build_input()
        assert battle_input.seed == 7
        assert battle_input.time_limit == 300
        assert len(battle_input.units) == 1
        validate_input(battle_input, _CONFIG)


class TestRelayCommands:
    def test_place_unit_command(self, board):
        spec = board.parse_command(
            "placeUnit", {"side": "Blue", "type": "cavalry", "x": "10", "y": 3.0},
        )
        assert spec.side == Side.BLUE
        assert spec.type == UnitType.CAVALRY
        assert spec.position == Position(10, 3)

    def test_unknown_action(self, board):
        with pytest.raises(PlacementRejected, match="Unknown action"):
            board.parse_command("removeUnit", {})

    def test_missing_payload(self, board):
        with pytest.raises(PlacementRejected, match="Invalid request"):
            board.parse_command("placeUnit", None)

    @pytest.mark.parametrize("payload,reason", [
        ({"side": "green", "type": "archer", "x": 0, "y": 0}, "Invalid side"),
        ({"side": "red", "type": "dragon", "x": 0, "y": 0}, "Invalid unit type"),
        ({"side": "red", "type": "archer", "x": "a", "y": 0}, "Invalid coordinates"),
        ({"side": "red", "type": "archer", "x": 0.5, "y": 0}, "Invalid coordinates"),
    ])
    def test_bad_payloads(self, board, payload, reason):
        with pytest.raises(PlacementRejected, match=reason):
            board.parse_command("placeUnit", payload)
        assert board.units == []

    def test_bool_is_not_a_coordinate(self):
        with pytest.raises(PlacementRejected):
            parse_grid_index(True)


class TestDemoBoard:
    def test_demo_is_symmetric_and_valid(self):
        demo = demo_board(_CONFIG, seed=3)
        battle_input = demo.build_input()
        validate_input(battle_input, _CONFIG)
        red = [u for u in battle_input.units if u.side == Side.RED]
        blue = [u for u in battle_input.units if u.side == Side.BLUE]
        assert len(red) == len(blue) == 7
        assert sorted(u.type.value for u in red) == sorted(u.type.value for u in blue)
        assert len(demo.tile_units(Position(2, 3))) == 2
