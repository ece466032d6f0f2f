"""Tests for the ``python -m skirmish`` command line."""

import sys
import os
import json

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from skirmish.__main__ import main


class TestCommands:
    def test_demo_then_replay(self, tmp_path, capsys):
        path = tmp_path / "demo.json"
        assert main(["demo", "--seed", "2", "--output", str(path), "--log-level", "WARNING"]) == 0
        assert path.exists()
        board = capsys.readouterr().out
        assert "Ended:" in board

        assert main(["replay", str(path), "--tick", "0", "--json"]) == 0
        snapshot = json.loads(capsys.readouterr().out)
        assert snapshot["tick"] == 0
        assert len(snapshot["units"]) == 14

    def test_resolve_input_file(self, tmp_path, capsys):
        path = tmp_path / "input.json"
        path.write_text(json.dumps({
            "grid": {"width": 12, "height": 8},
            "seed": 0,
            "timeLimit": 10,
            "units": [
                {"id": 1, "side": "Red", "type": "Infantry", "size": 2, "position": {"x": 0, "y": 0}},
                {"id": 2, "side": "Blue", "type": "Infantry", "size": 2, "position": {"x": 11, "y": 0}},
            ],
        }))
        assert main(["resolve", str(path)]) == 0
        result = json.loads(capsys.readouterr().out)
        assert result["reason"] == "time_limit"
        assert result["tick"] == 10

    def test_invalid_input_exits_nonzero(self, tmp_path, capsys):
        path = tmp_path / "input.json"
        path.write_text(json.dumps({
            "grid": {"width": 12, "height": 8},
            "units": [
                {"id": 1, "side": "Red", "type": "Infantry", "size": 3, "position": {"x": 0, "y": 0}},
            ],
        }))
        assert main(["resolve", str(path)]) == 1
        assert "expected 2" in capsys.readouterr().err

    def test_missing_file_exits_nonzero(self, tmp_path):
        assert main(["resolve", str(tmp_path / "nope.json")]) == 1
