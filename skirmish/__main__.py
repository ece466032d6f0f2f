"""Entry point: ``python -m skirmish``.

Supports four modes:
  - ``python -m skirmish``                        → Launch the FastAPI server
  - ``python -m skirmish resolve INPUT``          → Resolve a battle input file
  - ``python -m skirmish demo``                   → Resolve the built-in demo lineup
  - ``python -m skirmish replay OUTPUT --tick N`` → Print the board at a tick
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from skirmish.core.errors import BattleError

logger = logging.getLogger(__name__)

_LOG_LEVELS = ["DEBUG", "INFO", "WARNING"]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deterministic grid battle resolver")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--workers", type=int, default=2)
    srv.add_argument("--log-level", type=str, default="INFO", choices=_LOG_LEVELS)

    # --- Resolve an input file ---
    res = sub.add_parser("resolve", help="Resolve a battle input JSON file")
    res.add_argument("input", type=Path)
    res.add_argument("--output", type=Path, default=None, help="Write the replay JSON here")
    res.add_argument("--log-level", type=str, default="WARNING", choices=_LOG_LEVELS)

    # --- Demo battle ---
    demo = sub.add_parser("demo", help="Resolve the built-in demo lineup")
    demo.add_argument("--seed", type=int, default=1)
    demo.add_argument("--output", type=Path, default=None)
    demo.add_argument("--log-level", type=str, default="INFO", choices=_LOG_LEVELS)

    # --- Inspect a replay ---
    rep = sub.add_parser("replay", help="Reconstruct the board of a replay file at a tick")
    rep.add_argument("output", type=Path)
    rep.add_argument("--tick", type=int, default=0)
    rep.add_argument("--json", action="store_true", help="Print the snapshot as JSON")
    rep.add_argument("--log-level", type=str, default="WARNING", choices=_LOG_LEVELS)

    return parser


def render_board(snapshot) -> str:
    """ASCII board: one cell per tile, ``R``/``B`` plus living unit count."""
    cells: dict[tuple[int, int], list] = {}
    for unit in snapshot.living():
        cells.setdefault((unit.position.x, unit.position.y), []).append(unit)

    lines = [f"Tick {snapshot.tick}"]
    for y in range(snapshot.height):
        row = []
        for x in range(snapshot.width):
            units = cells.get((x, y))
            row.append(f"{units[0].side.value[0]}{len(units)}" if units else " .")
        lines.append(" ".join(row))
    if snapshot.projectiles:
        lines.append(f"In flight: {len(snapshot.projectiles)}")
    if snapshot.result is not None:
        r = snapshot.result
        lines.append(f"Ended: {r.winner.value} ({r.reason.value}) at tick {r.tick}")
    return "\n".join(lines)


def _print_result(output) -> None:
    print(json.dumps(output.result.to_dict(), indent=2))


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from skirmish.api.app import create_app
    from skirmish.config import BattleConfig

    config = BattleConfig(num_workers=args.workers, log_level=args.log_level)
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_resolve(args: argparse.Namespace) -> None:
    from skirmish.config import BattleConfig
    from skirmish.engine.tick_scheduler import resolve_battle
    from skirmish.utils.replay import load_input, save_output

    config = BattleConfig()
    output = resolve_battle(load_input(args.input), config)
    if args.output is not None:
        save_output(output, args.output)
    _print_result(output)


def _run_demo(args: argparse.Namespace) -> None:
    from skirmish.config import BattleConfig
    from skirmish.core.setup import demo_board
    from skirmish.engine.tick_scheduler import resolve_battle
    from skirmish.utils.replay import save_output, state_at

    config = BattleConfig()
    output = resolve_battle(demo_board(config, seed=args.seed).build_input(), config)
    path = args.output or Path(config.replay_dir) / f"demo-seed{args.seed}.json"
    save_output(output, path)
    print(render_board(state_at(output, output.result.tick)))


def _run_replay(args: argparse.Namespace) -> None:
    from skirmish.utils.replay import load_output, state_at

    snapshot = state_at(load_output(args.output), args.tick)
    if args.json:
        print(json.dumps(snapshot.to_dict(), indent=2))
    else:
        print(render_board(snapshot))


def main(argv: list[str] | None = None) -> int:
    from skirmish.utils.logging import setup_logging

    parser = _build_parser()
    args = parser.parse_args(argv)

    # Default to serve mode if no subcommand given
    if args.command is None:
        args = parser.parse_args(["serve"])

    if args.command == "serve":
        _run_server(args)
        return 0

    setup_logging(args.log_level)
    handlers = {"resolve": _run_resolve, "demo": _run_demo, "replay": _run_replay}
    try:
        handlers[args.command](args)
    except (BattleError, ValidationError, OSError, json.JSONDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
