"""Battle input validation — runs before any simulation step."""

from __future__ import annotations

from typing import TYPE_CHECKING

from skirmish.core.errors import InvalidBattleInput
from skirmish.core.unit_types import expected_size

if TYPE_CHECKING:
    from skirmish.config import BattleConfig
    from skirmish.core.models import BattleInput, Position


def _tile_label(pos: Position) -> str:
    return f"{pos.x},{pos.y}"


def validate_input(battle_input: BattleInput, config: BattleConfig) -> None:
    """Raise ``InvalidBattleInput`` describing the first problem found.

    Checks board shape, limits and time limit, then every unit in input order:
    duplicate id, size/type mismatch, out-of-grid, out-of-zone, and finally the
    accumulated side/count/size state of the unit's tile.
    """
    if battle_input.width <= 0 or battle_input.height <= 0:
        raise InvalidBattleInput(
            f"Grid must be at least 1x1, got {battle_input.width}x{battle_input.height}."
        )
    if battle_input.max_units_per_tile < 1 or battle_input.max_size_per_tile < 1:
        raise InvalidBattleInput("Tile limits must be positive.")
    if battle_input.time_limit < 0:
        raise InvalidBattleInput(f"Time limit must be non-negative, got {battle_input.time_limit}.")

    ids: set[int] = set()
    # tile -> (side, count, total size)
    tiles: dict[tuple[int, int], tuple[object, int, int]] = {}

    for unit in battle_input.units:
        if unit.id <= 0:
            raise InvalidBattleInput(f"Unit id {unit.id} must be a positive integer.")
        if unit.id in ids:
            raise InvalidBattleInput(f"Duplicate unit id {unit.id}.")
        ids.add(unit.id)

        size = expected_size(unit.type)
        if unit.size != size:
            raise InvalidBattleInput(
                f"Unit {unit.id} has size {unit.size} but expected {size}."
            )

        pos = unit.position
        if not (0 <= pos.x < battle_input.width and 0 <= pos.y < battle_input.height):
            raise InvalidBattleInput(f"Unit {unit.id} placed outside the grid.")

        start, end = config.deployment_columns(unit.side)
        if pos.x < start or pos.x > end:
            raise InvalidBattleInput(
                f"Unit {unit.id} placed outside {unit.side.value} deployment zone."
            )

        key = (pos.x, pos.y)
        current = tiles.get(key)
        if current is None:
            tiles[key] = (unit.side, 1, unit.size)
            continue
        side, count, total = current
        if side != unit.side:
            raise InvalidBattleInput(f"Tile {_tile_label(pos)} mixes sides.")
        count += 1
        total += unit.size
        if count > battle_input.max_units_per_tile:
            raise InvalidBattleInput(f"Tile {_tile_label(pos)} exceeds max units.")
        if total > battle_input.max_size_per_tile:
            raise InvalidBattleInput(f"Tile {_tile_label(pos)} exceeds max size.")
        tiles[key] = (side, count, total)
