"""/api/v1/setup — the pre-battle placement board and the agent command relay."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from skirmish.api.battle_manager import BattleManager
from skirmish.api.dependencies import get_battle_manager
from skirmish.api.routes.battles import battle_summary
from skirmish.api.schemas import BattleSummary, PlacementRequest, PlacementResult, RelayCommand, SetupOptions
from skirmish.core.errors import InvalidBattleInput, InvariantViolation, PlacementRejected
from skirmish.core.setup import parse_side, parse_unit_type
from skirmish.core.wire import BattleInputSchema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/setup")


@router.get("", response_model=BattleInputSchema)
def get_setup(
    manager: BattleManager = Depends(get_battle_manager),
) -> BattleInputSchema:
    return BattleInputSchema.from_core(manager.setup.build_input())


@router.put("", response_model=BattleInputSchema)
def load_setup(
    body: BattleInputSchema,
    manager: BattleManager = Depends(get_battle_manager),
) -> BattleInputSchema:
    """Replace the board with a complete battle input (e.g. an imported file)."""
    manager.setup.load(body.to_core())
    return BattleInputSchema.from_core(manager.setup.build_input())


@router.patch("", response_model=BattleInputSchema)
def update_options(
    body: SetupOptions,
    manager: BattleManager = Depends(get_battle_manager),
) -> BattleInputSchema:
    if body.seed is not None:
        manager.setup.seed = body.seed
    if body.time_limit is not None:
        if body.time_limit < 0:
            raise HTTPException(status_code=422, detail="Time limit must be non-negative.")
        manager.setup.time_limit = body.time_limit
    return BattleInputSchema.from_core(manager.setup.build_input())


@router.delete("", response_model=BattleInputSchema)
def clear_setup(
    manager: BattleManager = Depends(get_battle_manager),
) -> BattleInputSchema:
    manager.setup.clear()
    return BattleInputSchema.from_core(manager.setup.build_input())


@router.post("/units", response_model=PlacementResult, status_code=201)
def place_unit(
    body: PlacementRequest,
    manager: BattleManager = Depends(get_battle_manager),
) -> PlacementResult:
    try:
        spec = manager.setup.place(parse_side(body.side), parse_unit_type(body.type), body.x, body.y)
    except PlacementRejected as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return PlacementResult(ok=True, unit_id=spec.id)


@router.delete("/units", response_model=PlacementResult)
def remove_unit(
    x: int = Query(...),
    y: int = Query(...),
    manager: BattleManager = Depends(get_battle_manager),
) -> PlacementResult:
    removed = manager.setup.remove_at(x, y)
    if removed is None:
        return PlacementResult(ok=False, reason="No unit here to remove.")
    return PlacementResult(ok=True, unit_id=removed.id)


@router.post("/command", response_model=PlacementResult)
def relay_command(
    body: RelayCommand,
    manager: BattleManager = Depends(get_battle_manager),
) -> PlacementResult:
    """Entry point for out-of-process agents: ``{"action": "placeUnit", "payload": {...}}``."""
    try:
        spec = manager.setup.parse_command(body.action, body.payload)
    except PlacementRejected as exc:
        logger.info("Relay command rejected: %s", exc)
        return PlacementResult(ok=False, reason=str(exc))
    return PlacementResult(ok=True, unit_id=spec.id)


@router.post("/resolve", response_model=BattleSummary, status_code=201)
def resolve_setup(
    manager: BattleManager = Depends(get_battle_manager),
) -> BattleSummary:
    """Resolve the current board. The board itself is left untouched."""
    try:
        battle = manager.resolve(manager.setup.build_input())
    except InvalidBattleInput as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except InvariantViolation as exc:
        logger.exception("Battle resolution aborted")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return battle_summary(battle)
