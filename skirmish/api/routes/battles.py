"""/api/v1/battles — resolve battles and read their logs and board state."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from skirmish.api.battle_manager import BattleManager, StoredBattle
from skirmish.api.dependencies import get_battle_manager
from skirmish.api.schemas import BattleDetailResponse, BattleSummary, BoardStateResponse, EventsResponse
from skirmish.core.errors import InvalidBattleInput, InvariantViolation
from skirmish.core.wire import BattleInputSchema, BattleResultSchema, EventSchema
from skirmish.utils.replay import REPLAY_VERSION, state_at

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/battles")


def battle_summary(battle: StoredBattle) -> BattleSummary:
    output = battle.output
    return BattleSummary(
        id=battle.id,
        seed=output.input.seed,
        unit_count=len(output.input.units),
        event_count=len(output.events),
        digest=battle.digest,
        result=BattleResultSchema.model_validate(output.result.to_dict()),
    )


def _get_or_404(manager: BattleManager, battle_id: str) -> StoredBattle:
    battle = manager.get(battle_id)
    if battle is None:
        raise HTTPException(status_code=404, detail=f"Battle {battle_id} not found")
    return battle


@router.post("", response_model=BattleSummary, status_code=201)
def create_battle(
    body: BattleInputSchema,
    manager: BattleManager = Depends(get_battle_manager),
) -> BattleSummary:
    try:
        battle = manager.resolve(body.to_core())
    except InvalidBattleInput as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except InvariantViolation as exc:
        logger.exception("Battle resolution aborted")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return battle_summary(battle)


@router.get("", response_model=list[BattleSummary])
def list_battles(
    manager: BattleManager = Depends(get_battle_manager),
) -> list[BattleSummary]:
    return [battle_summary(b) for b in manager.battles()]


@router.get("/{battle_id}", response_model=BattleDetailResponse)
def get_battle(
    battle_id: str,
    manager: BattleManager = Depends(get_battle_manager),
) -> BattleDetailResponse:
    battle = _get_or_404(manager, battle_id)
    document = battle.output.to_dict()
    document.update(id=battle.id, version=REPLAY_VERSION, digest=battle.digest)
    return BattleDetailResponse.model_validate(document)


@router.get("/{battle_id}/events", response_model=EventsResponse)
def get_events(
    battle_id: str,
    since_tick: int = Query(0, ge=0, description="Only events with tick >= since_tick"),
    limit: int = Query(500, ge=1, le=10000),
    manager: BattleManager = Depends(get_battle_manager),
) -> EventsResponse:
    battle = _get_or_404(manager, battle_id)
    matching = [e for e in battle.output.events if e.tick >= since_tick]
    return EventsResponse(
        battle_id=battle.id,
        since_tick=since_tick,
        total=len(matching),
        events=[EventSchema.from_core(e) for e in matching[:limit]],
    )


@router.get("/{battle_id}/state", response_model=BoardStateResponse)
def get_state(
    battle_id: str,
    tick: int = Query(0, ge=0, description="Reconstruct the board after this tick"),
    manager: BattleManager = Depends(get_battle_manager),
) -> BoardStateResponse:
    battle = _get_or_404(manager, battle_id)
    snapshot = state_at(battle.output, tick)
    return BoardStateResponse.model_validate(snapshot.to_dict())
