"""POST /api/v1/playback/{battle_id}/{action} — real-time replay controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, HTTPException, Query

from skirmish.api.battle_manager import BattleManager
from skirmish.api.dependencies import get_battle_manager
from skirmish.api.schemas import BoardStateResponse, PlaybackResponse, PlaybackStatus

router = APIRouter(prefix="/playback")


class PlaybackAction(str, Enum):
    start = "start"
    pause = "pause"
    resume = "resume"
    step = "step"
    reset = "reset"


def _tick(manager: BattleManager) -> int:
    snapshot = manager.get_snapshot()
    return snapshot.tick if snapshot else 0


@router.get("", response_model=PlaybackStatus)
def playback_status(
    manager: BattleManager = Depends(get_battle_manager),
) -> PlaybackStatus:
    cursor = manager.cursor
    return PlaybackStatus(
        battle_id=manager.playing_id,
        tick=_tick(manager),
        final_tick=cursor.final_tick if cursor else 0,
        running=manager.running,
        paused=manager.paused,
        finished=cursor.finished if cursor else False,
        tps=manager.tps,
    )


@router.get("/snapshot", response_model=BoardStateResponse)
def playback_snapshot(
    manager: BattleManager = Depends(get_battle_manager),
) -> BoardStateResponse:
    snapshot = manager.get_snapshot()
    if snapshot is None:
        raise HTTPException(status_code=404, detail="No battle loaded for playback")
    return BoardStateResponse.model_validate(snapshot.to_dict())


@router.post("/speed", response_model=PlaybackResponse)
def set_speed(
    tps: int = Query(..., description="Ticks per second"),
    manager: BattleManager = Depends(get_battle_manager),
) -> PlaybackResponse:
    try:
        manager.tps = tps
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return PlaybackResponse(
        status="ok", message=f"Speed set to {tps} tps.",
        battle_id=manager.playing_id, tick=_tick(manager),
    )


@router.post("/{battle_id}/{action}", response_model=PlaybackResponse)
def control(
    battle_id: str,
    action: PlaybackAction,
    manager: BattleManager = Depends(get_battle_manager),
) -> PlaybackResponse:
    if manager.playing_id != battle_id:
        try:
            manager.load(battle_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Battle {battle_id} not found") from exc

    match action:
        case PlaybackAction.start:
            if manager.running:
                return PlaybackResponse(status="noop", message="Already playing.", battle_id=battle_id, tick=_tick(manager))
            manager.start()
            return PlaybackResponse(status="ok", message="Playback started.", battle_id=battle_id, tick=_tick(manager))

        case PlaybackAction.pause:
            if not manager.running:
                return PlaybackResponse(status="error", message="Not playing.", battle_id=battle_id, tick=_tick(manager))
            manager.pause()
            return PlaybackResponse(status="ok", message="Playback paused.", battle_id=battle_id, tick=_tick(manager))

        case PlaybackAction.resume:
            if not manager.running:
                return PlaybackResponse(status="error", message="Not playing.", battle_id=battle_id, tick=_tick(manager))
            manager.resume()
            return PlaybackResponse(status="ok", message="Playback resumed.", battle_id=battle_id, tick=_tick(manager))

        case PlaybackAction.step:
            manager.step()
            return PlaybackResponse(status="ok", message="Single tick advanced.", battle_id=battle_id, tick=_tick(manager))

        case PlaybackAction.reset:
            manager.reset()
            return PlaybackResponse(status="ok", message="Playback reset.", battle_id=battle_id, tick=_tick(manager))
