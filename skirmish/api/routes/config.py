"""GET /api/v1/config — expose battle configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from skirmish.api.battle_manager import BattleManager
from skirmish.api.dependencies import get_battle_manager
from skirmish.api.schemas import BattleConfigResponse

router = APIRouter()


@router.get("/config", response_model=BattleConfigResponse)
def get_config(
    manager: BattleManager = Depends(get_battle_manager),
) -> BattleConfigResponse:
    cfg = manager.config
    return BattleConfigResponse(
        grid_width=cfg.grid_width,
        grid_height=cfg.grid_height,
        max_units_per_tile=cfg.max_units_per_tile,
        max_size_per_tile=cfg.max_size_per_tile,
        red_columns=cfg.red_columns,
        blue_columns=cfg.blue_columns,
        time_limit=cfg.time_limit,
        stall_ticks=cfg.stall_ticks,
        max_iterations=cfg.max_iterations,
        min_ranged_distance=cfg.min_ranged_distance,
        melee_hit_chance=cfg.melee_hit_chance,
        tick_speeds=list(cfg.tick_speeds),
        num_workers=cfg.num_workers,
    )
