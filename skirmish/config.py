"""Battle configuration with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass

from skirmish.core.enums import Side


@dataclass(frozen=True)
class BattleConfig:
    """Immutable configuration for resolution, setup, and serving."""

    # Board (defaults for the setup board and the demo battle)
    grid_width: int = 12
    grid_height: int = 8
    max_units_per_tile: int = 4
    max_size_per_tile: int = 10

    # Deployment zones: inclusive column ranges
    red_columns: tuple[int, int] = (0, 2)
    blue_columns: tuple[int, int] = (9, 11)

    # Timing
    time_limit: int = 2000
    stall_ticks: int = 200
    max_iterations: int = 5000            # Hard ceiling on loop iterations

    # Combat
    min_ranged_distance: int = 1
    melee_hit_chance: float = 0.5

    # Playback (ticks per second)
    tick_speeds: tuple[int, ...] = (10, 20, 40)

    # Workers
    num_workers: int = 2
    worker_timeout_seconds: float = 30.0

    # API storage
    max_stored_battles: int = 32

    # Logging / output
    log_level: str = "INFO"
    replay_dir: str = "replays"

    def deployment_columns(self, side: Side) -> tuple[int, int]:
        match side:
            case Side.RED:
                return self.red_columns
            case Side.BLUE:
                return self.blue_columns
        raise ValueError(f"Unknown side {side!r}")
