"""TickScheduler — the authoritative per-tick battle loop.

Phase cycle, for tick = 0, 1, ..., time_limit:
  1. Impact — land every projectile due this tick, by (source id, projectile id)
  2. Action — every alive, ready unit acts in ascending id order
  3. Termination — elimination, then time limit, then stall
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from skirmish.ai.policy import UnitPolicy
from skirmish.config import BattleConfig
from skirmish.core.battle_state import BattleState
from skirmish.core.enums import EndReason, Side, Winner
from skirmish.core.errors import InvariantViolation
from skirmish.core.events import BattleEnded, BattleInit, UnitSpawned
from skirmish.core.grid import Grid
from skirmish.core.models import BattleOutput, BattleResult, Unit
from skirmish.core.validation import validate_input
from skirmish.engine.combat_resolver import CombatResolver
from skirmish.engine.projectile_schedule import ProjectileSchedule
from skirmish.systems.rng import DeterministicRNG
from skirmish.systems.spatial_hash import TileIndex
from skirmish.utils.event_log import EventLog

if TYPE_CHECKING:
    from skirmish.core.models import BattleInput

logger = logging.getLogger(__name__)


def create_battle_state(battle_input: BattleInput, config: BattleConfig) -> BattleState:
    """Build a fresh BattleState for *battle_input*. Emits nothing."""
    grid = Grid(battle_input.width, battle_input.height)
    units: dict[int, Unit] = {}
    tiles = TileIndex(
        grid,
        battle_input.max_units_per_tile,
        battle_input.max_size_per_tile,
        units,
    )
    state = BattleState(
        battle_input=battle_input,
        config=config,
        grid=grid,
        units=units,
        tiles=tiles,
        projectiles=ProjectileSchedule(),
        rng=DeterministicRNG(battle_input.seed),
        log=EventLog(),
    )
    for spec in sorted(battle_input.units, key=lambda s: s.id):
        state.add_unit(Unit.from_spec(spec))
    state.unit_order = tuple(sorted(units))
    return state


class TickScheduler:
    """The heartbeat of a battle.

    Single-threaded mutation of one BattleState.  ``run`` drives ticks until
    a terminal condition holds and returns the result; ``tick_once`` exposes
    a single step for tests and tooling.
    """

    __slots__ = ("_config", "_state", "_policy", "_resolver", "_result", "_iterations", "_ceiling")

    def __init__(self, state: BattleState, config: BattleConfig | None = None) -> None:
        self._config = config or state.config
        self._state = state
        self._policy = UnitPolicy(state)
        self._resolver = CombatResolver()
        self._result: BattleResult | None = None
        self._iterations = 0
        # One iteration per tick, 0..time_limit inclusive
        self._ceiling = max(self._config.max_iterations, state.input.time_limit + 1)

    @property
    def state(self) -> BattleState:
        return self._state

    @property
    def result(self) -> BattleResult | None:
        return self._result

    @property
    def finished(self) -> bool:
        return self._result is not None

    def start(self) -> None:
        """Emit BattleInit and one UnitSpawned per unit, ascending id."""
        state = self._state
        state.tick = 0
        state.emit(0, BattleInit(input=state.input))
        specs = {s.id: s for s in state.input.units}
        for uid in state.unit_order:
            state.emit(uid, UnitSpawned(unit=specs[uid]))
        state.tiles.verify_all()
        logger.info(
            "=== Battle started (seed=%d, units=%d, time_limit=%d) ===",
            state.input.seed, len(state.units), state.input.time_limit,
        )

    def tick_once(self) -> BattleResult | None:
        """Run one full tick. Returns the result if the battle ended on it."""
        if self._result is not None:
            return self._result

        self._iterations += 1
        if self._iterations > self._ceiling:
            raise InvariantViolation(
                f"Iteration ceiling of {self._ceiling} exceeded at tick {self._state.tick}"
            )

        state = self._state
        activity = self._phase_impacts()
        activity = self._phase_actions() or activity
        if activity:
            state.mark_activity()

        result = self._phase_termination()
        if result is None:
            state.tick += 1
        return result

    def run(self) -> BattleResult:
        """Drive ticks from 0 until termination."""
        if not self._state.log:
            self.start()
        while self._result is None:
            self.tick_once()
        return self._result

    # -- phases ------------------------------------------------------------

    def _phase_impacts(self) -> bool:
        due = self._state.projectiles.pop_due(self._state.tick)
        return self._resolver.resolve_impacts(due, self._state)

    def _phase_actions(self) -> bool:
        state = self._state
        activity = False
        for uid in state.unit_order:
            unit = state.units[uid]
            if not unit.is_ready(state.tick):
                continue
            proposal = self._policy.decide(unit)
            if self._resolver.apply(proposal, state):
                activity = True
        return activity

    def _phase_termination(self) -> BattleResult | None:
        state = self._state
        tick = state.tick
        red, blue = state.survivors()

        if red == 0 or blue == 0:
            if red == 0 and blue == 0:
                winner = Winner.DRAW
            elif red == 0:
                winner = Winner.BLUE
            else:
                winner = Winner.RED
            return self._finish(winner, EndReason.ELIMINATED, red, blue)

        if tick >= state.input.time_limit:
            return self._finish(Winner.DRAW, EndReason.TIME_LIMIT, red, blue)

        if tick - state.last_activity_tick >= self._config.stall_ticks:
            return self._finish(Winner.DRAW, EndReason.STALLED, red, blue)

        return None

    def _finish(self, winner: Winner, reason: EndReason, red: int, blue: int) -> BattleResult:
        state = self._state
        result = BattleResult(
            winner=winner,
            reason=reason,
            tick=state.tick,
            survivors_red=red,
            survivors_blue=blue,
        )
        state.emit(0, BattleEnded(result=result))
        self._result = result
        logger.info(
            "=== Battle ended at tick %d: %s (%s), survivors %s=%d %s=%d, rng draws=%d ===",
            result.tick, winner.value, reason.value,
            Side.RED.value, red, Side.BLUE.value, blue, state.rng.draws,
        )
        return result


def resolve_battle(battle_input: BattleInput, config: BattleConfig | None = None) -> BattleOutput:
    """Validate and resolve *battle_input* in full.

    Raises ``InvalidBattleInput`` before any event is produced, or
    ``InvariantViolation`` if resolution breaks a rule; never returns a
    partial log.
    """
    config = config or BattleConfig()
    validate_input(battle_input, config)
    state = create_battle_state(battle_input, config)
    scheduler = TickScheduler(state, config)
    result = scheduler.run()
    return BattleOutput(input=battle_input, events=state.log.freeze(), result=result)
