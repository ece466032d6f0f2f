"""BattleManager — owns resolved battles, the setup board, and replay playback.

Battles resolve on the ResolverPool; the API only ever reads immutable
BattleOutputs.  Playback runs on its own background thread, advancing a
ReplayCursor at the selected tick speed and publishing an immutable
BoardSnapshot behind a lock.
"""

from __future__ import annotations

import itertools
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import TYPE_CHECKING

from skirmish.core.errors import InvalidBattleInput, InvariantViolation
from skirmish.core.setup import SetupBoard
from skirmish.engine.worker_pool import ResolveFailure, ResolverPool
from skirmish.utils.event_log import digest_events
from skirmish.utils.replay import ReplayCursor

if TYPE_CHECKING:
    from skirmish.config import BattleConfig
    from skirmish.core.models import BattleInput, BattleOutput
    from skirmish.core.snapshot import BoardSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoredBattle:
    id: str
    output: BattleOutput
    digest: str


class BattleManager:
    """Manages battle storage and the playback lifecycle.

    Provides thread-safe access to:
      - resolved battles (lock-guarded, oldest evicted first)
      - latest playback snapshot (atomic reference swap)
      - playback commands (start / pause / resume / step / reset / stop)
    """

    def __init__(self, config: BattleConfig) -> None:
        self.config = config
        self._pool = ResolverPool(config)
        self.setup = SetupBoard(config)

        self._battles: OrderedDict[str, StoredBattle] = OrderedDict()
        self._battles_lock = threading.Lock()
        self._ids = itertools.count(1)

        # Playback
        self._tps: int = config.tick_speeds[0]
        self._cursor: ReplayCursor | None = None
        self._playing_id: str | None = None
        self._snapshot_lock = threading.Lock()
        self._latest_snapshot: BoardSnapshot | None = None

        self._thread: threading.Thread | None = None
        self._running = threading.Event()
        self._paused = threading.Event()
        self._step_requested = threading.Event()
        self._stop_requested = threading.Event()

    # -- battles -----------------------------------------------------------

    def resolve(self, battle_input: BattleInput) -> StoredBattle:
        """Resolve *battle_input* and store the output.

        Raises ``InvalidBattleInput`` or ``InvariantViolation`` on failure.
        """
        outcome = self._pool.resolve(battle_input)
        if isinstance(outcome, ResolveFailure):
            if outcome.is_input_error:
                raise InvalidBattleInput(outcome.message)
            raise InvariantViolation(outcome.message)
        return self.store(outcome)

    def store(self, output: BattleOutput) -> StoredBattle:
        battle = StoredBattle(
            id=str(next(self._ids)),
            output=output,
            digest=digest_events(output.events),
        )
        with self._battles_lock:
            self._battles[battle.id] = battle
            while len(self._battles) > self.config.max_stored_battles:
                evicted, _ = self._battles.popitem(last=False)
                logger.debug("Evicted battle %s", evicted)
        logger.info(
            "Stored battle %s: %s (%s) at tick %d",
            battle.id, output.result.winner.value, output.result.reason.value, output.result.tick,
        )
        return battle

    def get(self, battle_id: str) -> StoredBattle | None:
        with self._battles_lock:
            return self._battles.get(battle_id)

    def battles(self) -> list[StoredBattle]:
        with self._battles_lock:
            return list(self._battles.values())

    # -- playback properties -----------------------------------------------

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def paused(self) -> bool:
        return self._paused.is_set()

    @property
    def playing_id(self) -> str | None:
        return self._playing_id

    @property
    def tps(self) -> int:
        return self._tps

    @tps.setter
    def tps(self, value: int) -> None:
        if value not in self.config.tick_speeds:
            raise ValueError(f"Speed must be one of {list(self.config.tick_speeds)}")
        self._tps = value

    @property
    def cursor(self) -> ReplayCursor | None:
        return self._cursor

    def get_snapshot(self) -> BoardSnapshot | None:
        with self._snapshot_lock:
            return self._latest_snapshot

    # -- playback lifecycle ------------------------------------------------

    def load(self, battle_id: str) -> None:
        """Stop any playback and cue *battle_id* at tick 0, paused."""
        battle = self.get(battle_id)
        if battle is None:
            raise KeyError(battle_id)
        self.stop()
        self._cursor = ReplayCursor(battle.output)
        self._cursor.advance_to(0)
        self._playing_id = battle_id
        self._publish()
        logger.info("Playback loaded battle %s", battle_id)

    def start(self) -> None:
        if self._cursor is None or self._running.is_set():
            return
        self._stop_requested.clear()
        self._paused.clear()
        self._running.set()
        self._thread = threading.Thread(target=self._run_loop, name="playback", daemon=True)
        self._thread.start()
        logger.info("Playback started (tps=%d)", self._tps)

    def pause(self) -> None:
        self._paused.set()
        logger.info("Playback paused at tick %d", self._current_tick())

    def resume(self) -> None:
        self._paused.clear()
        logger.info("Playback resumed at tick %d", self._current_tick())

    def step(self) -> None:
        """Advance exactly one tick. Steps inline when the thread is not running."""
        if not self._running.is_set():
            if self._cursor is not None:
                self._cursor.step()
                self._publish()
            return
        if not self._paused.is_set():
            self.pause()
        self._step_requested.set()

    def reset(self) -> None:
        """Stop playback and rewind the cursor to tick 0."""
        self.stop()
        if self._cursor is not None:
            self._cursor.reset()
            self._cursor.advance_to(0)
            self._publish()
        logger.info("Playback reset.")

    def stop(self) -> None:
        self._stop_requested.set()
        self._paused.clear()
        if self._thread and self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=5.0)
        self._running.clear()
        self._thread = None

    def shutdown(self) -> None:
        self.stop()
        self._pool.shutdown()
        logger.info("BattleManager stopped.")

    # -- internals ---------------------------------------------------------

    def _run_loop(self) -> None:
        """Background thread main loop."""
        cursor = self._cursor
        assert cursor is not None

        while not self._stop_requested.is_set():
            if self._paused.is_set() and not self._step_requested.is_set():
                time.sleep(0.01)
                continue

            single_step = self._step_requested.is_set()
            if single_step:
                self._step_requested.clear()

            cursor.step()
            self._publish()

            if cursor.finished:
                logger.info("Playback reached final tick %d.", cursor.current_tick)
                break

            if not single_step:
                time.sleep(1.0 / self._tps)

        self._running.clear()

    def _publish(self) -> None:
        if self._cursor is None:
            return
        snap = self._cursor.snapshot()
        with self._snapshot_lock:
            self._latest_snapshot = snap

    def _current_tick(self) -> int:
        return self._cursor.current_tick if self._cursor else 0
