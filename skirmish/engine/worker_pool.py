"""Off-thread battle resolution."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING

from skirmish.core.errors import InvalidBattleInput, InvariantViolation
from skirmish.engine.tick_scheduler import resolve_battle

if TYPE_CHECKING:
    from skirmish.config import BattleConfig
    from skirmish.core.models import BattleInput, BattleOutput

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResolveFailure:
    """Structured failure returned in place of a BattleOutput."""

    kind: str        # "invalid_input" | "invariant_violation"
    message: str

    @property
    def is_input_error(self) -> bool:
        return self.kind == "invalid_input"


class ResolverPool:
    """Manages a ThreadPoolExecutor that resolves whole battles.

    Each submission receives one immutable BattleInput and yields one
    immutable BattleOutput or a ResolveFailure.  Battles never share state,
    so any number may be in flight.  Cancellation is coarse: cancel the
    future or shut the pool down.
    """

    __slots__ = ("_config", "_executor")

    def __init__(self, config: BattleConfig) -> None:
        self._config = config
        self._executor = ThreadPoolExecutor(
            max_workers=max(config.num_workers, 1),
            thread_name_prefix="resolver",
        )

    def submit(self, battle_input: BattleInput) -> Future[BattleOutput | ResolveFailure]:
        """Queue *battle_input* for resolution and return its future."""
        return self._executor.submit(self._resolve, battle_input)

    def resolve(
        self,
        battle_input: BattleInput,
        timeout: float | None = None,
    ) -> BattleOutput | ResolveFailure:
        """Submit and block until the battle resolves or *timeout* expires.

        Uses inline execution when num_workers <= 1 to avoid threading overhead.
        """
        if self._config.num_workers <= 1:
            return self._resolve(battle_input)
        wait = timeout if timeout is not None else self._config.worker_timeout_seconds
        return self.submit(battle_input).result(timeout=wait)

    def _resolve(self, battle_input: BattleInput) -> BattleOutput | ResolveFailure:
        """Run one battle (executed in a worker thread)."""
        try:
            return resolve_battle(battle_input, self._config)
        except InvalidBattleInput as exc:
            logger.info("Rejected battle input: %s", exc)
            return ResolveFailure(kind="invalid_input", message=str(exc))
        except InvariantViolation as exc:
            logger.exception("Battle resolution aborted")
            return ResolveFailure(kind="invariant_violation", message=str(exc))

    def shutdown(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)
