"""Replay export/import and event-log reconstruction.

A replay file is the full ``BattleOutput`` as JSON, plus a format version
and the xxh64 digest of the event log.  ``ReplayCursor`` rebuilds the board
at any tick purely from events; it never runs resolution logic.
"""

from __future__ import annotations

import json
import logging
from collections import defaultdict
from dataclasses import replace
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from skirmish.core.errors import InvalidBattleInput
from skirmish.core.events import (
    BattleEnded,
    BattleInit,
    ProjectileFired,
    ProjectileImpacted,
    UnitMoved,
    UnitRemoved,
    UnitSpawned,
)
from skirmish.core.snapshot import BoardSnapshot, ProjectileView, UnitView
from skirmish.core.wire import BattleInputSchema, BattleOutputSchema
from skirmish.utils.event_log import digest_events

if TYPE_CHECKING:
    from skirmish.core.events import BattleEvent
    from skirmish.core.models import BattleInput, BattleOutput, BattleResult

logger = logging.getLogger(__name__)

REPLAY_VERSION = "1.0"


class ReplayRecorder:
    """Holds one resolved battle and flushes it to a JSON replay file."""

    __slots__ = ("_path", "_output")

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._output: BattleOutput | None = None

    @property
    def path(self) -> Path:
        return self._path

    def record(self, output: BattleOutput) -> None:
        self._output = output

    def to_document(self) -> dict[str, Any]:
        if self._output is None:
            raise RuntimeError("Nothing recorded")
        document = self._output.to_dict()
        document["version"] = REPLAY_VERSION
        document["digest"] = digest_events(self._output.events)
        return document

    def flush(self) -> Path:
        """Write the recorded output to disk."""
        document = self.to_document()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        logger.info("Replay saved to %s (%d events)", self._path, len(document["events"]))
        return self._path


def save_output(output: BattleOutput, path: str | Path) -> Path:
    recorder = ReplayRecorder(path)
    recorder.record(output)
    return recorder.flush()


def _read_json(path: str | Path) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def load_input(path: str | Path) -> BattleInput:
    """Load a battle input file. A full replay file yields its echoed input."""
    document = _read_json(path)
    if isinstance(document, dict) and "events" in document and "input" in document:
        document = document["input"]
    return BattleInputSchema.model_validate(document).to_core()


def load_output(path: str | Path) -> BattleOutput:
    """Load a replay file, checking its digest when one is present."""
    schema = BattleOutputSchema.model_validate(_read_json(path))
    output = schema.to_core()
    if schema.digest is not None:
        actual = digest_events(output.events)
        if actual != schema.digest:
            raise InvalidBattleInput(
                f"Replay digest mismatch: file says {schema.digest}, events hash to {actual}"
            )
    logger.debug("Loaded replay %s (%d events)", path, len(output.events))
    return output


class ReplayCursor:
    """Reconstructs board state tick by tick from a finished event log.

    Usage:
        cursor = ReplayCursor(output)
        cursor.advance_to(40)
        board = cursor.snapshot()
    """

    __slots__ = (
        "_output",
        "_events_by_tick",
        "_current_tick",
        "_input",
        "_units",
        "_projectiles",
        "_result",
    )

    def __init__(self, output: BattleOutput) -> None:
        self._output = output
        self._events_by_tick: dict[int, list[BattleEvent]] = defaultdict(list)
        for event in output.events:
            self._events_by_tick[event.tick].append(event)
        self._current_tick = -1
        self._input: BattleInput = output.input
        self._units: dict[int, UnitView] = {}
        self._projectiles: list[ProjectileView] = []
        self._result: BattleResult | None = None

    @property
    def current_tick(self) -> int:
        return self._current_tick

    @property
    def final_tick(self) -> int:
        return self._output.result.tick

    @property
    def finished(self) -> bool:
        return self._current_tick >= self.final_tick

    def reset(self) -> None:
        self._current_tick = -1
        self._input = self._output.input
        self._units = {}
        self._projectiles = []
        self._result = None

    def advance_to(self, tick: int) -> None:
        """Apply every event up to and including *tick* (clamped to the final tick)."""
        if tick < self._current_tick:
            self.reset()
        target = min(tick, self.final_tick)
        for t in range(self._current_tick + 1, target + 1):
            for event in self._events_by_tick.get(t, ()):
                self._apply(event)
            self._current_tick = t

    def step(self) -> int:
        """Advance one tick; returns the new current tick."""
        self.advance_to(self._current_tick + 1)
        return self._current_tick

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            tick=max(self._current_tick, 0),
            width=self._input.width,
            height=self._input.height,
            units=MappingProxyType(dict(sorted(self._units.items()))),
            projectiles=tuple(self._projectiles),
            result=self._result,
        )

    def _apply(self, event: BattleEvent) -> None:
        match event.payload:
            case BattleInit(input=battle_input):
                self._input = battle_input
            case UnitSpawned(unit=spec):
                self._units[spec.id] = UnitView(
                    spec.id, spec.side, spec.type, spec.size, spec.position, True,
                )
            case UnitMoved(unit_id=uid, to_pos=to_pos):
                view = self._units.get(uid)
                if view is not None:
                    self._units[uid] = replace(view, position=to_pos)
            case ProjectileFired() as fired:
                self._projectiles.append(ProjectileView(
                    kind=fired.projectile,
                    source_id=fired.source_id,
                    source_side=fired.source_side,
                    origin=fired.from_pos,
                    target=fired.target,
                    fire_tick=fired.fire_tick,
                    impact_tick=fired.impact_tick,
                ))
            case ProjectileImpacted() as hit:
                for i, p in enumerate(self._projectiles):
                    if (
                        p.source_id == hit.source_id
                        and p.impact_tick == hit.impact_tick
                        and p.kind == hit.projectile
                        and p.target == hit.target
                    ):
                        del self._projectiles[i]
                        break
            case UnitRemoved(unit_id=uid):
                view = self._units.get(uid)
                if view is not None:
                    self._units[uid] = replace(view, alive=False)
            case BattleEnded(result=result):
                self._result = result
            case _:
                # MeleeAttackResolved carries no board change
                pass


def state_at(output: BattleOutput, tick: int) -> BoardSnapshot:
    """Board state after every event of *tick* has been applied."""
    cursor = ReplayCursor(output)
    cursor.advance_to(tick)
    return cursor.snapshot()
