"""Append-only battle event log and its canonical digest."""

from __future__ import annotations

import json
import threading
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

import xxhash

if TYPE_CHECKING:
    from skirmish.core.events import BattleEvent


def canonical_json(events: Iterable[BattleEvent]) -> bytes:
    """Stable byte encoding of an event sequence (sorted keys, no spaces)."""
    payload: list[dict[str, Any]] = [e.to_dict() for e in events]
    return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")


def digest_events(events: Iterable[BattleEvent]) -> str:
    """Return the xxh64 hex digest of the canonical JSON of *events*."""
    return xxhash.xxh64(canonical_json(events)).hexdigest()


class EventLog:
    """Ordered, append-only event sequence.

    Events are never mutated or removed once appended.  The resolver is the
    only writer; readers (playback, API) take copies.  A simple lock keeps
    reads consistent when a log is shared across threads.
    """

    __slots__ = ("_events", "_lock")

    def __init__(self, events: Iterable[BattleEvent] = ()) -> None:
        self._events: list[BattleEvent] = list(events)
        self._lock = threading.Lock()

    def append(self, event: BattleEvent) -> None:
        with self._lock:
            self._events.append(event)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[BattleEvent]:
        return iter(self.freeze())

    def freeze(self) -> tuple[BattleEvent, ...]:
        """Immutable copy of every event emitted so far."""
        with self._lock:
            return tuple(self._events)
