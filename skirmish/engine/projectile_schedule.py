"""Pending projectiles, bucketed by impact tick."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from skirmish.core.models import Projectile


class ProjectileSchedule:
    """Single-consumer schedule of in-flight projectiles.

    The action phase schedules; the impact phase pops everything due at the
    current tick exactly once, ordered by (source unit id, projectile id).
    """

    __slots__ = ("_by_tick", "_next_id")

    def __init__(self) -> None:
        self._by_tick: dict[int, list[Projectile]] = defaultdict(list)
        self._next_id = 0

    def allocate_id(self) -> int:
        pid = self._next_id
        self._next_id += 1
        return pid

    def schedule(self, projectile: Projectile) -> None:
        self._by_tick[projectile.impact_tick].append(projectile)

    def pop_due(self, tick: int) -> list[Projectile]:
        """Remove and return projectiles impacting at *tick*, in impact order."""
        due = self._by_tick.pop(tick, [])
        return sorted(due, key=lambda p: p.order_key())

    def in_flight(self) -> list[Projectile]:
        """All pending projectiles, in (impact tick, source id, id) order."""
        return sorted(
            (p for bucket in self._by_tick.values() for p in bucket),
            key=lambda p: (p.impact_tick, *p.order_key()),
        )
