"""Error hierarchy for battle resolution.

Two classes of failure exist.  Input errors are the caller's fault and are
raised before any simulation step.  Invariant violations mean the resolver
itself broke a rule it is supposed to enforce; they abort the whole run.
"""

from __future__ import annotations


class BattleError(Exception):
    """Base class for every error raised by the resolver."""


class InvalidBattleInput(BattleError, ValueError):
    """The battle input failed validation; no event log was produced."""


class PlacementRejected(InvalidBattleInput):
    """A setup placement command was refused."""


class InvariantViolation(BattleError, RuntimeError):
    """A tile or loop invariant broke during resolution. Fatal."""
