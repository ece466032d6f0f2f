"""FastAPI dependency injection — provides the BattleManager singleton."""

from __future__ import annotations

from skirmish.api.battle_manager import BattleManager

_battle_manager: BattleManager | None = None


def set_battle_manager(manager: BattleManager | None) -> None:
    global _battle_manager
    _battle_manager = manager


def get_battle_manager() -> BattleManager:
    if _battle_manager is None:
        raise RuntimeError("BattleManager not initialized — server not started correctly.")
    return _battle_manager
