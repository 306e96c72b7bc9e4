"""
Game rules as pure functions.

Separates logic from data models for easier testing.
"""

from .combat import (
    AttackResult,
    BattleReport,
    battle,
    exchange,
    resolve_attack,
)
from .norma import (
    make_goal,
    norma_check,
    norma_threshold,
    stars_goal,
    wins_goal,
)

__all__ = [
    "AttackResult",
    "BattleReport",
    "battle",
    "exchange",
    "resolve_attack",
    "make_goal",
    "norma_check",
    "norma_threshold",
    "stars_goal",
    "wins_goal",
]
