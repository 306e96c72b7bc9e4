"""
Norma progression rules as pure functions.

A norma goal is built from the threshold tables of a GameConfig. Clearing
the goal raises the player's norma level by one and installs the goal for
the next level.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..config import GameConfig
from ..state.schema import NormaGoal, NormaKind

if TYPE_CHECKING:
    from ..state.units import Player

logger = logging.getLogger(__name__)


def norma_threshold(kind: NormaKind, level: int, config: GameConfig | None = None) -> int:
    """
    Stars or wins needed to clear ``level``.

    Levels above the table reuse the highest defined entry.
    """
    config = config or GameConfig()
    table = config.stars_norma if kind == NormaKind.STARS else config.wins_norma
    if level in table:
        return table[level]
    defined = [lvl for lvl in table if lvl <= level]
    key = max(defined) if defined else min(table)
    return table[key]


def make_goal(kind: NormaKind, level: int, config: GameConfig | None = None) -> NormaGoal:
    """Build the goal of the given kind for a norma level."""
    return NormaGoal(kind=kind, level=level, threshold=norma_threshold(kind, level, config))


def stars_goal(level: int, config: GameConfig | None = None) -> NormaGoal:
    return make_goal(NormaKind.STARS, level, config)


def wins_goal(level: int, config: GameConfig | None = None) -> NormaGoal:
    return make_goal(NormaKind.WINS, level, config)


def norma_check(player: "Player", config: GameConfig | None = None) -> bool:
    """
    Evaluate the player's goal and advance one level when it is met.

    Mutates the player in place. A player already at the final norma level
    is never advanced.

    Args:
        player: The player to check
        config: Threshold tables and final level (defaults if omitted)

    Returns:
        True if the player cleared a norma level
    """
    config = config or GameConfig()
    if player.norma_level >= config.final_norma_level:
        return False
    if not player.norma_check():
        return False

    player.norma_clear()
    player.set_norma_goal(stars_goal(player.norma_level, config))
    logger.info(f"{player.name} cleared norma, now at level {player.norma_level}")
    return True
