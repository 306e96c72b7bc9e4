"""Tools shared by the game rules."""

from .dice import Dice, ScriptedDice

__all__ = [
    "Dice",
    "ScriptedDice",
]
