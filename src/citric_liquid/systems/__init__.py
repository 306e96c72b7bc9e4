"""
Game systems for Citric Liquid.

The movement engine and the turn phase machine are plain building blocks;
GameController ties them to the board, the units and the rules.
"""

from .turns import (
    TurnPhase,
    PhaseKind,
    VALID_TRANSITIONS,
    TurnError,
    InvalidPhaseError,
    InvalidChoiceError,
    GameOverError,
)
from .movement import Halt, Walk, place, walk, continue_through
from .controller import GameController

__all__ = [
    # Turn phase machine
    "TurnPhase",
    "PhaseKind",
    "VALID_TRANSITIONS",
    "TurnError",
    "InvalidPhaseError",
    "InvalidChoiceError",
    "GameOverError",
    # Movement
    "Halt",
    "Walk",
    "place",
    "walk",
    "continue_through",
    # Orchestration
    "GameController",
]
