"""Simulation module for bot vs bot games."""

from .player import BotPlayer
from .personas import PERSONAS
from .runner import (
    DEMO_LAYOUT,
    SimulationTranscript,
    TurnRecord,
    create_simulation_game,
    play_turn,
    run_simulation,
)

__all__ = [
    "BotPlayer",
    "PERSONAS",
    "DEMO_LAYOUT",
    "SimulationTranscript",
    "TurnRecord",
    "create_simulation_game",
    "play_turn",
    "run_simulation",
]
