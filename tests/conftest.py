"""
Pytest fixtures for Citric Liquid tests.

Provides controllers, boards and players driven by scripted dice so every
roll is known in advance.
"""

import pytest
from pathlib import Path

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from citric_liquid.config import GameConfig
from citric_liquid.state.panels import Board
from citric_liquid.state.units import Player
from citric_liquid.systems.controller import GameController
from citric_liquid.tools.dice import ScriptedDice


def link_cycle(controller: GameController, panels: list) -> None:
    """Link panels in order, closing the loop back to the first one."""
    for src, dst in zip(panels, panels[1:] + panels[:1]):
        controller.set_next_panel(src, dst)


@pytest.fixture
def controller():
    """Controller with seeded dice and default rules."""
    return GameController(GameConfig(seed=42))


@pytest.fixture
def circuit(controller):
    """Home -> Neutral -> Drop -> Boss -> Neutral -> back to Home."""
    panels = [
        controller.create_home_panel(0),
        controller.create_neutral_panel(1),
        controller.create_drop_panel(2),
        controller.create_boss_panel(3),
        controller.create_neutral_panel(4),
    ]
    link_cycle(controller, panels)
    return panels


@pytest.fixture
def board():
    """Empty board."""
    return Board()


@pytest.fixture
def suguri():
    """Player outside any controller, always rolling 1."""
    return Player("Suguri", 4, 1, -1, 2, dice=ScriptedDice([1]))


@pytest.fixture
def kai():
    """Second player outside any controller, always rolling 1."""
    return Player("Kai", 5, 1, 0, 0, dice=ScriptedDice([1]))
