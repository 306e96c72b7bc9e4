"""
Citric Liquid: turn-based board game core.

Players walk a directed graph of panels, trigger panel effects, fight and
race to clear escalating norma goals. GameController is the entry point.
"""

from .config import GameConfig, load_config, save_config
from .systems.controller import GameController

__version__ = "0.1.0"

__all__ = [
    "GameConfig",
    "GameController",
    "load_config",
    "save_config",
]
