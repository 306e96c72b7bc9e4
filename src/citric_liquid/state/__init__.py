"""Game state: units, panels, norma goals and the events they report."""

from .schema import (
    BoardLayout,
    NormaGoal,
    NormaKind,
    PanelSpec,
)
from .event_bus import (
    EventBus,
    EventType,
    GameEvent,
)
from .panels import (
    NULL_PANEL,
    Board,
    Panel,
    PanelKind,
)
from .layouts import (
    load_layout,
    save_layout,
)
from .units import (
    VICTORY_REWARDS,
    BossUnit,
    Player,
    Stance,
    Unit,
    UnitKind,
    WildUnit,
)

__all__ = [
    # Schema
    "BoardLayout",
    "NormaGoal",
    "NormaKind",
    "PanelSpec",
    # Event Bus
    "EventBus",
    "EventType",
    "GameEvent",
    # Panels
    "NULL_PANEL",
    "Board",
    "Panel",
    "PanelKind",
    # Layout files
    "load_layout",
    "save_layout",
    # Units
    "VICTORY_REWARDS",
    "BossUnit",
    "Player",
    "Stance",
    "Unit",
    "UnitKind",
    "WildUnit",
]
