"""
Event bus for player state changes.

Every Player owns its own bus. The controller subscribes to the players it
creates and reacts to what they report (reaching home, landing on an
encounter, clearing a norma) by driving the turn phase.

Usage:
    from .event_bus import EventBus, EventType

    # Subscribe (the controller does this when it creates a player)
    player.events.on(EventType.REACHED_HOME, my_handler)

    # Emit (inside Player when state changes)
    self.events.emit(EventType.STARS_CHANGED, source=self, old=3, new=8)

    # Handler receives event
    def my_handler(event: GameEvent):
        print(f"{event.source.name} is home")
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable


class EventType(Enum):
    """Changes a player can report."""

    # Stat events
    HP_CHANGED = "unit.hp_changed"
    STARS_CHANGED = "unit.stars_changed"
    WINS_CHANGED = "unit.wins_changed"
    KNOCKED_OUT = "unit.knocked_out"
    RECOVERED = "unit.recovered"

    # Norma events
    NORMA_LEVEL_CHANGED = "norma.level_changed"
    NORMA_GOAL_CHANGED = "norma.goal_changed"

    # Board events
    PANEL_CHANGED = "board.panel_changed"
    STUMBLED_UPON_PLAYER = "board.stumbled_upon_player"
    REACHED_HOME = "board.reached_home"
    REACHED_FORK = "board.reached_fork"
    LANDED_ON_ENCOUNTER = "board.landed_on_encounter"
    LANDED_ON_BOSS_ENCOUNTER = "board.landed_on_boss_encounter"


@dataclass
class GameEvent:
    """
    Event payload for the event bus.

    Attributes:
        type: The event type (from EventType enum)
        source: The unit that changed
        old: Value before the change (None for pure signals)
        new: Value after the change (None for pure signals)
        data: Extra event-specific payload
        timestamp: When the event was emitted
    """

    type: EventType
    source: Any = None
    old: Any = None
    new: Any = None
    data: dict = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        name = getattr(self.source, "name", self.source)
        return f"[{self.type.value}] {name}: {self.old!r} -> {self.new!r}"


# Type alias for event handlers
EventHandler = Callable[[GameEvent], None]


class EventBus:
    """
    Synchronous event bus owned by a single player.

    Listeners are called immediately on emit(), in subscription order.
    A listener that raises aborts the emitting operation: the error
    reaches whoever asked for the state change.
    """

    def __init__(self, history_limit: int = 100):
        self._listeners: dict[EventType, list[EventHandler]] = {}
        self._history: list[GameEvent] = []
        self._history_limit = history_limit

    def on(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The type of event to listen for
            handler: Callback function that receives GameEvent
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        if handler not in self._listeners[event_type]:
            self._listeners[event_type].append(handler)

    def off(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Unsubscribe from an event type.

        Args:
            event_type: The event type to unsubscribe from
            handler: The handler to remove
        """
        if event_type in self._listeners and handler in self._listeners[event_type]:
            self._listeners[event_type].remove(handler)

    def emit(
        self,
        event_type: EventType,
        source: Any = None,
        old: Any = None,
        new: Any = None,
        **data,
    ) -> GameEvent:
        """
        Emit an event to all subscribers.

        Args:
            event_type: The type of event
            source: The unit the event is about
            old: Previous value
            new: Current value
            **data: Event-specific data

        Returns:
            The emitted GameEvent (for chaining/testing)
        """
        event = GameEvent(
            type=event_type,
            source=source,
            old=old,
            new=new,
            data=data,
        )

        # Store in history for debugging
        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit :]

        # Copy so a handler may unsubscribe while being notified
        for handler in list(self._listeners.get(event_type, [])):
            handler(event)

        return event

    def clear(self) -> None:
        """Clear all listeners. Useful for testing."""
        self._listeners.clear()

    def get_history(self, event_type: EventType | None = None) -> list[GameEvent]:
        """
        Get recent event history.

        Args:
            event_type: Filter by type, or None for all events

        Returns:
            List of recent events
        """
        if event_type is None:
            return list(self._history)
        return [e for e in self._history if e.type == event_type]

    def listener_count(self, event_type: EventType) -> int:
        """Get number of listeners for an event type."""
        return len(self._listeners.get(event_type, []))
