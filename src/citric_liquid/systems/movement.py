"""
Movement resolver: placement and path resolution on the panel graph.

walk() advances a player one edge at a time until the step budget is spent
or the board asks for a decision:

    dead end  -> stop, the rest of the budget is lost
    one edge  -> move on
    fork      -> suspend with the remaining steps, caller picks a branch
    home      -> suspend with the remaining steps on entering home,
                 caller decides whether to stay

A suspended walk is resumed with continue_through(), which takes the
caller's branch choice. The returned Walk carries everything needed to
resume; the engine keeps no state of its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable

from ..state.event_bus import EventType
from .turns import InvalidChoiceError

if TYPE_CHECKING:
    from ..state.panels import Panel
    from ..state.units import Player

logger = logging.getLogger(__name__)


class Halt(str, Enum):
    """Why a walk stopped."""
    EXHAUSTED = "exhausted"      # Step budget fully spent
    DEAD_END = "dead_end"        # No outgoing edge, budget discarded
    FORK = "fork"                # Several outgoing edges, needs a choice
    HOME = "home"                # Entered own home with steps left
    INTERRUPTED = "interrupted"  # stop_on predicate fired with steps left


# Extra suspension rule supplied by the caller: (player, entered panel) -> stop?
StopRule = Callable[["Player", "Panel"], bool]


@dataclass
class Walk:
    """Outcome of a walk. ``remaining`` is 0 unless the walk is suspended."""
    remaining: int
    halt: Halt
    path: list["Panel"] = field(default_factory=list)

    @property
    def suspended(self) -> bool:
        return self.remaining > 0


def place(player: "Player", panel: "Panel") -> None:
    """
    Put a player on a panel.

    This is the only place that changes a player's position and the
    panels' occupant lists, so a player is always listed on exactly one
    panel. Entry events are independent and can fire together.
    """
    previous = player.current_panel
    previous._release(player)
    player._current_panel = panel
    panel._admit(player)

    if len(panel.players) > 1:
        player.events.emit(EventType.STUMBLED_UPON_PLAYER, source=player, old=previous, new=panel)
    if not panel.is_null and panel == player.home_panel:
        player.events.emit(EventType.REACHED_HOME, source=player, old=previous, new=panel)
    if panel.is_fork:
        player.events.emit(EventType.REACHED_FORK, source=player, old=previous, new=panel)
    player.events.emit(EventType.PANEL_CHANGED, source=player, old=previous, new=panel)


def _enter(
    player: "Player",
    panel: "Panel",
    remaining: int,
    stop_on: StopRule | None,
) -> Halt | None:
    place(player, panel)
    if remaining == 0:
        return None
    if not panel.is_null and panel == player.home_panel:
        return Halt.HOME
    if stop_on is not None and stop_on(player, panel):
        return Halt.INTERRUPTED
    return None


def _resume(
    player: "Player",
    steps: int,
    path: list["Panel"],
    stop_on: StopRule | None,
) -> Walk:
    remaining = steps
    while remaining > 0:
        edges = player.current_panel.next_panels
        if not edges:
            logger.debug(f"{player.name} hit a dead end with {remaining} steps unused")
            return Walk(0, Halt.DEAD_END, path)
        if len(edges) > 1:
            return Walk(remaining, Halt.FORK, path)

        remaining -= 1
        path.append(edges[0])
        halt = _enter(player, edges[0], remaining, stop_on)
        if halt is not None:
            return Walk(remaining, halt, path)
    return Walk(0, Halt.EXHAUSTED, path)


def walk(player: "Player", steps: int, stop_on: StopRule | None = None) -> Walk:
    """
    Move a player up to ``steps`` panels.

    Args:
        player: The player to move
        steps: Step budget, must be non-negative (0 leaves the player put)
        stop_on: Optional extra suspension rule checked on every entered
            panel while steps remain

    Returns:
        Walk with the remaining steps and the reason the walk stopped
    """
    if steps < 0:
        raise ValueError(f"Step count must be non-negative, got {steps}")
    return _resume(player, steps, [], stop_on)


def continue_through(
    player: "Player",
    panel: "Panel",
    steps: int,
    stop_on: StopRule | None = None,
) -> Walk:
    """
    Resume a suspended walk through the chosen successor panel.

    Raises:
        InvalidChoiceError: If ``panel`` is not an outgoing edge of the
            player's current panel (nothing is changed)
        ValueError: If there are no steps left to spend
    """
    if steps < 1:
        raise ValueError(f"Continuing needs at least one step, got {steps}")
    if panel not in player.current_panel.next_panels:
        raise InvalidChoiceError(player.current_panel, panel)

    remaining = steps - 1
    path = [panel]
    halt = _enter(player, panel, remaining, stop_on)
    if halt is not None:
        return Walk(remaining, halt, path)
    return _resume(player, remaining, path, stop_on)
