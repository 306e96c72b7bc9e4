"""
Board panels and the board that owns them.

A panel is a node of a directed graph. Outgoing edges are kept in insertion
order so forks always offer their branches in the same order. Which players
stand on a panel is tracked by the panel itself, but only
``systems.movement.place`` changes it.

Panel kinds are a closed set. Each kind's effect is a plain function looked
up by ``Panel.activated_by``.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Callable

from ..config import DEFAULT_BONUS_NORMA_CAP
from .schema import BoardLayout

if TYPE_CHECKING:
    from .units import Player


class PanelKind(str, Enum):
    HOME = "home"
    NEUTRAL = "neutral"
    DROP = "drop"
    BOSS = "boss"
    ENCOUNTER = "encounter"
    BONUS = "bonus"
    NULL = "null"


PANEL_DESCRIPTIONS: dict[PanelKind, str] = {
    PanelKind.HOME: "A Home Panel. Stop here to check your norma.",
    PanelKind.NEUTRAL: "A Neutral Panel. Nothing happens here.",
    PanelKind.DROP: "A Drop Panel. Land here to roll a die and lose stars!",
    PanelKind.BOSS: "A Boss Panel. Land here to face a boss.",
    PanelKind.ENCOUNTER: "An Encounter Panel. Land here to fight a wild unit.",
    PanelKind.BONUS: "A Bonus Panel. Land here to roll a die and earn stars!",
    PanelKind.NULL: "No panel.",
}


class Panel:
    """A single board panel."""

    def __init__(
        self,
        panel_id: int,
        kind: PanelKind,
        bonus_cap: int = DEFAULT_BONUS_NORMA_CAP,
    ):
        self.id = panel_id
        self.kind = kind
        self.description = PANEL_DESCRIPTIONS[kind]
        self.bonus_cap = bonus_cap
        self._next: list[Panel] = []
        self._players: list["Player"] = []

    def __repr__(self) -> str:
        return f"Panel({self.id}, {self.kind.value})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Panel):
            return NotImplemented
        return self.kind == other.kind and self.id == other.id

    def __hash__(self) -> int:
        return hash((self.kind, self.id))

    @property
    def sprite(self) -> str:
        return self.kind.name

    @property
    def is_null(self) -> bool:
        return self.kind == PanelKind.NULL

    @property
    def next_panels(self) -> tuple["Panel", ...]:
        return tuple(self._next)

    @property
    def players(self) -> tuple["Player", ...]:
        return tuple(self._players)

    @property
    def is_fork(self) -> bool:
        return len(self._next) > 1

    def add_next_panel(self, panel: "Panel") -> None:
        """Add an outgoing edge. Adding the same edge twice is a no-op."""
        if self.is_null or panel.is_null:
            raise ValueError("The null panel cannot be linked")
        if panel not in self._next:
            self._next.append(panel)

    # Occupant bookkeeping, called from systems.movement.place only
    def _admit(self, player: "Player") -> None:
        if not self.is_null and player not in self._players:
            self._players.append(player)

    def _release(self, player: "Player") -> None:
        if player in self._players:
            self._players.remove(player)

    def activated_by(self, player: "Player") -> None:
        """Apply this panel's effect to a player that stopped on it."""
        PANEL_EFFECTS[self.kind](self, player)


# ─── Panel effects ───────────────────────────────────────────────

def _no_effect(panel: Panel, player: "Player") -> None:
    pass


def _home_effect(panel: Panel, player: "Player") -> None:
    if player.home_panel.is_null:
        player.home_panel = panel


def _drop_effect(panel: Panel, player: "Player") -> None:
    player.reduce_stars_by(player.roll() * player.norma_level)


def _bonus_effect(panel: Panel, player: "Player") -> None:
    player.increase_stars_by(player.roll() * min(player.norma_level, panel.bonus_cap))


def _encounter_effect(panel: Panel, player: "Player") -> None:
    player.force_encounter()


def _boss_effect(panel: Panel, player: "Player") -> None:
    player.force_boss_encounter()


PANEL_EFFECTS: dict[PanelKind, Callable[[Panel, "Player"], None]] = {
    PanelKind.HOME: _home_effect,
    PanelKind.NEUTRAL: _no_effect,
    PanelKind.DROP: _drop_effect,
    PanelKind.BOSS: _boss_effect,
    PanelKind.ENCOUNTER: _encounter_effect,
    PanelKind.BONUS: _bonus_effect,
    PanelKind.NULL: _no_effect,
}


# Placeholder for players that are not on the board yet
NULL_PANEL = Panel(-1, PanelKind.NULL)


class Board:
    """
    Registry of every panel in a game, indexed by id.

    Usage:
        board = Board()
        home = board.create_panel(PanelKind.HOME, 0)
        road = board.create_panel(PanelKind.NEUTRAL, 1)
        board.link(home, road)
    """

    def __init__(self, bonus_cap: int = DEFAULT_BONUS_NORMA_CAP):
        self.bonus_cap = bonus_cap
        self._panels: dict[int, Panel] = {}

    def __len__(self) -> int:
        return len(self._panels)

    def __contains__(self, panel: object) -> bool:
        return isinstance(panel, Panel) and self._panels.get(panel.id) is panel

    @property
    def panels(self) -> list[Panel]:
        """All panels in creation order."""
        return list(self._panels.values())

    def get(self, panel_id: int) -> Panel:
        return self._panels[panel_id]

    def create_panel(self, kind: PanelKind, panel_id: int) -> Panel:
        if kind == PanelKind.NULL:
            raise ValueError("The null panel is a shared placeholder, not a board panel")
        if panel_id < 0:
            raise ValueError(f"Panel ids must be non-negative, got {panel_id}")
        if panel_id in self._panels:
            raise ValueError(f"Panel id {panel_id} is already in use")
        panel = Panel(panel_id, kind, bonus_cap=self.bonus_cap)
        self._panels[panel_id] = panel
        return panel

    def link(self, src: Panel, dst: Panel) -> None:
        """Add a directed edge between two panels of this board."""
        for panel in (src, dst):
            if panel not in self:
                raise ValueError(f"{panel!r} does not belong to this board")
        src.add_next_panel(dst)

    @classmethod
    def from_layout(
        cls,
        layout: BoardLayout,
        bonus_cap: int = DEFAULT_BONUS_NORMA_CAP,
    ) -> "Board":
        """Build a board from a validated layout."""
        board = cls(bonus_cap=bonus_cap)
        for spec in layout.panels:
            board.create_panel(PanelKind(spec.kind), spec.id)
        for src, dst in layout.edges:
            board.link(board.get(src), board.get(dst))
        return board
