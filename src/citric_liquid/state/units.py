"""
Combat-capable units: players, wild units and bosses.

A Unit carries the stats shared by everything that can fight. Player adds
the board position, norma progress, recovery countdown and an EventBus the
controller listens to.

Stat changes saturate instead of failing: HP stays inside [0, max_hp],
stars and wins never drop below zero.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar

from ..config import DEFAULT_RECOVERY_COUNTER, DEFAULT_STARS_NORMA
from ..tools.dice import Dice
from .event_bus import EventBus, EventType
from .panels import NULL_PANEL, Panel
from .schema import NormaGoal, NormaKind


class UnitKind(str, Enum):
    PLAYER = "player"
    WILD = "wild"
    BOSS = "boss"


class Stance(str, Enum):
    """How a unit answers an incoming attack."""
    DEFEND = "defend"  # Always take some damage, reduced by defense
    EVADE = "evade"    # Dodge completely or take the full hit


# Reward for defeating a unit of each kind: (wins gained, star divisor).
# The winner takes loser.stars // divisor stars from the loser.
VICTORY_REWARDS: dict[UnitKind, tuple[int, int]] = {
    UnitKind.PLAYER: (2, 2),
    UnitKind.WILD: (1, 1),
    UnitKind.BOSS: (3, 1),
}


class Unit:
    """Base for every entity that can attack and be attacked."""

    kind: ClassVar[UnitKind] = UnitKind.WILD

    def __init__(
        self,
        name: str,
        hp: int,
        attack: int,
        defense: int,
        evasion: int,
        dice: Dice | None = None,
    ):
        if hp < 1:
            raise ValueError(f"{name} needs at least 1 max HP, got {hp}")
        self.name = name
        self.max_hp = hp
        self.attack = attack
        self.defense = defense
        self.evasion = evasion
        self.dice = dice or Dice()
        self.stance = Stance.DEFEND
        self._hp = hp
        self._stars = 0
        self._wins = 0

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.name!r}, hp={self._hp}/{self.max_hp}, "
            f"stars={self._stars}, wins={self._wins})"
        )

    # ─── Notification hook ───────────────────────────────────────

    def _notify(self, event_type: EventType, old=None, new=None, **data) -> None:
        """Report a change. Plain units have nobody to tell."""

    # ─── HP ──────────────────────────────────────────────────────

    @property
    def current_hp(self) -> int:
        return self._hp

    @current_hp.setter
    def current_hp(self, value: int) -> None:
        old = self._hp
        self._hp = max(0, min(self.max_hp, value))
        if self._hp != old:
            self._notify(EventType.HP_CHANGED, old, self._hp)
            if self._hp == 0:
                self._notify(EventType.KNOCKED_OUT, old, 0)

    @property
    def is_ko(self) -> bool:
        return self._hp == 0

    def restore(self) -> None:
        """Heal back to max HP."""
        self.current_hp = self.max_hp

    # ─── Stars & wins ────────────────────────────────────────────

    @property
    def stars(self) -> int:
        return self._stars

    def increase_stars_by(self, amount: int) -> None:
        self._set_stars(self._stars + amount)

    def reduce_stars_by(self, amount: int) -> None:
        self._set_stars(self._stars - amount)

    def _set_stars(self, value: int) -> None:
        old = self._stars
        self._stars = max(0, value)
        if self._stars != old:
            self._notify(EventType.STARS_CHANGED, old, self._stars)

    @property
    def wins(self) -> int:
        return self._wins

    def increase_wins_by(self, amount: int) -> None:
        old = self._wins
        self._wins = max(0, self._wins + amount)
        if self._wins != old:
            self._notify(EventType.WINS_CHANGED, old, self._wins)

    # ─── Combat outcome ──────────────────────────────────────────

    def roll(self) -> int:
        return self.dice.roll()

    def defeated_by(self, attacker: "Unit") -> None:
        """Called once when this unit's HP reaches 0 from an attack."""
        attacker.claim_victory(self)

    def claim_victory(self, loser: "Unit") -> int:
        """
        Collect the reward for knocking out ``loser``.

        Stars are transferred, never created: whatever the winner gains,
        the loser loses.

        Returns:
            Number of stars taken
        """
        wins, divisor = VICTORY_REWARDS[loser.kind]
        taken = loser.stars // divisor
        self.increase_wins_by(wins)
        loser.reduce_stars_by(taken)
        self.increase_stars_by(taken)
        return taken

    def copy(self) -> "Unit":
        """Fresh unit with the same base stats and none of the accumulated state."""
        return type(self)(
            self.name, self.max_hp, self.attack, self.defense, self.evasion, dice=self.dice,
        )


class WildUnit(Unit):
    kind = UnitKind.WILD


class BossUnit(Unit):
    kind = UnitKind.BOSS


class Player(Unit):
    """
    A unit controlled by a participant of the game.

    The board position is written only by ``systems.movement.place``;
    everything else reads ``current_panel``.
    """

    kind = UnitKind.PLAYER

    def __init__(
        self,
        name: str,
        hp: int,
        attack: int,
        defense: int,
        evasion: int,
        dice: Dice | None = None,
    ):
        super().__init__(name, hp, attack, defense, evasion, dice=dice)
        self.events = EventBus()
        self._current_panel: Panel = NULL_PANEL
        self.home_panel: Panel = NULL_PANEL
        self.recovery_left = 0
        self.recovery_counter = DEFAULT_RECOVERY_COUNTER
        self._norma_level = 1
        self._norma_goal = NormaGoal(
            kind=NormaKind.STARS, level=1, threshold=DEFAULT_STARS_NORMA[1],
        )

    def copy(self) -> "Player":
        clone = super().copy()
        clone.recovery_counter = self.recovery_counter
        return clone

    def _notify(self, event_type: EventType, old=None, new=None, **data) -> None:
        self.events.emit(event_type, source=self, old=old, new=new, **data)

    @property
    def current_panel(self) -> Panel:
        return self._current_panel

    # ─── Norma ───────────────────────────────────────────────────

    @property
    def norma_level(self) -> int:
        return self._norma_level

    @property
    def norma_goal(self) -> NormaGoal:
        return self._norma_goal

    def set_norma_goal(self, goal: NormaGoal) -> None:
        old = self._norma_goal
        self._norma_goal = goal
        self._notify(EventType.NORMA_GOAL_CHANGED, old, goal)

    def norma_check(self) -> bool:
        """Whether the current goal is met. Does not change anything."""
        return self._norma_goal.is_met(self)

    def norma_clear(self) -> None:
        """Advance one norma level."""
        self._norma_level += 1
        self._notify(EventType.NORMA_LEVEL_CHANGED, self._norma_level - 1, self._norma_level)

    # ─── Knock-out & recovery ────────────────────────────────────

    def defeated_by(self, attacker: Unit) -> None:
        self.recovery_left = self.recovery_counter
        super().defeated_by(attacker)

    def recovery_trial(self) -> int:
        """
        Roll to shorten the recovery countdown.

        Reaching exactly 0 fully heals the player. Does nothing for a
        player that is not KO'd.

        Returns:
            The recovery countdown after the trial
        """
        if not self.is_ko:
            return self.recovery_left
        self.recovery_left = max(0, self.recovery_left - self.roll())
        if self.recovery_left == 0:
            self.revive()
        return self.recovery_left

    def revive(self) -> None:
        self.recovery_left = 0
        self.restore()
        self._notify(EventType.RECOVERED, None, self.current_hp)

    # ─── Encounter signals ───────────────────────────────────────

    def force_encounter(self) -> None:
        self._notify(EventType.LANDED_ON_ENCOUNTER)

    def force_boss_encounter(self) -> None:
        self._notify(EventType.LANDED_ON_BOSS_ENCOUNTER)
