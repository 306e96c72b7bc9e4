"""
Turn phase state machine for Citric Liquid.

One turn runs through:
    START → CARD_PICK → MOVING → (HOME_STOP_CHOOSE | PATH_CHOOSE |
    COMBAT_CHOOSE)* → NORMA_PICK? → END → START (next player)

The phase object is the only holder of in-progress movement: MOVING and the
three CHOOSE phases carry the steps still to walk. Phases are immutable;
every transition returns a new TurnPhase and an unsupported transition
raises InvalidPhaseError.

Usage:
    phase = TurnPhase.start()
    phase = phase.card_pick()
    phase = phase.move_to(4)
    phase = phase.path_choose(2)   # stopped at a fork with 2 steps left
    phase.end_phase()              # raises InvalidPhaseError
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class PhaseKind(str, Enum):
    """Phases of a single turn."""
    START = "start"                        # Turn begins (recovery trial if KO'd)
    CARD_PICK = "card_pick"                # Player picks an action card
    MOVING = "moving"                      # Walking with steps remaining
    HOME_STOP_CHOOSE = "home_stop_choose"  # At home with steps left: stay or go on
    PATH_CHOOSE = "path_choose"            # At a fork: pick a branch
    COMBAT_CHOOSE = "combat_choose"        # Next to a rival: fight or pass
    NORMA_PICK = "norma_pick"              # Norma cleared: pick the next goal
    END = "end"                            # Turn cleanup, hand over to next player


# Valid phase transitions: each phase maps to allowed next phases
VALID_TRANSITIONS: dict[PhaseKind, set[PhaseKind]] = {
    PhaseKind.START: {PhaseKind.CARD_PICK, PhaseKind.MOVING, PhaseKind.END},
    PhaseKind.CARD_PICK: {PhaseKind.MOVING},
    PhaseKind.MOVING: {
        PhaseKind.HOME_STOP_CHOOSE,
        PhaseKind.PATH_CHOOSE,
        PhaseKind.COMBAT_CHOOSE,
        PhaseKind.NORMA_PICK,
        PhaseKind.END,
    },
    PhaseKind.HOME_STOP_CHOOSE: {
        PhaseKind.MOVING,         # Continue through a chosen panel
        PhaseKind.COMBAT_CHOOSE,  # Stayed home next to a rival
        PhaseKind.NORMA_PICK,     # Stayed home and cleared norma
        PhaseKind.END,            # Stayed home
    },
    PhaseKind.PATH_CHOOSE: {PhaseKind.MOVING},
    PhaseKind.COMBAT_CHOOSE: {PhaseKind.MOVING, PhaseKind.NORMA_PICK, PhaseKind.END},
    PhaseKind.NORMA_PICK: {PhaseKind.END},
    PhaseKind.END: {PhaseKind.START},
}

# Phases that carry a step count
STEP_PHASES = {
    PhaseKind.MOVING,
    PhaseKind.HOME_STOP_CHOOSE,
    PhaseKind.PATH_CHOOSE,
    PhaseKind.COMBAT_CHOOSE,
}


class TurnError(Exception):
    """Error during turn processing."""
    pass


class InvalidPhaseError(TurnError):
    """Attempted operation not valid in current phase."""
    def __init__(self, current: PhaseKind, attempted: str):
        self.current = current
        self.attempted = attempted
        super().__init__(
            f"Cannot {attempted} during {current.value} phase."
        )


class InvalidChoiceError(TurnError):
    """A suspended walk was resumed through a panel that is not a legal successor."""
    def __init__(self, current: Any, chosen: Any):
        self.current = current
        self.chosen = chosen
        super().__init__(
            f"{chosen!r} is not reachable from {current!r}."
        )


class GameOverError(TurnError):
    """The game already has a winner."""
    def __init__(self, winner: Any):
        self.winner = winner
        name = getattr(winner, "name", winner)
        super().__init__(f"The game is over: {name} already won.")


@dataclass(frozen=True)
class TurnPhase:
    """
    The active phase of a turn and the steps it still holds.

    Transitions are requested by name; the table above decides which are
    legal from here.
    """
    kind: PhaseKind = PhaseKind.START
    steps: int = 0

    def __post_init__(self):
        if self.steps < 0:
            raise ValueError(f"Step count must be non-negative, got {self.steps}")
        if self.steps and self.kind not in STEP_PHASES:
            raise ValueError(f"{self.kind.value} phase does not carry steps")

    def __str__(self) -> str:
        if self.kind in STEP_PHASES:
            return f"{self.kind.value}({self.steps})"
        return self.kind.value

    @classmethod
    def start(cls) -> "TurnPhase":
        return cls(PhaseKind.START)

    def can_transition(self, to: PhaseKind) -> bool:
        return to in VALID_TRANSITIONS.get(self.kind, set())

    def transition(self, to: PhaseKind, steps: int = 0) -> "TurnPhase":
        """Return the next phase, enforcing valid transitions."""
        if not self.can_transition(to):
            raise InvalidPhaseError(self.kind, f"transition to {to.value}")
        return TurnPhase(to, steps)

    # ─── Named transitions ───────────────────────────────────────

    def card_pick(self) -> "TurnPhase":
        return self.transition(PhaseKind.CARD_PICK)

    def move_to(self, steps: int) -> "TurnPhase":
        return self.transition(PhaseKind.MOVING, steps)

    def home_stop_choose(self, steps: int) -> "TurnPhase":
        return self.transition(PhaseKind.HOME_STOP_CHOOSE, steps)

    def path_choose(self, steps: int) -> "TurnPhase":
        return self.transition(PhaseKind.PATH_CHOOSE, steps)

    def combat_choose(self, steps: int) -> "TurnPhase":
        return self.transition(PhaseKind.COMBAT_CHOOSE, steps)

    def norma_pick(self) -> "TurnPhase":
        return self.transition(PhaseKind.NORMA_PICK)

    def end_phase(self) -> "TurnPhase":
        return self.transition(PhaseKind.END)

    def start_phase(self) -> "TurnPhase":
        return self.transition(PhaseKind.START)

    # ─── Predicates ──────────────────────────────────────────────

    @property
    def is_start(self) -> bool:
        return self.kind == PhaseKind.START

    @property
    def is_card_pick(self) -> bool:
        return self.kind == PhaseKind.CARD_PICK

    @property
    def is_moving(self) -> bool:
        return self.kind == PhaseKind.MOVING

    @property
    def is_home_stop_choose(self) -> bool:
        return self.kind == PhaseKind.HOME_STOP_CHOOSE

    @property
    def is_path_choose(self) -> bool:
        return self.kind == PhaseKind.PATH_CHOOSE

    @property
    def is_combat_choose(self) -> bool:
        return self.kind == PhaseKind.COMBAT_CHOOSE

    @property
    def is_norma_pick(self) -> bool:
        return self.kind == PhaseKind.NORMA_PICK

    @property
    def is_end(self) -> bool:
        return self.kind == PhaseKind.END

    @property
    def awaits_choice(self) -> bool:
        """Whether the turn is suspended waiting for a player decision."""
        return self.kind in {
            PhaseKind.HOME_STOP_CHOOSE,
            PhaseKind.PATH_CHOOSE,
            PhaseKind.COMBAT_CHOOSE,
            PhaseKind.NORMA_PICK,
        }
