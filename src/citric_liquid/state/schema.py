"""
Pydantic models for Citric Liquid value types.

Entities with identity and mutable state (units, panels) live in their own
modules. This module holds the immutable values passed between them: norma
goals and board layouts.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from .units import Unit


# -----------------------------------------------------------------------------
# Norma
# -----------------------------------------------------------------------------

class NormaKind(str, Enum):
    STARS = "stars"
    WINS = "wins"


class NormaGoal(BaseModel):
    """
    Threshold a player must reach to clear their current norma level.

    Goals are frozen. Clearing a level installs a new goal instead of
    editing the old one.
    """
    model_config = ConfigDict(frozen=True)

    kind: NormaKind
    level: int = Field(ge=1)
    threshold: int = Field(ge=0)

    def is_met(self, unit: "Unit") -> bool:
        """Whether the unit's stars (or wins) reach the threshold."""
        if self.kind == NormaKind.STARS:
            return unit.stars >= self.threshold
        return unit.wins >= self.threshold

    @property
    def summary(self) -> str:
        return f"Norma {self.level}: {self.threshold} {self.kind.value}"


# -----------------------------------------------------------------------------
# Board layouts
# -----------------------------------------------------------------------------

class PanelSpec(BaseModel):
    """One panel of a board layout."""
    id: int = Field(ge=0)
    kind: str  # PanelKind value: "home", "neutral", "drop", ...


class BoardLayout(BaseModel):
    """
    Declarative description of a board.

    Edges are ``[from_id, to_id]`` pairs; their order is the order in which
    branches are offered at forks.
    """
    panels: list[PanelSpec] = Field(default_factory=list)
    edges: list[tuple[int, int]] = Field(default_factory=list)
    name: str = "custom"

    @model_validator(mode="after")
    def _check_references(self) -> "BoardLayout":
        ids = [p.id for p in self.panels]
        if len(ids) != len(set(ids)):
            raise ValueError("Panel ids must be unique")
        known = set(ids)
        for src, dst in self.edges:
            if src not in known or dst not in known:
                raise ValueError(f"Edge {src}->{dst} references an unknown panel")
        return self
