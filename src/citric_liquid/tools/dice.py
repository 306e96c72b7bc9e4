"""
Dice rolling tools for Citric Liquid.

Every random decision in the game goes through a roller that returns an
integer in ``[1, sides]``. The controller owns one roller and hands it to
every unit it creates.
"""

import random
from typing import Iterable


class Dice:
    """Seedable n-sided die."""

    def __init__(self, sides: int = 6, seed: int | None = None):
        if sides < 1:
            raise ValueError(f"A die needs at least one side, got {sides}")
        self.sides = sides
        self._rng = random.Random(seed)

    def roll(self) -> int:
        """Roll once."""
        return self._rng.randint(1, self.sides)

    def choice_index(self, count: int) -> int:
        """
        Pick an index in ``[0, count)`` using one roll.

        Used to choose among registered encounter units so that scripted
        dice keep the whole game reproducible.
        """
        if count < 1:
            raise ValueError("Nothing to choose from")
        return (self.roll() - 1) % count


class ScriptedDice(Dice):
    """
    Die that replays a fixed sequence of values, cycling when exhausted.

    Handy for tests and for replaying a recorded game:

        dice = ScriptedDice([2, 3, 1])
        dice.roll()  # 2
    """

    def __init__(self, values: Iterable[int], sides: int = 6):
        super().__init__(sides=sides)
        self.values = list(values)
        if not self.values:
            raise ValueError("ScriptedDice needs at least one value")
        for value in self.values:
            if not 1 <= value <= sides:
                raise ValueError(f"Scripted value {value} outside 1..{sides}")
        self._position = 0

    def roll(self) -> int:
        value = self.values[self._position % len(self.values)]
        self._position += 1
        return value

    @property
    def rolls_made(self) -> int:
        return self._position
