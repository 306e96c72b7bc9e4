"""
Combat rules as pure functions over units.

One exchange:
1. The attacker rolls: attack = max(1, roll + attack stat)
2. The defender answers with its stance
   - DEFEND: damage = max(1, attack - (roll + defense))
   - EVADE: no damage if roll + evasion > attack, else the full attack
3. The damage is applied through resolve_attack, which handles knock-outs
   and victory rewards
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ..state.units import Stance

if TYPE_CHECKING:
    from ..state.units import Unit

logger = logging.getLogger(__name__)


@dataclass
class AttackResult:
    """Result of one attack."""
    attacker: str
    defender: str
    attack_roll: int  # Attack power after the roll
    defense_roll: int  # Defender's raw die
    stance: Stance
    damage: int
    defeated: bool = False

    @property
    def evaded(self) -> bool:
        return self.stance == Stance.EVADE and self.damage == 0

    @property
    def narrative(self) -> str:
        if self.evaded:
            return f"{self.defender} evades {self.attacker}'s attack"
        text = f"{self.attacker} deals {self.damage} damage to {self.defender}"
        if self.defeated:
            text += f", knocking {self.defender} out"
        return text


@dataclass
class BattleReport:
    """Every attack of a battle, in order."""
    challenger: str
    defender: str
    attacks: list[AttackResult] = field(default_factory=list)

    @property
    def loser(self) -> str | None:
        for result in self.attacks:
            if result.defeated:
                return result.defender
        return None

    @property
    def winner(self) -> str | None:
        for result in self.attacks:
            if result.defeated:
                return result.attacker
        return None


def attack_power(roll: int, attack: int) -> int:
    return max(1, roll + attack)


def defended_damage(attack: int, roll: int, defense: int) -> int:
    """Damage taken when defending. Always at least 1."""
    return max(1, attack - (roll + defense))


def evaded_damage(attack: int, roll: int, evasion: int) -> int:
    """Damage taken when evading: all or nothing."""
    if roll + evasion > attack:
        return 0
    return attack


def resolve_attack(attacker: "Unit", defender: "Unit", damage: int) -> bool:
    """
    Apply damage to a defender.

    Knocking the defender out dispatches the victory to the attacker:
    wins and stars move according to the defender's kind. Hitting a unit
    that is already KO'd changes nothing.

    Returns:
        True if this attack knocked the defender out
    """
    if defender.is_ko:
        return False
    defender.current_hp = defender.current_hp - max(0, damage)
    if defender.is_ko:
        defender.defeated_by(attacker)
        return True
    return False


def exchange(attacker: "Unit", defender: "Unit") -> AttackResult:
    """Roll one attack and apply it."""
    attack = attack_power(attacker.roll(), attacker.attack)
    roll = defender.roll()
    if defender.stance == Stance.EVADE:
        damage = evaded_damage(attack, roll, defender.evasion)
    else:
        damage = defended_damage(attack, roll, defender.defense)

    defeated = resolve_attack(attacker, defender, damage)
    result = AttackResult(
        attacker=attacker.name,
        defender=defender.name,
        attack_roll=attack,
        defense_roll=roll,
        stance=defender.stance,
        damage=damage,
        defeated=defeated,
    )
    logger.debug(result.narrative)
    return result


def battle(challenger: "Unit", defender: "Unit") -> BattleReport:
    """
    Challenger attacks, then the defender strikes back if still standing.

    KO'd units never attack.
    """
    report = BattleReport(challenger=challenger.name, defender=defender.name)
    if challenger.is_ko or defender.is_ko:
        return report

    report.attacks.append(exchange(challenger, defender))
    if not defender.is_ko:
        report.attacks.append(exchange(defender, challenger))
    return report
