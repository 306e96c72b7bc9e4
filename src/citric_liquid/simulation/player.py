"""Bot player for simulation mode."""

from ..state.panels import Panel
from ..state.schema import NormaKind
from ..state.units import Player, Stance
from ..tools.dice import Dice
from .personas import PERSONAS, get_persona


class BotPlayer:
    """Answers the choices a turn asks for, following a persona."""

    def __init__(self, persona: str = "cautious", dice: Dice | None = None):
        """
        Initialize bot player.

        Args:
            persona: One of: cautious, brawler, wanderer
            dice: Roller for random branch picks (a fresh Dice if omitted)
        """
        self.persona_name = persona if persona in PERSONAS else "cautious"
        self.persona = get_persona(persona)
        self.dice = dice or Dice()
        self.decisions: list[str] = []  # Track key decisions made

    def __repr__(self) -> str:
        return f"BotPlayer({self.persona_name!r})"

    @property
    def stance(self) -> Stance:
        return self.persona["stance"]

    def choose_branch(self, options: tuple[Panel, ...] | list[Panel]) -> Panel:
        """Pick the panel to continue through at a fork or at home."""
        if not options:
            raise ValueError("No branch to choose from")
        policy = self.persona["branch"]
        if policy == "last":
            choice = options[-1]
        elif policy == "random":
            choice = options[self.dice.choice_index(len(options))]
        else:
            choice = options[0]
        self.decisions.append("branch")
        return choice

    def wants_to_stop_at_home(self, player: Player) -> bool:
        policy = self.persona["stop_at_home"]
        if policy == "always":
            stop = True
        elif policy == "never":
            stop = False
        else:
            stop = player.norma_check()
        self.decisions.append("stopped_home" if stop else "passed_home")
        return stop

    def wants_combat(self, player: Player, rival: Player | None) -> bool:
        policy = self.persona["engage"]
        if rival is None or policy == "never":
            engage = False
        elif policy == "always":
            engage = True
        else:
            engage = player.current_hp > rival.current_hp
        self.decisions.append("engaged" if engage else "declined")
        return engage

    def pick_norma(self, player: Player) -> NormaKind:
        self.decisions.append("picked_norma")
        return self.persona["norma_kind"]

    def get_stats(self) -> dict:
        """Get summary statistics about bot decisions."""
        return {
            "total_decisions": len(self.decisions),
            "fights_engaged": self.decisions.count("engaged"),
            "fights_declined": self.decisions.count("declined"),
            "home_stops": self.decisions.count("stopped_home"),
            "norma_picks": self.decisions.count("picked_norma"),
        }
