"""Simulation runner and transcript management."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..config import GameConfig
from ..state.panels import PanelKind
from ..state.schema import BoardLayout, PanelSpec
from ..state.units import Player
from ..systems.controller import GameController
from ..systems.turns import TurnError
from ..tools.dice import Dice
from .player import BotPlayer

logger = logging.getLogger(__name__)


# Ring of nine panels with a shortcut that forks at the drop panel (3).
# Panels 0 and 6 are the two homes.
DEMO_LAYOUT = BoardLayout(
    name="demo",
    panels=[
        PanelSpec(id=0, kind="home"),
        PanelSpec(id=1, kind="bonus"),
        PanelSpec(id=2, kind="neutral"),
        PanelSpec(id=3, kind="drop"),
        PanelSpec(id=4, kind="encounter"),
        PanelSpec(id=5, kind="bonus"),
        PanelSpec(id=6, kind="home"),
        PanelSpec(id=7, kind="boss"),
        PanelSpec(id=8, kind="neutral"),
        PanelSpec(id=9, kind="bonus"),
        PanelSpec(id=10, kind="encounter"),
    ],
    edges=[
        (0, 1), (1, 2), (2, 3), (3, 4), (3, 9), (4, 5), (5, 6),
        (6, 7), (7, 8), (8, 0), (9, 10), (10, 6),
    ],
)

# name -> (hp, atk, def, evd)
DEMO_CHARACTERS = {
    "Suguri": (4, 1, -1, 2),
    "Kai": (5, 1, 0, 0),
    "Marc": (4, 1, 1, -1),
}
DEMO_WILD_UNITS = {
    "Chicken": (3, -1, -1, 1),
    "Seagull": (3, 1, -1, -1),
}
DEMO_BOSS_UNITS = {
    "Store Manager": (8, 3, 2, -1),
}


@dataclass
class TurnRecord:
    """A single turn in the simulation."""

    turn_number: int
    chapter: int
    player: str
    actions: list[str] = field(default_factory=list)
    stars: int = 0
    wins: int = 0
    norma_level: int = 1
    panel: int | None = None


@dataclass
class SimulationTranscript:
    """Complete transcript of a simulation run."""

    personas: dict[str, str] = field(default_factory=dict)
    started_at: datetime = field(default_factory=datetime.now)
    turns: list[TurnRecord] = field(default_factory=list)
    winner: str | None = None
    final_snapshot: dict = field(default_factory=dict)
    player_stats: dict = field(default_factory=dict)

    def add_turn(self, chapter: int, player: Player, actions: list[str]) -> None:
        """Record the turn that ``player`` just played."""
        self.turns.append(TurnRecord(
            turn_number=len(self.turns) + 1,
            chapter=chapter,
            player=player.name,
            actions=list(actions),
            stars=player.stars,
            wins=player.wins,
            norma_level=player.norma_level,
            panel=None if player.current_panel.is_null else player.current_panel.id,
        ))

    def to_markdown(self) -> str:
        """Convert transcript to markdown format."""
        lines = [
            "# Simulation Transcript",
            "",
            f"- **Date:** {self.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
            "- **Players:** " + ", ".join(
                f"{name} ({persona})" for name, persona in self.personas.items()
            ),
            f"- **Turns:** {len(self.turns)}",
            f"- **Winner:** {self.winner or 'none'}",
            "",
            "---",
            "",
        ]

        for turn in self.turns:
            lines.append(f"## Turn {turn.turn_number} (chapter {turn.chapter}): {turn.player}")
            lines.append("")
            for action in turn.actions:
                lines.append(f"- {action}")
            lines.append("")
            lines.append(
                f"*Stars {turn.stars}, wins {turn.wins}, "
                f"norma {turn.norma_level}, panel {turn.panel}*"
            )
            lines.append("")

        # Add summary
        lines.append("## Summary")
        lines.append("")
        for p in self.final_snapshot.get("players", []):
            lines.append(
                f"- **{p['name']}:** {p['stars']} stars, {p['wins']} wins, "
                f"norma {p['norma_level']} ({p['norma_goal']})"
            )
        for name, stats in self.player_stats.items():
            lines.append(
                f"- **{name} decisions:** {stats.get('total_decisions', 0)} "
                f"({stats.get('fights_engaged', 0)} fights engaged, "
                f"{stats.get('home_stops', 0)} home stops)"
            )
        lines.append("")

        return "\n".join(lines)

    def save(self, simulations_dir: Path | str) -> Path:
        """Save transcript to file. Returns the file path."""
        simulations_dir = Path(simulations_dir)
        simulations_dir.mkdir(parents=True, exist_ok=True)

        timestamp = self.started_at.strftime("%Y-%m-%d_%H%M%S")
        filepath = simulations_dir / f"sim_{timestamp}.md"

        filepath.write_text(self.to_markdown(), encoding="utf-8")
        return filepath


def create_simulation_game(
    personas: list[str],
    config: GameConfig | None = None,
    dice: Dice | None = None,
    layout: BoardLayout = DEMO_LAYOUT,
) -> tuple[GameController, dict[str, BotPlayer]]:
    """
    Set up a board with one player per persona.

    Players are handed the layout's home panels in order, wrapping around
    when there are fewer homes than players.

    Returns:
        The controller and the bots keyed by player name
    """
    if not 1 <= len(personas) <= len(DEMO_CHARACTERS):
        raise ValueError(f"Between 1 and {len(DEMO_CHARACTERS)} personas are supported")

    controller = GameController(config, dice)
    controller.build_board(layout)
    homes = [panel for panel in controller.panels if panel.kind == PanelKind.HOME]
    if not homes:
        raise ValueError(f"Board '{layout.name}' has no home panel")

    bots: dict[str, BotPlayer] = {}
    for i, (persona, (name, stats)) in enumerate(zip(personas, DEMO_CHARACTERS.items())):
        home = homes[i % len(homes)]
        player = controller.create_player(name, *stats, home)
        controller.set_player_home(player, home)
        bots[name] = BotPlayer(persona, controller.dice)

    for name, stats in DEMO_WILD_UNITS.items():
        controller.create_wild_unit(name, *stats)
    for name, stats in DEMO_BOSS_UNITS.items():
        controller.create_boss_unit(name, *stats)
    return controller, bots


def play_turn(controller: GameController, bot: BotPlayer) -> list[str]:
    """
    Drive the turn owner's whole turn, asking the bot at every choice.

    Returns:
        Human-readable actions taken during the turn
    """
    owner = controller.turn_owner
    actions: list[str] = []
    battles_seen = len(controller.battles)

    controller.set_stance(owner, bot.stance)
    controller.begin_turn()
    if controller.awaiting_recovery:
        left = controller.recovery_trial()
        actions.append("recovered" if left == 0 else f"recovery trial failed, {left} left")

    while not controller.game_ended and not controller.phase.is_end:
        phase = controller.phase
        if phase.is_card_pick:
            actions.append(f"rolled {controller.use_card()}")
        elif phase.is_moving:
            controller.do_move()
        elif phase.is_path_choose:
            panel = bot.choose_branch(owner.current_panel.next_panels)
            actions.append(f"took the branch to panel {panel.id}")
            controller.continue_moving_through(panel)
        elif phase.is_home_stop_choose:
            options = owner.current_panel.next_panels
            if not options or bot.wants_to_stop_at_home(owner):
                actions.append("stopped at home")
                controller.stop_at_home()
            else:
                controller.continue_moving_through(bot.choose_branch(options))
        elif phase.is_combat_choose:
            rival = next(
                (p for p in owner.current_panel.players if p is not owner and not p.is_ko),
                None,
            )
            if bot.wants_combat(owner, rival):
                actions.append(f"challenged {rival.name}")
                controller.engage_combat()
            else:
                controller.decline_combat()
        elif phase.is_norma_pick:
            kind = bot.pick_norma(owner)
            goal = controller.pick_norma_goal(kind)
            actions.append(f"cleared norma, next goal: {goal.summary}")
        else:
            raise TurnError(f"Bot cannot act during {phase}")

    for report in controller.battles[battles_seen:]:
        actions.extend(result.narrative for result in report.attacks)
    if controller.game_ended:
        actions.append(f"{controller.winner.name} wins the game")
    else:
        actions.append(f"ended on panel {owner.current_panel.id}")
        controller.finish_turn()
    return actions


def run_simulation(
    controller: GameController,
    bots: dict[str, BotPlayer],
    max_turns: int = 200,
    verbose: bool = False,
) -> SimulationTranscript:
    """
    Run the simulation loop.

    Args:
        controller: A controller with its board and players set up
        bots: Bot for each player, keyed by player name
        max_turns: Turn budget; the run stops early once someone wins
        verbose: Log every action at INFO level

    Returns:
        SimulationTranscript with all turns
    """
    missing = [p.name for p in controller.players if p.name not in bots]
    if missing:
        raise ValueError(f"No bot for: {', '.join(missing)}")

    transcript = SimulationTranscript(
        personas={name: bot.persona_name for name, bot in bots.items()},
    )

    for _ in range(max_turns):
        if controller.game_ended:
            break
        owner = controller.turn_owner
        chapter = controller.chapter
        actions = play_turn(controller, bots[owner.name])
        transcript.add_turn(chapter, owner, actions)
        if verbose:
            for action in actions:
                logger.info(f"{owner.name}: {action}")

    transcript.winner = controller.winner.name if controller.winner else None
    transcript.final_snapshot = controller.snapshot()
    transcript.player_stats = {name: bot.get_stats() for name, bot in bots.items()}
    return transcript
