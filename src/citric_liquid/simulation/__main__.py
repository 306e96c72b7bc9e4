"""
Run a bot vs bot game on the demo board (or a board file).

Usage:
    python -m citric_liquid.simulation --personas cautious brawler --seed 7
    python -m citric_liquid.simulation --board boards/loop.yaml --save simulations/
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from ..config import load_config
from ..state.layouts import load_layout
from .personas import PERSONAS
from .runner import DEMO_LAYOUT, SimulationTranscript, create_simulation_game, run_simulation

logger = logging.getLogger(__name__)


def render_standings(transcript: SimulationTranscript) -> Table:
    """Final standings, one row per player."""
    table = Table(title="Final standings")
    table.add_column("Player", style="bold")
    table.add_column("Persona")
    table.add_column("Stars", justify="right")
    table.add_column("Wins", justify="right")
    table.add_column("Norma", justify="right")
    table.add_column("Goal")

    for p in transcript.final_snapshot.get("players", []):
        name = p["name"]
        if name == transcript.winner:
            name = f"[green]{name} ★[/green]"
        table.add_row(
            name,
            transcript.personas.get(p["name"], "-"),
            str(p["stars"]),
            str(p["wins"]),
            str(p["norma_level"]),
            p["norma_goal"],
        )
    return table


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Play a headless Citric Liquid game between bots"
    )
    parser.add_argument(
        "--personas",
        nargs="+",
        choices=sorted(PERSONAS),
        default=["cautious", "brawler"],
        help="One persona per player (1 to 3)",
    )
    parser.add_argument(
        "--turns",
        type=int,
        default=200,
        help="Turn budget before giving up",
    )
    parser.add_argument("--seed", type=int, default=None, help="Dice seed")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON game config (defaults if missing)",
    )
    parser.add_argument(
        "--board",
        type=Path,
        default=None,
        help="YAML or JSON board layout (demo board if omitted)",
    )
    parser.add_argument(
        "--save",
        type=Path,
        default=None,
        help="Directory to write the markdown transcript to",
    )
    parser.add_argument("--json", action="store_true", help="Print the final snapshot as JSON")
    parser.add_argument(
        "--transcript",
        action="store_true",
        help="Print every turn, not just the standings",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every action")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(message)s',
    )

    console = Console()
    config = load_config(args.config)
    if args.seed is not None:
        config = config.model_copy(update={"seed": args.seed})

    try:
        layout = load_layout(args.board) if args.board else DEMO_LAYOUT
        controller, bots = create_simulation_game(args.personas, config, layout=layout)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    transcript = run_simulation(controller, bots, max_turns=args.turns, verbose=args.verbose)

    if args.json:
        print(json.dumps(transcript.final_snapshot, indent=2))
    else:
        if args.transcript:
            console.print(Markdown(transcript.to_markdown()))
        console.print(render_standings(transcript))
        if transcript.winner:
            console.print(f"[bold green]{transcript.winner} wins[/bold green] "
                          f"after {len(transcript.turns)} turns")
        else:
            console.print(f"[yellow]No winner within {args.turns} turns[/yellow]")

    if args.save:
        path = transcript.save(args.save)
        logger.info(f"Transcript saved to {path}")
    return 0 if transcript.winner else 1


if __name__ == "__main__":
    sys.exit(main())
