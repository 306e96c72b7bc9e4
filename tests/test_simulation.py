"""Tests for simulation module."""

import json

import pytest

from citric_liquid.config import GameConfig
from citric_liquid.simulation.__main__ import main
from citric_liquid.simulation.personas import PERSONAS, get_persona
from citric_liquid.simulation.player import BotPlayer
from citric_liquid.simulation.runner import (
    DEMO_LAYOUT,
    SimulationTranscript,
    create_simulation_game,
    play_turn,
    run_simulation,
)
from citric_liquid.state.layouts import save_layout
from citric_liquid.state.panels import Panel, PanelKind
from citric_liquid.state.schema import BoardLayout, NormaKind, PanelSpec
from citric_liquid.state.units import Stance
from citric_liquid.tools.dice import ScriptedDice


class TestPersonas:
    """Test persona definitions."""

    def test_all_personas_exist(self):
        """All three personas are defined."""
        assert set(PERSONAS) == {"cautious", "brawler", "wanderer"}

    def test_persona_has_required_fields(self):
        """Each persona has required fields."""
        for name, persona in PERSONAS.items():
            for key in ("name", "style", "stop_at_home", "engage", "stance", "norma_kind", "branch"):
                assert key in persona, f"{name} missing '{key}'"

    def test_unknown_persona_defaults_to_cautious(self):
        """Unknown persona falls back to cautious."""
        assert get_persona("nonexistent")["name"] == "Cautious"


class TestBotPlayer:
    """Test BotPlayer decisions."""

    def _options(self):
        return (Panel(1, PanelKind.NEUTRAL), Panel(2, PanelKind.BONUS))

    def test_unknown_persona(self):
        """Unknown personas play cautiously."""
        assert BotPlayer("nonexistent").persona_name == "cautious"

    def test_branch_policies(self):
        """First, last and random branch picks."""
        first, last = self._options()
        assert BotPlayer("cautious").choose_branch((first, last)) is first
        assert BotPlayer("brawler").choose_branch((first, last)) is last
        wanderer = BotPlayer("wanderer", ScriptedDice([2]))
        assert wanderer.choose_branch((first, last)) is last

    def test_no_branch(self):
        """Choosing among nothing is an error."""
        with pytest.raises(ValueError):
            BotPlayer().choose_branch(())

    def test_home_policies(self, suguri):
        """Cautious always stays home, brawler only when norma is met."""
        assert BotPlayer("cautious").wants_to_stop_at_home(suguri)
        brawler = BotPlayer("brawler")
        assert not brawler.wants_to_stop_at_home(suguri)
        suguri.increase_stars_by(10)
        assert brawler.wants_to_stop_at_home(suguri)

    def test_combat_policies(self, suguri, kai):
        """Engagement follows the persona."""
        assert not BotPlayer("cautious").wants_combat(suguri, kai)
        assert BotPlayer("brawler").wants_combat(suguri, kai)
        assert not BotPlayer("brawler").wants_combat(suguri, None)
        # Suguri has 4 HP, Kai 5
        assert not BotPlayer("wanderer").wants_combat(suguri, kai)
        assert BotPlayer("wanderer").wants_combat(kai, suguri)

    def test_stance_and_norma(self, suguri):
        """Stance and norma kind come from the persona."""
        brawler = BotPlayer("brawler")
        assert brawler.stance == Stance.DEFEND
        assert brawler.pick_norma(suguri) == NormaKind.WINS
        assert BotPlayer("cautious").stance == Stance.EVADE

    def test_stats(self, suguri, kai):
        """Decisions are counted."""
        bot = BotPlayer("brawler")
        bot.wants_combat(suguri, kai)
        bot.pick_norma(suguri)
        stats = bot.get_stats()
        assert stats["total_decisions"] == 2
        assert stats["fights_engaged"] == 1
        assert stats["norma_picks"] == 1


class TestSimulationGame:
    """Test game setup and turn driving."""

    def test_create_game(self):
        """Each persona gets a player at a home panel."""
        controller, bots = create_simulation_game(["cautious", "brawler"], GameConfig(seed=1))
        assert [p.name for p in controller.players] == ["Suguri", "Kai"]
        assert set(bots) == {"Suguri", "Kai"}
        assert len(controller.panels) == len(DEMO_LAYOUT.panels)
        for player in controller.players:
            assert player.current_panel is player.home_panel
        assert controller.wild_units
        assert controller.boss_units

    def test_persona_count_limits(self):
        """One to three players are supported."""
        with pytest.raises(ValueError):
            create_simulation_game([])
        with pytest.raises(ValueError):
            create_simulation_game(["cautious"] * 4)

    def test_play_turn_hands_over(self):
        """A bot turn ends with the next player to move."""
        controller, bots = create_simulation_game(["cautious", "brawler"], GameConfig(seed=5))
        actions = play_turn(controller, bots["Suguri"])
        assert actions[0].startswith("rolled")
        assert controller.turn_owner.name == "Kai"
        assert controller.phase.is_start

    def test_missing_bot(self):
        """Every player needs a bot."""
        controller, bots = create_simulation_game(["cautious", "brawler"])
        del bots["Kai"]
        with pytest.raises(ValueError):
            run_simulation(controller, bots, max_turns=1)


class TestRunSimulation:
    """Test full runs and transcripts."""

    def test_run_respects_budget(self):
        """The run stops at the turn budget or at a winner."""
        controller, bots = create_simulation_game(
            ["cautious", "brawler", "wanderer"], GameConfig(seed=11),
        )
        transcript = run_simulation(controller, bots, max_turns=30)

        assert 1 <= len(transcript.turns) <= 30
        assert transcript.final_snapshot["chapter"] >= 1
        assert set(transcript.player_stats) == {"Suguri", "Kai", "Marc"}
        if transcript.winner is None:
            assert len(transcript.turns) == 30

    def test_short_game_finds_winner(self):
        """An easy rule set is won within the budget."""
        config = GameConfig(seed=3, final_norma_level=2, stars_norma={1: 1})
        controller, bots = create_simulation_game(["cautious"], config)
        transcript = run_simulation(controller, bots, max_turns=200)

        assert transcript.winner == "Suguri"
        assert controller.game_ended
        assert transcript.turns[-1].actions[-1] == "Suguri wins the game"

    def test_to_markdown(self):
        """Transcripts render as markdown."""
        controller, bots = create_simulation_game(["cautious", "wanderer"], GameConfig(seed=2))
        transcript = run_simulation(controller, bots, max_turns=4)
        markdown = transcript.to_markdown()

        assert markdown.startswith("# Simulation Transcript")
        assert "Suguri (cautious)" in markdown
        assert "## Turn 1 (chapter 1): Suguri" in markdown
        assert "## Summary" in markdown

    def test_save(self, tmp_path):
        """Transcripts are written to the given directory."""
        transcript = SimulationTranscript(personas={"Suguri": "cautious"})
        path = transcript.save(tmp_path / "sims")
        assert path.exists()
        assert path.read_text(encoding="utf-8").startswith("# Simulation Transcript")


class TestCli:
    """Test the command line entry point."""

    def test_main_prints_standings(self, capsys):
        """The CLI plays a game and prints the standings table."""
        code = main(["--personas", "cautious", "--seed", "3", "--turns", "5"])
        assert code in (0, 1)
        out = capsys.readouterr().out
        assert "Final standings" in out
        assert "Suguri" in out

    def test_main_json(self, capsys):
        """--json prints the final snapshot."""
        main(["--personas", "cautious", "brawler", "--seed", "3", "--turns", "4", "--json"])
        snapshot = json.loads(capsys.readouterr().out)
        assert [p["name"] for p in snapshot["players"]] == ["Suguri", "Kai"]

    def test_main_saves_transcript(self, tmp_path, capsys):
        """--save writes a markdown transcript."""
        main(["--personas", "cautious", "--seed", "1", "--turns", "3",
              "--save", str(tmp_path)])
        files = list(tmp_path.glob("sim_*.md"))
        assert len(files) == 1
        assert files[0].read_text(encoding="utf-8").startswith("# Simulation Transcript")

    def test_main_loads_board_file(self, tmp_path, capsys):
        """--board plays on a layout read from disk."""
        path = save_layout(DEMO_LAYOUT, tmp_path / "demo.yaml")
        code = main(["--personas", "brawler", "--seed", "2", "--turns", "3",
                     "--board", str(path)])
        assert code in (0, 1)
        assert "Final standings" in capsys.readouterr().out

    def test_main_rejects_board_without_home(self, tmp_path, capsys):
        """A board with no home panel is reported, not played."""
        layout = BoardLayout(
            panels=[PanelSpec(id=0, kind="neutral")],
            edges=[(0, 0)],
        )
        path = save_layout(layout, tmp_path / "homeless.json")
        code = main(["--board", str(path)])
        assert code == 2
        assert "no home panel" in capsys.readouterr().err

    def test_main_missing_board_file(self, tmp_path, capsys):
        """An unreadable board file exits with status 2."""
        code = main(["--board", str(tmp_path / "nope.yaml")])
        assert code == 2
