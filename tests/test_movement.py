"""Tests for placement and path resolution."""

import pytest

from citric_liquid.state.event_bus import EventType
from citric_liquid.state.panels import PanelKind
from citric_liquid.systems.movement import Halt, continue_through, place, walk
from citric_liquid.systems.turns import InvalidChoiceError


def chain(board, count, kind=PanelKind.NEUTRAL):
    """count panels linked one after the other."""
    panels = [board.create_panel(kind, i) for i in range(count)]
    for src, dst in zip(panels, panels[1:]):
        board.link(src, dst)
    return panels


def entered(player):
    return [e.new for e in player.events.get_history(EventType.PANEL_CHANGED)]


class TestWalk:
    """Test walking along single edges."""

    def test_zero_steps_stays_put(self, board, suguri):
        """A zero-step walk fires no entry events."""
        panels = chain(board, 3)
        place(suguri, panels[0])
        before = len(suguri.events.get_history())

        result = walk(suguri, 0)

        assert result.halt == Halt.EXHAUSTED
        assert result.remaining == 0
        assert suguri.current_panel is panels[0]
        assert len(suguri.events.get_history()) == before

    def test_walks_exact_budget(self, board, suguri):
        """Each step follows the only edge."""
        panels = chain(board, 5)
        place(suguri, panels[0])
        result = walk(suguri, 3)
        assert suguri.current_panel is panels[3]
        assert result.path == panels[1:4]
        assert not result.suspended

    def test_dead_end_discards_budget(self, board, suguri):
        """Running out of edges ends the walk."""
        panels = chain(board, 2)
        place(suguri, panels[0])
        result = walk(suguri, 5)
        assert result.halt == Halt.DEAD_END
        assert result.remaining == 0
        assert suguri.current_panel is panels[1]

    def test_negative_steps_rejected(self, board, suguri):
        """Step counts are non-negative."""
        place(suguri, chain(board, 1)[0])
        with pytest.raises(ValueError):
            walk(suguri, -1)

    def test_occupancy_follows_player(self, board, suguri):
        """The player is listed only on the panel it ends on."""
        panels = chain(board, 4)
        place(suguri, panels[0])
        walk(suguri, 3)
        assert [p for p in panels if suguri in p.players] == [panels[3]]

    def test_panel_changed_per_step(self, board, suguri):
        """Every entered panel reports a panel change."""
        panels = chain(board, 4)
        place(suguri, panels[0])
        walk(suguri, 3)
        assert entered(suguri) == panels


class TestForks:
    """Test suspension at forks."""

    def _fork_board(self, board):
        start = board.create_panel(PanelKind.NEUTRAL, 0)
        fork = board.create_panel(PanelKind.NEUTRAL, 1)
        left = board.create_panel(PanelKind.BONUS, 2)
        right = board.create_panel(PanelKind.DROP, 3)
        after = board.create_panel(PanelKind.NEUTRAL, 4)
        board.link(start, fork)
        board.link(fork, left)
        board.link(fork, right)
        board.link(right, after)
        return start, fork, left, right, after

    @pytest.mark.parametrize("steps", [2, 3, 6])
    def test_suspends_with_remaining_steps(self, board, suguri, steps):
        """A fork always suspends with the steps still to walk."""
        start, fork, *_ = self._fork_board(board)
        place(suguri, start)
        result = walk(suguri, steps)
        assert result.halt == Halt.FORK
        assert result.remaining == steps - 1
        assert suguri.current_panel is fork

    def test_fork_on_last_step_is_not_a_stop(self, board, suguri):
        """Ending on a fork simply ends the walk."""
        start, fork, *_ = self._fork_board(board)
        place(suguri, start)
        result = walk(suguri, 1)
        assert result.halt == Halt.EXHAUSTED
        assert suguri.current_panel is fork

    def test_reached_fork_event(self, board, suguri):
        """Entering a fork is reported."""
        start, fork, *_ = self._fork_board(board)
        place(suguri, start)
        walk(suguri, 2)
        assert suguri.events.get_history(EventType.REACHED_FORK)[-1].new is fork

    def test_continue_through_choice(self, board, suguri):
        """Resuming spends one step on the chosen branch and walks on."""
        start, fork, left, right, after = self._fork_board(board)
        place(suguri, start)
        result = walk(suguri, 3)
        result = continue_through(suguri, right, result.remaining)
        assert result.halt == Halt.EXHAUSTED
        assert suguri.current_panel is after

    def test_continue_through_invalid_choice(self, board, suguri):
        """A panel that is not a successor is rejected and nothing moves."""
        start, fork, left, right, after = self._fork_board(board)
        place(suguri, start)
        walk(suguri, 3)
        with pytest.raises(InvalidChoiceError):
            continue_through(suguri, after, 2)
        assert suguri.current_panel is fork
        assert suguri in fork.players

    def test_continue_needs_steps(self, board, suguri):
        """There must be a step left to spend."""
        start, fork, left, *_ = self._fork_board(board)
        place(suguri, fork)
        with pytest.raises(ValueError):
            continue_through(suguri, left, 0)


class TestHome:
    """Test suspension at the player's home."""

    def test_home_suspends_mid_walk(self, board, suguri):
        """Passing home stops the walk even on a single edge."""
        panels = chain(board, 4)
        suguri.home_panel = panels[2]
        place(suguri, panels[0])
        result = walk(suguri, 3)
        assert result.halt == Halt.HOME
        assert result.remaining == 1
        assert suguri.current_panel is panels[2]

    def test_landing_on_home_is_not_a_stop(self, board, suguri):
        """Arriving home on the last step ends normally."""
        panels = chain(board, 3)
        suguri.home_panel = panels[2]
        place(suguri, panels[0])
        result = walk(suguri, 2)
        assert result.halt == Halt.EXHAUSTED
        assert suguri.events.get_history(EventType.REACHED_HOME)[-1].new is panels[2]

    def test_other_homes_do_not_stop(self, board, suguri, kai):
        """Only the player's own home suspends the walk."""
        panels = chain(board, 4, PanelKind.HOME)
        kai.home_panel = panels[1]
        place(suguri, panels[0])
        result = walk(suguri, 3)
        assert result.halt == Halt.EXHAUSTED
        assert suguri.current_panel is panels[3]


class TestEncounters:
    """Test meeting other players."""

    def test_stumble_event(self, board, suguri, kai):
        """Entering an occupied panel is reported."""
        panels = chain(board, 3)
        place(kai, panels[1])
        place(suguri, panels[0])
        walk(suguri, 2)
        stumble = suguri.events.get_history(EventType.STUMBLED_UPON_PLAYER)
        assert [e.new for e in stumble] == [panels[1]]

    def test_stop_rule_interrupts(self, board, suguri, kai):
        """A stop rule suspends the walk with the remaining steps."""
        panels = chain(board, 4)
        place(kai, panels[1])
        place(suguri, panels[0])

        def occupied(player, panel):
            return any(other is not player for other in panel.players)

        result = walk(suguri, 3, stop_on=occupied)
        assert result.halt == Halt.INTERRUPTED
        assert result.remaining == 2
        assert suguri.current_panel is panels[1]

    def test_no_stop_rule_walks_past(self, board, suguri, kai):
        """Without a stop rule occupied panels are walked through."""
        panels = chain(board, 4)
        place(kai, panels[1])
        place(suguri, panels[0])
        result = walk(suguri, 3)
        assert result.halt == Halt.EXHAUSTED
        assert suguri.current_panel is panels[3]
        assert kai in panels[1].players
