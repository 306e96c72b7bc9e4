"""
Game controller.

Owns every entity of one game (board, players, wild and boss units), the
active turn phase, the turn and chapter counters and the winner. All
turn-driving goes through its methods; the movement engine, combat and
norma rules are plain functions it calls.

Turn pipeline:
    begin_turn()            START -> CARD_PICK   (or recovery_trial() if KO'd)
    use_card() / do_move()  CARD_PICK -> MOVING -> walk
    continue_moving_through(panel)   resume after PATH_CHOOSE / HOME_STOP_CHOOSE
    stop_at_home()          settle at home
    engage_combat() / decline_combat()   answer COMBAT_CHOOSE
    pick_norma_goal(kind)   NORMA_PICK -> END
    finish_turn()           END -> START for the next player

Once a winner is recorded every turn-driving call raises GameOverError.
"""

from __future__ import annotations

import logging
from typing import Any

from ..config import GameConfig
from ..rules.combat import BattleReport, battle
from ..rules.norma import make_goal, norma_check, stars_goal, wins_goal
from ..state.event_bus import EventType, GameEvent
from ..state.panels import NULL_PANEL, Board, Panel, PanelKind
from ..state.schema import BoardLayout, NormaGoal, NormaKind
from ..state.units import BossUnit, Player, Stance, Unit, WildUnit
from ..tools.dice import Dice
from . import movement
from .movement import Halt, Walk
from .turns import (
    GameOverError,
    InvalidChoiceError,
    InvalidPhaseError,
    PhaseKind,
    TurnError,
    TurnPhase,
)

logger = logging.getLogger(__name__)


class GameController:
    """
    Central context object for one game of Citric Liquid.

    Usage:
        controller = GameController(GameConfig(seed=7))
        home = controller.create_home_panel(0)
        ...
        suguri = controller.create_player("Suguri", 4, 1, -1, 2, home)
        controller.set_player_home(suguri, home)
        controller.begin_turn()
        controller.do_move()
    """

    def __init__(self, config: GameConfig | None = None, dice: Dice | None = None):
        self.config = config or GameConfig()
        self.dice = dice or Dice(sides=self.config.dice_sides, seed=self.config.seed)
        self.board = Board(bonus_cap=self.config.bonus_norma_cap)

        self._players: list[Player] = []
        self._wild_units: list[WildUnit] = []
        self._boss_units: list[BossUnit] = []

        self._turn = 0
        self._chapter = 1
        self._phase = TurnPhase.start()
        self._winner: Player | None = None
        self._awaiting_recovery = False

        self.battles: list[BattleReport] = []

    # ─── Observation ─────────────────────────────────────────────

    @property
    def players(self) -> list[Player]:
        return list(self._players)

    @property
    def panels(self) -> list[Panel]:
        return self.board.panels

    @property
    def wild_units(self) -> list[WildUnit]:
        return list(self._wild_units)

    @property
    def boss_units(self) -> list[BossUnit]:
        return list(self._boss_units)

    @property
    def turn_owner(self) -> Player:
        if not self._players:
            raise TurnError("No players have been created")
        return self._players[self._turn]

    @property
    def chapter(self) -> int:
        return self._chapter

    @property
    def phase(self) -> TurnPhase:
        return self._phase

    @property
    def winner(self) -> Player | None:
        return self._winner

    @property
    def game_ended(self) -> bool:
        return self._winner is not None

    @property
    def awaiting_recovery(self) -> bool:
        """Whether the turn owner must roll a recovery trial before acting."""
        return self._awaiting_recovery

    def get_player_panel(self, player: Player) -> Panel:
        return player.current_panel

    def snapshot(self) -> dict[str, Any]:
        """
        Plain-data view of the observable game state.

        Suitable for rendering or for writing into a transcript.
        """
        snapshot: dict[str, Any] = {
            "chapter": self._chapter,
            "turn_owner": self._players[self._turn].name if self._players else None,
            "phase": self._phase.kind.value,
            "steps": self._phase.steps,
            "winner": self._winner.name if self._winner else None,
        }
        snapshot["players"] = [
            {
                "name": p.name,
                "hp": p.current_hp,
                "max_hp": p.max_hp,
                "stars": p.stars,
                "wins": p.wins,
                "norma_level": p.norma_level,
                "norma_goal": p.norma_goal.summary,
                "panel": None if p.current_panel.is_null else p.current_panel.id,
                "home": None if p.home_panel.is_null else p.home_panel.id,
                "knocked_out": p.is_ko,
                "recovery_left": p.recovery_left,
            }
            for p in self._players
        ]
        return snapshot

    # ─── Entity factories ────────────────────────────────────────

    def create_player(
        self,
        name: str,
        hp: int,
        atk: int,
        def_: int,
        evd: int,
        panel: Panel = NULL_PANEL,
    ) -> Player:
        """
        Create a player, register it in turn order and put it on ``panel``.

        The controller subscribes to the player's events so norma clears
        and encounter panels feed back into the game.
        """
        if not panel.is_null and panel not in self.board:
            raise ValueError(f"{panel!r} does not belong to this board")

        player = Player(name, hp, atk, def_, evd, dice=self.dice)
        player.recovery_counter = self.config.recovery_counter
        player.set_norma_goal(stars_goal(1, self.config))

        player.events.on(EventType.NORMA_LEVEL_CHANGED, self._on_norma_level_changed)
        player.events.on(EventType.LANDED_ON_ENCOUNTER, self._on_encounter)
        player.events.on(EventType.LANDED_ON_BOSS_ENCOUNTER, self._on_boss_encounter)

        self._players.append(player)
        if not panel.is_null:
            movement.place(player, panel)
        return player

    def create_wild_unit(self, name: str, hp: int, atk: int, def_: int, evd: int) -> WildUnit:
        unit = WildUnit(name, hp, atk, def_, evd, dice=self.dice)
        self._wild_units.append(unit)
        return unit

    def create_boss_unit(self, name: str, hp: int, atk: int, def_: int, evd: int) -> BossUnit:
        unit = BossUnit(name, hp, atk, def_, evd, dice=self.dice)
        self._boss_units.append(unit)
        return unit

    def create_panel(self, kind: PanelKind, panel_id: int) -> Panel:
        return self.board.create_panel(kind, panel_id)

    def create_home_panel(self, panel_id: int) -> Panel:
        return self.create_panel(PanelKind.HOME, panel_id)

    def create_neutral_panel(self, panel_id: int) -> Panel:
        return self.create_panel(PanelKind.NEUTRAL, panel_id)

    def create_drop_panel(self, panel_id: int) -> Panel:
        return self.create_panel(PanelKind.DROP, panel_id)

    def create_boss_panel(self, panel_id: int) -> Panel:
        return self.create_panel(PanelKind.BOSS, panel_id)

    def create_encounter_panel(self, panel_id: int) -> Panel:
        return self.create_panel(PanelKind.ENCOUNTER, panel_id)

    def create_bonus_panel(self, panel_id: int) -> Panel:
        return self.create_panel(PanelKind.BONUS, panel_id)

    def set_next_panel(self, src: Panel, dst: Panel) -> None:
        self.board.link(src, dst)

    def build_board(self, layout: BoardLayout) -> Board:
        """Replace the (empty) board with one built from a layout."""
        if len(self.board):
            raise ValueError("The board already has panels")
        self.board = Board.from_layout(layout, bonus_cap=self.config.bonus_norma_cap)
        return self.board

    def set_player_home(self, player: Player, panel: Panel) -> None:
        player.home_panel = panel

    def place_player(self, panel: Panel) -> None:
        """Put the turn owner on a panel without triggering its effect."""
        movement.place(self.turn_owner, panel)

    def set_stance(self, unit: Unit, stance: Stance) -> None:
        unit.stance = stance

    # ─── Norma ───────────────────────────────────────────────────

    def norma_check(self, player: Player) -> bool:
        """Advance the player's norma level if the goal is met."""
        self._check_not_over()
        return self._norma_check(player)

    def set_norma_goal(self, goal: NormaGoal) -> None:
        """Install a goal for the turn owner."""
        self.turn_owner.set_norma_goal(goal)

    def set_stars_norma(self, player: Player) -> None:
        player.set_norma_goal(stars_goal(player.norma_level, self.config))

    def set_wins_norma(self, player: Player) -> None:
        player.set_norma_goal(wins_goal(player.norma_level, self.config))

    # ─── Turn driving ────────────────────────────────────────────

    def begin_turn(self) -> None:
        """
        Start the turn owner's turn.

        Awards the chapter star bonus. A KO'd owner stays in START and
        must call recovery_trial() next.
        """
        self._require("begin turn", PhaseKind.START)
        if self._awaiting_recovery:
            raise InvalidPhaseError(self._phase.kind, "begin turn")

        owner = self.turn_owner
        logger.info(f"Chapter {self._chapter}: {owner.name}'s turn")
        if self.config.chapter_star_bonus:
            owner.increase_stars_by(self._chapter // 5 + 1)

        if owner.is_ko:
            self._awaiting_recovery = True
            logger.debug(f"{owner.name} is knocked out, {owner.recovery_left} to recover")
            return
        self._set_phase(self._phase.card_pick())

    def recovery_trial(self) -> int:
        """
        Roll the turn owner's recovery trial.

        Success continues the turn at CARD_PICK, failure ends it.

        Returns:
            The recovery countdown after the roll
        """
        self._require("roll recovery", PhaseKind.START)
        if not self._awaiting_recovery:
            raise InvalidPhaseError(self._phase.kind, "roll recovery")

        owner = self.turn_owner
        left = owner.recovery_trial()
        self._awaiting_recovery = False
        if left == 0:
            logger.info(f"{owner.name} recovered")
            self._set_phase(self._phase.card_pick())
        else:
            self._set_phase(self._phase.end_phase())
        return left

    def use_card(self) -> int:
        """Play the turn's card: roll the movement budget and enter MOVING."""
        self._require("use a card", PhaseKind.CARD_PICK)
        self._require_standing("use a card")
        steps = self.turn_owner.roll()
        self._set_phase(self._phase.move_to(steps))
        return steps

    def do_move(self) -> int:
        """Walk the rolled budget. Rolls first when called from CARD_PICK."""
        self._require("move", PhaseKind.CARD_PICK, PhaseKind.MOVING)
        if self._phase.is_card_pick:
            self.use_card()
        return self.move_player(self._phase.steps)

    def move_player(self, steps: int) -> int:
        """
        Move the turn owner up to ``steps`` panels.

        Returns:
            Steps left when the walk suspended at a fork, home or rival
            (0 when the turn owner came to rest)
        """
        self._require("move", PhaseKind.START, PhaseKind.CARD_PICK, PhaseKind.MOVING)
        self._require_standing("move")
        if steps < 0:
            raise ValueError(f"Step count must be non-negative, got {steps}")

        if self._phase.is_moving:
            self._set_phase(TurnPhase(PhaseKind.MOVING, steps))
        else:
            self._set_phase(self._phase.move_to(steps))

        player = self.turn_owner
        return self._follow(player, movement.walk(player, steps, stop_on=self._blocks))

    def continue_moving_through(self, panel: Panel) -> int:
        """
        Resume a walk suspended at a fork or at home through ``panel``.

        Raises:
            InvalidChoiceError: If ``panel`` is not reachable in one step
                (the phase and position are left unchanged)
        """
        self._require("continue moving", PhaseKind.PATH_CHOOSE, PhaseKind.HOME_STOP_CHOOSE)
        player = self.turn_owner
        if panel not in player.current_panel.next_panels:
            raise InvalidChoiceError(player.current_panel, panel)

        steps = self._phase.steps
        self._set_phase(self._phase.move_to(steps))
        walk = movement.continue_through(player, panel, steps, stop_on=self._blocks)
        return self._follow(player, walk)

    def stop_at_home(self) -> None:
        """Stay at home, spending the remaining steps."""
        self._require("stop at home", PhaseKind.HOME_STOP_CHOOSE)
        self._settle(self.turn_owner)

    def engage_combat(self) -> BattleReport | None:
        """Fight the rival the turn owner stumbled upon, then end movement."""
        self._require("engage combat", PhaseKind.COMBAT_CHOOSE)
        player = self.turn_owner
        rival = self._rival_of(player)

        report = None
        if rival is not None:
            report = battle(player, rival)
            self.battles.append(report)
            logger.debug(f"{player.name} fought {rival.name}: {report.winner or 'no'} winner")
        self._settle(player, check_rival=False)
        return report

    def decline_combat(self) -> int:
        """Pass the rival by and keep walking with the remaining steps."""
        self._require("decline combat", PhaseKind.COMBAT_CHOOSE)
        player = self.turn_owner
        steps = self._phase.steps
        if steps == 0:
            self._settle(player, check_rival=False)
            return 0

        self._set_phase(self._phase.move_to(steps))
        return self._follow(player, movement.walk(player, steps, stop_on=self._blocks))

    def pick_norma_goal(self, kind: NormaKind) -> NormaGoal:
        """Choose the goal for the norma level just reached."""
        self._require("pick a norma goal", PhaseKind.NORMA_PICK)
        owner = self.turn_owner
        goal = make_goal(kind, owner.norma_level, self.config)
        owner.set_norma_goal(goal)
        self._set_phase(self._phase.end_phase())
        return goal

    def force_encounter(self) -> None:
        self._check_not_over()
        self.turn_owner.force_encounter()

    def force_boss_encounter(self) -> None:
        self._check_not_over()
        self.turn_owner.force_boss_encounter()

    def end_turn(self) -> None:
        """
        End the turn and pass it on.

        Accepted in START, MOVING, HOME_STOP_CHOOSE, COMBAT_CHOOSE,
        NORMA_PICK and END. CARD_PICK and PATH_CHOOSE raise InvalidPhaseError.
        """
        self._check_not_over()
        if not self._phase.is_end:
            self._set_phase(self._phase.end_phase())
        self.finish_turn()

    def finish_turn(self) -> None:
        """Hand the turn to the next player, advancing the chapter on wrap."""
        self._require("finish turn", PhaseKind.END)
        logger.info(f"{self.turn_owner.name}'s turn is over")

        self._turn = (self._turn + 1) % len(self._players)
        if self._turn == 0:
            self._chapter += 1
            logger.info(f"Chapter {self._chapter} begins")
        self._awaiting_recovery = False
        self._set_phase(self._phase.start_phase())

    # ─── Internals ───────────────────────────────────────────────

    def _check_not_over(self) -> None:
        if self._winner is not None:
            raise GameOverError(self._winner)

    def _require(self, operation: str, *kinds: PhaseKind) -> None:
        self._check_not_over()
        if self._phase.kind not in kinds:
            raise InvalidPhaseError(self._phase.kind, operation)

    def _require_standing(self, operation: str) -> None:
        """A knocked out owner must pass a recovery trial before acting."""
        if self._awaiting_recovery or self.turn_owner.is_ko:
            raise InvalidPhaseError(self._phase.kind, operation)

    def _set_phase(self, phase: TurnPhase) -> None:
        logger.debug(f"Phase {self._phase} -> {phase}")
        self._phase = phase

    def _rival_of(self, player: Player) -> Player | None:
        """First other standing player on the same panel."""
        for other in player.current_panel.players:
            if other is not player and not other.is_ko:
                return other
        return None

    def _blocks(self, player: Player, panel: Panel) -> bool:
        return any(other is not player and not other.is_ko for other in panel.players)

    def _at_home(self, player: Player) -> bool:
        return not player.home_panel.is_null and player.current_panel == player.home_panel

    def _follow(self, player: Player, walk: Walk) -> int:
        """Pick the phase that answers how a walk stopped."""
        logger.debug(
            f"{player.name} halted ({walk.halt.value}) on {player.current_panel!r}, "
            f"{walk.remaining} steps left"
        )
        if walk.halt == Halt.FORK:
            self._set_phase(self._phase.path_choose(walk.remaining))
        elif walk.halt == Halt.HOME:
            self._set_phase(self._phase.home_stop_choose(walk.remaining))
        elif walk.halt == Halt.INTERRUPTED:
            self._set_phase(self._phase.combat_choose(walk.remaining))
        else:
            self._settle(player)
        return walk.remaining

    def _settle(self, player: Player, check_rival: bool = True) -> None:
        """
        Bring the walk to rest on the player's current panel.

        A standing rival on the panel is offered first. Then the panel
        takes effect, and at home the norma is checked.
        """
        if check_rival and self._rival_of(player) is not None:
            self._set_phase(self._phase.combat_choose(0))
            return

        if not player.is_ko:
            player.current_panel.activated_by(player)
        if player.is_ko:
            self._set_phase(self._phase.end_phase())
            return

        if self._at_home(player) and self._norma_check(player) and self._winner is None:
            self._set_phase(self._phase.norma_pick())
            return
        self._set_phase(self._phase.end_phase())

    def _norma_check(self, player: Player) -> bool:
        cleared = norma_check(player, self.config)
        if (
            not cleared
            and self._at_home(player)
            and player.norma_level >= self.config.final_norma_level
        ):
            self._declare_winner(player)
        return cleared

    def _declare_winner(self, player: Player) -> None:
        if self._winner is None:
            self._winner = player
            logger.info(f"{player.name} wins in chapter {self._chapter}")

    # ─── Event handlers ──────────────────────────────────────────

    def _on_norma_level_changed(self, event: GameEvent) -> None:
        player = event.source
        if event.new >= self.config.final_norma_level and self._at_home(player):
            self._declare_winner(player)

    def _on_encounter(self, event: GameEvent) -> None:
        self._fight_registered(event.source, self._wild_units, "wild unit")

    def _on_boss_encounter(self, event: GameEvent) -> None:
        self._fight_registered(event.source, self._boss_units, "boss")

    def _fight_registered(self, player: Player, units: list, label: str) -> None:
        if not units:
            logger.warning(f"{player.name} met no {label}: none is registered")
            return

        if len(units) == 1:
            opponent = units[0]
        else:
            opponent = units[self.dice.choice_index(len(units))]
        report = battle(player, opponent)
        self.battles.append(report)
        if opponent.is_ko:
            opponent.restore()
