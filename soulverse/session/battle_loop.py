"""
Battle Loop - Drives one battle session from first turn to outcome.

The loop:
1. Starts the duel (coin toss for the first player)
2. Runs the monster's turn whenever it becomes active
3. Applies the player's actions through the reducer
4. When the duel ends, resolves the post-battle outcome exactly once
5. A surrender ends the battle early with the surrender penalty
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from ..engine_core import Action, GameStatus, Reducer
from ..post_battle import BattleOutcome, PlayerProfile, PostBattleResolver
from .manager import SessionState

if TYPE_CHECKING:
    from .manager import BattleSession

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the battle loop."""
    NOT_STARTED = "not_started"
    WAITING_PLAYER = "waiting_player"
    BATTLE_OVER = "battle_over"  # Duel finished, outcome pending
    RESOLVED = "resolved"


@dataclass
class TurnResult:
    """Result of a player action, including the bot turn it triggered."""
    success: bool
    loop_state: LoopState
    state_changes: list[str] = field(default_factory=list)
    bot_actions: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    error_code: str | None = None
    winner_id: str | None = None


class BattleLoop:
    """
    The battle driver for a single session.

    Usage:
        loop = BattleLoop(session)
        loop.start()

        result = loop.submit_action(Action.play_card(player_id, 0))
        if result.loop_state is LoopState.BATTLE_OVER:
            outcome = loop.resolve(profile)
    """

    def __init__(
        self,
        session: BattleSession,
        resolver: PostBattleResolver | None = None,
        reducer: Reducer | None = None,
    ):
        self.session = session
        self.resolver = resolver or PostBattleResolver(rng=session.engine.rng)
        self.reducer = reducer or Reducer()
        self.state = LoopState.NOT_STARTED

    @property
    def engine(self):
        return self.session.engine

    def start(self, first_player_id: str | None = None) -> TurnResult:
        """Start the duel; if the monster goes first, play its turn."""
        if self.state is not LoopState.NOT_STARTED:
            return TurnResult(
                success=False,
                loop_state=self.state,
                errors=["Battle already started"],
                error_code="INVALID_ACTION",
            )

        self.engine.start_game(first_player_id)
        self.state = LoopState.WAITING_PLAYER
        changes = [f"Battle started; {self.engine.active_player_id} goes first"]
        self.session.action_log.extend(changes)

        bot_actions = self._run_bot_if_active()
        return self._result(True, changes, bot_actions)

    def submit_action(self, action: Action) -> TurnResult:
        """Apply the player's action, then let the monster respond."""
        self.session.touch()
        if self.state is not LoopState.WAITING_PLAYER:
            return TurnResult(
                success=False,
                loop_state=self.state,
                errors=[f"Battle is {self.state.value}"],
                error_code="GAME_NOT_ACTIVE",
            )

        if action.payload.player_id is None:
            action.payload.player_id = self.session.human_player_id
        if action.payload.player_id != self.session.human_player_id:
            return TurnResult(
                success=False,
                loop_state=self.state,
                errors=[f"{action.payload.player_id} is not controlled by the player"],
                error_code="NOT_YOUR_TURN",
            )

        result = self.reducer.apply(self.engine, action)
        if not result.success:
            return TurnResult(
                success=False,
                loop_state=self.state,
                errors=[result.error],
                error_code=result.error_code,
            )

        self.session.action_log.extend(result.state_changes)
        bot_actions = self._run_bot_if_active()
        return self._result(True, result.state_changes, bot_actions)

    def _run_bot_if_active(self) -> list[str]:
        bot = self.session.bot
        changes: list[str] = []
        if self.engine.game_status is GameStatus.ACTIVE and self.engine.active_player_id == bot.player_id:
            for result in bot.take_turn(self.engine, self.reducer):
                changes.extend(result.state_changes)
            self.session.action_log.extend(changes)
        self._sync_state()
        return changes

    def _sync_state(self) -> None:
        if self.engine.is_finished and self.state is LoopState.WAITING_PLAYER:
            self.state = LoopState.BATTLE_OVER
            self.session.state = SessionState.FINISHED
            logger.info("Session %s battle over: %s wins", self.session.session_id, self.engine.winner_id)

    def _result(self, success: bool, changes: list[str], bot_actions: list[str]) -> TurnResult:
        return TurnResult(
            success=success,
            loop_state=self.state,
            state_changes=list(changes),
            bot_actions=bot_actions,
            winner_id=self.engine.winner_id,
        )

    # ========================================================================
    # Ending the battle
    # ========================================================================

    def resolve(self, profile: PlayerProfile) -> BattleOutcome:
        """
        Apply the post-battle outcome to profile. Runs once per battle.

        Raises ValueError if the duel is still running.
        """
        if self.session.outcome is not None:
            return self.session.outcome
        if not self.engine.is_finished:
            raise ValueError("Battle is not finished; surrender to end it early")

        outcome = self.resolver.resolve(
            self.engine,
            profile,
            opponent=self.session.opponent,
            player_id=self.session.human_player_id,
        )
        self._store(outcome, SessionState.RESOLVED)
        return outcome

    def surrender(self, profile: PlayerProfile) -> BattleOutcome:
        """Abandon a running battle. Random equipped cards break."""
        if self.session.outcome is not None:
            return self.session.outcome
        if self.engine.is_finished:
            return self.resolve(profile)

        outcome = self.resolver.apply_surrender_penalty(profile)
        self._store(outcome, SessionState.ABANDONED)
        self.session.action_log.append(f"{self.session.human_player_id} surrendered")
        return outcome

    def _store(self, outcome: BattleOutcome, state: SessionState) -> None:
        self.session.outcome = outcome
        self.session.state = state
        self.state = LoopState.RESOLVED
