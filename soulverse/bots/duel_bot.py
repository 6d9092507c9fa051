"""
Duel Bot - The scripted opponent that monsters fight with.

Each turn the bot:
1. Plays the first card in hand it can afford (at most one per turn)
2. Attacks with every ready creature: the first enemy creature if
   there is one, otherwise the enemy player
3. Ends the turn
"""

from __future__ import annotations
import logging

from ..engine_core import Action, ActionResult, ActionType, DuelEngine, Reducer, legal_actions
from .policy import BotDecision, BotPolicy

logger = logging.getLogger(__name__)

# Upper bound on actions in one turn, in case a move keeps failing
MAX_ACTIONS_PER_TURN = 50


class DuelBot(BotPolicy):
    """Scripted policy for one seat of a duel."""

    def __init__(self, player_id: str):
        self.player_id = player_id
        self._played_on_turn: int | None = None

    def select_action(
        self,
        engine: DuelEngine,
        legal_actions: list[Action],
    ) -> BotDecision:
        me = engine.get_player(self.player_id)
        opponent = engine.get_opponent(self.player_id)

        if self._played_on_turn != engine.turn_count:
            self._played_on_turn = engine.turn_count
            for index, card in enumerate(me.hand.cards):
                if card.cost <= me.current_mana:
                    return BotDecision(
                        action=Action.play_card(self.player_id, index),
                        explanation=f"Play {card.name} ({card.cost} mana)",
                        evaluated_actions=len(legal_actions),
                    )

        for attacker in me.battlefield.cards:
            if attacker.is_exhausted:
                continue
            defender = opponent.battlefield.get_at(0)
            if defender is not None:
                return BotDecision(
                    action=Action.attack_creature(self.player_id, attacker.runtime_id, defender.runtime_id),
                    explanation=f"{attacker.name} attacks {defender.name}",
                    evaluated_actions=len(legal_actions),
                )
            return BotDecision(
                action=Action.attack_player(self.player_id, attacker.runtime_id),
                explanation=f"{attacker.name} attacks {opponent.player_id}",
                evaluated_actions=len(legal_actions),
            )

        return BotDecision(
            action=Action.end_turn(self.player_id),
            explanation="Nothing left to do",
            evaluated_actions=len(legal_actions),
        )

    def take_turn(self, engine: DuelEngine, reducer: Reducer | None = None) -> list[ActionResult]:
        """Play out the bot's whole turn. Returns the result of each action applied."""
        reducer = reducer or Reducer()
        results: list[ActionResult] = []

        while (
            not engine.is_finished
            and engine.active_player_id == self.player_id
            and len(results) < MAX_ACTIONS_PER_TURN
        ):
            decision = self.select_action(engine, legal_actions(engine, self.player_id))
            logger.debug("%s: %s", self.player_id, decision.explanation)
            result = reducer.apply(engine, decision.action)
            results.append(result)

            if decision.action.action_type is ActionType.END_TURN:
                break
            if not result.success:
                logger.warning("%s action rejected (%s); ending turn", self.player_id, result.error)
                results.append(reducer.apply(engine, Action.end_turn(self.player_id)))
                break

        if (
            len(results) >= MAX_ACTIONS_PER_TURN
            and not engine.is_finished
            and engine.active_player_id == self.player_id
        ):
            results.append(reducer.apply(engine, Action.end_turn(self.player_id)))
        return results
