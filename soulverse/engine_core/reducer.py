"""
Reducer - Applies actions to a duel engine.

Sessions, bots and the API mutate a duel only through apply_action().

Design principles:
- Validates turn and status before touching the engine
- Translates the engine's boolean rejections into error codes
- Returns ActionResult with human-readable state changes
- Records successful actions in the engine's action history
"""

from __future__ import annotations
import logging
from dataclasses import dataclass

from .action import Action, ActionResult, ActionType
from .duel_engine import DuelEngine
from .state import GameStatus

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies actions to a duel.

    Stateless - all state is in the DuelEngine.
    """

    def apply(self, engine: DuelEngine, action: Action) -> ActionResult:
        """
        Apply an action to the duel.

        Returns ActionResult describing what changed, or the error.
        """
        validation_error = self._validate_action(engine, action)
        if validation_error:
            return validation_error

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
            )

        resolved_before = len(engine.resolver.resolved)
        result = handler(engine, action)
        if not result.success:
            logger.debug("Rejected %s: %s", action.describe(), result.error)
        else:
            engine.action_history.append(action)
            result.effects_resolved = [
                f"{e.ability.effect_type.value}({e.ability.value}) -> {e.target_id}"
                for e in engine.resolver.resolved[resolved_before:]
            ]
            if engine.is_finished:
                result.game_over = True
                result.winner_id = engine.winner_id
                result.state_changes.append(f"Duel over: {engine.winner_id} wins")
        return result

    def _validate_action(self, engine: DuelEngine, action: Action) -> ActionResult | None:
        """Returns a failure result if the action cannot apply now, None if it can."""
        if engine.game_status is not GameStatus.ACTIVE:
            return ActionResult.failure(
                f"Duel is {engine.game_status.value}", error_code="GAME_NOT_ACTIVE"
            )
        if action.payload.player_id != engine.active_player_id:
            return ActionResult.failure(
                f"Not {action.payload.player_id}'s turn", error_code="NOT_YOUR_TURN"
            )

        p = action.payload
        missing = {
            ActionType.PLAY_CARD: p.hand_index is None,
            ActionType.ATTACK_CREATURE: not p.attacker_id or not p.defender_id,
            ActionType.ATTACK_PLAYER: not p.attacker_id,
        }.get(action.action_type, False)
        if missing:
            return ActionResult.failure(
                f"Incomplete payload for {action.action_type.value}", error_code="INVALID_ACTION"
            )
        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.PLAY_CARD: self._handle_play_card,
            ActionType.ATTACK_CREATURE: self._handle_attack_creature,
            ActionType.ATTACK_PLAYER: self._handle_attack_player,
            ActionType.END_TURN: self._handle_end_turn,
        }
        return handlers.get(action_type)

    def _handle_play_card(self, engine: DuelEngine, action: Action) -> ActionResult:
        p = action.payload
        player = engine.get_player(p.player_id)
        card = player.hand.get_at(p.hand_index)
        if card is None:
            return ActionResult.failure(
                f"No card at hand index {p.hand_index}", error_code="ILLEGAL_MOVE"
            )
        if not engine.play_card(p.player_id, p.hand_index, p.target_id):
            return ActionResult.failure(
                f"Cannot play {card.name}: costs {card.cost}, {player.current_mana} mana available",
                error_code="ILLEGAL_MOVE",
            )
        return ActionResult.ok(changes=[f"{p.player_id} played {card.name}"])

    def _handle_attack_creature(self, engine: DuelEngine, action: Action) -> ActionResult:
        p = action.payload
        attacker = engine.find_card(p.attacker_id)
        defender = engine.find_card(p.defender_id)
        if not engine.attack_creature(p.attacker_id, p.defender_id):
            return ActionResult.failure(
                f"{p.attacker_id} cannot attack {p.defender_id}", error_code="ILLEGAL_MOVE"
            )
        return ActionResult.ok(changes=[f"{attacker.name} attacked {defender.name}"])

    def _handle_attack_player(self, engine: DuelEngine, action: Action) -> ActionResult:
        p = action.payload
        attacker = engine.find_card(p.attacker_id)
        opponent = engine.get_opponent(p.player_id)
        if not engine.attack_player(p.attacker_id):
            return ActionResult.failure(
                f"{p.attacker_id} cannot attack {opponent.player_id}", error_code="ILLEGAL_MOVE"
            )
        return ActionResult.ok(changes=[
            f"{attacker.name} hit {opponent.player_id} for {attacker.attack} (health {opponent.health})"
        ])

    def _handle_end_turn(self, engine: DuelEngine, action: Action) -> ActionResult:
        if not engine.end_turn():
            return ActionResult.failure("Cannot end turn", error_code="ILLEGAL_MOVE")
        return ActionResult.ok(changes=[
            f"{action.payload.player_id} ended turn; turn {engine.turn_count} belongs to {engine.active_player_id}"
        ])


def apply_action(engine: DuelEngine, action: Action) -> ActionResult:
    """Convenience function to apply an action."""
    return Reducer().apply(engine, action)
