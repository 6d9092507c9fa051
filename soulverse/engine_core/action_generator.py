"""
Action Generator - Enumerates the legal actions of a duel.

The action generator is used by:
1. Bots to enumerate possible moves
2. The API to show available actions

Every generated action is fully specified and accepted by the reducer.
"""

from __future__ import annotations
from dataclasses import dataclass

from .action import Action
from .duel_engine import DuelEngine
from .state import GameStatus


@dataclass
class ActionGenerator:
    """Generates legal actions for the active player of a duel."""
    engine: DuelEngine

    def generate(self, player_id: str | None = None) -> list[Action]:
        """
        Generate all legal actions for player_id (default: the active player).

        Returns an empty list when the duel is not active or it is not
        player_id's turn. Otherwise END_TURN is always included, last.
        """
        engine = self.engine
        if engine.game_status is not GameStatus.ACTIVE:
            return []

        player_id = player_id or engine.active_player_id
        if player_id != engine.active_player_id:
            return []

        actions = []
        actions.extend(self._generate_play_actions(player_id))
        actions.extend(self._generate_attack_actions(player_id))
        actions.append(Action.end_turn(player_id))
        return actions

    def _generate_play_actions(self, player_id: str) -> list[Action]:
        player = self.engine.get_player(player_id)
        return [
            Action.play_card(player_id, index)
            for index, card in enumerate(player.hand.cards)
            if card.cost <= player.current_mana
        ]

    def _generate_attack_actions(self, player_id: str) -> list[Action]:
        player = self.engine.get_player(player_id)
        opponent = self.engine.get_opponent(player_id)
        actions = []
        for attacker in player.battlefield.cards:
            if attacker.is_exhausted:
                continue
            for defender in opponent.battlefield.cards:
                actions.append(
                    Action.attack_creature(player_id, attacker.runtime_id, defender.runtime_id)
                )
            actions.append(Action.attack_player(player_id, attacker.runtime_id))
        return actions


def legal_actions(engine: DuelEngine, player_id: str | None = None) -> list[Action]:
    """Convenience function to get legal actions."""
    return ActionGenerator(engine).generate(player_id)
