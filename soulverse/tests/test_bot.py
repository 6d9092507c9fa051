"""
Tests for bot policies.

Tests:
- DuelBot turn script (one play, attacks, end turn)
- Generic policies
- Bot-vs-bot duels terminate
"""

import pytest

from ..bots import DuelBot, FirstLegalPolicy, RandomPolicy
from ..engine_core import ActionType, Reducer, legal_actions


class TestDuelBot:
    """Tests for the scripted duel bot."""

    def test_plays_one_card_then_ends(self, grunt_duel):
        grunt_duel.end_turn()
        grunt_duel.end_turn()  # alice, 2 mana
        grunt_duel.player1.current_mana = 10

        results = DuelBot("alice").take_turn(grunt_duel)

        assert all(result.success for result in results)
        assert len(results) == 2
        assert grunt_duel.player1.battlefield.count == 1
        assert grunt_duel.active_player_id == "bob"

    def test_attacks_first_enemy_creature(self, grunt_duel, place):
        attacker = place(grunt_duel, "alice", "grunt")
        first = place(grunt_duel, "bob", "grunt")
        second = place(grunt_duel, "bob", "grunt")

        results = DuelBot("alice").take_turn(grunt_duel)

        assert results[0].state_changes == ["Grunt attacked Grunt"]
        assert grunt_duel.player2.battlefield.cards == [second]
        assert first not in grunt_duel.player2.battlefield.cards
        assert attacker not in grunt_duel.player1.battlefield.cards
        assert grunt_duel.player2.health == 20

    def test_attacks_face_with_empty_board(self, grunt_duel, place):
        place(grunt_duel, "alice", "grunt")
        place(grunt_duel, "alice", "grunt")

        DuelBot("alice").take_turn(grunt_duel)

        assert grunt_duel.player2.health == 16

    def test_skips_exhausted_creatures(self, grunt_duel, place):
        place(grunt_duel, "alice", "grunt", ready=False)

        results = DuelBot("alice").take_turn(grunt_duel)

        assert len(results) == 1
        assert grunt_duel.player2.health == 20

    def test_idle_when_not_its_turn(self, grunt_duel):
        assert DuelBot("bob").take_turn(grunt_duel) == []
        assert grunt_duel.active_player_id == "alice"

    def test_stops_when_duel_ends(self, grunt_duel, place):
        place(grunt_duel, "alice", "grunt")
        place(grunt_duel, "alice", "grunt")
        grunt_duel.player2.health = 2

        results = DuelBot("alice").take_turn(grunt_duel)

        assert len(results) == 1
        assert results[0].game_over
        assert grunt_duel.winner_id == "alice"

    def test_decision_is_always_legal(self, grunt_duel, place):
        grunt_duel.player1.current_mana = 5
        place(grunt_duel, "alice", "grunt")
        place(grunt_duel, "bob", "grunt")
        bot = DuelBot("alice")

        decision = bot.select_action(grunt_duel, legal_actions(grunt_duel))

        assert decision.action.action_type is ActionType.PLAY_CARD
        assert Reducer().apply(grunt_duel, decision.action).success

    @pytest.mark.parametrize("seed", [10, 20, 30])
    def test_bot_duel_terminates(self, make_duel, grunt, brute, seed):
        """Ten brutes outlast three grunts."""
        engine = make_duel([brute] * 10, [grunt] * 3, seed=seed, first="bob")
        reducer = Reducer()
        bots = {"alice": DuelBot("alice"), "bob": DuelBot("bob")}

        while not engine.is_finished and engine.turn_count < 100:
            bots[engine.active_player_id].take_turn(engine, reducer)

        assert engine.is_finished
        assert engine.winner_id == "alice"


class TestPolicies:
    """Tests for generic policies."""

    def test_first_legal(self, grunt_duel):
        actions = legal_actions(grunt_duel)
        decision = FirstLegalPolicy().select_action(grunt_duel, actions)

        assert decision.action is actions[0]
        assert decision.evaluated_actions == 1

    def test_random_is_seeded(self, grunt_duel, place):
        place(grunt_duel, "alice", "grunt")
        actions = legal_actions(grunt_duel)

        first = RandomPolicy(seed=3).select_action(grunt_duel, actions).action
        second = RandomPolicy(seed=3).select_action(grunt_duel, actions).action

        assert first is second
        assert first in actions

    @pytest.mark.parametrize("policy", [FirstLegalPolicy(), RandomPolicy(seed=0)])
    def test_no_actions_raises(self, grunt_duel, policy):
        with pytest.raises(ValueError):
            policy.select_action(grunt_duel, [])

    def test_name(self):
        assert DuelBot("alice").get_name() == "DuelBot"
