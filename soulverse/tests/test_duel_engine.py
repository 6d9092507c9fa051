"""
Tests for the duel engine.

Tests:
- Game start, turn flow and mana
- Card play legality
- Combat (simultaneous damage, exhaustion)
- Deaths, the win condition and the terminal state
- Whole-duel properties (card conservation, mana bounds)
"""

import pytest

from ..bots import DuelBot
from ..card_schema import creature
from ..engine_core import DuelEngine, GameStatus, Reducer, ZoneRole
from ..engine_core.state import MANA_CAP, OPENING_HAND_SIZE


def snapshot(engine):
    return [(p.health, [z.count for z in p.zones]) for p in engine.players]


class TestGameStart:
    """Tests for start_game and the first turn."""

    def test_new_engine_is_pre_game(self, make_duel, grunt):
        engine = make_duel([grunt] * 10, [grunt] * 10, start=False)

        assert engine.game_status is GameStatus.PRE_GAME
        assert engine.turn_count == 0
        assert engine.active_player_id is None
        assert engine.player1.deck.count == 10

    def test_start_deals_opening_hands(self, grunt_duel):
        """First player draws an extra card from the fused first start_turn."""
        alice, bob = grunt_duel.player1, grunt_duel.player2

        assert grunt_duel.game_status is GameStatus.ACTIVE
        assert grunt_duel.active_player_id == "alice"
        assert grunt_duel.turn_count == 1
        assert alice.hand.count == OPENING_HAND_SIZE + 1
        assert bob.hand.count == OPENING_HAND_SIZE
        assert alice.max_mana == 1
        assert alice.current_mana == 1
        assert bob.max_mana == 0

    def test_start_twice_fails(self, grunt_duel):
        assert not grunt_duel.start_game()
        assert grunt_duel.turn_count == 1

    def test_unknown_first_player_fails(self, make_duel, grunt):
        engine = make_duel([grunt] * 5, [grunt] * 5, start=False)

        assert not engine.start_game(first_player_id="carol")
        assert engine.game_status is GameStatus.PRE_GAME

    def test_coin_toss_is_seeded(self, grunt):
        """The same seed picks the same first player."""
        def first(seed):
            engine = DuelEngine("alice", [grunt] * 10, "bob", [grunt] * 10, seed=seed)
            engine.start_game()
            return engine.active_player_id

        assert first(11) == first(11)
        assert {first(seed) for seed in range(30)} == {"alice", "bob"}

    def test_duplicate_player_ids_rejected(self, grunt):
        with pytest.raises(ValueError):
            DuelEngine("alice", [grunt], "alice", [grunt])

    def test_runtime_ids_unique_across_players(self, grunt_duel):
        ids = [
            card.runtime_id
            for player in grunt_duel.players
            for zone in player.zones
            for card in zone.cards
        ]

        assert len(ids) == len(set(ids)) == 20

    def test_starting_health_override(self, make_duel, grunt):
        engine = make_duel([grunt], [grunt], starting_health=30)

        assert engine.player1.health == 30
        assert engine.player2.max_health == 30


class TestTurnFlow:
    """Tests for end_turn / start_turn."""

    def test_end_turn_passes_to_opponent(self, grunt_duel):
        assert grunt_duel.end_turn()

        bob = grunt_duel.player2
        assert grunt_duel.active_player_id == "bob"
        assert grunt_duel.turn_count == 2
        assert bob.max_mana == 1
        assert bob.hand.count == OPENING_HAND_SIZE + 1

    def test_turn_start_refreshes_battlefield(self, grunt_duel, place):
        card = place(grunt_duel, "alice", "grunt", ready=False)

        grunt_duel.end_turn()
        assert card.is_exhausted  # Only the active player's creatures refresh

        grunt_duel.end_turn()
        assert not card.is_exhausted

    def test_mana_caps_at_ten(self, grunt_duel):
        for _ in range(30):
            grunt_duel.end_turn()

        for player in grunt_duel.players:
            assert player.max_mana == MANA_CAP

    def test_end_turn_before_start_fails(self, make_duel, grunt):
        engine = make_duel([grunt], [grunt], start=False)

        assert not engine.end_turn()
        assert engine.turn_count == 0


class TestPlayCard:
    """Tests for play_card."""

    def test_cannot_afford_two_cost_on_turn_one(self, make_duel, grunt):
        """A single 2-cost card each; 1 mana on turn 1 is not enough."""
        engine = make_duel([grunt], [grunt])
        alice = engine.player1

        assert alice.hand.count == 1
        assert not engine.play_card("alice", 0)
        assert alice.hand.count == 1
        assert alice.current_mana == 1
        assert alice.battlefield.is_empty

    def test_play_moves_card_and_spends_mana(self, grunt_duel):
        grunt_duel.end_turn()
        grunt_duel.end_turn()  # alice, 2 mana
        alice = grunt_duel.player1
        card = alice.hand.get_at(0)

        assert grunt_duel.play_card("alice", 0)
        assert alice.current_mana == 0
        assert alice.battlefield.get_by_id(card.runtime_id) is card
        assert card.location is ZoneRole.BATTLEFIELD
        assert card.is_exhausted

    def test_not_your_turn(self, grunt_duel):
        grunt_duel.player2.current_mana = 10

        assert not grunt_duel.play_card("bob", 0)

    def test_bad_hand_index(self, grunt_duel):
        grunt_duel.player1.current_mana = 10

        assert not grunt_duel.play_card("alice", 42)
        assert not grunt_duel.play_card("alice", -1)

    def test_free_card_on_turn_one(self, make_duel):
        zero = creature("wisp", "Wisp", attack=1, defense=1, cost=0)
        engine = make_duel([zero] * 6, [zero] * 6)

        assert engine.play_card("alice", 0)
        assert engine.player1.current_mana == 1


class TestCombat:
    """Tests for attack_creature and attack_player."""

    def test_simultaneous_trade(self, make_duel, place, brute, grunt):
        """3/2 into 2/2: both die, both graveyards gain a card."""
        engine = make_duel([brute] * 6, [grunt] * 6)
        attacker = place(engine, "alice", "brute")
        defender = place(engine, "bob", "grunt")

        assert engine.attack_creature(attacker.runtime_id, defender.runtime_id)

        assert defender.health == 0
        assert attacker.health == 0
        assert defender.location is ZoneRole.GRAVEYARD
        assert attacker.location is ZoneRole.GRAVEYARD
        assert engine.player1.battlefield.is_empty
        assert engine.player2.battlefield.is_empty
        assert engine.player1.graveyard.count == 1
        assert engine.player2.graveyard.count == 1

    def test_survivor_keeps_damage(self, make_duel, place, grunt):
        big = creature("ogre", "Ogre", attack=1, defense=5, cost=4)
        engine = make_duel([big] * 6, [grunt] * 6)
        attacker = place(engine, "alice", "ogre")
        defender = place(engine, "bob", "grunt")

        engine.attack_creature(attacker.runtime_id, defender.runtime_id)

        assert attacker.health == 3
        assert attacker.location is ZoneRole.BATTLEFIELD
        assert defender.health == 1
        assert attacker.is_exhausted

    def test_exhausted_attacker_rejected(self, make_duel, place, grunt):
        engine = make_duel([grunt] * 6, [grunt] * 6)
        attacker = place(engine, "alice", "grunt")
        attacker.is_exhausted = True

        assert not engine.attack_player(attacker.runtime_id)
        assert engine.player2.health == 20

    def test_attack_once_per_turn(self, make_duel, place, grunt):
        engine = make_duel([grunt] * 6, [grunt] * 6)
        attacker = place(engine, "alice", "grunt")

        assert engine.attack_player(attacker.runtime_id)
        assert not engine.attack_player(attacker.runtime_id)
        assert engine.player2.health == 18

    def test_cannot_attack_own_creature(self, make_duel, place, grunt):
        engine = make_duel([grunt] * 6, [grunt] * 6)
        attacker = place(engine, "alice", "grunt")
        own = place(engine, "alice", "grunt")

        assert not engine.attack_creature(attacker.runtime_id, own.runtime_id)
        assert not attacker.is_exhausted

    def test_cannot_attack_with_enemy_creature(self, make_duel, place, grunt):
        engine = make_duel([grunt] * 6, [grunt] * 6)
        enemy = place(engine, "bob", "grunt")

        assert not engine.attack_player(enemy.runtime_id)
        assert engine.player1.health == 20

    def test_played_creature_waits_a_turn(self, make_duel):
        imp = creature("imp", "Imp", attack=1, defense=1, cost=0)
        engine = make_duel([imp] * 6, [imp] * 6)
        card = engine.player1.hand.get_at(0)

        assert engine.play_card("alice", 0)
        assert card.is_exhausted
        assert not engine.attack_player(card.runtime_id)
        assert engine.player2.health == 20

        engine.end_turn()
        engine.end_turn()

        assert engine.attack_player(card.runtime_id)
        assert engine.player2.health == 19

    def test_lethal_attack_finishes_duel(self, make_duel, place, brute):
        engine = make_duel([brute] * 6, [brute] * 6)
        attacker = place(engine, "alice", "brute")
        engine.player2.health = 3

        assert engine.attack_player(attacker.runtime_id)
        assert engine.game_status is GameStatus.FINISHED
        assert engine.winner_id == "alice"


class TestTerminalState:
    """Once FINISHED, nothing changes."""

    @pytest.fixture
    def finished(self, make_duel, place, brute):
        engine = make_duel([brute] * 8, [brute] * 8)
        attacker = place(engine, "alice", "brute")
        place(engine, "alice", "brute")
        engine.player2.health = 1
        engine.attack_player(attacker.runtime_id)
        return engine

    def test_all_operations_rejected(self, finished, place):
        spare = finished.player1.battlefield.get_at(0)
        enemy = place(finished, "bob", "brute")
        finished.player1.current_mana = 10
        before = snapshot(finished)

        assert not finished.play_card("alice", 0)
        assert not finished.attack_player(spare.runtime_id)
        assert not finished.attack_creature(spare.runtime_id, enemy.runtime_id)
        assert not finished.end_turn()
        assert not finished.start_turn("bob")
        assert not finished.start_game()
        assert snapshot(finished) == before
        assert not spare.is_exhausted

    def test_winner_frozen(self, finished):
        finished.player1.health = -10

        assert finished.check_win_condition() == "alice"
        assert finished.winner_id == "alice"

    def test_double_ko_goes_to_player1(self, make_duel, grunt):
        engine = make_duel([grunt] * 6, [grunt] * 6)
        engine.player1.health = 0
        engine.player2.health = 0

        assert engine.check_win_condition() == "alice"
        assert engine.is_finished

    def test_no_winner_while_both_alive(self, grunt_duel):
        assert grunt_duel.check_win_condition() is None
        assert grunt_duel.game_status is GameStatus.ACTIVE


class TestDuelProperties:
    """Properties over whole bot-vs-bot duels."""

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_full_duel_invariants(self, seed, pyromancer, grunt, cleric, martyr):
        deck = [grunt, pyromancer, cleric, martyr] * 5
        engine = DuelEngine("alice", deck, "bob", deck, seed=seed)
        engine.start_game()
        reducer = Reducer()
        bots = {"alice": DuelBot("alice"), "bob": DuelBot("bob")}

        while not engine.is_finished and engine.turn_count < 200:
            bots[engine.active_player_id].take_turn(engine, reducer)
            for player in engine.players:
                assert player.card_count == 20
                assert 0 <= player.current_mana <= player.max_mana <= MANA_CAP
                for card in player.battlefield.cards:
                    assert card.health > 0
                for card in player.graveyard.cards:
                    assert card.health == 0
                    assert card.location is ZoneRole.GRAVEYARD
            assert engine.effect_stack == []

        if engine.is_finished:
            assert engine.winner_id in ("alice", "bob")
            assert engine.get_opponent(engine.winner_id).is_defeated

