"""
Integration tests for the full battle flow.

Tests:
- A whole battle played through the API service
- Profile consequences carried into the next battle
- CLI commands
"""

import random
import sys

import pytest

from ..api.schemas import ActionRequest, BattleStatus, CreateBattleRequest
from ..api.service import APIService
from ..bots import DuelBot
from ..cli import main
from ..content import create_starter_profile
from ..engine_core import legal_actions


def to_request(action):
    p = action.payload
    return ActionRequest(
        action_type=action.action_type.value,
        hand_index=p.hand_index,
        target_id=p.target_id,
        attacker_id=p.attacker_id,
        defender_id=p.defender_id,
    )


def play_out(service, battle_id, max_actions=400):
    """Let a DuelBot play the player's side until the battle ends."""
    session = service.session_manager.get_session(battle_id)
    bot = DuelBot(session.human_player_id)

    state = service.get_battle(battle_id)
    for _ in range(max_actions):
        if state.status is not BattleStatus.YOUR_TURN:
            break
        engine = session.engine
        decision = bot.select_action(engine, legal_actions(engine, session.human_player_id))
        response = service.submit_action(battle_id, to_request(decision.action))
        assert response.success, response
        state = response.battle
    return state


class TestFullBattleFlow:
    """Tests for a whole battle through the service."""

    @pytest.mark.parametrize("opponent", ["mist_shade", "forest_lurker"])
    def test_battle_to_outcome(self, opponent):
        service = APIService(profile=create_starter_profile(random.Random(11)))
        battle = service.create_battle(CreateBattleRequest(opponent_id=opponent, random_seed=11))

        state = play_out(service, battle.battle_id)
        outcome = service.end_battle(battle.battle_id)
        profile = service.get_profile()

        if state.status is BattleStatus.RESOLVED:
            assert not outcome.surrendered
            assert outcome.victory == (state.winner_id == profile.id)
            assert (outcome.loot is not None) == outcome.victory
        else:
            assert outcome.surrendered
        assert outcome.profile == profile
        assert len(profile.deck) + len(profile.graveyard) == 12
        assert {card.id for card in outcome.broken_cards} <= {card.id for card in profile.graveyard}

    def test_broken_cards_carry_over(self):
        service = APIService(profile=create_starter_profile(random.Random(2)))
        first = service.create_battle(CreateBattleRequest(opponent_id="pyro_walker", random_seed=2))
        play_out(service, first.battle_id)
        service.end_battle(first.battle_id)
        profile = service.get_profile()

        second = service.create_battle(CreateBattleRequest(opponent_id="mist_shade", random_seed=3))
        engine = service.session_manager.get_session(second.battle_id).engine

        assert engine.player1.card_count == len(profile.deck) == 12 - len(profile.graveyard)

    def test_seeded_battles_replay(self):
        def transcript():
            service = APIService(profile=create_starter_profile(random.Random(5)))
            battle = service.create_battle(CreateBattleRequest(opponent_id="mist_shade", random_seed=5))
            play_out(service, battle.battle_id)
            return service.session_manager.get_session(battle.battle_id).action_log

        assert transcript() == transcript()


class TestCLI:
    """Tests for CLI commands."""

    def run(self, monkeypatch, *args):
        monkeypatch.setattr(sys, "argv", ["soulverse", *args])
        main()

    def test_monsters(self, monkeypatch, capsys):
        self.run(monkeypatch, "monsters")

        out = capsys.readouterr().out
        assert len(out.strip().splitlines()) == 4
        assert "crystal_golem" in out

    def test_simulate(self, monkeypatch, capsys):
        self.run(monkeypatch, "simulate", "--opponent", "mist_shade", "--seed", "3")

        out = capsys.readouterr().out
        assert "vs Mist Shade (10 health)" in out
        assert "Winner:" in out or "No winner" in out

    def test_simulate_unknown_opponent(self, monkeypatch, capsys):
        with pytest.raises(SystemExit):
            self.run(monkeypatch, "simulate", "--opponent", "dragon")

        assert "Error" in capsys.readouterr().out

    def test_no_command(self, monkeypatch):
        with pytest.raises(SystemExit):
            self.run(monkeypatch)
