"""
Tests for battle sessions and the battle loop.

Tests:
- Session lifecycle (create, list, end, cleanup)
- Bot turns run as part of the player's action
- Post-battle resolution runs exactly once
- Surrender
"""

import time

import pytest

from ..engine_core import Action, GameStatus
from ..session import BattleLoop, LoopState, SessionManager, SessionState


@pytest.fixture
def manager():
    return SessionManager()


@pytest.fixture
def session(manager, profile):
    return manager.create_session(profile, "mist_shade", seed=4)


@pytest.fixture
def loop(session, profile):
    """A started loop with the player going first."""
    loop = BattleLoop(session)
    loop.start(first_player_id=profile.id)
    return loop


def win_now(engine, place, player_id):
    """Leave the opponent on 1 health with a ready attacker for player_id."""
    engine.get_opponent(player_id).health = 1
    return place(engine, player_id, "goblin-001")


class TestSessionManager:
    """Tests for SessionManager."""

    def test_create_session(self, session, profile):
        assert session.engine.game_status is GameStatus.PRE_GAME
        assert session.human_player_id == profile.id
        assert session.bot.player_id == "mist_shade"
        assert session.opponent.name == "Mist Shade"
        assert session.state is SessionState.ACTIVE
        assert session.metadata["seed"] == 4

    def test_unknown_monster(self, manager, profile):
        with pytest.raises(ValueError):
            manager.create_session(profile, "dragon")

    def test_list_and_end(self, manager, session):
        assert manager.get_session(session.session_id) is session
        assert manager.list_active_sessions() == [session.session_id]

        assert manager.end_session(session.session_id)
        assert not manager.end_session(session.session_id)
        assert manager.get_session(session.session_id) is None

    def test_cleanup_only_removes_old_finished(self, manager, profile):
        old_done = manager.create_session(profile, "mist_shade")
        old_running = manager.create_session(profile, "mist_shade")
        fresh_done = manager.create_session(profile, "mist_shade")
        for s in (old_done, old_running):
            s.created_at = time.time() - 7200
        old_done.state = SessionState.RESOLVED
        fresh_done.state = SessionState.RESOLVED

        assert manager.cleanup_stale_sessions(max_age_seconds=3600) == 1
        assert manager.get_session(old_done.session_id) is None
        assert manager.get_session(old_running.session_id) is old_running
        assert manager.get_session(fresh_done.session_id) is fresh_done

    def test_stale_sessions_include_running(self, manager, profile):
        idle = manager.create_session(profile, "mist_shade")
        busy = manager.create_session(profile, "mist_shade")
        for s in (idle, busy):
            s.created_at = time.time() - 7200
        busy.touch()

        assert manager.stale_sessions(max_age_seconds=3600) == [idle]
        assert manager.cleanup_stale_sessions(max_age_seconds=3600) == 0
        assert manager.get_session(idle.session_id) is idle

    def test_seeded_sessions_match(self, manager, profile):
        a = manager.create_session(profile, "forest_lurker", seed=12)
        b = manager.create_session(profile, "forest_lurker", seed=12)
        a.engine.start_game()
        b.engine.start_game()

        assert a.engine.active_player_id == b.engine.active_player_id
        assert [c.name for c in a.engine.player2.hand.cards] == [c.name for c in b.engine.player2.hand.cards]


class TestBattleLoop:
    """Tests for BattleLoop."""

    def test_start_with_player_first(self, loop, profile):
        assert loop.state is LoopState.WAITING_PLAYER
        assert loop.engine.active_player_id == profile.id
        assert loop.engine.turn_count == 1

    def test_start_twice_fails(self, loop):
        result = loop.start()

        assert not result.success
        assert result.error_code == "INVALID_ACTION"

    def test_monster_first_plays_immediately(self, session, profile):
        loop = BattleLoop(session)
        result = loop.start(first_player_id="mist_shade")

        assert result.success
        assert result.bot_actions
        assert loop.engine.active_player_id == profile.id
        assert loop.engine.turn_count == 2

    def test_end_turn_runs_bot(self, loop, profile):
        result = loop.submit_action(Action.end_turn(profile.id))

        assert result.success
        assert any("ended turn" in change for change in result.bot_actions)
        assert loop.engine.active_player_id == profile.id
        assert loop.engine.turn_count == 3

    def test_missing_player_id_filled(self, loop, profile):
        result = loop.submit_action(Action.end_turn(None))

        assert result.success
        assert loop.engine.action_history[0].payload.player_id == profile.id

    def test_cannot_act_for_monster(self, loop):
        result = loop.submit_action(Action.end_turn("mist_shade"))

        assert not result.success
        assert result.error_code == "NOT_YOUR_TURN"

    def test_illegal_move_reported(self, loop, profile):
        result = loop.submit_action(Action.play_card(profile.id, 99))

        assert not result.success
        assert result.error_code == "ILLEGAL_MOVE"
        assert loop.state is LoopState.WAITING_PLAYER

    def test_action_log(self, loop, session, profile):
        loop.submit_action(Action.end_turn(profile.id))

        assert session.action_log[0].startswith("Battle started")
        assert len(session.action_log) > 2

    def test_actions_mark_activity(self, loop, session, profile):
        assert session.last_activity is None

        loop.submit_action(Action.end_turn(profile.id))

        assert session.last_activity is not None
        assert session.idle_seconds() < 60


class TestBattleEnd:
    """Tests for resolution and surrender."""

    def test_win_and_resolve_once(self, loop, session, profile, place):
        attacker = win_now(loop.engine, place, profile.id)

        result = loop.submit_action(Action.attack_player(profile.id, attacker.runtime_id))

        assert result.success
        assert result.loop_state is LoopState.BATTLE_OVER
        assert result.winner_id == profile.id
        assert result.bot_actions == []
        assert session.state is SessionState.FINISHED

        outcome = loop.resolve(profile)
        assert outcome.victory
        assert outcome.loot is not None
        assert session.state is SessionState.RESOLVED
        assert loop.resolve(profile) is outcome

    def test_actions_rejected_after_end(self, loop, profile, place):
        attacker = win_now(loop.engine, place, profile.id)
        loop.submit_action(Action.attack_player(profile.id, attacker.runtime_id))

        result = loop.submit_action(Action.end_turn(profile.id))

        assert not result.success
        assert result.error_code == "GAME_NOT_ACTIVE"

    def test_resolve_running_battle_raises(self, loop, profile):
        with pytest.raises(ValueError):
            loop.resolve(profile)

    def test_surrender(self, loop, session, profile):
        outcome = loop.surrender(profile)

        assert outcome.surrendered
        assert [card.id for card in outcome.broken_cards] == ["goblin-001"]
        assert session.state is SessionState.ABANDONED
        assert loop.state is LoopState.RESOLVED
        assert loop.surrender(profile) is outcome
        assert session.action_log[-1] == f"{profile.id} surrendered"

    def test_surrender_after_win_resolves_instead(self, loop, profile, place):
        attacker = win_now(loop.engine, place, profile.id)
        loop.submit_action(Action.attack_player(profile.id, attacker.runtime_id))

        outcome = loop.surrender(profile)

        assert not outcome.surrendered
        assert outcome.victory
