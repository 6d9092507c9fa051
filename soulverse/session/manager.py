"""
Session Manager - Creates and manages battle sessions.

LIFECYCLE:
1. A player picks a monster -> a session is created with a fresh duel
2. During the battle:
   - The player's actions are applied through the reducer
   - The monster's bot plays its turns immediately
3. Battle ends (win, loss or surrender) -> the post-battle resolver
   runs exactly once and the outcome is stored on the session
4. The session is deleted when the client is done with it

PERSISTENCE RULES:
- Sessions are in-memory only
- Nothing from a duel survives except the resolved BattleOutcome
"""

from __future__ import annotations
import logging
import random
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..bots import DuelBot
from ..content import MonsterDefinition, setup_battle
from ..engine_core import DuelEngine
from ..post_battle import BattleOutcome, PlayerProfile

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a battle session."""
    ACTIVE = "active"  # Duel in progress
    FINISHED = "finished"  # Duel over, outcome not yet resolved
    RESOLVED = "resolved"  # Post-battle outcome applied
    ABANDONED = "abandoned"  # Player surrendered


@dataclass
class BattleSession:
    """
    An ephemeral battle against one monster.

    Contains:
    - The duel engine (player1 is the human, player2 the monster)
    - The monster definition and its bot
    - A log of every applied action
    - The resolved outcome, once there is one
    """
    session_id: str
    engine: DuelEngine
    opponent: MonsterDefinition
    bot: DuelBot
    human_player_id: str
    created_at: float

    state: SessionState = SessionState.ACTIVE
    action_log: list[str] = field(default_factory=list)
    outcome: BattleOutcome | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    last_activity: float | None = None

    def is_active(self) -> bool:
        """Check if the duel can still take actions."""
        return self.state is SessionState.ACTIVE

    def is_human_turn(self) -> bool:
        return self.engine.active_player_id == self.human_player_id

    def touch(self) -> None:
        self.last_activity = time.time()

    def idle_seconds(self, now: float | None = None) -> float:
        """Seconds since the last player action, or since creation."""
        now = time.time() if now is None else now
        return now - (self.last_activity or self.created_at)


class SessionManager:
    """
    Manages battle sessions.

    Responsibilities:
    - Create sessions (engine + bot) for a profile and a monster
    - Track sessions by id
    - Clean up old sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, BattleSession] = {}

    def create_session(
        self,
        profile: PlayerProfile,
        monster_id: str,
        seed: int | None = None,
    ) -> BattleSession:
        """
        Create a new battle session. The duel is not started yet.

        Raises:
            ValueError: unknown monster id
            CardValidationError: a deck fails validation
        """
        engine, monster = setup_battle(profile, monster_id, rng=random.Random(seed))

        session = BattleSession(
            session_id=str(uuid.uuid4()),
            engine=engine,
            opponent=monster,
            bot=DuelBot(player_id=engine.player2.player_id),
            human_player_id=engine.player1.player_id,
            created_at=time.time(),
        )
        if seed is not None:
            session.metadata["seed"] = seed

        self._sessions[session.session_id] = session
        logger.info("Created session %s: %s vs %s", session.session_id, profile.id, monster.name)
        return session

    def get_session(self, session_id: str) -> BattleSession | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[BattleSession]:
        return list(self._sessions.values())

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose duel is still running."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def end_session(self, session_id: str) -> bool:
        """Remove a session from memory. Returns False if it did not exist."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        logger.info("Ended session %s (%s)", session_id, session.state.value)
        return True

    def stale_sessions(self, max_age_seconds: int = 3600) -> list[BattleSession]:
        """Sessions, running or not, idle for longer than max_age."""
        now = time.time()
        return [
            session for session in self._sessions.values()
            if session.idle_seconds(now) > max_age_seconds
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove idle sessions whose battle is over.

        Running sessions are left alone: abandoning one carries the
        surrender penalty, which only the profile owner can apply
        (see APIService.cleanup_stale_battles).

        Returns the number of sessions removed.
        """
        to_remove = [
            session.session_id for session in self.stale_sessions(max_age_seconds)
            if not session.is_active()
        ]
        for session_id in to_remove:
            self.end_session(session_id)
        return len(to_remove)
