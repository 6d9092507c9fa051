"""
Session Module - Manages ephemeral battle sessions.

A session represents one battle against a monster:
- Created when the player engages a monster
- Holds the duel engine and the monster's bot
- Resolves the post-battle outcome once the duel ends
- Deleted when the client is done with it

Sessions are in-memory only.
"""

from .manager import SessionManager, BattleSession, SessionState
from .battle_loop import BattleLoop, LoopState, TurnResult

__all__ = [
    "SessionManager",
    "BattleSession",
    "SessionState",
    "BattleLoop",
    "LoopState",
    "TurnResult",
]
