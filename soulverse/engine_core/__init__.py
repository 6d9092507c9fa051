"""
Engine Core - Deterministic duel state management and effect resolution.

The engine is the runtime that:
1. Builds CardInstances from deck templates
2. Manages both PlayerDuelStates and the turn flow
3. Generates legal actions
4. Applies actions via the reducer
5. Resolves triggered abilities on a LIFO stack
"""

from .state import (
    CardInstance,
    GameStatus,
    PlayerDuelState,
    Zone,
    ZoneRole,
    STARTING_HEALTH,
    MANA_CAP,
    OPENING_HAND_SIZE,
)
from .action import Action, ActionType, ActionPayload, ActionResult
from .effect_resolver import EffectResolver, PendingEffect, ResolverState
from .duel_engine import DuelEngine
from .reducer import Reducer, apply_action
from .action_generator import ActionGenerator, legal_actions

__all__ = [
    "CardInstance",
    "GameStatus",
    "PlayerDuelState",
    "Zone",
    "ZoneRole",
    "STARTING_HEALTH",
    "MANA_CAP",
    "OPENING_HAND_SIZE",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "EffectResolver",
    "PendingEffect",
    "ResolverState",
    "DuelEngine",
    "Reducer",
    "apply_action",
    "ActionGenerator",
    "legal_actions",
]
