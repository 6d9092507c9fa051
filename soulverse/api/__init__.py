"""
API Module - Client interface.

Exposes battles via a REST API. A client:
1. Starts a battle against a monster
2. Submits actions and reads back the monster's replies
3. Collects the outcome, which permanently changes the profile

Battles are session-scoped and held in memory.
"""

from .schemas import (
    # Requests
    CreateBattleRequest,
    ActionRequest,
    # Responses
    BattleStateResponse,
    ActionResponse,
    BattleOutcomeResponse,
    ProfileResponse,
    MonsterListResponse,
    ErrorResponse,
    # Shared
    PlayerInfo,
    ZoneInfo,
    CardInfo,
    CardTemplateInfo,
    LootInfo,
    # Enums
    ActionKind,
    BattleStatus,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateBattleRequest",
    "ActionRequest",
    # Responses
    "BattleStateResponse",
    "ActionResponse",
    "BattleOutcomeResponse",
    "ProfileResponse",
    "MonsterListResponse",
    "ErrorResponse",
    # Shared
    "PlayerInfo",
    "ZoneInfo",
    "CardInfo",
    "CardTemplateInfo",
    "LootInfo",
    # Enums
    "ActionKind",
    "BattleStatus",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
