"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the contract between a game client and the engine.
All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: Battle does not exist or was deleted
- UNKNOWN_OPPONENT: Monster id is not in the monster database
- ILLEGAL_MOVE: The engine rejected the move (mana, exhaustion, missing card)
- NOT_YOUR_TURN: Action submitted for a player who is not active
- GAME_NOT_ACTIVE: Battle has already ended
- BATTLE_NOT_FINISHED: Outcome requested while the duel is still running
- VALIDATION_ERROR: Request or deck failed validation
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class BattleStatus(str, Enum):
    """Battle status values."""
    YOUR_TURN = "your_turn"
    OPPONENT_TURN = "opponent_turn"
    FINISHED = "finished"
    RESOLVED = "resolved"
    ABANDONED = "abandoned"


class ActionKind(str, Enum):
    """Actions a player can submit."""
    PLAY_CARD = "play_card"
    ATTACK_CREATURE = "attack_creature"
    ATTACK_PLAYER = "attack_player"
    END_TURN = "end_turn"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    UNKNOWN_OPPONENT = "UNKNOWN_OPPONENT"
    ILLEGAL_MOVE = "ILLEGAL_MOVE"
    NOT_YOUR_TURN = "NOT_YOUR_TURN"
    GAME_NOT_ACTIVE = "GAME_NOT_ACTIVE"
    INVALID_ACTION = "INVALID_ACTION"
    BATTLE_NOT_FINISHED = "BATTLE_NOT_FINISHED"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """A card instance in a duel."""
    runtime_id: str
    original_id: str
    name: str
    cost: int
    attack: int
    health: int
    max_health: int
    is_exhausted: bool
    location: str = Field(description="deck, hand, battlefield, graveyard")

    model_config = {"from_attributes": True}


class ZoneInfo(BaseModel):
    """A zone. Cards are omitted for hidden zones (decks, the opponent's hand)."""
    zone_type: str = Field(description="deck, hand, battlefield, graveyard")
    card_count: int = 0
    cards: list[CardInfo] = Field(default_factory=list)


class PlayerInfo(BaseModel):
    """One side of a duel."""
    player_id: str
    is_human: bool
    is_current_turn: bool = False
    health: int
    max_health: int
    current_mana: int
    max_mana: int
    zones: list[ZoneInfo] = Field(default_factory=list)


class CardTemplateInfo(BaseModel):
    """An owned card in the player's grimoire."""
    id: str
    name: str
    cost: int
    attack: int
    defense: int
    rarity: str
    status: str
    durability: int
    origin_biome: Optional[str] = None


class LootInfo(BaseModel):
    """Rewards from a victory."""
    essence_id: str
    essence_source: str
    essence_power: int
    essence_purity: float
    xp_root: str
    xp_amount: int
    leveled_up: bool
    fragments_found: int


# =============================================================================
# Request Models
# =============================================================================

class CreateBattleRequest(BaseModel):
    """Request to start a battle against a monster."""
    opponent_id: str = Field(..., description="Monster id, e.g. pyro_walker")
    random_seed: Optional[int] = Field(None, description="Seed for a reproducible battle")
    player_first: Optional[bool] = Field(
        None, description="Force who goes first; a coin toss when omitted"
    )


class ActionRequest(BaseModel):
    """A player action for the active battle."""
    action_type: ActionKind
    hand_index: Optional[int] = Field(None, ge=0, description="PLAY_CARD: index in hand")
    target_id: Optional[str] = Field(None, description="PLAY_CARD: manual ability target")
    attacker_id: Optional[str] = Field(None, description="Runtime id of the attacking creature")
    defender_id: Optional[str] = Field(None, description="ATTACK_CREATURE: runtime id of the defender")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class BattleStateResponse(BaseModel):
    """Complete battle state for display."""
    battle_id: str
    status: BattleStatus
    opponent_id: str
    opponent_name: str
    turn_number: int
    current_turn_player_id: Optional[str] = None
    winner_id: Optional[str] = None
    player: PlayerInfo
    opponent: PlayerInfo
    legal_action_count: int = 0
    created_at: float = 0.0
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """Result of a player action, plus the opponent's reply."""
    battle_id: str
    success: bool
    state_changes: list[str] = Field(default_factory=list)
    opponent_actions: list[str] = Field(
        default_factory=list, description="What the monster did on its turn"
    )
    battle: BattleStateResponse
    api_version: str = "v1"


class ProfileResponse(BaseModel):
    """The persistent player profile."""
    id: str
    name: str
    level: int
    soul_cap: int
    soul_usage: int
    fragments: int
    magic_roots: dict[str, int]
    deck: list[CardTemplateInfo] = Field(default_factory=list)
    graveyard: list[CardTemplateInfo] = Field(default_factory=list)
    equipped: list[CardTemplateInfo] = Field(default_factory=list)
    essence_count: int = 0
    api_version: str = "v1"


class BattleOutcomeResponse(BaseModel):
    """The lasting result of a battle."""
    battle_id: str
    victory: bool
    surrendered: bool = False
    broken_cards: list[CardTemplateInfo] = Field(default_factory=list)
    loot: Optional[LootInfo] = None
    profile: ProfileResponse
    api_version: str = "v1"


class MonsterInfo(BaseModel):
    """A monster that can be battled."""
    id: str
    name: str
    biome: str
    base_hp: int
    duel_health: int
    signature_attack: int
    signature_defense: int
    signature_cost: int


class MonsterListResponse(BaseModel):
    monsters: list[MonsterInfo]
    count: int


class BattleListResponse(BaseModel):
    """Response listing battle ids."""
    battles: list[str]
    count: int


class EndBattleResponse(BaseModel):
    """Response after deleting a battle."""
    success: bool
    battle_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
