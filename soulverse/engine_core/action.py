"""
Action System - Duel actions, payloads, and results.

Actions are the serializable form of the engine's player operations.
Sessions, bots and the API all drive a duel through actions so every
move can be logged and replayed in order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class ActionType(Enum):
    """Types of actions a duel accepts."""
    PLAY_CARD = "play_card"
    ATTACK_CREATURE = "attack_creature"
    ATTACK_PLAYER = "attack_player"
    END_TURN = "end_turn"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields.
    This is a generic container; validation happens in the reducer.
    """
    player_id: str | None = None

    # PLAY_CARD
    hand_index: int | None = None
    target_id: str | None = None

    # ATTACK_CREATURE / ATTACK_PLAYER
    attacker_id: str | None = None
    defender_id: str | None = None


@dataclass
class Action:
    """A complete action to be applied to a duel."""
    action_type: ActionType
    payload: ActionPayload

    @classmethod
    def play_card(cls, player_id: str, hand_index: int, target_id: str | None = None) -> Action:
        """Factory for playing a card from hand."""
        return cls(
            action_type=ActionType.PLAY_CARD,
            payload=ActionPayload(player_id=player_id, hand_index=hand_index, target_id=target_id),
        )

    @classmethod
    def attack_creature(cls, player_id: str, attacker_id: str, defender_id: str) -> Action:
        """Factory for attacking an enemy creature."""
        return cls(
            action_type=ActionType.ATTACK_CREATURE,
            payload=ActionPayload(
                player_id=player_id, attacker_id=attacker_id, defender_id=defender_id
            ),
        )

    @classmethod
    def attack_player(cls, player_id: str, attacker_id: str) -> Action:
        """Factory for attacking the opponent directly."""
        return cls(
            action_type=ActionType.ATTACK_PLAYER,
            payload=ActionPayload(player_id=player_id, attacker_id=attacker_id),
        )

    @classmethod
    def end_turn(cls, player_id: str) -> Action:
        """Factory for ending the turn."""
        return cls(
            action_type=ActionType.END_TURN,
            payload=ActionPayload(player_id=player_id),
        )

    def describe(self) -> str:
        p = self.payload
        if self.action_type is ActionType.PLAY_CARD:
            suffix = f" -> {p.target_id}" if p.target_id else ""
            return f"{p.player_id} plays hand[{p.hand_index}]{suffix}"
        if self.action_type is ActionType.ATTACK_CREATURE:
            return f"{p.player_id}: {p.attacker_id} attacks {p.defender_id}"
        if self.action_type is ActionType.ATTACK_PLAYER:
            return f"{p.player_id}: {p.attacker_id} attacks face"
        return f"{p.player_id} ends turn"


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether the action succeeded
    - Errors (if failed)
    - Human-readable state changes (for UI updates)
    """
    success: bool
    error: str | None = None
    error_code: str | None = None
    state_changes: list[str] = field(default_factory=list)
    effects_resolved: list[str] = field(default_factory=list)
    game_over: bool = False
    winner_id: str | None = None

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def ok(
        cls,
        changes: list[str] | None = None,
        effects: list[str] | None = None,
        winner_id: str | None = None,
    ) -> ActionResult:
        """Create a success result."""
        return cls(
            success=True,
            state_changes=changes or [],
            effects_resolved=effects or [],
            game_over=winner_id is not None,
            winner_id=winner_id,
        )
