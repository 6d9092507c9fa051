"""
API Service - Business logic layer between the API and the engine.

The service:
1. Translates API requests into battle loop calls
2. Manages sessions and their loops
3. Owns the player's persistent profile and applies battle outcomes
4. Formats responses

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    ActionRequest,
    CreateBattleRequest,
    # Responses
    ActionResponse,
    BattleOutcomeResponse,
    BattleStateResponse,
    ErrorResponse,
    MonsterListResponse,
    ProfileResponse,
    # Shared
    CardInfo,
    CardTemplateInfo,
    LootInfo,
    MonsterInfo,
    PlayerInfo,
    ZoneInfo,
    # Enums
    ActionKind,
    BattleStatus,
    ErrorCode,
)
from ..card_schema import CardTemplate, CardValidationError
from ..content import MONSTER_DATABASE, create_starter_profile
from ..engine_core import Action, CardInstance, PlayerDuelState, legal_actions
from ..post_battle import BattleOutcome, PlayerProfile, calculate_current_soul_usage
from ..session import BattleLoop, BattleSession, LoopState, SessionManager, SessionState

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()

        battle = service.create_battle(CreateBattleRequest(opponent_id="mist_shade"))
        result = service.submit_action(battle.battle_id, ActionRequest(action_type="end_turn"))
        outcome = service.end_battle(battle.battle_id)
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    profile: PlayerProfile = field(default_factory=create_starter_profile)
    max_idle_seconds: int = 3600

    # Battle loops per session
    _loops: dict[str, BattleLoop] = field(default_factory=dict)

    def create_battle(self, request: CreateBattleRequest) -> BattleStateResponse | ErrorResponse:
        """Start a battle of the current profile against a monster."""
        self.cleanup_stale_battles()
        if request.opponent_id not in MONSTER_DATABASE:
            return ErrorResponse(
                error=f"Unknown monster: {request.opponent_id}",
                error_code=ErrorCode.UNKNOWN_OPPONENT,
                details={"known": sorted(MONSTER_DATABASE)},
            )

        try:
            session = self.session_manager.create_session(
                self.profile, request.opponent_id, seed=request.random_seed
            )
        except CardValidationError as e:
            return ErrorResponse(
                error=str(e),
                error_code=ErrorCode.VALIDATION_ERROR,
                details={"errors": e.errors},
            )

        first_player_id = None
        if request.player_first is not None:
            engine = session.engine
            first_player_id = (
                engine.player1.player_id if request.player_first else engine.player2.player_id
            )

        loop = BattleLoop(session)
        self._loops[session.session_id] = loop
        loop.start(first_player_id)
        self._resolve_if_finished(loop)
        return self._build_battle_state(session)

    def get_battle(self, battle_id: str) -> BattleStateResponse | ErrorResponse:
        session = self.session_manager.get_session(battle_id)
        if not session:
            return self._not_found(battle_id)
        return self._build_battle_state(session)

    def list_battles(self) -> list[str]:
        return [session.session_id for session in self.session_manager.list_sessions()]

    def submit_action(self, battle_id: str, request: ActionRequest) -> ActionResponse | ErrorResponse:
        """Apply a player action; the monster's turn runs before this returns."""
        session = self.session_manager.get_session(battle_id)
        loop = self._loops.get(battle_id)
        if not session or not loop:
            return self._not_found(battle_id)

        result = loop.submit_action(self._to_action(session, request))
        if not result.success:
            return ErrorResponse(
                error="; ".join(result.errors) or "Action rejected",
                error_code=self._error_code(result.error_code),
            )

        self._resolve_if_finished(loop)
        return ActionResponse(
            battle_id=battle_id,
            success=True,
            state_changes=result.state_changes,
            opponent_actions=result.bot_actions,
            battle=self._build_battle_state(session),
        )

    def end_battle(self, battle_id: str, surrender: bool = True) -> BattleOutcomeResponse | ErrorResponse:
        """
        Get the battle's outcome, surrendering first if it is still running.

        With surrender=False a running battle is an error instead.
        """
        session = self.session_manager.get_session(battle_id)
        loop = self._loops.get(battle_id)
        if not session or not loop:
            return self._not_found(battle_id)

        if session.outcome is None:
            if not session.engine.is_finished and not surrender:
                return ErrorResponse(
                    error="Battle is still running",
                    error_code=ErrorCode.BATTLE_NOT_FINISHED,
                )
            self._apply_outcome(loop.surrender(self.profile))

        return self._build_outcome(battle_id, session.outcome)

    def delete_battle(self, battle_id: str) -> bool:
        """Release a battle. A running battle is surrendered first."""
        session = self.session_manager.get_session(battle_id)
        loop = self._loops.pop(battle_id, None)
        if session and loop and session.outcome is None:
            self._apply_outcome(loop.surrender(self.profile))
        return self.session_manager.end_session(battle_id)

    def cleanup_stale_battles(self, max_age_seconds: int | None = None) -> int:
        """Delete battles idle longer than max_age, surrendering running ones."""
        if max_age_seconds is None:
            max_age_seconds = self.max_idle_seconds
        stale = self.session_manager.stale_sessions(max_age_seconds)
        for session in stale:
            logger.info("Evicting idle battle %s (%s)", session.session_id, session.state.value)
            self.delete_battle(session.session_id)
        return len(stale)

    def get_profile(self) -> ProfileResponse:
        return self._build_profile(self.profile)

    def list_monsters(self) -> MonsterListResponse:
        monsters = [
            MonsterInfo(
                id=monster.id,
                name=monster.name,
                biome=monster.biome.value,
                base_hp=monster.physical.base_hp,
                duel_health=monster.duel_health,
                signature_attack=monster.card.attack,
                signature_defense=monster.card.defense,
                signature_cost=monster.card.cost,
            )
            for monster in MONSTER_DATABASE.values()
        ]
        return MonsterListResponse(monsters=monsters, count=len(monsters))

    # =========================================================================
    # Outcome handling
    # =========================================================================

    def _resolve_if_finished(self, loop: BattleLoop) -> None:
        if loop.state is LoopState.BATTLE_OVER:
            self._apply_outcome(loop.resolve(self.profile))

    def _apply_outcome(self, outcome: BattleOutcome) -> None:
        self.profile = outcome.profile
        logger.info(
            "Profile %s updated: victory=%s, %d broken",
            self.profile.id, outcome.victory, len(outcome.broken_cards),
        )

    # =========================================================================
    # Conversion helpers
    # =========================================================================

    def _not_found(self, battle_id: str) -> ErrorResponse:
        return ErrorResponse(
            error="Battle not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
            details={"battle_id": battle_id},
        )

    def _error_code(self, code: str | None) -> ErrorCode:
        try:
            return ErrorCode(code)
        except ValueError:
            return ErrorCode.INVALID_ACTION

    def _to_action(self, session: BattleSession, request: ActionRequest) -> Action:
        player_id = session.human_player_id
        if request.action_type is ActionKind.PLAY_CARD:
            return Action.play_card(player_id, request.hand_index, request.target_id)
        if request.action_type is ActionKind.ATTACK_CREATURE:
            return Action.attack_creature(player_id, request.attacker_id, request.defender_id)
        if request.action_type is ActionKind.ATTACK_PLAYER:
            return Action.attack_player(player_id, request.attacker_id)
        return Action.end_turn(player_id)

    def _status(self, session: BattleSession) -> BattleStatus:
        if session.state is SessionState.ABANDONED:
            return BattleStatus.ABANDONED
        if session.state is SessionState.RESOLVED:
            return BattleStatus.RESOLVED
        if session.engine.is_finished:
            return BattleStatus.FINISHED
        if session.is_human_turn():
            return BattleStatus.YOUR_TURN
        return BattleStatus.OPPONENT_TURN

    def _build_battle_state(self, session: BattleSession) -> BattleStateResponse:
        engine = session.engine
        return BattleStateResponse(
            battle_id=session.session_id,
            status=self._status(session),
            opponent_id=session.opponent.id,
            opponent_name=session.opponent.name,
            turn_number=engine.turn_count,
            current_turn_player_id=engine.active_player_id,
            winner_id=engine.winner_id,
            player=self._player_info(engine.player1, engine.active_player_id, is_human=True),
            opponent=self._player_info(engine.player2, engine.active_player_id, is_human=False),
            legal_action_count=len(legal_actions(engine, session.human_player_id)),
            created_at=session.created_at,
        )

    def _player_info(self, player: PlayerDuelState, active_id: str | None, is_human: bool) -> PlayerInfo:
        visible = {"battlefield", "graveyard"}
        if is_human:
            visible.add("hand")

        zones = []
        for zone in player.zones:
            role = zone.role.value
            zones.append(ZoneInfo(
                zone_type=role,
                card_count=zone.count,
                cards=[self._card_info(card) for card in zone.cards] if role in visible else [],
            ))

        return PlayerInfo(
            player_id=player.player_id,
            is_human=is_human,
            is_current_turn=player.player_id == active_id,
            health=player.health,
            max_health=player.max_health,
            current_mana=player.current_mana,
            max_mana=player.max_mana,
            zones=zones,
        )

    def _card_info(self, card: CardInstance) -> CardInfo:
        return CardInfo(
            runtime_id=card.runtime_id,
            original_id=card.original_id,
            name=card.name,
            cost=card.cost,
            attack=card.attack,
            health=card.health,
            max_health=card.max_health,
            is_exhausted=card.is_exhausted,
            location=card.location.value,
        )

    def _template_info(self, card: CardTemplate) -> CardTemplateInfo:
        return CardTemplateInfo(
            id=card.id,
            name=card.name,
            cost=card.stats.cost,
            attack=card.stats.attack,
            defense=card.stats.defense,
            rarity=card.rarity.value,
            status=card.status.value,
            durability=card.durability,
            origin_biome=card.origin_biome.value if card.origin_biome else None,
        )

    def _build_profile(self, profile: PlayerProfile) -> ProfileResponse:
        return ProfileResponse(
            id=profile.id,
            name=profile.name,
            level=profile.level,
            soul_cap=profile.soul_cap,
            soul_usage=calculate_current_soul_usage(profile),
            fragments=profile.fragments,
            magic_roots=profile.magic_roots.as_dict(),
            deck=[self._template_info(card) for card in profile.grimoire.deck],
            graveyard=[self._template_info(card) for card in profile.grimoire.graveyard],
            equipped=[self._template_info(card) for card in profile.equipped_creatures],
            essence_count=len(profile.grimoire.essences),
        )

    def _build_outcome(self, battle_id: str, outcome: BattleOutcome) -> BattleOutcomeResponse:
        loot = None
        if outcome.loot is not None:
            loot = LootInfo(
                essence_id=outcome.loot.essence.id,
                essence_source=outcome.loot.essence.source_name,
                essence_power=outcome.loot.essence.power_level,
                essence_purity=outcome.loot.essence.purity,
                xp_root=outcome.loot.xp_root,
                xp_amount=outcome.loot.xp_amount,
                leveled_up=outcome.loot.leveled_up,
                fragments_found=outcome.loot.fragments_found,
            )
        return BattleOutcomeResponse(
            battle_id=battle_id,
            victory=outcome.victory,
            surrendered=outcome.surrendered,
            broken_cards=[self._template_info(card) for card in outcome.broken_cards],
            loot=loot,
            profile=self._build_profile(outcome.profile),
        )
