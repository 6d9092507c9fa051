"""
Duel Engine - The rules authority for a two-player card duel.

The engine:
1. Builds runtime instances from both players' deck templates
2. Drives the fused end-turn/start-turn flow and the mana economy
3. Checks card-play and combat legality
4. Resolves abilities through the EffectResolver stack
5. Detects the win condition and freezes once FINISHED

Every public operation runs to completion, including cascading
triggers, before returning. Illegal moves are rejected with False and a
log line; they never raise and never partially apply.
"""

from __future__ import annotations
import itertools
import logging
import random

from ..card_schema import AbilityTrigger, CardTemplate
from .effect_resolver import EffectResolver, PendingEffect
from .state import (
    CardInstance,
    GameStatus,
    OPENING_HAND_SIZE,
    PlayerDuelState,
    STARTING_HEALTH,
    ZoneRole,
)

logger = logging.getLogger(__name__)


class DuelEngine:
    """
    A single duel between player1 and player2.

    Randomness (deck shuffles, the opening coin toss) comes from an
    injectable random.Random so duels can be replayed from a seed.
    """

    def __init__(
        self,
        player1_id: str,
        player1_deck: list[CardTemplate],
        player2_id: str,
        player2_deck: list[CardTemplate],
        rng: random.Random | None = None,
        seed: int | None = None,
        starting_health: int = STARTING_HEALTH,
    ):
        if player1_id == player2_id:
            raise ValueError("Duel players must have distinct ids")

        self.rng = rng or random.Random(seed)
        self._id_counter = itertools.count(1)

        # runtime_id -> instance, runtime_id -> owning player
        self._cards: dict[str, CardInstance] = {}
        self._owners: dict[str, PlayerDuelState] = {}

        self.player1 = self._create_player(player1_id, player1_deck, starting_health)
        self.player2 = self._create_player(player2_id, player2_deck, starting_health)

        self.turn_count = 0
        self.active_player_id: str | None = None
        self.game_status = GameStatus.PRE_GAME
        self.winner_id: str | None = None
        self.resolver = EffectResolver(engine=self)
        self.action_history: list = []  # Actions applied through the reducer

    def _create_player(
        self, player_id: str, templates: list[CardTemplate], starting_health: int
    ) -> PlayerDuelState:
        player = PlayerDuelState.create(
            player_id, templates, self._next_runtime_id, starting_health=starting_health
        )
        for card in player.deck.cards:
            self._cards[card.runtime_id] = card
            self._owners[card.runtime_id] = player
        return player

    def _next_runtime_id(self) -> str:
        return f"inst_{next(self._id_counter):03d}"

    # ========================================================================
    # Introspection
    # ========================================================================

    @property
    def players(self) -> tuple[PlayerDuelState, PlayerDuelState]:
        return (self.player1, self.player2)

    @property
    def effect_stack(self) -> list[PendingEffect]:
        return self.resolver.stack

    @property
    def is_finished(self) -> bool:
        return self.game_status is GameStatus.FINISHED

    def get_player(self, player_id: str | None) -> PlayerDuelState | None:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def get_active_player(self) -> PlayerDuelState | None:
        return self.get_player(self.active_player_id)

    def get_opponent(self, player_id: str | None = None) -> PlayerDuelState | None:
        """Opponent of player_id, or of the active player when omitted."""
        player_id = player_id or self.active_player_id
        if player_id == self.player1.player_id:
            return self.player2
        if player_id == self.player2.player_id:
            return self.player1
        return None

    def owner_of(self, runtime_id: str) -> PlayerDuelState | None:
        return self._owners.get(runtime_id)

    def find_card(self, runtime_id: str) -> CardInstance | None:
        """Look up an instance in any hand, battlefield or graveyard. Deck cards are hidden."""
        card = self._cards.get(runtime_id)
        if card is None or card.location is ZoneRole.DECK:
            return None
        return card

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def start_game(self, first_player_id: str | None = None) -> bool:
        """
        PRE_GAME -> ACTIVE: shuffle, deal opening hands, start the first turn.

        The first player is a coin toss unless first_player_id is given.
        """
        if self.game_status is not GameStatus.PRE_GAME:
            logger.warning("start_game called in status %s", self.game_status.value)
            return False
        if first_player_id is not None and self.get_player(first_player_id) is None:
            logger.warning("Unknown first player %s", first_player_id)
            return False

        for player in self.players:
            player.deck.shuffle(self.rng)
            player.draw_card(OPENING_HAND_SIZE)

        if first_player_id is None:
            first = self.player1 if self.rng.random() < 0.5 else self.player2
            first_player_id = first.player_id

        self.game_status = GameStatus.ACTIVE
        logger.info(
            "Duel started: %s vs %s, %s goes first",
            self.player1.player_id, self.player2.player_id, first_player_id,
        )
        return self.start_turn(first_player_id)

    def start_turn(self, player_id: str) -> bool:
        """Make player_id active: bump the turn counter, grow mana, draw one, refresh."""
        if self.game_status is not GameStatus.ACTIVE:
            logger.warning("start_turn rejected: duel is %s", self.game_status.value)
            return False
        player = self.get_player(player_id)
        if player is None:
            logger.warning("start_turn rejected: unknown player %s", player_id)
            return False

        self.active_player_id = player_id
        self.turn_count += 1
        player.grow_mana()
        player.draw_card(1)
        player.refresh_battlefield()
        logger.debug(
            "Turn %d: %s (mana %d/%d)",
            self.turn_count, player_id, player.current_mana, player.max_mana,
        )
        return True

    def end_turn(self) -> bool:
        """End the active turn, which is exactly starting the opponent's."""
        if self.game_status is not GameStatus.ACTIVE:
            logger.warning("end_turn rejected: duel is %s", self.game_status.value)
            return False
        opponent = self.get_opponent()
        return self.start_turn(opponent.player_id)

    # ========================================================================
    # Player actions
    # ========================================================================

    def play_card(self, player_id: str, hand_index: int, target_id: str | None = None) -> bool:
        """Pay for a hand card, put it onto the battlefield exhausted, fire ON_PLAY."""
        if self.game_status is not GameStatus.ACTIVE:
            logger.warning("play_card rejected: duel is %s", self.game_status.value)
            return False
        if player_id != self.active_player_id:
            logger.warning("play_card rejected: not %s's turn", player_id)
            return False

        player = self.get_player(player_id)
        card = player.hand.get_at(hand_index)
        if card is None:
            logger.warning("play_card rejected: no card at hand index %d", hand_index)
            return False
        if player.current_mana < card.cost:
            logger.warning(
                "play_card rejected: %s costs %d, %s has %d mana",
                card.name, card.cost, player_id, player.current_mana,
            )
            return False

        player.current_mana -= card.cost
        player.hand.remove_at(hand_index)
        player.battlefield.add(card)
        card.is_exhausted = True
        logger.info("%s played %s", player_id, card.name)

        self.check_trigger(card, AbilityTrigger.ON_PLAY, target_id)
        return True

    def attack_creature(self, attacker_id: str, defender_id: str) -> bool:
        """
        Attack an enemy creature. Damage is simultaneous: both amounts are
        computed before either death is handled, defender's death first.
        """
        if self.game_status is not GameStatus.ACTIVE:
            logger.warning("attack_creature rejected: duel is %s", self.game_status.value)
            return False

        active = self.get_active_player()
        opponent = self.get_opponent()
        attacker = active.battlefield.get_by_id(attacker_id)
        defender = opponent.battlefield.get_by_id(defender_id)
        if attacker is None or defender is None:
            logger.warning("attack_creature rejected: %s or %s not on the battlefield", attacker_id, defender_id)
            return False
        if attacker.is_exhausted:
            logger.warning("attack_creature rejected: %s is exhausted", attacker.name)
            return False

        attacker.is_exhausted = True
        self.check_trigger(attacker, AbilityTrigger.ON_ATTACK)
        if not self._combat_continues(active, attacker) or opponent.battlefield.get_by_id(defender_id) is None:
            return True

        defender_died = defender.take_damage(attacker.attack)
        attacker_died = attacker.take_damage(defender.attack)
        logger.info(
            "%s (%d/%d) fought %s (%d/%d)",
            attacker.name, attacker.attack, attacker.health,
            defender.name, defender.attack, defender.health,
        )

        if defender_died:
            self.handle_card_death(defender)
        if attacker_died:
            self.handle_card_death(attacker)
        return True

    def attack_player(self, attacker_id: str) -> bool:
        """Attack the opponent directly."""
        if self.game_status is not GameStatus.ACTIVE:
            logger.warning("attack_player rejected: duel is %s", self.game_status.value)
            return False

        active = self.get_active_player()
        opponent = self.get_opponent()
        attacker = active.battlefield.get_by_id(attacker_id)
        if attacker is None:
            logger.warning("attack_player rejected: %s not on the battlefield", attacker_id)
            return False
        if attacker.is_exhausted:
            logger.warning("attack_player rejected: %s is exhausted", attacker.name)
            return False

        attacker.is_exhausted = True
        self.check_trigger(attacker, AbilityTrigger.ON_ATTACK)
        if not self._combat_continues(active, attacker):
            return True

        opponent.take_damage(attacker.attack)
        logger.info(
            "%s hit %s for %d (health %d)",
            attacker.name, opponent.player_id, attacker.attack, opponent.health,
        )
        self.check_win_condition()
        return True

    def _combat_continues(self, active: PlayerDuelState, attacker: CardInstance) -> bool:
        """After ON_ATTACK: the duel is still on and the attacker survived."""
        return (
            self.game_status is GameStatus.ACTIVE
            and active.battlefield.get_by_id(attacker.runtime_id) is not None
        )

    # ========================================================================
    # Triggers, deaths and the win condition
    # ========================================================================

    def check_trigger(
        self,
        source: CardInstance,
        trigger: AbilityTrigger,
        manual_target_id: str | None = None,
    ) -> None:
        """Push source's abilities for trigger and drain the stack."""
        self.resolver.push_triggers(source, trigger, manual_target_id)
        if self.resolver.stack:
            self.resolver.resolve_stack()

    def handle_card_death(self, card: CardInstance) -> bool:
        """Move a dead creature from its owner's battlefield to graveyard, then fire ON_DEATH."""
        owner = self.owner_of(card.runtime_id)
        if owner is None or owner.battlefield.get_by_id(card.runtime_id) is None:
            return False

        if card.health < 0:
            card.health = 0
        owner.move_card(card.runtime_id, ZoneRole.BATTLEFIELD, ZoneRole.GRAVEYARD)
        logger.info("%s (%s) died", card.name, owner.player_id)

        self.check_trigger(card, AbilityTrigger.ON_DEATH)
        return True

    def check_win_condition(self) -> str | None:
        """
        Finish the duel the moment a player's health is at or below 0.

        A double KO goes to player1. The winner is never rewritten.
        """
        if self.game_status is GameStatus.FINISHED:
            return self.winner_id

        if self.player2.is_defeated:
            self.winner_id = self.player1.player_id
        elif self.player1.is_defeated:
            self.winner_id = self.player2.player_id
        else:
            return None

        self.game_status = GameStatus.FINISHED
        logger.info("Duel finished on turn %d: %s wins", self.turn_count, self.winner_id)
        return self.winner_id
