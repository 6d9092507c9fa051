"""
Duel State - Runtime card instances, zones and per-player duel state.

Design principles:
- Mutable in place: a single DuelEngine owns and mutates everything here
- A CardInstance lives in exactly one Zone, and its location says which
- Cards never cross players: each PlayerDuelState owns its four zones,
  so the card count across those zones is constant for the whole duel
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from ..card_schema import Ability, AbilityTrigger, CardTemplate

logger = logging.getLogger(__name__)

STARTING_HEALTH = 20
MANA_CAP = 10
OPENING_HAND_SIZE = 5


class ZoneRole(Enum):
    DECK = "deck"
    HAND = "hand"
    BATTLEFIELD = "battlefield"
    GRAVEYARD = "graveyard"


class GameStatus(Enum):
    """Duel lifecycle. Transitions are one-way and FINISHED is terminal."""
    PRE_GAME = "pre_game"
    ACTIVE = "active"
    FINISHED = "finished"


@dataclass
class CardInstance:
    """
    A runtime copy of a card template.

    Combat stats are copied from the template at creation and mutate
    independently afterwards. No ability logic lives here; the effect
    resolver operates on instances from outside.
    """
    runtime_id: str
    original_id: str  # CardTemplate.id this instance was created from
    name: str
    cost: int
    attack: int
    health: int
    max_health: int
    abilities: list[Ability] = field(default_factory=list)
    is_exhausted: bool = True
    location: ZoneRole = ZoneRole.DECK

    def __hash__(self):
        return hash(self.runtime_id)

    def __eq__(self, other):
        if not isinstance(other, CardInstance):
            return False
        return self.runtime_id == other.runtime_id

    @classmethod
    def from_template(cls, template: CardTemplate, runtime_id: str) -> CardInstance:
        return cls(
            runtime_id=runtime_id,
            original_id=template.id,
            name=template.name,
            cost=template.stats.cost,
            attack=template.stats.attack,
            health=template.stats.defense,
            max_health=template.stats.defense,
            abilities=list(template.abilities),
        )

    def take_damage(self, amount: int) -> bool:
        """Subtract health. Returns True if the card is now dead. Does not clamp."""
        self.health -= amount
        return self.health <= 0

    def heal(self, amount: int) -> None:
        self.health = min(self.max_health, self.health + amount)

    def refresh(self) -> None:
        self.is_exhausted = False

    def abilities_for(self, trigger: AbilityTrigger) -> list[Ability]:
        return [ab for ab in self.abilities if ab.trigger is trigger]


@dataclass
class Zone:
    """
    An ordered collection of card instances with a fixed role.

    Index 0 is the top of the deck. Removal of a missing id or an
    out-of-range index returns None and changes nothing.
    """
    role: ZoneRole
    cards: list[CardInstance] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.cards)

    @property
    def is_empty(self) -> bool:
        return len(self.cards) == 0

    def add(self, card: CardInstance) -> None:
        card.location = self.role
        self.cards.append(card)

    def remove(self, runtime_id: str) -> CardInstance | None:
        for i, card in enumerate(self.cards):
            if card.runtime_id == runtime_id:
                return self.cards.pop(i)
        return None

    def remove_at(self, index: int) -> CardInstance | None:
        if index < 0 or index >= len(self.cards):
            return None
        return self.cards.pop(index)

    def get_by_id(self, runtime_id: str) -> CardInstance | None:
        for card in self.cards:
            if card.runtime_id == runtime_id:
                return card
        return None

    def get_at(self, index: int) -> CardInstance | None:
        if index < 0 or index >= len(self.cards):
            return None
        return self.cards[index]

    def shuffle(self, rng: random.Random | None = None) -> None:
        """Uniform in-place permutation (Fisher-Yates)."""
        rng = rng or random.Random()
        for i in range(len(self.cards) - 1, 0, -1):
            j = rng.randint(0, i)
            self.cards[i], self.cards[j] = self.cards[j], self.cards[i]


@dataclass
class PlayerDuelState:
    """
    One combatant in a duel: health, mana economy and four zones.

    Duel health is independent of any persistent profile health.
    """
    player_id: str
    health: int = STARTING_HEALTH
    max_health: int = STARTING_HEALTH
    current_mana: int = 0
    max_mana: int = 0
    mana_cap: int = MANA_CAP

    deck: Zone = field(default_factory=lambda: Zone(ZoneRole.DECK))
    hand: Zone = field(default_factory=lambda: Zone(ZoneRole.HAND))
    battlefield: Zone = field(default_factory=lambda: Zone(ZoneRole.BATTLEFIELD))
    graveyard: Zone = field(default_factory=lambda: Zone(ZoneRole.GRAVEYARD))

    @classmethod
    def create(
        cls,
        player_id: str,
        templates: list[CardTemplate],
        make_runtime_id: Callable[[], str],
        starting_health: int = STARTING_HEALTH,
    ) -> PlayerDuelState:
        """Build a player whose deck holds one fresh instance per template."""
        player = cls(player_id=player_id, health=starting_health, max_health=starting_health)
        for template in templates:
            player.deck.add(CardInstance.from_template(template, make_runtime_id()))
        return player

    @property
    def zones(self) -> tuple[Zone, Zone, Zone, Zone]:
        return (self.deck, self.hand, self.battlefield, self.graveyard)

    @property
    def card_count(self) -> int:
        """Total instances across all four zones."""
        return sum(zone.count for zone in self.zones)

    @property
    def is_defeated(self) -> bool:
        return self.health <= 0

    def zone(self, role: ZoneRole) -> Zone:
        return {
            ZoneRole.DECK: self.deck,
            ZoneRole.HAND: self.hand,
            ZoneRole.BATTLEFIELD: self.battlefield,
            ZoneRole.GRAVEYARD: self.graveyard,
        }[role]

    def move_card(self, runtime_id: str, source: ZoneRole, dest: ZoneRole) -> CardInstance | None:
        """Atomic remove-then-add between two of this player's zones."""
        card = self.zone(source).remove(runtime_id)
        if card is None:
            return None
        self.zone(dest).add(card)
        return card

    def draw_card(self, amount: int = 1) -> int:
        """
        Move cards from the top of the deck to hand. Returns the number drawn.

        Drawing from an empty deck is a no-op: no fatigue damage, no loss.
        """
        drawn = 0
        for _ in range(amount):
            card = self.deck.remove_at(0)
            if card is None:
                logger.info("Player %s tried to draw from an empty deck (fatigue)", self.player_id)
                continue
            self.hand.add(card)
            drawn += 1
        return drawn

    def grow_mana(self) -> None:
        """Turn-start mana: +1 max up to the cap, then refill."""
        if self.max_mana < self.mana_cap:
            self.max_mana += 1
        self.current_mana = self.max_mana

    def take_damage(self, amount: int) -> None:
        self.health -= amount

    def heal(self, amount: int) -> None:
        self.health = min(self.max_health, self.health + amount)

    def refresh_battlefield(self) -> None:
        for card in self.battlefield.cards:
            card.refresh()
