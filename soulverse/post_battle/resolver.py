"""
Post-Battle Resolver - Lasting consequences of a finished duel.

Given the finished engine and the player's profile it produces:
1. Permadeath: each card that died in the duel breaks one deck copy
2. Victory rewards: essence, root XP and fragments, scaled by the monster
3. Surrender penalty: random equipped cards break, win or lose

The input profile is never mutated; every entry point returns a new one.
"""

from __future__ import annotations
import logging
import math
import random
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from ..card_schema import CardStatus, CardTemplate
from ..engine_core import CardInstance, DuelEngine, GameStatus
from .harvest import harvest_mob
from .profile import PlayerProfile, SoulEssence, root_for_biome
from .progression import calculate_xp_reward, roll_root_level_up, victory_xp

if TYPE_CHECKING:
    from ..content.monsters import MonsterDefinition

logger = logging.getLogger(__name__)

SURRENDER_PENALTY_COUNT = 2


@dataclass
class LootResult:
    essence: SoulEssence
    xp_root: str
    xp_amount: int
    leveled_up: bool
    fragments_found: int


@dataclass
class BattleOutcome:
    """Everything a battle changed, plus the profile to keep from now on."""
    profile: PlayerProfile
    victory: bool
    broken_cards: list[CardTemplate] = field(default_factory=list)
    loot: LootResult | None = None
    surrendered: bool = False


def break_card(profile: PlayerProfile, card: CardTemplate) -> CardTemplate:
    """
    Mark a card BROKEN on a working profile copy (mutates it).

    The first deck copy with the card's id moves to the grimoire
    graveyard, and the first equipped copy is unequipped. A card with no
    deck copy gets no graveyard entry; the broken copy is still returned.
    """
    grimoire = profile.grimoire
    for i, equipped in enumerate(profile.equipped_creatures):
        if equipped.id == card.id:
            profile.equipped_creatures.pop(i)
            break

    for i, deck_card in enumerate(grimoire.deck):
        if deck_card.id == card.id:
            broken = replace(grimoire.deck.pop(i), status=CardStatus.BROKEN, durability=0)
            grimoire.graveyard.append(broken)
            return broken

    logger.warning("Broke %s, which has no deck copy", card.id)
    return replace(card, status=CardStatus.BROKEN, durability=0)


@dataclass
class PostBattleResolver:
    """
    Applies permadeath, rewards and penalties to player profiles.

    All reward rolls draw from rng, so outcomes replay from a seed.
    """
    rng: random.Random = field(default_factory=random.Random)
    surrender_penalty_count: int = SURRENDER_PENALTY_COUNT

    def resolve(
        self,
        engine: DuelEngine,
        profile: PlayerProfile,
        opponent: MonsterDefinition | None = None,
        opponent_level: int | None = None,
        player_id: str | None = None,
    ) -> BattleOutcome:
        """
        Resolve a finished duel for the profile's player (player1 by default).

        Raises ValueError if the duel has not finished.
        """
        if engine.game_status is not GameStatus.FINISHED:
            raise ValueError(f"Cannot resolve a duel that is {engine.game_status.value}")

        player = engine.get_player(player_id) if player_id else engine.player1
        if player is None:
            raise ValueError(f"Player {player_id} is not in this duel")

        updated = profile.clone()
        broken = self.apply_permadeath(updated, player.graveyard.cards)

        victory = engine.winner_id == player.player_id
        loot = None
        if victory and opponent is not None:
            updated, loot = self.process_victory(updated, opponent, opponent_level)

        logger.info(
            "Resolved duel for %s: victory=%s, %d card(s) broken",
            profile.id, victory, len(broken),
        )
        return BattleOutcome(profile=updated, victory=victory, broken_cards=broken, loot=loot)

    def apply_permadeath(
        self, profile: PlayerProfile, dead: list[CardInstance]
    ) -> list[CardTemplate]:
        """Break one deck copy per dead instance, matched by template id. Mutates profile."""
        broken = []
        for instance in dead:
            card = profile.find_deck_card(instance.original_id)
            if card is None:
                logger.debug("No deck copy of %s left to break", instance.original_id)
                continue
            broken.append(break_card(profile, card))
        return broken

    def process_victory(
        self,
        profile: PlayerProfile,
        opponent: MonsterDefinition,
        opponent_level: int | None = None,
    ) -> tuple[PlayerProfile, LootResult]:
        """Returns (new profile, loot) for beating opponent."""
        base_hp = opponent.physical.base_hp
        essence = harvest_mob(opponent.name, base_hp, opponent.biome, self.rng)

        if opponent_level is not None:
            xp_amount = calculate_xp_reward(profile.level, opponent_level)
        else:
            xp_amount = victory_xp(base_hp)
        xp_root = root_for_biome(opponent.biome)
        fragments_found = math.floor(base_hp / 5) + self.rng.randint(0, 4)

        roots, leveled_up = roll_root_level_up(profile.magic_roots, xp_root, xp_amount, self.rng)

        updated = profile.clone()
        updated.magic_roots = roots
        updated.fragments += fragments_found
        updated.grimoire.essences.append(essence)

        loot = LootResult(
            essence=essence,
            xp_root=xp_root,
            xp_amount=xp_amount,
            leveled_up=leveled_up,
            fragments_found=fragments_found,
        )
        return updated, loot

    def apply_surrender_penalty(self, profile: PlayerProfile) -> BattleOutcome:
        """Break up to surrender_penalty_count randomly chosen equipped cards."""
        updated = profile.clone()
        count = min(self.surrender_penalty_count, len(updated.equipped_creatures))
        victims = self.rng.sample(updated.equipped_creatures, count)

        broken = [break_card(updated, card) for card in victims]
        logger.info("%s surrendered: %d equipped card(s) broken", profile.id, len(broken))
        return BattleOutcome(
            profile=updated, victory=False, broken_cards=broken, surrendered=True
        )
