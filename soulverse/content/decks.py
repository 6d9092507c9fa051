"""
Deck Generation - Monster decks, stock test decks and the starter profile.

A monster deck is 20 cards:
- 3 signature copies of the monster itself
- 17 minions themed on the monster's biome
"""

from __future__ import annotations
import random
from copy import deepcopy
from dataclasses import replace

from ..card_schema import (
    AbilityTrigger,
    Biome,
    CardRarity,
    CardStatus,
    CardTemplate,
    EffectType,
    TargetRequirement,
    ability,
    creature,
)
from ..post_battle import Grimoire, MagicRoots, PlayerProfile
from .monsters import MonsterDefinition

SIGNATURE_COPIES = 3
MINION_COUNT = 17
GREATER_MINION_CHANCE = 0.3

# Biome -> (name, attack, defense, cost)
BIOME_MINIONS: dict[Biome, tuple[str, int, int, int]] = {
    Biome.VOLCANIC: ("Ember Sprite", 3, 1, 2),
    Biome.SWAMP: ("Muck Leech", 1, 3, 2),
    Biome.FOREST: ("Thorn Spitter", 2, 2, 2),
    Biome.TUNDRA: ("Ice Shard", 4, 1, 3),
    Biome.ASTRAL: ("Void Wisp", 2, 4, 3),
}
DEFAULT_MINION = ("Wild Critter", 2, 2, 2)


def _short_suffix(rng: random.Random) -> str:
    alphabet = "abcdefghijklmnopqrstuvwxyz0123456789"
    return "".join(rng.choice(alphabet) for _ in range(5))


def create_signature_card(monster: MonsterDefinition, rng: random.Random) -> CardTemplate:
    """The monster's own card, used as the boss unit of its deck."""
    return creature(
        f"{monster.id}-signature-{_short_suffix(rng)}",
        monster.name,
        attack=monster.card.attack,
        defense=monster.card.defense,
        cost=monster.card.cost,
        abilities=list(monster.card.abilities),
        rarity=CardRarity.RARE,
        origin_biome=monster.biome,
        soul_weight=monster.card.cost,
        status=CardStatus.MINTED,
        description=f"The manifest soul of a {monster.name}.",
    )


def generate_minion_for_biome(biome: Biome, suffix: int, rng: random.Random) -> CardTemplate:
    """A filler creature; 30% of the time a Greater variant with +1 attack and +1 cost."""
    name, attack, defense, cost = BIOME_MINIONS.get(biome, DEFAULT_MINION)
    if rng.random() > 1 - GREATER_MINION_CHANCE:
        attack += 1
        cost += 1
        name = f"Greater {name}"

    return creature(
        f"minion-{biome.value}-{suffix}",
        name,
        attack=attack,
        defense=defense,
        cost=cost,
        rarity=CardRarity.COMMON,
        origin_biome=biome,
        soul_weight=1,
        status=CardStatus.MINTED,
        description="A minor spirit bound to this biome.",
    )


def generate_deck_for_mob(monster: MonsterDefinition, rng: random.Random | None = None) -> list[CardTemplate]:
    """Build and shuffle the 20-card deck a monster duels with."""
    rng = rng or random.Random()
    deck = [create_signature_card(monster, rng) for _ in range(SIGNATURE_COPIES)]
    deck.extend(generate_minion_for_biome(monster.biome, i, rng) for i in range(MINION_COUNT))
    rng.shuffle(deck)
    return deck


# ============================================================================
# Stock cards
# ============================================================================

MOCK_TEMPLATES: list[CardTemplate] = [
    creature(
        "tmpl_1", "Goblin Grunt", attack=2, defense=2, cost=2,
        origin_biome=Biome.SWAMP, status=CardStatus.MINTED,
    ),
    creature(
        "tmpl_pyro", "Pyromancer", attack=2, defense=2, cost=3,
        abilities=[ability(
            AbilityTrigger.ON_PLAY, EffectType.DEAL_DAMAGE, 2, TargetRequirement.ENEMY_CREATURE
        )],
        rarity=CardRarity.RARE, origin_biome=Biome.VOLCANIC, soul_weight=3,
        status=CardStatus.MINTED, description="Burn them all.",
    ),
    creature(
        "tmpl_cleric", "Sanctuary Cleric", attack=1, defense=4, cost=3,
        abilities=[ability(AbilityTrigger.ON_PLAY, EffectType.HEAL, 3, TargetRequirement.SELF)],
        origin_biome=Biome.FOREST, soul_weight=2,
        status=CardStatus.MINTED, description="Healing light.",
    ),
]

GOBLIN_SCAVENGER = creature(
    "goblin-001", "Goblin Scavenger", attack=1, defense=1, cost=1,
    origin_biome=Biome.SWAMP, soul_weight=2, status=CardStatus.ACTIVE,
    description="A meager creature that thrives in the muck.",
    requirements={"black": 1},
)

ASTRAL_TITAN = creature(
    "titan-999", "Astral Titan", attack=8, defense=8, cost=8,
    rarity=CardRarity.LEGENDARY, origin_biome=Biome.ASTRAL, soul_weight=50,
    status=CardStatus.MINTED,
    description="A construct of starlight and ancient geometry.",
    requirements={"blue": 5, "white": 3},
)


def generate_mock_deck(size: int, rng: random.Random | None = None) -> list[CardTemplate]:
    """A deck of independent copies drawn uniformly from the stock templates."""
    rng = rng or random.Random()
    return [deepcopy(rng.choice(MOCK_TEMPLATES)) for _ in range(size)]


def create_starter_profile(
    rng: random.Random | None = None,
    deck_size: int = 12,
    profile_id: str = "player-alpha",
    name: str = "Traveler",
) -> PlayerProfile:
    """
    A fresh level-10 profile.

    The deck holds the Goblin Scavenger plus stock cards; the goblin
    is also the only equipped creature.
    """
    deck = [replace(GOBLIN_SCAVENGER)]
    deck.extend(generate_mock_deck(deck_size - 1, rng))
    return PlayerProfile(
        id=profile_id,
        name=name,
        level=10,
        soul_cap=100,
        magic_roots=MagicRoots(red=2, blue=4, green=5, white=1, black=2),
        grimoire=Grimoire(deck=deck, collection=[replace(ASTRAL_TITAN)]),
        equipped_creatures=[replace(GOBLIN_SCAVENGER)],
        unlocked_biomes=[Biome.FOREST, Biome.SWAMP],
    )
