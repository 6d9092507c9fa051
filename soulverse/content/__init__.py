"""
Content - The authored world data duels are played with.

This module contains:
- The monster database and biome encounter pools
- Monster deck generation and stock test decks
- The starter profile
- Battle setup (profile vs monster)
"""

from .monsters import (
    BIOME_MONSTER_POOLS,
    MONSTER_DATABASE,
    CardForm,
    MonsterDefinition,
    PhysicalForm,
    get_monster,
    random_monster_for_biome,
)
from .decks import (
    MOCK_TEMPLATES,
    GOBLIN_SCAVENGER,
    create_signature_card,
    create_starter_profile,
    generate_deck_for_mob,
    generate_minion_for_biome,
    generate_mock_deck,
)
from .setup import setup_battle

__all__ = [
    "BIOME_MONSTER_POOLS",
    "MONSTER_DATABASE",
    "CardForm",
    "MonsterDefinition",
    "PhysicalForm",
    "get_monster",
    "random_monster_for_biome",
    "MOCK_TEMPLATES",
    "GOBLIN_SCAVENGER",
    "create_signature_card",
    "create_starter_profile",
    "generate_deck_for_mob",
    "generate_minion_for_biome",
    "generate_mock_deck",
    "setup_battle",
]
