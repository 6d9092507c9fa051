"""
Battle Setup - Creates a duel between a player profile and a monster.

This module handles:
- Looking up the monster and building its deck
- Filtering the profile's deck down to playable cards
- Validating both decks before any instance is created
- Scaling the monster's duel health from its base HP

The returned engine is still PRE_GAME; the caller starts it.
"""

from __future__ import annotations
import logging
import random

from ..card_schema import ensure_valid_deck
from ..engine_core import DuelEngine
from ..post_battle import PlayerProfile
from .decks import generate_deck_for_mob
from .monsters import MonsterDefinition, get_monster

logger = logging.getLogger(__name__)


def setup_battle(
    profile: PlayerProfile,
    monster_id: str,
    rng: random.Random | None = None,
    seed: int | None = None,
) -> tuple[DuelEngine, MonsterDefinition]:
    """
    Set up a duel of profile (player1) against a monster (player2).

    Args:
        profile: The player's persistent profile; only read here
        monster_id: Key into the monster database
        rng: Random source shared by deck generation and the engine
        seed: Seed for a new random source when rng is not given

    Returns:
        (engine, monster definition)

    Raises:
        ValueError: unknown monster id
        CardValidationError: a deck fails validation
    """
    monster = get_monster(monster_id)
    if monster is None:
        raise ValueError(f"Unknown monster: {monster_id}")

    rng = rng or random.Random(seed)
    player_deck = profile.playable_deck()
    monster_deck = generate_deck_for_mob(monster, rng)

    for deck in (player_deck, monster_deck):
        result = ensure_valid_deck(deck)
        for warning in result.warnings:
            logger.warning(warning)

    engine = DuelEngine(profile.id, player_deck, monster.id, monster_deck, rng=rng)
    engine.player2.health = monster.duel_health
    engine.player2.max_health = monster.duel_health

    logger.info(
        "Battle set up: %s (%d cards) vs %s (%d cards, %d health)",
        profile.id, len(player_deck), monster.name, len(monster_deck), monster.duel_health,
    )
    return engine, monster
