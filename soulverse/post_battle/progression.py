"""
Progression - Level curves, affinity scaling and XP rewards.

Roots have no XP bucket of their own: a root levels up on a weighted
coin flip gated by the size of the reward.
"""

from __future__ import annotations
import math
import random

from ..card_schema import Biome
from .profile import MagicRoots, PlayerProfile, root_for_biome

AFFINITY_PER_LEVEL = 0.05
LEVEL_UP_CHANCE = 0.2
GUARANTEED_LEVEL_XP = 50  # Rewards above this always level the root


def get_xp_for_next_level(level: int) -> int:
    """XP needed to go from level to level + 1: level^2 * 100."""
    return level ** 2 * 100


def calculate_affinity_multiplier(profile: PlayerProfile, biome: Biome | None) -> float:
    """
    Stat multiplier for cards of a biome: 1.0 + 5% per level of its root.

    NEUTRAL (or no biome) uses the player's highest root.
    """
    if biome is None or biome is Biome.NEUTRAL:
        level = profile.magic_roots.highest()
    else:
        level = profile.magic_roots.get(root_for_biome(biome))
    return 1.0 + level * AFFINITY_PER_LEVEL


def calculate_xp_reward(winner_level: int, loser_level: int) -> int:
    """Beating a stronger opponent pays more: floor(100 * loser / winner)."""
    return math.floor(100 * loser_level / max(1, winner_level))


def victory_xp(base_hp: int) -> int:
    return math.ceil(base_hp * 0.5)


def roll_root_level_up(
    roots: MagicRoots,
    root: str,
    xp_amount: int,
    rng: random.Random,
    chance: float = LEVEL_UP_CHANCE,
) -> tuple[MagicRoots, bool]:
    """Returns (new roots, leveled_up)."""
    if rng.random() < chance or xp_amount > GUARANTEED_LEVEL_XP:
        return roots.with_level(root, roots.get(root) + 1), True
    return roots, False


def can_learn_spell(profile: PlayerProfile, requirements: dict[str, int]) -> bool:
    return all(
        profile.magic_roots.get(root) >= (level or 0)
        for root, level in requirements.items()
    )
