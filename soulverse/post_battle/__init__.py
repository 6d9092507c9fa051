"""
Post-Battle - Persistent player profiles and what a duel does to them.

The resolver runs once per finished battle:
1. Permadeath breaks the deck copies of cards that died
2. Victories grant soul essence, root XP and fragments
3. Surrendering breaks random equipped cards
"""

from .profile import (
    BIOME_ROOTS,
    EquipResult,
    Grimoire,
    MagicRoots,
    PlayerProfile,
    SoulEssence,
    calculate_current_soul_usage,
    can_equip_card,
    root_for_biome,
)
from .progression import (
    calculate_affinity_multiplier,
    calculate_xp_reward,
    can_learn_spell,
    get_xp_for_next_level,
    roll_root_level_up,
)
from .harvest import harvest_mob
from .resolver import BattleOutcome, LootResult, PostBattleResolver, break_card

__all__ = [
    "BIOME_ROOTS",
    "EquipResult",
    "Grimoire",
    "MagicRoots",
    "PlayerProfile",
    "SoulEssence",
    "calculate_current_soul_usage",
    "can_equip_card",
    "root_for_biome",
    "calculate_affinity_multiplier",
    "calculate_xp_reward",
    "can_learn_spell",
    "get_xp_for_next_level",
    "roll_root_level_up",
    "harvest_mob",
    "BattleOutcome",
    "LootResult",
    "PostBattleResolver",
    "break_card",
]
