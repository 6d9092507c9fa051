"""Soul harvesting - turning a defeated monster into essence."""

from __future__ import annotations
import math
import random
import time

from ..card_schema import Biome
from .profile import SoulEssence


def harvest_mob(
    source_name: str,
    difficulty: int,
    biome: Biome,
    rng: random.Random,
    collected_at: float | None = None,
) -> SoulEssence:
    """
    Create the essence left by a defeated monster.

    Power varies by +/- 20% around the difficulty; purity is uniform.
    """
    collected_at = time.time() if collected_at is None else collected_at
    return SoulEssence(
        id=f"essence-{int(collected_at * 1000)}-{rng.getrandbits(24):06x}",
        source_name=f"Spirit of {source_name}",
        biome=biome,
        power_level=math.floor(difficulty * (0.8 + rng.random() * 0.4)),
        purity=rng.random(),
        collected_at=collected_at,
    )
