"""
Monsters - Definitions of the creatures a player can duel.

Each monster has a physical form (how it behaves in the world, and how
much HP it has) and a card form (the signature card its deck is built
around). Duel health and rewards both derive from base_hp.
"""

from __future__ import annotations
import math
import random
from dataclasses import dataclass, field

from ..card_schema import (
    Ability,
    AbilityTrigger,
    Biome,
    EffectType,
    TargetRequirement,
    ability,
)

# Monster HP is scaled down to keep duels short
DUEL_HEALTH_DIVISOR = 4


@dataclass
class PhysicalForm:
    sprite_color: str
    base_hp: int
    speed: float
    aggro_radius: float
    ai_type: str  # "AGGRESSIVE", "PASSIVE", "FLEE"
    drop_table: list[str] = field(default_factory=list)


@dataclass
class CardForm:
    cost: int
    attack: int
    defense: int
    abilities: list[Ability] = field(default_factory=list)


@dataclass
class MonsterDefinition:
    id: str
    name: str
    biome: Biome
    physical: PhysicalForm
    card: CardForm

    @property
    def duel_health(self) -> int:
        return math.ceil(self.physical.base_hp / DUEL_HEALTH_DIVISOR)


MONSTER_DATABASE: dict[str, MonsterDefinition] = {
    "pyro_walker": MonsterDefinition(
        id="pyro_walker",
        name="Cinder Walker",
        biome=Biome.VOLCANIC,
        physical=PhysicalForm(
            sprite_color="#ef4444",
            base_hp=80,
            speed=4.5,
            aggro_radius=8,
            ai_type="AGGRESSIVE",
            drop_table=["ash_pile", "magma_stone"],
        ),
        card=CardForm(
            cost=4, attack=4, defense=2,
            abilities=[ability(
                AbilityTrigger.ON_PLAY, EffectType.DEAL_DAMAGE, 2, TargetRequirement.ENEMY_CREATURE
            )],
        ),
    ),
    "mist_shade": MonsterDefinition(
        id="mist_shade",
        name="Mist Shade",
        biome=Biome.SWAMP,
        physical=PhysicalForm(
            sprite_color="#64748b",
            base_hp=40,
            speed=6.0,
            aggro_radius=5,
            ai_type="FLEE",
            drop_table=["ectoplasm"],
        ),
        card=CardForm(
            cost=2, attack=3, defense=1,
            abilities=[ability(
                AbilityTrigger.ON_DEATH, EffectType.DRAW_CARD, 1, TargetRequirement.SELF
            )],
        ),
    ),
    "crystal_golem": MonsterDefinition(
        id="crystal_golem",
        name="Prism Guardian",
        biome=Biome.ASTRAL,
        physical=PhysicalForm(
            sprite_color="#06b6d4",
            base_hp=150,
            speed=2.0,
            aggro_radius=3,
            ai_type="PASSIVE",
            drop_table=["crystal_shard", "stardust"],
        ),
        card=CardForm(
            cost=6, attack=2, defense=8,
            abilities=[ability(
                AbilityTrigger.PASSIVE, EffectType.BUFF_STATS, 1, TargetRequirement.ALLY_CREATURE
            )],
        ),
    ),
    "forest_lurker": MonsterDefinition(
        id="forest_lurker",
        name="Moss Lurker",
        biome=Biome.FOREST,
        physical=PhysicalForm(
            sprite_color="#15803d",
            base_hp=60,
            speed=3.5,
            aggro_radius=6,
            ai_type="AGGRESSIVE",
            drop_table=["herbs", "wood"],
        ),
        card=CardForm(
            cost=3, attack=3, defense=3,
            abilities=[ability(
                AbilityTrigger.ON_ATTACK, EffectType.HEAL, 2, TargetRequirement.SELF
            )],
        ),
    ),
}

# Which monsters roam each biome
BIOME_MONSTER_POOLS: dict[Biome, list[str]] = {
    Biome.VOLCANIC: ["pyro_walker"],
    Biome.SWAMP: ["mist_shade"],
    Biome.FOREST: ["forest_lurker"],
    Biome.TUNDRA: ["crystal_golem"],
    Biome.ASTRAL: ["crystal_golem"],
    Biome.NEUTRAL: ["forest_lurker"],
}


def get_monster(monster_id: str) -> MonsterDefinition | None:
    """Get a monster definition by id."""
    return MONSTER_DATABASE.get(monster_id)


def random_monster_for_biome(biome: Biome, rng: random.Random) -> MonsterDefinition:
    """Pick an encounter from the biome's pool."""
    pool = BIOME_MONSTER_POOLS.get(biome) or BIOME_MONSTER_POOLS[Biome.NEUTRAL]
    return MONSTER_DATABASE[rng.choice(pool)]
