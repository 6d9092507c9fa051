"""
Card Schema - Authored card templates and their abilities.

Templates are the catalog side of a card: the persistent definition a
player owns. The duel engine never mutates a template; it creates
CardInstance copies (see engine_core.state) for every battle.

String values match the catalog wire form, e.g. "ON_PLAY" or "BROKEN".
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class CardType(Enum):
    CREATURE = "CREATURE"
    SPELL = "SPELL"
    ENCHANTMENT = "ENCHANTMENT"
    LAND = "LAND"


class CardRarity(Enum):
    COMMON = "COMMON"
    RARE = "RARE"
    LEGENDARY = "LEGENDARY"
    MYTHIC = "MYTHIC"


class CardStatus(Enum):
    """Lifecycle of an owned card. BROKEN and EXILED cards cannot be played."""
    MINTED = "MINTED"
    ACTIVE = "ACTIVE"
    BROKEN = "BROKEN"
    EXILED = "EXILED"


class Biome(Enum):
    VOLCANIC = "VOLCANIC"
    SWAMP = "SWAMP"
    FOREST = "FOREST"
    TUNDRA = "TUNDRA"
    ASTRAL = "ASTRAL"
    NEUTRAL = "NEUTRAL"


class AbilityTrigger(Enum):
    """When an ability fires. PASSIVE abilities are carried as data only."""
    ON_PLAY = "ON_PLAY"
    ON_DEATH = "ON_DEATH"
    ON_ATTACK = "ON_ATTACK"
    PASSIVE = "PASSIVE"


class EffectType(Enum):
    DEAL_DAMAGE = "DEAL_DAMAGE"
    HEAL = "HEAL"
    DRAW_CARD = "DRAW_CARD"
    BUFF_STATS = "BUFF_STATS"


class TargetRequirement(Enum):
    NONE = "NONE"
    SELF = "SELF"
    ENEMY_CREATURE = "ENEMY_CREATURE"
    ALLY_CREATURE = "ALLY_CREATURE"
    ENEMY_PLAYER = "ENEMY_PLAYER"


UNPLAYABLE_STATUSES = frozenset({CardStatus.BROKEN, CardStatus.EXILED})

# Names of the five magic roots used by card requirements and player affinity
MAGIC_ROOTS = ("red", "blue", "green", "white", "black")


@dataclass
class Ability:
    """A single triggered effect printed on a card."""
    trigger: AbilityTrigger
    effect_type: EffectType
    value: int
    target_requirement: TargetRequirement = TargetRequirement.NONE


@dataclass
class CardStats:
    attack: int
    defense: int
    cost: int


@dataclass
class CardTemplate:
    """
    An owned card definition.

    Duplicate copies in a deck may share the same id; the runtime
    instances created from them always get distinct runtime ids.
    """
    id: str
    name: str
    card_type: CardType
    stats: CardStats
    rarity: CardRarity = CardRarity.COMMON
    origin_biome: Biome | None = None
    soul_weight: int = 1
    status: CardStatus = CardStatus.ACTIVE
    durability: int = 100
    description: str = ""
    requirements: dict[str, int] = field(default_factory=dict)  # root name -> min level
    abilities: list[Ability] = field(default_factory=list)

    @property
    def cost(self) -> int:
        return self.stats.cost

    @property
    def is_playable(self) -> bool:
        return self.status not in UNPLAYABLE_STATUSES


# ============================================================================
# Factory functions for common card shapes
# ============================================================================

def creature(
    card_id: str,
    name: str,
    attack: int,
    defense: int,
    cost: int,
    abilities: list[Ability] | None = None,
    **kwargs,
) -> CardTemplate:
    """Create a creature template."""
    return CardTemplate(
        id=card_id,
        name=name,
        card_type=CardType.CREATURE,
        stats=CardStats(attack=attack, defense=defense, cost=cost),
        abilities=abilities or [],
        **kwargs,
    )


def ability(
    trigger: AbilityTrigger,
    effect_type: EffectType,
    value: int,
    target: TargetRequirement = TargetRequirement.NONE,
) -> Ability:
    """Create an ability."""
    return Ability(
        trigger=trigger,
        effect_type=effect_type,
        value=value,
        target_requirement=target,
    )
