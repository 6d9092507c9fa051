"""
Player Profile - The persistent side of a player, outside any duel.

The profile holds the grimoire (deck, graveyard, collection, essences),
the five magic roots and the currencies. The duel engine never touches
it; only the post-battle resolver produces updated profiles.
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field, replace

from ..card_schema import Biome, CardStatus, CardTemplate, MAGIC_ROOTS

# Biome whose soul essence feeds each root
BIOME_ROOTS: dict[Biome, str] = {
    Biome.VOLCANIC: "red",
    Biome.SWAMP: "black",
    Biome.FOREST: "green",
    Biome.TUNDRA: "blue",
    Biome.ASTRAL: "white",
}
DEFAULT_ROOT = "white"


def root_for_biome(biome: Biome | None) -> str:
    return BIOME_ROOTS.get(biome, DEFAULT_ROOT)


@dataclass
class MagicRoots:
    """Five affinity levels gating card requirements and scaling rewards."""
    red: int = 0
    blue: int = 0
    green: int = 0
    white: int = 0
    black: int = 0

    def get(self, root: str) -> int:
        if root not in MAGIC_ROOTS:
            raise ValueError(f"Unknown magic root: {root}")
        return getattr(self, root)

    def with_level(self, root: str, level: int) -> MagicRoots:
        """Return new roots with one level changed."""
        self.get(root)
        return replace(self, **{root: level})

    def highest(self) -> int:
        return max(self.as_dict().values())

    def as_dict(self) -> dict[str, int]:
        return {root: getattr(self, root) for root in MAGIC_ROOTS}


@dataclass
class SoulEssence:
    """Crafting material harvested from a defeated monster."""
    id: str
    source_name: str
    biome: Biome
    power_level: int
    purity: float  # 0.0 - 1.0
    collected_at: float


@dataclass
class Grimoire:
    """The soulbound inventory."""
    deck: list[CardTemplate] = field(default_factory=list)
    graveyard: list[CardTemplate] = field(default_factory=list)
    collection: list[CardTemplate] = field(default_factory=list)
    essences: list[SoulEssence] = field(default_factory=list)


@dataclass
class PlayerProfile:
    """
    A persistent player.

    Created once per play session. Treat as a value: the post-battle
    resolver returns a modified clone and leaves its input alone.
    """
    id: str
    name: str
    level: int = 1
    soul_cap: int = 100
    magic_roots: MagicRoots = field(default_factory=MagicRoots)
    fragments: int = 0
    grimoire: Grimoire = field(default_factory=Grimoire)
    equipped_creatures: list[CardTemplate] = field(default_factory=list)
    unlocked_biomes: list[Biome] = field(default_factory=list)

    def clone(self) -> PlayerProfile:
        """Create a deep copy of the profile."""
        return deepcopy(self)

    def playable_deck(self) -> list[CardTemplate]:
        """Deck cards that may enter a duel (not BROKEN or EXILED)."""
        return [card for card in self.grimoire.deck if card.is_playable]

    def find_deck_card(self, template_id: str) -> CardTemplate | None:
        for card in self.grimoire.deck:
            if card.id == template_id:
                return card
        return None


@dataclass
class EquipResult:
    success: bool
    reason: str | None = None


def calculate_current_soul_usage(profile: PlayerProfile) -> int:
    return sum(card.soul_weight for card in profile.equipped_creatures)


def can_equip_card(profile: PlayerProfile, card: CardTemplate) -> EquipResult:
    """Check status, magic-root requirements and soul capacity."""
    if card.status is CardStatus.BROKEN:
        return EquipResult(False, "Card is BROKEN. Repair at Origin Biome.")
    if card.status is CardStatus.EXILED:
        return EquipResult(False, "Card is EXILED and cannot be used.")

    for root in MAGIC_ROOTS:
        required = card.requirements.get(root, 0)
        have = profile.magic_roots.get(root)
        if have < required:
            return EquipResult(
                False,
                f"Insufficient {root.upper()} Magic. Need Lvl {required}, Have Lvl {have}.",
            )

    usage = calculate_current_soul_usage(profile)
    if usage + card.soul_weight > profile.soul_cap:
        return EquipResult(
            False,
            f"Soul Overload. Capacity: {usage}/{profile.soul_cap}. Card Weight: {card.soul_weight}.",
        )

    return EquipResult(True)
