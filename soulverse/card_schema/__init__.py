"""Card schema - authored card templates, abilities and deck validation."""

from .card import (
    Ability,
    AbilityTrigger,
    Biome,
    CardRarity,
    CardStats,
    CardStatus,
    CardTemplate,
    CardType,
    EffectType,
    TargetRequirement,
    MAGIC_ROOTS,
    UNPLAYABLE_STATUSES,
    ability,
    creature,
)
from .validation import (
    CardValidationError,
    ValidationResult,
    validate_template,
    validate_deck,
    ensure_valid_deck,
)

__all__ = [
    "Ability",
    "AbilityTrigger",
    "Biome",
    "CardRarity",
    "CardStats",
    "CardStatus",
    "CardTemplate",
    "CardType",
    "EffectType",
    "TargetRequirement",
    "MAGIC_ROOTS",
    "UNPLAYABLE_STATUSES",
    "ability",
    "creature",
    "CardValidationError",
    "ValidationResult",
    "validate_template",
    "validate_deck",
    "ensure_valid_deck",
]
