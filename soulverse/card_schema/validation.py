"""
Card Validation - Schema checks for authored card templates and decks.

Validates that:
1. Required fields are present
2. Stats, durability and ability values are in range
3. Requirements name real magic roots
4. A deck handed to a duel contains playable cards
"""

from __future__ import annotations
from dataclasses import dataclass

from .card import CardTemplate, CardType, MAGIC_ROOTS, UNPLAYABLE_STATUSES


class CardValidationError(Exception):
    """Raised when a deck or template fails validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Card validation failed with {len(errors)} error(s)")


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_template(template: CardTemplate) -> list[str]:
    """Validate a single card template. Returns a list of errors."""
    errors = []
    label = template.id or template.name or "<unnamed>"

    if not template.id:
        errors.append("Card id is required")
    if not template.name:
        errors.append(f"Card {label}: name is required")

    stats = template.stats
    if stats.cost < 0:
        errors.append(f"Card {label}: cost must be >= 0")
    if stats.attack < 0:
        errors.append(f"Card {label}: attack must be >= 0")
    if stats.defense < 0:
        errors.append(f"Card {label}: defense must be >= 0")

    if not 0 <= template.durability <= 100:
        errors.append(f"Card {label}: durability must be between 0 and 100")
    if template.soul_weight < 0:
        errors.append(f"Card {label}: soul_weight must be >= 0")

    for root, level in template.requirements.items():
        if root not in MAGIC_ROOTS:
            errors.append(f"Card {label}: unknown magic root '{root}' in requirements")
        elif level < 0:
            errors.append(f"Card {label}: requirement for '{root}' must be >= 0")

    for index, ab in enumerate(template.abilities):
        if ab.value < 0:
            errors.append(f"Card {label}: ability {index} value must be >= 0")

    return errors


def validate_deck(templates: list[CardTemplate]) -> ValidationResult:
    """
    Validate a deck about to be turned into duel instances.

    Broken or exiled cards are errors here: callers are expected to
    filter a profile's deck down to playable cards first.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not templates:
        warnings.append("Deck is empty; the player will only ever fatigue")

    for template in templates:
        errors.extend(validate_template(template))
        if template.status in UNPLAYABLE_STATUSES:
            errors.append(
                f"Card {template.id}: status {template.status.value} cannot enter a duel"
            )
        if template.card_type is CardType.CREATURE and template.stats.defense == 0:
            warnings.append(f"Card {template.id}: creature with 0 defense")

    return ValidationResult(
        valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


def ensure_valid_deck(templates: list[CardTemplate]) -> ValidationResult:
    """Validate a deck and raise CardValidationError if it has errors."""
    result = validate_deck(templates)
    if not result.valid:
        raise CardValidationError(result.errors)
    return result
