"""
Pytest fixtures for Soulverse tests.
"""

import random

import pytest

from ..card_schema import (
    AbilityTrigger,
    CardTemplate,
    EffectType,
    TargetRequirement,
    ability,
    creature,
)
from ..content import create_starter_profile
from ..engine_core import CardInstance, DuelEngine, ZoneRole
from ..post_battle import PlayerProfile


# =============================================================================
# Card templates
# =============================================================================

@pytest.fixture
def grunt() -> CardTemplate:
    """A vanilla 2-cost 2/2."""
    return creature("grunt", "Grunt", attack=2, defense=2, cost=2)


@pytest.fixture
def brute() -> CardTemplate:
    """A vanilla 3/2 for combat tests."""
    return creature("brute", "Brute", attack=3, defense=2, cost=3)


@pytest.fixture
def pyromancer() -> CardTemplate:
    """ON_PLAY: deal 2 to an enemy creature."""
    return creature(
        "pyro", "Pyromancer", attack=2, defense=2, cost=3,
        abilities=[ability(
            AbilityTrigger.ON_PLAY, EffectType.DEAL_DAMAGE, 2, TargetRequirement.ENEMY_CREATURE
        )],
    )


@pytest.fixture
def cleric() -> CardTemplate:
    """ON_PLAY: heal itself for 3."""
    return creature(
        "cleric", "Cleric", attack=1, defense=4, cost=3,
        abilities=[ability(AbilityTrigger.ON_PLAY, EffectType.HEAL, 3, TargetRequirement.SELF)],
    )


@pytest.fixture
def martyr() -> CardTemplate:
    """ON_DEATH: deal 3 to the enemy player."""
    return creature(
        "martyr", "Martyr", attack=1, defense=1, cost=1,
        abilities=[ability(
            AbilityTrigger.ON_DEATH, EffectType.DEAL_DAMAGE, 3, TargetRequirement.ENEMY_PLAYER
        )],
    )


# =============================================================================
# Engines
# =============================================================================

@pytest.fixture
def make_duel():
    """
    Factory for a duel between "alice" (player1) and "bob" (player2).

    Started with alice going first unless start=False.
    """
    def _make(
        alice_deck: list[CardTemplate],
        bob_deck: list[CardTemplate],
        start: bool = True,
        first: str = "alice",
        seed: int = 7,
        **kwargs,
    ) -> DuelEngine:
        engine = DuelEngine("alice", alice_deck, "bob", bob_deck, seed=seed, **kwargs)
        if start:
            engine.start_game(first_player_id=first)
        return engine
    return _make


@pytest.fixture
def grunt_duel(make_duel, grunt) -> DuelEngine:
    """Ten grunts each, alice to act on turn 1."""
    return make_duel([grunt] * 10, [grunt] * 10)


@pytest.fixture
def place():
    """
    Move the first instance of a template into a zone, wherever it is.

    Battlefield placements are ready to attack unless ready=False.
    """
    def _place(
        engine: DuelEngine,
        player_id: str,
        original_id: str,
        role: ZoneRole = ZoneRole.BATTLEFIELD,
        ready: bool = True,
    ) -> CardInstance:
        player = engine.get_player(player_id)
        for zone in player.zones:
            if zone.role is role:
                continue
            for card in zone.cards:
                if card.original_id == original_id:
                    player.move_card(card.runtime_id, zone.role, role)
                    card.is_exhausted = not ready
                    return card
        raise LookupError(f"{player_id} has no movable {original_id}")
    return _place


# =============================================================================
# Profiles
# =============================================================================

@pytest.fixture
def profile() -> PlayerProfile:
    """The seeded starter profile: goblin-001 plus 11 stock cards."""
    return create_starter_profile(random.Random(3))
