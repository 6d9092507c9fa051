"""
Bot Policy - How a duel seat picks its next move.

Policies never touch the engine; they choose one of the actions from
legal_actions() and the caller applies it through the Reducer.
"""

from __future__ import annotations
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from ..engine_core.duel_engine import DuelEngine


@dataclass
class BotDecision:
    """The chosen action, with a short reason for logs."""
    action: Action
    explanation: str = ""
    evaluated_actions: int = 0


class BotPolicy(ABC):
    """Base class for anything that can take a seat in a duel."""

    @abstractmethod
    def select_action(self, engine: DuelEngine, legal_actions: list[Action]) -> BotDecision:
        """
        Choose the next move.

        Args:
            engine: The duel; policies only read it
            legal_actions: Moves the seat may make right now

        Raises:
            ValueError: legal_actions is empty
        """

    def get_name(self) -> str:
        return type(self).__name__

    @staticmethod
    def _require(legal_actions: list[Action]) -> None:
        if not legal_actions:
            raise ValueError("No legal actions available")


class RandomPolicy(BotPolicy):
    """Uniform choice among legal moves. Seed it for repeatable duels."""

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_action(self, engine: DuelEngine, legal_actions: list[Action]) -> BotDecision:
        self._require(legal_actions)
        action = self.rng.choice(legal_actions)
        return BotDecision(
            action=action,
            explanation=f"Random pick: {action.describe()}",
            evaluated_actions=len(legal_actions),
        )


class FirstLegalPolicy(BotPolicy):
    """Always the first legal move; plays come before attacks and end turn."""

    def select_action(self, engine: DuelEngine, legal_actions: list[Action]) -> BotDecision:
        self._require(legal_actions)
        return BotDecision(
            action=legal_actions[0],
            explanation=legal_actions[0].describe(),
            evaluated_actions=1,
        )
