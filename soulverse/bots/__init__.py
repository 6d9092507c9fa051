"""
Bots module - Duel opponents.

Provides:
- BotPolicy: Interface for bot decision-making
- RandomPolicy / FirstLegalPolicy: baseline policies over legal actions
- DuelBot: the scripted monster opponent
"""

from .policy import BotPolicy, BotDecision, RandomPolicy, FirstLegalPolicy
from .duel_bot import DuelBot

__all__ = [
    "BotPolicy",
    "BotDecision",
    "RandomPolicy",
    "FirstLegalPolicy",
    "DuelBot",
]
