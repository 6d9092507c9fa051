"""
Soulverse - Turn-based card duels with persistent post-battle consequences.

A duel is fought with runtime copies of a player's card templates. Once the
duel is over, the post-battle resolver writes the lasting results back to the
player profile: dead cards break, victories grant soul essence and experience.
"""

__version__ = "0.1.0"
