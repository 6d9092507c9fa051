"""Tests for the Soulverse duel engine."""
