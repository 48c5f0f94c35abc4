"""Scoring domain services: house scoreboard engine, board registry and calculator.

This package holds the game rules and in-memory board state. HTTP routes
and socket handlers import it, keeping transport concerns separated from
the scoring mechanics.
"""

from .engine import ScoringEngine

__all__ = ['ScoringEngine']
