"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import GameState, GuessError, LetterState, Outcome, RoundState
from .score import OutcomeHistogram

__all__ = ['GameState', 'GuessError', 'LetterState', 'Outcome', 'RoundState', 'OutcomeHistogram']
