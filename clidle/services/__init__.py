"""
Services Package

Contains all business logic and service classes.
"""

from .score_store import ScoreStore, StoreError, StoreReadError, StoreWriteError
from .game_engine import GameEngine, score_guess
from .game_service import GameService, GameSession, get_game_service, initialize_game_service

__all__ = [
    'ScoreStore', 'StoreError', 'StoreReadError', 'StoreWriteError',
    'GameEngine', 'score_guess',
    'GameService', 'GameSession', 'get_game_service', 'initialize_game_service'
]
