"""
Game Service

Keeps one private game engine per connected session. All sessions share the
process's score store.
"""

import threading
import time
import uuid
from typing import Callable, Dict, List, Optional

from ..config.game_settings import get_word, is_word
from ..models.game import GameState
from .game_engine import GameEngine
from .score_store import ScoreStore
from ..utils.game_logger import game_logger


class GameSession:
    """An engine plus the bookkeeping the host needs to expire it."""

    def __init__(self, session_id: str, engine: GameEngine, now: float):
        self.session_id = session_id
        self.engine = engine
        # Serializes input events for this session
        self.lock = threading.Lock()
        self.created_at = now
        self.last_activity = now


class GameService:
    """
    Session manager for single-player rounds.

    This class handles:
    - Session creation with unique session IDs
    - Routing input events to the session's engine
    - Game event logging when rounds end
    - Eviction of idle sessions
    """

    def __init__(self,
                 score_store: ScoreStore,
                 is_word: Callable[[str], bool] = is_word,
                 get_word: Callable[[], str] = get_word,
                 clock: Callable[[], float] = time.monotonic):
        self.score_store = score_store
        self.is_word = is_word
        self.get_word = get_word
        self.clock = clock
        self.sessions: Dict[str, GameSession] = {}
        self._lock = threading.Lock()

    def create_session(self, session_id: Optional[str] = None) -> str:
        """
        Creates a new session and starts its first round.

        Args:
            session_id: Identifier to use, e.g. a socket id. A UUID is generated when omitted.

        Returns:
            str: The session ID
        """
        session_id = session_id or str(uuid.uuid4())
        engine = GameEngine(self.score_store, is_word=self.is_word, get_word=self.get_word, clock=self.clock)
        with self._lock:
            self.sessions[session_id] = GameSession(session_id, engine, self.clock())

        game_logger.log_game_event(session_id, 'session_created', 'system', score=engine.score)
        return session_id

    def _touch(self, session_id: str) -> Optional[GameSession]:
        with self._lock:
            session = self.sessions.get(session_id)
            if session is not None:
                session.last_activity = self.clock()
            return session

    def get_game_state(self, session_id: str) -> Optional[GameState]:
        """Returns the session's snapshot or None if the session does not exist."""
        with self._lock:
            session = self.sessions.get(session_id)
        if session is None:
            return None
        with session.lock:
            return session.engine.get_state()

    def input_char(self, session_id: str, ch: str) -> Optional[GameState]:
        session = self._touch(session_id)
        if session is None:
            return None
        with session.lock:
            session.engine.input_char(ch)
            return session.engine.get_state()

    def delete_char(self, session_id: str) -> Optional[GameState]:
        session = self._touch(session_id)
        if session is None:
            return None
        with session.lock:
            session.engine.delete_char()
            return session.engine.get_state()

    def submit_guess(self, session_id: str) -> Optional[Dict]:
        """
        Submits the session's current row.

        Returns:
            Dictionary with the updated state and the rejection reason (if any),
            or None if the session does not exist
        """
        session = self._touch(session_id)
        if session is None:
            return None

        with session.lock:
            engine = session.engine
            was_over = engine.round.game_over
            error = engine.submit_guess()
            state = engine.get_state()
            target = engine.round.target

        if state.game_over and not was_over:
            event = 'game_won' if state.won else 'game_lost'
            game_logger.log_game_event(
                session_id, event, 'system',
                rounds_used=state.current_row, target_word=target,
                score=state.score
            )

        return {
            'state': state,
            'error': error
        }

    def reset(self, session_id: str) -> Optional[GameState]:
        """Abandons the current round, if any, and starts a new one."""
        session = self._touch(session_id)
        if session is None:
            return None
        with session.lock:
            session.engine.new_round()
            return session.engine.get_state()

    def delete_session(self, session_id: str) -> bool:
        """
        Removes a session from memory. An unfinished round is abandoned and not recorded.

        Returns:
            bool: True if the session was deleted, False if not found
        """
        with self._lock:
            if session_id in self.sessions:
                del self.sessions[session_id]
                return True
        return False

    def cleanup_idle_sessions(self, timeout_seconds: float) -> List[str]:
        """
        Drops sessions without input for longer than timeout_seconds.

        Returns:
            List of expired session IDs
        """
        now = self.clock()
        with self._lock:
            expired = [
                session_id for session_id, session in self.sessions.items()
                if now - session.last_activity > timeout_seconds
            ]
            for session_id in expired:
                del self.sessions[session_id]

        for session_id in expired:
            game_logger.log_game_event(session_id, 'session_expired', 'system', idle_timeout=timeout_seconds)
        return expired

    def active_session_count(self) -> int:
        with self._lock:
            return len(self.sessions)


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(score_store: ScoreStore) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(score_store)
    return _game_service
