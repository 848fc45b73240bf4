"""
WebSocket Event Handlers

Every connected socket owns one game session, keyed by its socket id. Each
input event is answered with a ``state`` event carrying the new snapshot.
"""

from dataclasses import asdict
from flask import request
from flask_socketio import emit
from ..services.game_service import get_game_service
from ..utils.game_logger import game_logger


def _emit_state(state):
    emit('state', {'success': True, 'state': asdict(state)})


def _emit_session_missing():
    emit('error', {'error': 'Session not found'})


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('connect')
    def handle_connect():
        """Start a session for the new socket."""
        game_service = get_game_service()
        if not game_service:
            emit('error', {'error': 'Game service unavailable'})
            return

        session_id = game_service.create_session(request.sid)
        game_logger.log_user_action(request, 'connect', session_id)
        _emit_state(game_service.get_game_state(session_id))

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """Drop the socket's session; an unfinished round is abandoned."""
        game_service = get_game_service()
        if game_service and game_service.delete_session(request.sid):
            game_logger.log_game_event(request.sid, 'session_closed', request.remote_addr or 'unknown')

    @socketio.on('get_state')
    def handle_get_state(data=None):
        game_service = get_game_service()
        state = game_service.get_game_state(request.sid) if game_service else None
        if state is None:
            _emit_session_missing()
            return
        _emit_state(state)

    @socketio.on('input_char')
    def handle_input_char(data):
        """Type one character; payload ``{'char': 'a'}``."""
        game_service = get_game_service()
        if not game_service:
            emit('error', {'error': 'Game service unavailable'})
            return

        ch = data.get('char') if isinstance(data, dict) else None
        if not isinstance(ch, str):
            emit('error', {'error': 'Character is required'})
            return

        state = game_service.input_char(request.sid, ch)
        if state is None:
            _emit_session_missing()
            return
        _emit_state(state)

    @socketio.on('delete_char')
    def handle_delete_char(data=None):
        game_service = get_game_service()
        state = game_service.delete_char(request.sid) if game_service else None
        if state is None:
            _emit_session_missing()
            return
        _emit_state(state)

    @socketio.on('submit_guess')
    def handle_submit_guess(data=None):
        """Submit the current row; a rejected row also yields a ``guess_error`` event."""
        game_service = get_game_service()
        result = game_service.submit_guess(request.sid) if game_service else None
        if result is None:
            _emit_session_missing()
            return

        error = result['error']
        if error is not None:
            game_logger.log_user_action(request, 'submit_guess', request.sid, validation_error=error.name)
            emit('guess_error', {'error': error.message, 'error_code': error.name})
        _emit_state(result['state'])

    @socketio.on('reset')
    def handle_reset(data=None):
        game_service = get_game_service()
        state = game_service.reset(request.sid) if game_service else None
        if state is None:
            _emit_session_missing()
            return
        game_logger.log_user_action(request, 'reset', request.sid)
        _emit_state(state)
