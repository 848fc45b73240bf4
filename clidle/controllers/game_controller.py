"""
Game Controller

Handles all game-related HTTP endpoints. Each session is one player's private
round; input events map one to one onto engine operations.
"""

from flask import Blueprint, request, jsonify
from dataclasses import asdict
from ..services.game_service import get_game_service
from ..utils.game_logger import game_logger

game_bp = Blueprint('game', __name__)


def _service_unavailable():
    return jsonify({
        'success': False,
        'error': 'Game service unavailable'
    }), 500


def _session_not_found(action, session_id):
    error_response = {
        'success': False,
        'error': 'Session not found'
    }
    game_logger.log_server_response(request, action, False, error_response, session_id)
    return jsonify(error_response), 404


def _internal_error(action, error, session_id=None):
    game_logger.log_error(request, error, action, session_id)
    error_response = {
        'success': False,
        'error': str(error)
    }
    game_logger.log_server_response(request, action, False, error_response, session_id)
    return jsonify(error_response), 500


@game_bp.route('/session', methods=['POST'])
def new_session():
    """Create a new session and start its first round."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        game_logger.log_user_action(request, 'new_session')

        session_id = game_service.create_session()
        state = game_service.get_game_state(session_id)

        response_data = {
            'success': True,
            'session_id': session_id,
            'state': asdict(state)
        }

        game_logger.log_server_response(
            request, 'new_session', True, response_data, session_id,
            score=state.score
        )

        return jsonify(response_data), 201

    except Exception as e:
        return _internal_error('new_session', e)


@game_bp.route('/session/<session_id>/state', methods=['GET'])
def get_state(session_id):
    """Get the current round state."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        state = game_service.get_game_state(session_id)
        if state is None:
            return _session_not_found('get_state', session_id)

        return jsonify({
            'success': True,
            'state': asdict(state)
        })

    except Exception as e:
        return _internal_error('get_state', e, session_id)


@game_bp.route('/session/<session_id>/input', methods=['POST'])
def input_char(session_id):
    """Type one character into the current row."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        data = request.get_json(silent=True)
        if not data or not isinstance(data.get('char'), str):
            error_response = {
                'success': False,
                'error': 'Character is required'
            }
            game_logger.log_server_response(request, 'input_char', False, error_response, session_id)
            return jsonify(error_response), 400

        state = game_service.input_char(session_id, data['char'])
        if state is None:
            return _session_not_found('input_char', session_id)

        return jsonify({
            'success': True,
            'state': asdict(state)
        })

    except Exception as e:
        return _internal_error('input_char', e, session_id)


@game_bp.route('/session/<session_id>/delete', methods=['POST'])
def delete_char(session_id):
    """Move the cursor back one cell."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        state = game_service.delete_char(session_id)
        if state is None:
            return _session_not_found('delete_char', session_id)

        return jsonify({
            'success': True,
            'state': asdict(state)
        })

    except Exception as e:
        return _internal_error('delete_char', e, session_id)


@game_bp.route('/session/<session_id>/submit', methods=['POST'])
def submit_guess(session_id):
    """Submit the current row for validation and scoring."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        game_logger.log_user_action(request, 'submit_guess', session_id)

        result = game_service.submit_guess(session_id)
        if result is None:
            return _session_not_found('submit_guess', session_id)

        state = result['state']
        error = result['error']

        if error is not None:
            error_response = {
                'success': False,
                'error': error.message,
                'error_code': error.name,
                'state': asdict(state)
            }
            game_logger.log_server_response(
                request, 'submit_guess', False, error_response, session_id,
                validation_error=error.name
            )
            return jsonify(error_response), 400

        response_data = {
            'success': True,
            'state': asdict(state)
        }

        game_logger.log_server_response(
            request, 'submit_guess', True, response_data, session_id,
            row=state.current_row, game_over=state.game_over
        )

        return jsonify(response_data)

    except Exception as e:
        return _internal_error('submit_guess', e, session_id)


@game_bp.route('/session/<session_id>/reset', methods=['POST'])
def reset(session_id):
    """Start a new round in an existing session."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        game_logger.log_user_action(request, 'reset', session_id)

        state = game_service.reset(session_id)
        if state is None:
            return _session_not_found('reset', session_id)

        response_data = {
            'success': True,
            'state': asdict(state)
        }
        game_logger.log_server_response(request, 'reset', True, response_data, session_id)

        return jsonify(response_data)

    except Exception as e:
        return _internal_error('reset', e, session_id)


@game_bp.route('/session/<session_id>', methods=['DELETE'])
def delete_session(session_id):
    """Drop a session. An unfinished round is not recorded."""
    try:
        game_service = get_game_service()
        if not game_service:
            return _service_unavailable()

        game_logger.log_user_action(request, 'delete_session', session_id)

        success = game_service.delete_session(session_id)

        response_data = {
            'success': success
        }
        game_logger.log_server_response(request, 'delete_session', success, response_data, session_id)

        return jsonify(response_data), (200 if success else 404)

    except Exception as e:
        return _internal_error('delete_session', e, session_id)


@game_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    try:
        game_service = get_game_service()

        response_data = {
            'status': 'healthy',
            'active_sessions': game_service.active_session_count() if game_service else 0,
            'log_stats': game_logger.get_log_stats()
        }

        return jsonify(response_data)

    except Exception as e:
        game_logger.log_error(request, e, 'health_check')
        return jsonify({
            'status': 'error',
            'error': str(e)
        }), 500
