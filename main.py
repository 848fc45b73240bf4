"""
clidle Game Server - Main Entry Point

Initializes the score store and game service, starts the idle-session
cleanup worker and runs the Flask-SocketIO application.
"""

import threading
import time
from clidle import create_app
from clidle.config import Config, validate_word_list_integrity
from clidle.services.game_service import initialize_game_service
from clidle.services.score_store import ScoreStore
from clidle.utils.game_logger import game_logger


def idle_cleanup_worker(game_service, timeout_seconds, interval_seconds):
    """
    Background worker that periodically drops sessions nobody has typed into
    for timeout_seconds. Abandoned rounds are not recorded.
    """
    print("Idle session cleanup worker started")
    while True:
        try:
            expired = game_service.cleanup_idle_sessions(timeout_seconds)
            if expired:
                game_logger.logger.info(f"Idle cleanup: Removed {len(expired)} expired sessions")
                print(f"Idle cleanup removed {len(expired)} session(s)")
        except Exception as e:
            game_logger.logger.error(f"Error in idle cleanup worker: {e}")

        time.sleep(interval_seconds)


def main():
    """Main function to initialize services and start the server."""
    try:
        print("Initializing services...")

        validate_word_list_integrity()

        score_store = ScoreStore(Config.SCORE_FILE)
        print(f"✓ Score file: {Config.SCORE_FILE}")

        game_service = initialize_game_service(score_store)
        print("✓ Game service initialized successfully")

        print("Creating Flask application...")
        app, socketio = create_app(Config)
        print("✓ Flask application created successfully")

        cleanup_thread = threading.Thread(
            target=idle_cleanup_worker,
            args=(game_service, Config.SESSION_IDLE_TIMEOUT_SECONDS, Config.CLEANUP_INTERVAL_SECONDS),
            daemon=True
        )
        cleanup_thread.start()
        print(f"✓ Idle cleanup worker started - sessions expire after {Config.SESSION_IDLE_TIMEOUT_SECONDS}s")

        game_logger.logger.info("clidle Server Starting")

        print(f"\nStarting clidle Game Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print("=" * 50)

        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("clidle Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
