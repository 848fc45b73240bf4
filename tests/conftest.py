import os
import tempfile
import pytest

# Keep test logs out of the working tree; must be set before clidle is imported
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='clidle-logs-'))

from clidle import create_app
from clidle.config import TestingConfig
from clidle.services import game_service as game_service_module
from clidle.services.game_engine import GameEngine
from clidle.services.game_service import GameService
from clidle.services.score_store import ScoreStore

DICTIONARY = {
    'CRANE', 'TRACE', 'CHAIR', 'TORCH', 'SLATE', 'MOUNT', 'PLUMB',
    'FIGHT', 'DWARF', 'GHOST', 'HELLO', 'LEVEL',
}


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def in_dictionary(word):
    return word.upper() in DICTIONARY


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def score_path(tmp_path):
    return str(tmp_path / 'clidle' / 'db.json')


@pytest.fixture()
def store(score_path):
    return ScoreStore(score_path)


@pytest.fixture()
def make_engine(store, clock):
    def factory(target='CRANE', score_store=None):
        return GameEngine(
            score_store or store,
            is_word=in_dictionary,
            get_word=lambda: target,
            clock=clock,
        )
    return factory


@pytest.fixture()
def service(store, clock, monkeypatch):
    svc = GameService(store, is_word=in_dictionary, get_word=lambda: 'CRANE', clock=clock)
    monkeypatch.setattr(game_service_module, '_game_service', svc)
    return svc


@pytest.fixture()
def flask_app(service):
    application, socketio = create_app(TestingConfig)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = flask_app.socketio.test_client(flask_app)
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


def type_word(engine, word):
    for ch in word:
        engine.input_char(ch)
