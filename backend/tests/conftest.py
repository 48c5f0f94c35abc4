import os
import sys
import pytest

# Ensure the backend root (containing the `scoreboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from scoreboard import create_app, socketio
from scoreboard.services.scoring import ScoringEngine
from scoreboard.services.scoring.registry import clear_boards


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = ['http://localhost:5173']
    BOARD_CODE_LENGTH = 4
    SESSION_END_GRACE_SEC = 0
    BOARD_IDLE_TTL_SEC = 3600


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
    clear_boards()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except RuntimeError:
        pass


@pytest.fixture()
def engine():
    return ScoringEngine()


@pytest.fixture()
def board_code(client):
    return client.post('/api/boards/create').get_json()['board_code']
