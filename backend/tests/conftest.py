import os
import sys
import pytest

# Ensure the backend root (containing the `arena` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from arena import create_app, db, socketio
from arena.services.session import SESSION_EXTENSION, TOKENS_EXTENSION


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret-key-that-is-long-enough-for-hs256')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BCRYPT_LOG_ROUNDS = 4
    TOKEN_ALGORITHM = 'HS256'
    TOKEN_TTL_MINUTES = 5
    TOKEN_COOKIE_NAME = 'token'
    SOCKETIO_NAMESPACE = '/ws'
    PLAYFIELD_WIDTH = 800
    PLAYFIELD_HEIGHT = 600
    SPAWN_X = 400
    SPAWN_Y = 300
    MAX_HP = 100


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    # Only hold an app context around setup and teardown; each request must
    # get its own context so Flask-Login resolves the user per request
    with application.app_context():
        # Ensure models are imported so tables are created
        import arena.models  # noqa: F401
        db.create_all()
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def session(flask_app):
    return flask_app.extensions[SESSION_EXTENSION]


@pytest.fixture()
def make_token(flask_app):
    tokens = flask_app.extensions[TOKENS_EXTENSION]

    def _make(user_id=1, username='alice'):
        return tokens.issue(user_id, username)

    return _make


@pytest.fixture()
def connect_player(flask_app, make_token):
    """Open Socket.IO test clients on /ws; all are disconnected on teardown."""
    opened = []

    def _connect(user_id=1, username='alice', token=None):
        auth = {'token': token if token is not None else make_token(user_id, username)}
        test_client = socketio.test_client(flask_app, namespace='/ws', auth=auth)
        opened.append(test_client)
        return test_client

    yield _connect
    for test_client in opened:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass
