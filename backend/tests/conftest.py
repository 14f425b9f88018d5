import os
import sys
import pytest

# Ensure the backend root (containing the `courtside` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from courtside import create_app, db, socketio
from courtside.services.games import registry
from courtside.services.games.session import GameSession


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    BCRYPT_LOG_ROUNDS = 4
    DEFAULT_COURT_STANDARD = 'fiba'
    UNDO_LIMIT = 20
    PLAY_BY_PLAY_LIMIT = 50
    VIEWER_POLL_SEC = 2


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import courtside.models  # noqa: F401
        db.create_all()
        registry.clear()
        yield application
        registry.clear()
        db.session.remove()
        db.drop_all()


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
    except Exception:
        pass


@pytest.fixture()
def game():
    """A quarters-format game with one player per side, ready to record."""
    session = GameSession(code='TEST01', name='Scrimmage', password_hash='x')
    session.configure(period_minutes=10)
    session.add_player('home', 'Avery', 7)
    session.add_player('away', 'Blake', 23)
    session.start()
    return session
