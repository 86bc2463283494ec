import os
import random
import sys
import pytest

# Ensure the repo root (containing the `wordspy` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from wordspy import create_app, db, socketio
from wordspy.services.game.rooms import RoomService
from wordspy.store.memory import MemoryRoomStore
from wordspy.store.sql import SqlRoomStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    ROOM_STORE = 'sql'
    MAX_PLAYERS = 8
    ROOM_CODE_LENGTH = 6
    REQUIRE_ALL_READY = False
    DISCONNECT_GRACE_SEC = 0
    STALE_ROOM_SEC = 3600
    OPEN_ROOMS_LIMIT = 50
    EMOTE_HISTORY_LIMIT = 20
    POLL_INTERVAL_MS = 2000
    SUBSCRIBE_TIMEOUT_MS = 3000
    AUTH_HEADER = 'X-User-Id'
    CORS_ORIGINS = ['http://localhost:3000']
    LOG_LEVEL = 'DEBUG'


class MemoryTestConfig(TestConfig):
    ROOM_STORE = 'memory'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    # Requests push their own app context; an outer one would leak g between them
    with application.app_context():
        db.create_all()
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def memory_app():
    return create_app(MemoryTestConfig)


@pytest.fixture()
def memory_api(memory_app):
    return ApiClient(memory_app.test_client())


class ApiClient:
    """Test client that sends the delegated identity header."""

    def __init__(self, client, header='X-User-Id'):
        self.client = client
        self.header = header

    def _headers(self, user):
        return {self.header: user} if user else {}

    def get(self, path, user=None, **kwargs):
        return self.client.get(path, headers=self._headers(user), **kwargs)

    def post(self, path, user=None, **kwargs):
        return self.client.post(path, headers=self._headers(user), **kwargs)

    def create_room(self, user, name):
        res = self.post('/api/rooms', user, json={'host_name': name})
        assert res.status_code == 201, res.get_json()
        return res.get_json()['room']

    def join(self, user, room_id, name):
        res = self.post('/api/rooms/join', user, json={'room_id': room_id, 'player_name': name})
        assert res.status_code == 200, res.get_json()
        return res.get_json()['room']


@pytest.fixture()
def api(client):
    return ApiClient(client)


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def socket_for(flask_app):
    """Open /ws sockets whose handshake carries a user's identity header."""
    opened = []

    def _connect(user):
        sock = socketio.test_client(flask_app, namespace='/ws', headers={'X-User-Id': user})
        opened.append(sock)
        return sock

    yield _connect
    for sock in opened:
        if sock.is_connected('/ws'):
            sock.disconnect(namespace='/ws')


@pytest.fixture(params=['memory', 'sql'])
def room_service(request, flask_app):
    """RoomService over each backend, with a seeded rng."""
    store = MemoryRoomStore() if request.param == 'memory' else SqlRoomStore()
    config = {
        'MAX_PLAYERS': 8,
        'ROOM_CODE_LENGTH': 6,
        'REQUIRE_ALL_READY': False,
        'STALE_ROOM_SEC': 3600,
        'OPEN_ROOMS_LIMIT': 50,
        'EMOTE_HISTORY_LIMIT': 20,
    }
    with flask_app.app_context():
        yield RoomService(store, config, rng=random.Random(1234))
