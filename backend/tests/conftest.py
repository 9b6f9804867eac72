import os
import random
import sys

import pytest

# Ensure the backend root (containing the `scribble` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from scribble.config import Config  # noqa: E402
from scribble.game.engine import GameEngine  # noqa: E402
from scribble.realtime import events  # noqa: E402
from scribble.server import create_app  # noqa: E402
from scribble.storage.backends import MemoryStore  # noqa: E402
from scribble.storage.rooms import RoomStateStore  # noqa: E402


ROOM = 'ABCDE'


class TestConfig(Config):
    __test__ = False

    TESTING = True
    SECRET_KEY = 'test-secret'
    REDIS_URL = ''
    TRUST_PROXY_HEADERS = False
    LOG_LEVEL = 'DEBUG'
    TOTAL_ROUNDS = 3
    DRAW_DURATION_SEC = 60
    CHOOSE_DURATION_SEC = 15
    WORD_CHOICES_COUNT = 3


class RecordingNotifier:
    """Collects outbound notifications instead of emitting them."""

    def __init__(self):
        self.sent = []

    def broadcast(self, room, event, payload=None, skip=None):
        self.sent.append({'to': room, 'event': event, 'payload': payload, 'skip': skip, 'room': True})

    def send(self, token, event, payload=None):
        self.sent.append({'to': token, 'event': event, 'payload': payload, 'skip': None, 'room': False})

    def system(self, room, message, class_name=None):
        self.broadcast(room, events.RECEIVE_MESSAGE, events.chat_line(events.SYSTEM_USER, message, class_name))

    def of(self, event, to=None):
        return [m for m in self.sent if m['event'] == event and (to is None or m['to'] == to)]

    def last(self, event, to=None):
        found = self.of(event, to)
        return found[-1]['payload'] if found else None

    def messages(self, to=ROOM):
        return [m['payload']['message'] for m in self.of(events.RECEIVE_MESSAGE, to)]

    def clear(self):
        self.sent = []


@pytest.fixture()
def store():
    return RoomStateStore(MemoryStore())


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def engine(store, notifier):
    return GameEngine(store, notifier, config=TestConfig, rng=random.Random(7))


@pytest.fixture()
def three_players(engine):
    for token, name in (('a', 'Alice'), ('b', 'Bob'), ('c', 'Cara')):
        engine.join(ROOM, token, name)
    return ['a', 'b', 'c']


@pytest.fixture()
def app_and_socketio():
    return create_app(TestConfig)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(app_and_socketio):
    app, socketio = app_and_socketio
    clients = []

    def make():
        test_client = socketio.test_client(app, flask_test_client=app.test_client())
        clients.append(test_client)
        return test_client

    yield make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
