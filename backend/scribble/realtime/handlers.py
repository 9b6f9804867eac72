from __future__ import annotations

import functools
import logging

from flask import request, session
from flask_socketio import SocketIO, emit, join_room, leave_room

from ..game.engine import GameEngine
from ..storage.backends import StoreUnavailable


logger = logging.getLogger(__name__)


def _validate_name(name: str) -> bool:
    n = (name or "").strip()
    if not n:
        return False
    if len(n) > 16:
        return False
    # Avoid obvious HTML/script injection.
    if "<" in n or ">" in n:
        return False
    # No control characters.
    for ch in n:
        if ord(ch) < 32:
            return False
    return True


def _validate_room_code(code: str) -> bool:
    return bool(code) and len(code) <= 32 and code.isalnum()


def _store_guarded(fn):
    """Store outages abort the event; operators see the log, players see nothing."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except StoreUnavailable:
            logger.exception("store unavailable while handling %s for %s", fn.__name__, request.sid)
            return None

    return wrapper


def _current_room() -> str | None:
    return session.get("room")


def register_socketio_handlers(socketio: SocketIO, engine: GameEngine) -> None:
    @socketio.on("connect")
    def on_connect():
        logger.info("client connected: %s", request.sid)

    @socketio.on("join_game")
    @_store_guarded
    def join_game(data):
        payload = data if isinstance(data, dict) else {}
        room_code = str(payload.get("room", "")).strip()
        name = str(payload.get("name", "")).strip()

        if not _validate_room_code(room_code) or not _validate_name(name):
            emit("room:error", {"error": "invalid_payload"})
            return

        previous = _current_room()
        if previous and previous != room_code:
            leave_room(previous)
            engine.leave(previous, request.sid)

        join_room(room_code)
        session["room"] = room_code
        engine.join(room_code, request.sid, name)

    @socketio.on("startGame")
    @_store_guarded
    def start_game(*_args):
        room_code = _current_room()
        if not room_code:
            return
        engine.start_game(room_code, request.sid)

    @socketio.on("wordChosen")
    @_store_guarded
    def word_chosen(word=None):
        room_code = _current_room()
        if not room_code or not isinstance(word, str):
            return
        engine.choose_word(room_code, request.sid, word)

    @socketio.on("send_message")
    @_store_guarded
    def send_message(data):
        room_code = _current_room()
        if not room_code or not isinstance(data, dict):
            return
        text = data.get("message")
        if not isinstance(text, str) or not text.strip():
            return
        engine.send_message(room_code, request.sid, text)

    @socketio.on("draw")
    def draw(data):
        room_code = _current_room()
        if not room_code:
            return
        engine.relay_stroke(room_code, request.sid, data)

    @socketio.on("disconnect")
    @_store_guarded
    def on_disconnect(*_args):
        logger.info("client disconnected: %s", request.sid)
        room_code = _current_room()
        if room_code:
            engine.leave(room_code, request.sid)
