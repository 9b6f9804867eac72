from __future__ import annotations

from flask_socketio import SocketIO


# Outbound event names understood by the web client.
AM_I_HOST = "amIHost"
UPDATE_PLAYER_LIST = "updatePlayerList"
RECEIVE_MESSAGE = "receive_message"
CHOOSE_WORD = "chooseWord"
DRAWING_PHASE_STARTED = "drawingPhaseStarted"
TURN_UPDATE = "turnUpdate"
TIMER_UPDATE = "timerUpdate"
CLEAR_CANVAS = "clearCanvas"
GAME_OVER = "gameOver"
DRAWING = "drawing"

SYSTEM_USER = "System"


def chat_line(user: str, message: str, class_name: str | None = None) -> dict:
    payload = {"user": user, "message": message}
    if class_name:
        payload["className"] = class_name
    return payload


class SocketIONotifier:
    """Pushes notifications to every member of a room, or to one member."""

    def __init__(self, socketio: SocketIO) -> None:
        self.socketio = socketio

    def broadcast(self, room: str, event: str, payload=None, skip: str | None = None) -> None:
        args = () if payload is None else (payload,)
        self.socketio.emit(event, *args, to=room, skip_sid=skip)

    def send(self, token: str, event: str, payload=None) -> None:
        args = () if payload is None else (payload,)
        self.socketio.emit(event, *args, to=token)

    def system(self, room: str, message: str, class_name: str | None = None) -> None:
        self.broadcast(room, RECEIVE_MESSAGE, chat_line(SYSTEM_USER, message, class_name))
