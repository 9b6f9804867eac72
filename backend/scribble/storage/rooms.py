from __future__ import annotations

import json

from ..game.models import GameState, Roster, roster_from_dict, roster_to_dict
from .backends import MemoryStore, RedisStore


def room_key(room: str) -> str:
    return f"room:{room}"


def game_key(room: str) -> str:
    return f"game:{room}"


class RoomStateStore:
    """Roster and game-state records of each room, stored as JSON blobs."""

    def __init__(self, backend: MemoryStore | RedisStore) -> None:
        self.backend = backend

    def _load(self, key: str) -> dict | None:
        raw = self.backend.get(key)
        if not raw:
            return None
        return json.loads(raw)

    def get_roster(self, room: str) -> Roster | None:
        data = self._load(room_key(room))
        return roster_from_dict(data) if data is not None else None

    def get_game(self, room: str) -> GameState | None:
        data = self._load(game_key(room))
        return GameState.from_dict(data) if data is not None else None

    def save(self, room: str, roster: Roster | None = None, game: GameState | None = None) -> None:
        """Write whichever records are given, in a single backend call."""
        items: dict[str, str] = {}
        if roster is not None:
            items[room_key(room)] = json.dumps(roster_to_dict(roster), ensure_ascii=False)
        if game is not None:
            items[game_key(room)] = json.dumps(game.to_dict(), ensure_ascii=False)
        self.backend.set_many(items)

    def delete_room(self, room: str) -> None:
        self.backend.delete(room_key(room), game_key(room))
