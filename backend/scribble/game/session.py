from __future__ import annotations

import logging

from ..realtime import events
from ..storage.rooms import RoomStateStore
from .models import Player, Roster


logger = logging.getLogger(__name__)


def sorted_players(roster: Roster) -> list[Player]:
    # sorted() is stable, so equal scores keep join order.
    return sorted(roster.values(), key=lambda p: p.score, reverse=True)


def host_token(roster: Roster) -> str | None:
    return next(iter(roster), None)


class SessionManager:
    """Room membership, host designation and the player list.

    Callers hold the room's lock.
    """

    def __init__(self, store: RoomStateStore, notifier) -> None:
        self.store = store
        self.notifier = notifier

    def join(self, room: str, token: str, name: str) -> tuple[bool, list[Player]]:
        roster = self.store.get_roster(room) or {}
        player = roster.get(token)
        if player is None:
            roster[token] = Player(id=token, name=name, score=0)
        else:
            player.name = name
        self.store.save(room, roster=roster)

        is_host = host_token(roster) == token
        players = sorted_players(roster)
        logger.info("%s joined room %s as %s (host=%s)", token, room, name, is_host)

        self.notifier.send(token, events.AM_I_HOST, is_host)
        self.broadcast_players(room, players)
        self.notifier.system(room, f"{name} has joined!")
        return is_host, players

    def leave(self, room: str, token: str) -> Player | None:
        roster = self.store.get_roster(room)
        if not roster or token not in roster:
            return None
        player = roster.pop(token)
        self.store.save(room, roster=roster)
        logger.info("%s left room %s", token, room)
        self.broadcast_players(room, sorted_players(roster))
        return player

    def broadcast_players(self, room: str, players: list[Player]) -> None:
        self.notifier.broadcast(room, events.UPDATE_PLAYER_LIST, [p.to_dict() for p in players])
