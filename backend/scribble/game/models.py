from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


GameStatus = Literal["idle", "playing", "ended"]
Phase = Literal["", "choosing", "drawing"]


@dataclass
class Player:
    id: str
    name: str
    score: int = 0

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "score": self.score}

    @classmethod
    def from_dict(cls, data: dict) -> Player:
        return cls(id=str(data["id"]), name=str(data.get("name", "")), score=int(data.get("score", 0)))


# Insertion-ordered: the first key still present is the host.
Roster = dict[str, Player]


def roster_to_dict(roster: Roster) -> dict:
    return {token: p.to_dict() for token, p in roster.items()}


def roster_from_dict(data: dict) -> Roster:
    return {token: Player.from_dict(p) for token, p in data.items()}


@dataclass
class GameState:
    status: GameStatus = "idle"
    phase: Phase = ""
    turn_order: list[str] = field(default_factory=list)
    current_turn_index: int = -1
    current_round: int = 1
    total_rounds: int = 3
    current_word: str = ""
    word_choices: list[str] = field(default_factory=list)
    players_who_guessed: list[str] = field(default_factory=list)
    # Last phase duration, informational only; scoring reads the live countdown.
    timer: int = 0

    @property
    def drawer_id(self) -> str | None:
        if self.status != "playing":
            return None
        if 0 <= self.current_turn_index < len(self.turn_order):
            return self.turn_order[self.current_turn_index]
        return None

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "phase": self.phase,
            "turnOrder": list(self.turn_order),
            "currentTurnIndex": self.current_turn_index,
            "currentRound": self.current_round,
            "totalRounds": self.total_rounds,
            "currentWord": self.current_word,
            "wordChoices": list(self.word_choices),
            "playersWhoGuessed": list(self.players_who_guessed),
            "timer": self.timer,
        }

    @classmethod
    def from_dict(cls, data: dict) -> GameState:
        return cls(
            status=data.get("status", "idle"),
            phase=data.get("phase", ""),
            turn_order=list(data.get("turnOrder", [])),
            current_turn_index=int(data.get("currentTurnIndex", -1)),
            current_round=int(data.get("currentRound", 1)),
            total_rounds=int(data.get("totalRounds", 3)),
            current_word=data.get("currentWord", ""),
            word_choices=list(data.get("wordChoices", [])),
            players_who_guessed=list(data.get("playersWhoGuessed", [])),
            timer=int(data.get("timer", 0)),
        )
