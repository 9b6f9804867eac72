from __future__ import annotations

import logging
import random
from threading import RLock
from typing import Callable

from ..config import Config
from ..realtime import events
from ..storage.rooms import RoomStateStore
from . import scoring
from .models import GameState, Player, Roster
from .session import SessionManager, host_token, sorted_players
from .timer import PhaseTimer
from .words import DEFAULT_WORDS, pick_words, word_blanks


logger = logging.getLogger(__name__)


class RoomActor:
    """Serialization point of one room: its lock and its active timer."""

    def __init__(self, code: str) -> None:
        self.code = code
        self.lock = RLock()
        self.timer: PhaseTimer | None = None

    @property
    def countdown(self) -> int | None:
        if self.timer is not None and self.timer.active:
            return self.timer.remaining
        return None

    def stop_timer(self) -> None:
        if self.timer is not None:
            self.timer.stop()
            self.timer = None


class RoomActors:
    def __init__(self) -> None:
        self._lock = RLock()
        self._actors: dict[str, RoomActor] = {}

    def get(self, code: str) -> RoomActor:
        with self._lock:
            actor = self._actors.get(code)
            if actor is None:
                actor = RoomActor(code)
                self._actors[code] = actor
            return actor

    def owns(self, code: str, actor: RoomActor) -> bool:
        with self._lock:
            return self._actors.get(code) is actor

    def discard(self, code: str, actor: RoomActor) -> None:
        with self._lock:
            if self._actors.get(code) is actor:
                del self._actors[code]


class GameEngine:
    def __init__(
        self,
        store: RoomStateStore,
        notifier,
        config=Config,
        spawn: Callable[..., object] | None = None,
        sleep: Callable[[float], None] | None = None,
        rng: random.Random | None = None,
        words: list[str] | None = None,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.config = config
        self.spawn = spawn
        self.sleep = sleep
        self.rng = rng or random.Random()
        self.words = list(words or DEFAULT_WORDS)
        self.actors = RoomActors()
        self.sessions = SessionManager(store, notifier)

    # -- serialization -------------------------------------------------------

    def _run(self, room: str, fn, *args):
        while True:
            actor = self.actors.get(room)
            with actor.lock:
                # Room torn down while we waited: retry on its successor.
                if not self.actors.owns(room, actor):
                    continue
                return fn(actor, *args)

    def _funnel(self, actor: RoomActor, fn: Callable[[], None]) -> None:
        with actor.lock:
            fn()

    def _teardown(self, actor: RoomActor) -> None:
        self.store.delete_room(actor.code)
        actor.stop_timer()
        self.actors.discard(actor.code, actor)
        logger.info("room %s torn down", actor.code)

    # -- inbound operations --------------------------------------------------

    def join(self, room: str, token: str, name: str) -> tuple[bool, list[Player]]:
        return self._run(room, lambda actor: self.sessions.join(room, token, name))

    def leave(self, room: str, token: str) -> None:
        self._run(room, self._leave, token)

    def start_game(self, room: str, token: str) -> None:
        self._run(room, self._start_game, token)

    def choose_word(self, room: str, token: str, word: str) -> None:
        self._run(room, self._choose_word, token, word)

    def send_message(self, room: str, token: str, text: str) -> None:
        self._run(room, self._send_message, token, text)

    def relay_stroke(self, room: str, token: str, data) -> None:
        self.notifier.broadcast(room, events.DRAWING, data, skip=token)

    def tick(self, room: str) -> None:
        """Advance the room's active countdown by one second, if any."""

        def _tick(actor: RoomActor) -> None:
            if actor.timer is not None:
                actor.timer.tick()

        self._run(room, _tick)

    def countdown(self, room: str) -> int | None:
        return self._run(room, lambda actor: actor.countdown)

    def public_state(self, room: str) -> dict | None:
        return self._run(room, self._public_state)

    # -- transitions ---------------------------------------------------------

    def _leave(self, actor: RoomActor, token: str) -> None:
        if self.sessions.leave(actor.code, token) is None:
            return
        roster = self.store.get_roster(actor.code)
        if not roster:
            self._teardown(actor)

    def _start_game(self, actor: RoomActor, token: str) -> None:
        room = actor.code
        roster = self.store.get_roster(room)
        if not roster or host_token(roster) != token:
            return
        current = self.store.get_game(room)
        if current is not None and current.status == "playing":
            return

        turn_order = list(roster)
        self.rng.shuffle(turn_order)
        game = GameState(
            status="playing",
            turn_order=turn_order,
            current_turn_index=-1,
            current_round=1,
            total_rounds=self.config.TOTAL_ROUNDS,
        )

        def announce() -> None:
            logger.info("room %s game started with %d players", room, len(turn_order))
            self.notifier.system(room, f"The game is starting! Round 1 of {game.total_rounds}")

        # Nothing is stored until the first turn is fully built.
        self._advance_turn(actor, game=game, roster=roster, after_save=announce)

    def _advance_turn(
        self,
        actor: RoomActor,
        game: GameState | None = None,
        roster: Roster | None = None,
        dirty_roster: bool = False,
        after_save: Callable[[], None] | None = None,
    ) -> None:
        """Move to the next drawer, committing the new turn in a single save.

        The running timer is only replaced once the save succeeded, so a
        failed write leaves the previous phase untouched.
        """
        room = actor.code
        if game is None:
            game = self.store.get_game(room)
        if game is None or game.status != "playing":
            actor.stop_timer()
            return
        if roster is None:
            roster = self.store.get_roster(room) or {}
        saved_roster = roster if dirty_roster else None

        # Keep the index pointing at the same drawer after dropping departed tokens.
        departed_before = sum(
            1 for i, t in enumerate(game.turn_order) if i <= game.current_turn_index and t not in roster
        )
        game.turn_order = [t for t in game.turn_order if t in roster]
        game.current_turn_index -= departed_before

        if not game.turn_order:
            self._teardown(actor)
            return

        game.current_turn_index += 1
        new_round = False
        if game.current_turn_index >= len(game.turn_order):
            game.current_turn_index = 0
            if game.current_round >= game.total_rounds:
                self._end_game(actor, game, saved_roster, after_save)
                return
            game.current_round += 1
            new_round = True

        drawer = game.turn_order[game.current_turn_index]
        game.phase = "choosing"
        game.current_word = ""
        game.players_who_guessed = []
        game.word_choices = pick_words(self.words, self.config.WORD_CHOICES_COUNT, self.rng)
        game.timer = self.config.CHOOSE_DURATION_SEC
        self.store.save(room, roster=saved_roster, game=game)
        actor.stop_timer()

        if after_save is not None:
            after_save()
        if new_round:
            self.notifier.system(room, f"Starting Round {game.current_round} of {game.total_rounds}")
        self.notifier.broadcast(room, events.CLEAR_CANVAS)
        self.notifier.system(room, f"It's {roster[drawer].name}'s turn to draw.")
        self.notifier.send(drawer, events.CHOOSE_WORD, list(game.word_choices))

        self._start_timer(
            actor,
            "choosing",
            self.config.CHOOSE_DURATION_SEC,
            lambda: self._on_choosing_expired(actor),
        )

    def _end_game(
        self,
        actor: RoomActor,
        game: GameState,
        roster: Roster | None = None,
        after_save: Callable[[], None] | None = None,
    ) -> None:
        game.status = "ended"
        game.phase = ""
        game.current_word = ""
        game.word_choices = []
        game.players_who_guessed = []
        game.timer = 0
        self.store.save(actor.code, roster=roster, game=game)
        actor.stop_timer()
        logger.info("room %s game over after %d rounds", actor.code, game.total_rounds)

        if after_save is not None:
            after_save()
        self.notifier.system(actor.code, "Game Over!")
        self.notifier.broadcast(actor.code, events.GAME_OVER)

    def _choose_word(self, actor: RoomActor, token: str, word: str) -> None:
        game = self.store.get_game(actor.code)
        if game is None or game.status != "playing" or game.phase != "choosing":
            return
        if token != game.drawer_id:
            return
        word = (word or "").strip()
        if not word or word not in game.word_choices:
            return
        self._begin_drawing(actor, game, word)

    def _on_choosing_expired(self, actor: RoomActor) -> None:
        game = self.store.get_game(actor.code)
        if game is None or game.status != "playing" or game.phase != "choosing":
            actor.stop_timer()
            return
        word = game.word_choices[0] if game.word_choices else pick_words(self.words, 1, self.rng)[0]
        drawer = game.drawer_id

        def announce() -> None:
            if drawer:
                self._private_notice(drawer, "Time's up! We picked a word for you.")

        self._begin_drawing(actor, game, word, after_save=announce)

    def _begin_drawing(
        self,
        actor: RoomActor,
        game: GameState,
        word: str,
        after_save: Callable[[], None] | None = None,
    ) -> None:
        room = actor.code
        roster = self.store.get_roster(room) or {}

        game.phase = "drawing"
        game.current_word = word
        game.word_choices = []
        game.players_who_guessed = []
        game.timer = self.config.DRAW_DURATION_SEC
        self.store.save(room, game=game)
        actor.stop_timer()

        if after_save is not None:
            after_save()
        drawer = game.drawer_id
        drawer_player = roster.get(drawer)
        self.notifier.broadcast(room, events.CLEAR_CANVAS)
        self.notifier.send(drawer, events.DRAWING_PHASE_STARTED, word)
        self.notifier.broadcast(
            room,
            events.TURN_UPDATE,
            {
                "drawerName": drawer_player.name if drawer_player else "Unknown",
                "drawerID": drawer,
                "wordBlanks": word_blanks(word),
                "round": game.current_round,
                "totalRounds": game.total_rounds,
            },
        )

        self._start_timer(
            actor,
            "drawing",
            self.config.DRAW_DURATION_SEC,
            lambda: self._on_drawing_expired(actor),
        )

    def _on_drawing_expired(self, actor: RoomActor) -> None:
        game = self.store.get_game(actor.code)
        if game is None or game.status != "playing" or game.phase != "drawing":
            actor.stop_timer()
            return
        word = game.current_word
        self._advance_turn(
            actor,
            game=game,
            after_save=lambda: self.notifier.system(actor.code, f"Time's up! The word was: {word}"),
        )

    def _send_message(self, actor: RoomActor, token: str, text: str) -> None:
        room = actor.code
        roster = self.store.get_roster(room)
        if roster is None:
            return
        player = roster.get(token)
        name = player.name if player else "Anonymous"
        game = self.store.get_game(room)

        if (
            game is not None
            and game.status == "playing"
            and game.phase == "drawing"
            and game.current_word
            and text.casefold() == game.current_word.casefold()
        ):
            if player is None:
                return
            if token not in game.turn_order:
                self._private_notice(token, "You can guess once the next game starts.")
                return
            if token == game.drawer_id:
                self._private_notice(token, "You can't say the word while drawing.")
                return
            if token in game.players_who_guessed:
                self._private_notice(token, "You already guessed the word!")
                return
            self._correct_guess(actor, roster, game, player)
            return

        self.notifier.broadcast(room, events.RECEIVE_MESSAGE, events.chat_line(name, text))

    def _correct_guess(self, actor: RoomActor, roster: Roster, game: GameState, player: Player) -> None:
        room = actor.code
        points = scoring.guess_points(actor.countdown, self.config.DRAW_DURATION_SEC)
        player.score += points
        drawer = game.drawer_id
        if drawer in roster:
            roster[drawer].score += scoring.DRAWER_POINTS_PER_GUESS
        game.players_who_guessed.append(player.id)

        def announce() -> None:
            logger.debug("room %s: %s guessed for %d points", room, player.id, points)
            self.notifier.system(room, f"{player.name} guessed the word! (+{points})", class_name="correct-guess")
            self.sessions.broadcast_players(room, sorted_players(roster))

        non_drawers = [t for t in game.turn_order if t in roster and t != drawer]
        if non_drawers and all(t in game.players_who_guessed for t in non_drawers):
            # The award and the next turn are committed together.
            def announce_and_advance() -> None:
                announce()
                self.notifier.system(room, "Everyone guessed! Moving to next turn.")

            self._advance_turn(actor, game=game, roster=roster, dirty_roster=True, after_save=announce_and_advance)
            return

        self.store.save(room, roster=roster, game=game)
        announce()

    def _private_notice(self, token: str, message: str) -> None:
        self.notifier.send(token, events.RECEIVE_MESSAGE, events.chat_line(events.SYSTEM_USER, message))

    def _start_timer(self, actor: RoomActor, phase: str, duration_sec: int, on_expire: Callable[[], None]) -> None:
        actor.stop_timer()
        room = actor.code
        timer = PhaseTimer(
            phase,
            duration_sec,
            on_tick=lambda remaining: self.notifier.broadcast(room, events.TIMER_UPDATE, max(0, remaining)),
            on_expire=on_expire,
            funnel=lambda fn: self._funnel(actor, fn),
            spawn=self.spawn,
            sleep=self.sleep,
        )
        actor.timer = timer
        timer.start()
        logger.debug("room %s %s timer started (%ds)", room, phase, duration_sec)
        self.notifier.broadcast(room, events.TIMER_UPDATE, duration_sec)

    def _public_state(self, actor: RoomActor) -> dict | None:
        roster = self.store.get_roster(actor.code)
        game = self.store.get_game(actor.code)
        if roster is None and game is None:
            if actor.timer is None:
                self.actors.discard(actor.code, actor)
            return None
        roster = roster or {}
        payload = {
            "code": actor.code,
            "hostId": host_token(roster),
            "players": [p.to_dict() for p in sorted_players(roster)],
            "status": game.status if game else "idle",
            "phase": game.phase if game else "",
            "round": game.current_round if game else 0,
            "totalRounds": game.total_rounds if game else self.config.TOTAL_ROUNDS,
            "drawerId": game.drawer_id if game else None,
            "timeLeft": actor.countdown,
        }
        if game and game.current_word:
            payload["wordBlanks"] = word_blanks(game.current_word)
        return payload
