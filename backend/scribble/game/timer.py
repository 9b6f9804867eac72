from __future__ import annotations

import logging
from typing import Callable


logger = logging.getLogger(__name__)


class PhaseTimer:
    """One-second countdown for a single game phase of a room.

    The background loop never touches game state itself: every tick is handed
    to ``funnel``, which runs it under the room's lock. ``stop()`` must be
    called under that same lock, so a stopped timer can never tick again.
    """

    def __init__(
        self,
        phase: str,
        duration_sec: int,
        on_tick: Callable[[int], None],
        on_expire: Callable[[], None],
        funnel: Callable[[Callable[[], None]], None],
        spawn: Callable[..., object] | None = None,
        sleep: Callable[[float], None] | None = None,
        interval_sec: float = 1.0,
    ) -> None:
        self.phase = phase
        self.duration_sec = duration_sec
        self.remaining = duration_sec
        self.active = False
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._funnel = funnel
        self._spawn = spawn
        self._sleep = sleep
        self._interval_sec = interval_sec

    def start(self) -> None:
        self.remaining = self.duration_sec
        self.active = True
        if self._spawn is not None:
            self._spawn(self._run)

    def stop(self) -> None:
        self.active = False

    def tick(self) -> None:
        if not self.active:
            return
        self.remaining -= 1
        self._on_tick(self.remaining)
        if self.remaining <= 0:
            self.active = False
            self._on_expire()

    def _run(self) -> None:
        while self.active:
            self._sleep(self._interval_sec)
            if not self.active:
                break
            try:
                self._funnel(self.tick)
            except Exception:
                logger.exception("%s timer tick failed, stopping", self.phase)
                self.active = False
