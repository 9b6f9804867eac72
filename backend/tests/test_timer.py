from scribble.game.timer import PhaseTimer


def _make(duration=3, **kwargs):
    ticks, expired = [], []
    timer = PhaseTimer(
        'drawing',
        duration,
        on_tick=ticks.append,
        on_expire=lambda: expired.append(True),
        funnel=lambda fn: fn(),
        **kwargs,
    )
    return timer, ticks, expired


def test_tick_counts_down_and_expires_once():
    timer, ticks, expired = _make()
    timer.start()

    for _ in range(5):
        timer.tick()

    assert ticks == [2, 1, 0]
    assert expired == [True]
    assert not timer.active


def test_stopped_timer_never_fires():
    timer, ticks, expired = _make()
    timer.start()
    timer.tick()
    timer.stop()
    timer.tick()
    timer.tick()

    assert ticks == [2]
    assert expired == []


def test_background_loop_runs_to_expiry():
    sleeps = []
    timer, ticks, expired = _make(duration=4, spawn=lambda fn: fn(), sleep=sleeps.append)

    timer.start()

    assert ticks == [3, 2, 1, 0]
    assert expired == [True]
    assert sleeps == [1.0] * 4


def test_background_loop_stops_on_tick_failure():
    def boom(fn):
        raise RuntimeError('store down')

    timer = PhaseTimer(
        'choosing',
        5,
        on_tick=lambda remaining: None,
        on_expire=lambda: None,
        funnel=boom,
        spawn=lambda fn: fn(),
        sleep=lambda s: None,
    )
    timer.start()

    assert not timer.active
    assert timer.remaining == 5


def test_restart_resets_remaining():
    timer, ticks, _ = _make(duration=10)
    timer.start()
    timer.tick()
    timer.start()
    assert timer.remaining == 10
