from __future__ import annotations

import math


MAX_GUESS_POINTS = 500
MIN_GUESS_POINTS = 100
DRAWER_POINTS_PER_GUESS = 50


def guess_points(remaining_sec: int | None, phase_duration_sec: int) -> int:
    """Points for a correct guess, scaled by the time left in the drawing phase.

    A guess with no live countdown (timer already gone) earns the floor.
    """
    if not remaining_sec or remaining_sec <= 0 or phase_duration_sec <= 0:
        return MIN_GUESS_POINTS
    scaled = math.ceil((remaining_sec / phase_duration_sec) * MAX_GUESS_POINTS)
    return max(MIN_GUESS_POINTS, scaled)
