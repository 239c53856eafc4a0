"""Rate limiter for the fetch/execute loop."""

import pyglet

from .config import MILLISECONDS_PER_CYCLE


class ClockRegulator:
    """``tick()`` returns True at most once every ``milliseconds_per_cycle``.

    Call it early in every pass of the host loop and only advance the
    machine when it says so::

        while window.poll_events():
            if not clock.tick():
                continue
            cpu.step()
    """

    def __init__(self, milliseconds_per_cycle=MILLISECONDS_PER_CYCLE, time_func=None):
        self.milliseconds_per_cycle = milliseconds_per_cycle
        self.time = time_func or pyglet.clock.get_default().time
        self.ready_at = self.time()

    @property
    def period(self):
        return self.milliseconds_per_cycle / 1000.0

    def tick(self):
        now = self.time()
        # enough time has passed since the last tick, next one is a period away
        if now >= self.ready_at:
            self.ready_at = now + self.period
            return True
        return False
