"""
Periodic mutate-and-install cycle.

There is no timer thread: the host loop calls poll() every frame and a cycle
runs once the armed deadline has passed. The armed flag is checked again at
fire time, so stop() wins over any tick that was already due.
"""
import logging
import time
from enum import Enum

import mutations
from waveforms import SampleBuffer

logger = logging.getLogger(__name__)

DEFAULT_PERIOD = 0.2


class ScheduleState(Enum):
    IDLE = "idle"
    ACTIVE = "active"


class MutationScheduler:
    def __init__(self, playback, settings, period=DEFAULT_PERIOD, clock=time.monotonic,
                 on_install=None, rng=None):
        self.playback = playback
        self.settings = settings
        self.period = period
        self.clock = clock
        self.on_install = on_install
        self.rng = rng
        self.cycles = 0

        self._armed = False
        self._due = None

    @property
    def state(self):
        return ScheduleState.ACTIVE if self._armed else ScheduleState.IDLE

    @property
    def active(self):
        return self._armed

    def start(self):
        """Run one cycle now, then every `period` seconds until stop()."""
        if self._armed:
            return False
        self._armed = True
        self._due = self.clock() + self.period
        logger.info("Mutating with %s every %.0f ms", self.settings.mutation, self.period * 1000)
        self._fire()
        return True

    def stop(self):
        if not self._armed:
            return False
        self._armed = False
        self._due = None
        logger.info("Mutation stopped after %d cycles", self.cycles)
        return True

    def toggle(self):
        if self._armed:
            self.stop()
        else:
            self.start()
        return self.state

    def poll(self):
        """Fire the pending tick if it is due. Returns True when a cycle ran."""
        if not self._armed:
            return False
        now = self.clock()
        if now < self._due:
            return False

        self._due += self.period
        if self._due <= now:
            # Fell behind; skip the missed ticks instead of bursting through them
            self._due = now + self.period
        self._fire()
        return True

    def _fire(self):
        try:
            self._cycle()
        except Exception:
            self._armed = False
            self._due = None
            raise

    def _cycle(self):
        samples = self.playback.current_samples().copy()
        mutations.apply(self.settings.mutation, samples, self.settings.mutation_amount, rng=self.rng)
        mutated = SampleBuffer(samples, self.playback.sample_rate)

        self.playback.install(mutated)
        self.cycles += 1
        logger.debug("Cycle %d: %s (amount %+.1f)", self.cycles, self.settings.mutation,
                     self.settings.mutation_amount)

        if self.on_install is not None:
            self.on_install(mutated)
