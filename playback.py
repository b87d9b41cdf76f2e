"""
Owns the buffer that is currently sounding and swaps it without a gap.
"""
import logging
import math
from enum import Enum

from errors import InvalidArgumentError, PlaybackStateError

logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    STOPPED = "stopped"
    SUSPENDED = "suspended"
    RUNNING = "running"


class PlaybackController:
    def __init__(self, engine):
        self.engine = engine
        self.state = PlaybackState.STOPPED
        self._buffer = None
        self._source = None

    def open(self, buffer):
        """Install the first buffer and leave the device paused."""
        self.install(buffer)
        self.engine.suspend()
        self.state = PlaybackState.SUSPENDED

    def install(self, buffer):
        """
        Replace the playing buffer.

        The new source is started before the old one is stopped, both under
        the engine lock, so the audio thread never sees zero or two sources.
        Play/pause state is left alone: while suspended the new source is
        simply not heard until resume.
        """
        with self.engine.lock:
            previous = self._source
            offset = previous.position if previous is not None else 0
            source = self.engine.create_source(buffer)
            source.start(offset % len(buffer))
            if not source.playing:
                raise PlaybackStateError("new source did not start")
            if previous is not None:
                previous.stop()
            self._source = source
            self._buffer = buffer
        logger.debug("Installed %d-sample buffer (%.1f Hz)", len(buffer), buffer.frequency)

    @property
    def current_buffer(self):
        """The installed SampleBuffer. Its samples are read-only."""
        if self._buffer is None:
            raise PlaybackStateError("no buffer installed")
        return self._buffer

    def current_samples(self):
        """Read-only view of the live samples."""
        return self.current_buffer.samples

    @property
    def sample_rate(self):
        return self.current_buffer.sample_rate

    def set_gain(self, gain):
        gain = float(gain)
        if not math.isfinite(gain) or gain < 0:
            raise InvalidArgumentError(f"gain must be >= 0, got {gain}")
        self.engine.set_gain(gain)

    def toggle_playback(self):
        if self.state is PlaybackState.STOPPED:
            raise PlaybackStateError("playback has not been opened")
        if self.state is PlaybackState.SUSPENDED:
            self.engine.resume()
            self.state = PlaybackState.RUNNING
        else:
            self.engine.suspend()
            self.state = PlaybackState.SUSPENDED
        logger.info("Playback %s", self.state.value)
        return self.state

    @property
    def running(self):
        return self.state is PlaybackState.RUNNING

    def close(self):
        if self._source is not None:
            self._source.stop()
            self._source = None
        self.engine.shutdown()
