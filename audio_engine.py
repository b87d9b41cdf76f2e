import logging
import threading

import numpy as np
import pyaudio

from errors import AudioUnsupportedError

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
BUFFER_SIZE = 256


class LoopSource:
    """Plays one SampleBuffer in an endless loop through its engine."""

    def __init__(self, engine, buffer):
        self.engine = engine
        self.buffer = buffer
        self.position = 0
        self.playing = False

    def start(self, offset=0):
        with self.engine.lock:
            self.position = int(offset) % len(self.buffer)
            self.playing = True
            self.engine._sources.append(self)

    def stop(self):
        with self.engine.lock:
            self.playing = False
            if self in self.engine._sources:
                self.engine._sources.remove(self)

    def render(self, frame_count):
        data = self.buffer.samples
        n = len(data)
        # Wrap around the end of the loop as many times as the block needs
        idx = (self.position + np.arange(frame_count)) % n
        self.position = (self.position + frame_count) % n
        return data[idx]


class AudioEngine:
    def __init__(self, sample_rate=SAMPLE_RATE, frames_per_buffer=BUFFER_SIZE, gain=0.5):
        self.sample_rate = sample_rate
        self.frames_per_buffer = frames_per_buffer
        self.lock = threading.RLock()
        self._sources = []

        # --- STATE ---
        self.gain = gain
        self.suspended = False

        try:
            self.p = pyaudio.PyAudio()
        except Exception as exc:
            raise AudioUnsupportedError(f"audio subsystem unavailable: {exc}") from exc

        try:
            device = self.p.get_default_output_device_info()
            self.stream = self.p.open(
                format=pyaudio.paFloat32,
                channels=1,
                rate=sample_rate,
                output=True,
                frames_per_buffer=frames_per_buffer,
                stream_callback=self.callback
            )
        except (IOError, OSError, ValueError) as exc:
            self.p.terminate()
            raise AudioUnsupportedError(f"no usable audio output: {exc}") from exc

        logger.info("Audio output opened on %s at %d Hz", device.get("name", "default"), sample_rate)

    def create_source(self, buffer):
        return LoopSource(self, buffer)

    @property
    def active_sources(self):
        with self.lock:
            return list(self._sources)

    def set_gain(self, gain):
        with self.lock:
            self.gain = gain

    def suspend(self):
        if not self.suspended:
            self.stream.stop_stream()
            self.suspended = True

    def resume(self):
        if self.suspended:
            self.stream.start_stream()
            self.suspended = False

    def mix(self, frame_count):
        out = np.zeros(frame_count, dtype=np.float32)
        with self.lock:
            for source in self._sources:
                out += source.render(frame_count)
            out *= self.gain
        np.clip(out, -1.0, 1.0, out=out)
        return out

    def callback(self, in_data, frame_count, time_info, status):
        mono = self.mix(frame_count)
        return (mono.tobytes(), pyaudio.paContinue)

    def shutdown(self):
        with self.lock:
            self._sources.clear()
        self.stream.stop_stream()
        self.stream.close()
        self.p.terminate()
