"""
Single-cycle waveform generation.
A SampleBuffer holds exactly one loop of audio: one period for the periodic
shapes, 32 nominal periods for noise so the loop is not obviously audible.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from errors import InvalidArgumentError

SAMPLE_RATE = 44100
NOISE_PERIODS = 32


class WaveKind(Enum):
    SINE = "sine"
    SAW = "saw"
    SQUARE = "square"
    NOISE = "noise"

    @classmethod
    def parse(cls, value) -> "WaveKind":
        """Accepts a member or its name. None means the default kind (sine)."""
        if value is None:
            return cls.SINE
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidArgumentError(f"unknown wave kind: {value!r}") from None


@dataclass(frozen=True, eq=False)
class SampleBuffer:
    samples: np.ndarray  # float32, read-only
    sample_rate: int

    def __post_init__(self):
        data = np.asarray(self.samples, dtype=np.float32)
        if data.ndim != 1 or data.size == 0:
            raise InvalidArgumentError("sample buffer must be a non-empty 1-D array")
        if self.sample_rate <= 0:
            raise InvalidArgumentError(f"sample rate must be positive, got {self.sample_rate}")
        # Always copy so nobody keeps a writable alias to the buffer content
        data = np.clip(data, -1.0, 1.0)
        data.flags.writeable = False
        object.__setattr__(self, "samples", data)

    def __len__(self):
        return len(self.samples)

    @property
    def frequency(self) -> float:
        return self.sample_rate / len(self.samples)

    def copy_samples(self) -> np.ndarray:
        """Writable copy of the samples, for building a new buffer."""
        return self.samples.copy()


def period_length(frequency: float, sample_rate: int) -> int:
    try:
        frequency = float(frequency)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"frequency must be a number, got {frequency!r}") from None
    if not math.isfinite(frequency) or frequency <= 0:
        raise InvalidArgumentError(f"frequency must be a positive finite number, got {frequency!r}")
    if sample_rate <= 0:
        raise InvalidArgumentError(f"sample rate must be positive, got {sample_rate!r}")
    length = int(round(sample_rate / frequency))
    if length < 1:
        raise InvalidArgumentError(f"frequency {frequency} Hz is too high for {sample_rate} Hz sampling")
    return length


def generate(frequency: float, kind=WaveKind.SINE, sample_rate: int = SAMPLE_RATE,
             rng: Optional[np.random.Generator] = None) -> SampleBuffer:
    """
    Generate one loop of the given wave kind.

    The period is rounded to a whole number of samples, so the sounding
    frequency is sample_rate / length rather than exactly `frequency`.
    """
    kind = WaveKind.parse(kind)
    length = period_length(frequency, sample_rate)
    i = np.arange(length)

    if kind is WaveKind.SAW:
        data = 1.0 - 2.0 * i / length
    elif kind is WaveKind.SQUARE:
        data = np.where(i < length / 2, 1.0, -1.0)
    elif kind is WaveKind.NOISE:
        rng = rng if rng is not None else np.random.default_rng()
        data = rng.uniform(-1.0, 1.0, NOISE_PERIODS * length)
    else:
        data = np.sin(2 * np.pi * i / length)

    return SampleBuffer(data, sample_rate)
