"""
Per-sample mutation operators.

Every operator edits a writable float array in place and clips the result to
[-1, 1]. `amount` scales the per-tick step; its sign flips the direction.
Nothing here touches a buffer that is currently playing: callers pass a copy
(see SampleBuffer.copy_samples).
"""
import math
from enum import Enum

import numpy as np

from errors import InvalidArgumentError

STEP = 0.01
PEAK_STEP = 0.0001


class MutationKind(Enum):
    SINIFY = "sinify"
    SQUARIFY = "squarify"
    PEAKIFY = "peakify"
    NULLIFY = "nullify"
    OFFSETTIFY = "offsettify"
    SMOOTHIFY = "smoothify"
    NOISIFY = "noisify"
    RANDOMIZIFY = "randomizify"

    @classmethod
    def parse(cls, value) -> "MutationKind":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidArgumentError(f"unknown mutation: {value!r}") from None


def _clip(samples):
    np.clip(samples, -1.0, 1.0, out=samples)


def _rng(rng):
    return rng if rng is not None else np.random.default_rng()


def sinify(samples, amount, rng=None):
    """Drifts towards a sine."""
    n = len(samples)
    samples += np.sin(2 * np.pi * np.arange(n) / n) * STEP * amount
    _clip(samples)


def squarify(samples, amount, rng=None):
    """Drifts towards a square."""
    n = len(samples)
    samples += np.where(np.arange(n) < n / 2, STEP, -STEP) * amount
    _clip(samples)


def peakify(samples, amount, rng=None):
    """Pulls later samples further down; ends up as a single impulse."""
    samples -= np.arange(len(samples)) * PEAK_STEP * amount
    _clip(samples)


def nullify(samples, amount, rng=None):
    """Moves every sample towards zero (away from it for negative amounts)."""
    samples -= np.sign(samples) * STEP * amount
    _clip(samples)


def offsettify(samples, amount, rng=None):
    samples += STEP * amount
    _clip(samples)


def smoothify(samples, amount=0.0, rng=None):
    """
    Circular 3-tap moving average, updated in place from left to right: each
    sample sees its already smoothed left neighbour, and the last one sees
    the already smoothed first sample.
    """
    n = len(samples)
    for i in range(n):
        samples[i] = (samples[i - 1] + samples[i] + samples[(i + 1) % n]) / 3.0
    _clip(samples)


def noisify(samples, amount, rng=None):
    """Symmetric jitter of +/- 0.01 * amount."""
    jitter = _rng(rng).random(len(samples)) * 2 * STEP * amount - STEP * amount
    samples += jitter
    _clip(samples)


def randomizify(samples, amount=0.0, rng=None):
    """Replaces everything with white noise."""
    samples[:] = _rng(rng).uniform(-1.0, 1.0, len(samples))


MUTATIONS = {
    MutationKind.SINIFY: sinify,
    MutationKind.SQUARIFY: squarify,
    MutationKind.PEAKIFY: peakify,
    MutationKind.NULLIFY: nullify,
    MutationKind.OFFSETTIFY: offsettify,
    MutationKind.SMOOTHIFY: smoothify,
    MutationKind.NOISIFY: noisify,
    MutationKind.RANDOMIZIFY: randomizify,
}


def apply(kind, samples: np.ndarray, amount: float, rng=None) -> None:
    """Run the named mutation on `samples` in place."""
    kind = MutationKind.parse(kind)
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"mutation amount must be a number, got {amount!r}") from None
    if not math.isfinite(amount):
        raise InvalidArgumentError(f"mutation amount must be finite, got {amount}")
    if not samples.flags.writeable:
        raise InvalidArgumentError("mutations need a writable copy of the samples")
    MUTATIONS[kind](samples, amount, rng=rng)
