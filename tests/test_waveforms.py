"""
Tests for waveforms: buffer lengths, shapes, range and argument checks.
Run from project root: python -m pytest tests/test_waveforms.py -v
"""
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import math

import numpy as np
import pytest

from errors import InvalidArgumentError
from waveforms import NOISE_PERIODS, SampleBuffer, WaveKind, generate

SR = 44100


@pytest.mark.parametrize("kind", list(WaveKind))
@pytest.mark.parametrize("freq", [20.0, 110.0, 440.0, 1000.0, 7000.0, SR / 2])
def test_length_and_range(kind, freq):
    buf = generate(freq, kind, SR, rng=np.random.default_rng(1))
    period = round(SR / freq)
    expected = period * NOISE_PERIODS if kind is WaveKind.NOISE else period
    assert len(buf) == expected
    assert buf.samples.dtype == np.float32
    assert np.max(buf.samples) <= 1.0
    assert np.min(buf.samples) >= -1.0
    assert buf.sample_rate == SR


def test_sine_440_scenario():
    buf = generate(440, WaveKind.SINE, SR)
    assert len(buf) == 100
    assert buf.samples[0] == pytest.approx(0.0, abs=1e-6)
    assert buf.samples[25] == pytest.approx(1.0, abs=1e-6)
    assert buf.samples[75] == pytest.approx(-1.0, abs=1e-6)
    assert buf.frequency == pytest.approx(441.0)


def test_square_halves():
    buf = generate(440, WaveKind.SQUARE, SR)
    n = len(buf)
    assert np.all(buf.samples[: n // 2] == 1.0)
    assert np.all(buf.samples[n // 2:] == -1.0)


def test_square_odd_length():
    # 8000 / 1142.86 -> 7 samples; i < 3.5 is high
    buf = generate(8000 / 7, WaveKind.SQUARE, 8000)
    assert buf.samples.tolist() == [1.0, 1.0, 1.0, 1.0, -1.0, -1.0, -1.0]


def test_saw_ramp():
    buf = generate(441, WaveKind.SAW, SR)
    assert buf.samples[0] == 1.0
    assert np.all(np.diff(buf.samples) < 0)
    assert buf.samples[-1] > -1.0
    assert buf.samples[-1] == pytest.approx(1 - 2 * 99 / 100, abs=1e-6)


def test_default_kind_is_sine():
    a = generate(440, None, SR)
    b = generate(440, WaveKind.SINE, SR)
    c = generate(440, sample_rate=SR)
    np.testing.assert_array_equal(a.samples, b.samples)
    np.testing.assert_array_equal(a.samples, c.samples)


def test_kind_by_name():
    np.testing.assert_array_equal(
        generate(440, "SQUARE", SR).samples,
        generate(440, WaveKind.SQUARE, SR).samples,
    )


def test_noise_seeded_and_not_constant():
    a = generate(440, WaveKind.NOISE, SR, rng=np.random.default_rng(7))
    b = generate(440, WaveKind.NOISE, SR, rng=np.random.default_rng(7))
    np.testing.assert_array_equal(a.samples, b.samples)
    assert np.std(a.samples) > 0.3


@pytest.mark.parametrize("freq", [0, -440, math.nan, math.inf, "loud", None])
def test_bad_frequency(freq):
    with pytest.raises(InvalidArgumentError):
        generate(freq, WaveKind.SINE, SR)


def test_frequency_too_high_for_rate():
    # round(44100 / 100000) == 0 samples
    with pytest.raises(InvalidArgumentError):
        generate(100000, WaveKind.SINE, SR)


def test_unknown_kind():
    with pytest.raises(InvalidArgumentError):
        generate(440, "triangle", SR)


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        generate(-1, WaveKind.SINE, SR)


def test_buffer_is_read_only():
    buf = generate(440, WaveKind.SINE, SR)
    assert not buf.samples.flags.writeable
    with pytest.raises(ValueError):
        buf.samples[0] = 0.5


def test_copy_samples_is_independent():
    buf = generate(440, WaveKind.SINE, SR)
    data = buf.copy_samples()
    data[:] = 0.0
    assert buf.samples[25] == pytest.approx(1.0, abs=1e-6)


def test_buffer_clips_and_copies_input():
    raw = np.array([2.0, -3.0, 0.5])
    buf = SampleBuffer(raw, 10)
    assert buf.samples.tolist() == [1.0, -1.0, 0.5]
    raw[2] = 0.0
    assert buf.samples[2] == 0.5


def test_empty_buffer_rejected():
    with pytest.raises(InvalidArgumentError):
        SampleBuffer(np.array([]), SR)
