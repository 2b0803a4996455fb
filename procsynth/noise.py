"""Noise layers: continuous base noise, 10 Hz gated grains and one-pole filtered noise."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from scipy.signal import lfilter  # type: ignore[import]

FloatArray = NDArray[np.float64]

BURST_RATE_HZ = 10.0
GRANULAR_GAIN = 0.5
FILTERED_GAIN = 0.3
# One-pole smoothing coefficient, must stay in (0, 1).
FILTER_COEFF = 0.1

_FILTER_B = np.array([FILTER_COEFF])
_FILTER_A = np.array([1.0, -(1.0 - FILTER_COEFF)])


@dataclass(frozen=True, slots=True)
class FilterState:
    """Most recent one-pole output per channel."""

    left: float = 0.0
    right: float = 0.0


def uniform_noise(rng: np.random.Generator, size: int) -> FloatArray:
    return rng.uniform(-1.0, 1.0, size)


def base_noise(rng: np.random.Generator, size: int, noise_level: float) -> FloatArray:
    """Continuous white noise; the same value is added to both channels."""
    return uniform_noise(rng, size) * noise_level


def burst_env(t: float | FloatArray) -> float | FloatArray:
    """Unipolar 10 Hz gate in [0, 1]."""
    return np.sin(2.0 * np.pi * BURST_RATE_HZ * t) * 0.5 + 0.5


def granular_noise(rng: np.random.Generator, t: FloatArray, noise_level: float) -> FloatArray:
    """Noise bursts shaped by the 10 Hz gate; the same value feeds both channels."""
    return uniform_noise(rng, t.size) * noise_level * GRANULAR_GAIN * burst_env(t)


def one_pole_step(state: float, w: float) -> float:
    """Scalar reference for one low-pass step: ``y = c * w + (1 - c) * y_prev``.

    :func:`filtered_noise` runs the same recurrence through ``lfilter``; this form
    exists to check that path sample by sample.
    """
    return FILTER_COEFF * w + (1.0 - FILTER_COEFF) * state


def _one_pole(w: FloatArray, prev: float) -> tuple[FloatArray, float]:
    if w.size == 0:
        return np.zeros(0, dtype=np.float64), prev
    # lfilter's transposed direct form keeps (1 - A) * y[n-1] as its single delay element.
    zi = np.array([(1.0 - FILTER_COEFF) * prev])
    out, _ = lfilter(_FILTER_B, _FILTER_A, w, zi=zi)
    out = np.asarray(out, dtype=np.float64)
    return out, float(out[-1])


def filtered_noise(
    state: FilterState,
    rng: np.random.Generator,
    size: int,
    noise_level: float,
) -> tuple[FilterState, FloatArray, FloatArray]:
    """Run ``size`` one-pole low-pass steps per channel starting from ``state``.

    One noise draw per sample drives both channel filters. Returns the new state
    and the per-channel outputs, which equal the successive filter states.
    """
    w = uniform_noise(rng, size) * noise_level * FILTERED_GAIN
    left, last_left = _one_pole(w, state.left)
    right, last_right = _one_pole(w, state.right)
    return FilterState(left=last_left, right=last_right), left, right
