"""Detuned, slowly modulated sine voices and the voice bank drawn at setup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

from .params import GeneratorParams

_LOGGER = logging.getLogger("procsynth.voice")

TWO_PI = 2.0 * np.pi
DETUNE_RANGE: tuple[float, float] = (0.8, 1.2)
PAN_RATE_RANGE: tuple[float, float] = (0.01, 0.05)

TimeInput: TypeAlias = float | NDArray[np.float64]


@dataclass(frozen=True, slots=True)
class Voice:
    """One oscillator with its own amplitude LFO and stereo pan rate."""

    freq: float
    lfo_rate: float
    mod_depth: float
    pan_rate: float

    def synthesize(self, t: TimeInput) -> tuple[TimeInput, TimeInput]:
        """Return the ``(left, right)`` contribution at time ``t`` (seconds).

        ``t`` may be a scalar or an array of times; the result has the same shape.
        """
        mod_env = np.sin(TWO_PI * self.lfo_rate * t) * 0.5 + 0.5
        sample = np.sin(TWO_PI * self.freq * t) * (mod_env * self.mod_depth)
        pan = np.sin(TWO_PI * self.pan_rate * t)
        l_gain = (1.0 - pan) * 0.5
        r_gain = (1.0 + pan) * 0.5
        return sample * l_gain, sample * r_gain


def build_voices(params: GeneratorParams, rng: np.random.Generator) -> tuple[Voice, ...]:
    """Draw the voice bank once; voices are immutable for the rest of the run."""

    lfo_min, lfo_max = params.lfo_rate_range
    depth_min, depth_max = params.mod_depth_range
    voices: list[Voice] = []
    for index in range(params.voices):
        voice = Voice(
            freq=params.base_freq * float(rng.uniform(*DETUNE_RANGE)),
            lfo_rate=float(rng.uniform(lfo_min, lfo_max)),
            mod_depth=float(rng.uniform(depth_min, depth_max)),
            pan_rate=float(rng.uniform(*PAN_RATE_RANGE)),
        )
        _LOGGER.debug(
            "voice %d: freq=%.2fHz lfo=%.3fHz depth=%.2f pan=%.3fHz",
            index,
            voice.freq,
            voice.lfo_rate,
            voice.mod_depth,
            voice.pan_rate,
        )
        voices.append(voice)
    return tuple(voices)


def mix_voices(
    voices: tuple[Voice, ...], t: NDArray[np.float64]
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Sum every voice's contribution over an array of times."""

    left = np.zeros_like(t)
    right = np.zeros_like(t)
    for voice in voices:
        l_part, r_part = voice.synthesize(t)
        left += l_part
        right += r_part
    return left, right
