"""Feedback delay-line reverb applied to a finished stereo buffer."""

from __future__ import annotations

import logging

import numpy as np

from .buffer import FloatArray, ensure_stereo_buffer

_LOGGER = logging.getLogger("procsynth.reverb")

DELAY_SECONDS = 0.05
FEEDBACK = 0.7


def delay_length(sample_rate: int) -> int:
    """Delay line length in samples; never shorter than one sample."""
    return max(1, int(round(DELAY_SECONDS * sample_rate)))


class FeedbackDelay:
    """Per-channel ring buffer with feedback and a dry/wet mix.

    For every sample, the slot at the running index is read first (``wet``), the
    output becomes ``dry * (1 - mix) + wet * mix``, and only then is the slot
    overwritten with ``dry + wet * feedback``. Swapping the read and the write
    changes the output.
    """

    def __init__(self, length: int, mix: float, feedback: float = FEEDBACK) -> None:
        if length < 1:
            raise ValueError(f"delay length must be at least one sample, got {length}")
        self.length = length
        self.mix = mix
        self.feedback = feedback
        self._lines = np.zeros((length, 2), dtype=np.float64)
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    def process(self, block: FloatArray) -> FloatArray:
        """Process ``block`` (shape ``(n, 2)``) in place and return it."""
        total = block.shape[0]
        done = 0
        while done < total:
            # A span never wraps, so each slot in it is visited exactly once.
            span = min(self.length - self._index, total - done)
            slots = slice(self._index, self._index + span)
            rows = slice(done, done + span)

            dry = block[rows].copy()
            wet = self._lines[slots].copy()
            block[rows] = dry * (1.0 - self.mix) + wet * self.mix
            self._lines[slots] = dry + wet * self.feedback

            self._index = (self._index + span) % self.length
            done += span
        return block


def apply_reverb(samples: FloatArray, sample_rate: int, mix: float) -> FloatArray:
    """Run one forward reverb pass over the whole buffer, in place."""

    buffer = ensure_stereo_buffer(samples)
    length = delay_length(sample_rate)
    _LOGGER.debug("reverb: delay=%d samples mix=%.2f feedback=%.2f", length, mix, FEEDBACK)
    return FeedbackDelay(length, mix).process(buffer)
