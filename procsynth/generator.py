"""
Generation pipeline:

1. Setup: draw the voice bank and allocate the stereo buffer
2. Accumulation: voices + noise layers, shaped by the envelope, in time order
3. Done: buffer complete, ready for the reverb pass
"""

from __future__ import annotations

import logging
from typing import Callable, Literal

import numpy as np
from numpy.typing import NDArray

from .envelope import envelope_curve
from .errors import InvalidParameterError, PipelineStateError
from .noise import FilterState, base_noise, filtered_noise, granular_noise
from .params import GeneratorParams
from .reverb import apply_reverb
from .voice import Voice, build_voices, mix_voices

_LOGGER = logging.getLogger("procsynth.generator")

FloatArray = NDArray[np.float64]
Phase = Literal["setup", "accumulation", "done"]
ProgressFn = Callable[[int, int], None]


class Generator:
    """Owns the voice bank, filter state and sample buffer for one run.

    Noise is drawn per block (base, then granular, then filtered), so the random
    stream is consumed in an order that depends on ``block_size``. Output is
    reproducible for a given ``(seed, block_size)`` pair; changing the block size
    with a fixed seed keeps the voice bank but yields different noise.
    """

    def __init__(
        self,
        params: GeneratorParams,
        *,
        rng: np.random.Generator | None = None,
        block_size: int | None = None,
    ) -> None:
        if not isinstance(params, GeneratorParams):
            raise InvalidParameterError(
                f"expected GeneratorParams, got {type(params).__name__}"
            )
        if block_size is not None and block_size < 1:
            raise InvalidParameterError(f"block_size must be positive, got {block_size}")

        self.params = params
        self.rng = rng if rng is not None else np.random.default_rng()
        self.block_size = block_size or params.sample_rate
        self.num_samples = params.num_samples
        self.voices: tuple[Voice, ...] = build_voices(params, self.rng)
        self.samples: FloatArray = np.zeros((self.num_samples, 2), dtype=np.float64)
        self.filter_state = FilterState()
        self.phase: Phase = "setup"
        self.reverb_applied = False
        self._cursor = 0

    @property
    def samples_written(self) -> int:
        return self._cursor

    def generate(self, progress: ProgressFn | None = None) -> FloatArray:
        """Fill the buffer block by block in strictly increasing time order."""
        if self.phase != "setup":
            raise PipelineStateError(f"cannot generate from phase {self.phase!r}")

        self.phase = "accumulation"
        for start in range(0, self.num_samples, self.block_size):
            stop = min(start + self.block_size, self.num_samples)
            self._accumulate(start, stop)
            if progress is not None:
                progress(stop, self.num_samples)

        self.phase = "done"
        _LOGGER.info(
            "Generated %ss with %d voices (%d samples)",
            self.params.duration,
            self.params.voices,
            self.num_samples,
        )
        return self.samples

    def _accumulate(self, start: int, stop: int) -> None:
        params = self.params
        size = stop - start
        t = np.arange(start, stop, dtype=np.float64) / params.sample_rate

        left, right = mix_voices(self.voices, t)

        noise = base_noise(self.rng, size, params.noise_level)
        left += noise
        right += noise

        grains = granular_noise(self.rng, t, params.noise_level)
        left += grains
        right += grains

        self.filter_state, filt_l, filt_r = filtered_noise(
            self.filter_state, self.rng, size, params.noise_level
        )
        left += filt_l
        right += filt_r

        # Envelope goes on last so the noise layers fade with the voices.
        env = envelope_curve(t, params.attack, params.release, params.duration)
        self.samples[start:stop, 0] = left * env
        self.samples[start:stop, 1] = right * env
        self._cursor = stop

    def apply_reverb(self) -> FloatArray:
        if self.phase != "done":
            raise PipelineStateError("reverb needs a completed sample buffer")
        if self.reverb_applied:
            raise PipelineStateError("reverb has already been applied")
        apply_reverb(self.samples, self.params.sample_rate, self.params.reverb_mix)
        self.reverb_applied = True
        return self.samples

    def run(self, progress: ProgressFn | None = None) -> FloatArray:
        self.generate(progress)
        return self.apply_reverb()


def render(
    params: GeneratorParams,
    *,
    rng: np.random.Generator | None = None,
    progress: ProgressFn | None = None,
) -> FloatArray:
    """Generate a finished ``(num_samples, 2)`` buffer with reverb applied."""

    return Generator(params, rng=rng).run(progress)
