from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, cast

import numpy as np
import soundfile as sf  # type: ignore[import]
from numpy.typing import NDArray

from .buffer import ensure_stereo_buffer

_LOGGER = logging.getLogger("procsynth.audio")

FloatArray = NDArray[np.float64]
Pcm16Array = NDArray[np.int16]

PCM16_SCALE = 32767.0
PCM16_MIN = -32768.0
PCM16_MAX = 32767.0
CHANNELS = 2


def interleave(samples: FloatArray) -> FloatArray:
    """Flatten an ``(N, 2)`` buffer to ``L0, R0, L1, R1, ...``."""
    return ensure_stereo_buffer(samples).reshape(-1)


def quantize_pcm16(samples: FloatArray) -> Pcm16Array:
    """``clamp(value * 32767, -32768, 32767)`` truncated toward zero."""
    scaled = np.clip(np.asarray(samples, dtype=np.float64) * PCM16_SCALE, PCM16_MIN, PCM16_MAX)
    return scaled.astype(np.int16)


def dequantize_pcm16(pcm: Pcm16Array) -> FloatArray:
    return np.asarray(pcm, dtype=np.float64) / PCM16_SCALE


def write_wav(path: str | Path, samples: FloatArray, *, sample_rate: int) -> Path:
    """Write a stereo buffer as 16-bit PCM; I/O errors propagate unchanged."""

    target = Path(path)
    pcm = quantize_pcm16(ensure_stereo_buffer(samples))
    write_fn = getattr(sf, "write", None)
    assert callable(write_fn)
    write_audio = cast(Callable[..., None], write_fn)
    write_audio(target, pcm, sample_rate, subtype="PCM_16")
    _LOGGER.info("Wrote %d frames to %s (sr=%d)", pcm.shape[0], target, sample_rate)
    return target


def read_wav(path: str | Path) -> tuple[FloatArray, int]:
    """Read a 16-bit PCM file back into an ``(N, channels)`` float buffer."""

    data, sample_rate = sf.read(Path(path), dtype="int16", always_2d=True)
    return dequantize_pcm16(data), int(sample_rate)
