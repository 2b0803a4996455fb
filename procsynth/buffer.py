from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from .errors import SampleBufferError

FloatArray = NDArray[np.float64]


def ensure_stereo_buffer(samples: object) -> FloatArray:
    """Return ``samples`` as an ``(N, 2)`` float array, without copying when possible."""
    array = np.asarray(samples)
    if array.ndim != 2 or array.shape[1] != 2:
        raise SampleBufferError(f"expected an (N, 2) stereo buffer, got shape {array.shape}")
    if not np.issubdtype(array.dtype, np.floating):
        raise SampleBufferError(f"expected real-valued samples, got dtype {array.dtype}")
    return array
