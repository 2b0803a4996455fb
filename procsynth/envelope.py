from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

FloatArray = NDArray[np.float64]


def envelope(t: float, attack: float, release: float, duration: float) -> float:
    """Linear attack/sustain/release gain at time ``t``, clamped to [0, 1].

    Overlapping ramps (``attack + release > duration``) are evaluated pointwise:
    the attack ramp wins while ``t < attack``, so the curve can jump down where
    the release ramp takes over.
    """
    if t < attack:
        value = t / attack if attack > 0.0 else 0.0
    elif t > duration - release:
        value = (duration - t) / release if release > 0.0 else 0.0
    else:
        value = 1.0
    return min(max(value, 0.0), 1.0)


def envelope_curve(t: FloatArray, attack: float, release: float, duration: float) -> FloatArray:
    """Vectorized :func:`envelope` over an array of times."""
    gain = np.ones_like(t, dtype=np.float64)

    in_release = t > duration - release
    if release > 0.0:
        gain[in_release] = (duration - t[in_release]) / release
    else:
        gain[in_release] = 0.0

    # Applied last so the attack branch takes precedence, as in the scalar form.
    in_attack = t < attack
    gain[in_attack] = t[in_attack] / attack if attack > 0.0 else 0.0

    return np.clip(gain, 0.0, 1.0)
