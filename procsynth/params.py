from __future__ import annotations

import logging
from typing import Annotated, Any, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    ValidationError,
    field_validator,
    model_validator,
)

from .errors import InvalidParameterError

_LOGGER = logging.getLogger("procsynth.params")

# Fallbacks shared by the CLI, the JSON config and range parsing.
DEFAULT_DURATION = 60.0
DEFAULT_SAMPLE_RATE = 44_100
DEFAULT_VOICES = 4
DEFAULT_BASE_FREQ = 330.0
DEFAULT_LFO_RATE_RANGE: tuple[float, float] = (0.05, 0.2)
DEFAULT_MOD_DEPTH_RANGE: tuple[float, float] = (0.5, 1.0)
DEFAULT_NOISE_LEVEL = 0.005
DEFAULT_ATTACK = 5.0
DEFAULT_RELEASE = 10.0
DEFAULT_REVERB_MIX = 0.3

UnitFloat = Annotated[float, Field(ge=0.0, le=1.0)]


def parse_range(text: str, default_min: float, default_max: float) -> tuple[float, float]:
    """Parse a ``"min:max"`` string, falling back per side on bad input.

    >>> parse_range("0.1:0.3", 0.0, 1.0)
    (0.1, 0.3)
    >>> parse_range("0.5", 0.0, 1.0)
    (0.5, 1.0)
    >>> parse_range("invalid", 0.2, 0.8)
    (0.2, 0.8)
    """

    parts = text.split(":")
    return (
        _parse_part(parts, 0, default_min),
        _parse_part(parts, 1, default_max),
    )


def _parse_part(parts: list[str], index: int, default: float) -> float:
    if index >= len(parts):
        return default
    try:
        return float(parts[index])
    except ValueError:
        return default


def format_range(bounds: tuple[float, float]) -> str:
    return f"{bounds[0]}:{bounds[1]}"


class GeneratorParams(BaseModel):
    """Fully-resolved, validated input record for one generation run."""

    sample_rate: int = Field(default=DEFAULT_SAMPLE_RATE, gt=0)
    duration: float = Field(default=DEFAULT_DURATION, gt=0.0)
    voices: int = Field(default=DEFAULT_VOICES, ge=1)
    base_freq: float = Field(default=DEFAULT_BASE_FREQ, gt=0.0)
    lfo_rate_range: tuple[NonNegativeFloat, NonNegativeFloat] = DEFAULT_LFO_RATE_RANGE
    mod_depth_range: tuple[UnitFloat, UnitFloat] = DEFAULT_MOD_DEPTH_RANGE
    noise_level: UnitFloat = DEFAULT_NOISE_LEVEL
    attack: NonNegativeFloat = DEFAULT_ATTACK
    release: NonNegativeFloat = DEFAULT_RELEASE
    reverb_mix: UnitFloat = DEFAULT_REVERB_MIX

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    @field_validator("lfo_rate_range", "mod_depth_range")
    @classmethod
    def _ordered_range(cls, value: tuple[float, float]) -> tuple[float, float]:
        low, high = value
        if low > high:
            raise ValueError(f"range minimum {low} exceeds maximum {high}")
        return value

    @model_validator(mode="after")
    def _ramps_fit_duration(self) -> "GeneratorParams":
        if self.attack > self.duration:
            raise ValueError(f"attack {self.attack}s exceeds duration {self.duration}s")
        if self.release > self.duration:
            raise ValueError(f"release {self.release}s exceeds duration {self.duration}s")
        return self

    @property
    def num_samples(self) -> int:
        return int(round(self.duration * self.sample_rate))


def parse_params(payload: Mapping[str, Any]) -> GeneratorParams:
    """Validate a parameter payload, raising InvalidParameterError on failure."""

    try:
        return GeneratorParams.model_validate(dict(payload))
    except ValidationError as exc:
        _LOGGER.warning("Rejected generator parameters: %s", exc)
        raise InvalidParameterError(str(exc)) from exc
