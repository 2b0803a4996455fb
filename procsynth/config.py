from __future__ import annotations

import logging
import uuid
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import ConfigFileError
from .params import (
    DEFAULT_ATTACK,
    DEFAULT_BASE_FREQ,
    DEFAULT_DURATION,
    DEFAULT_LFO_RATE_RANGE,
    DEFAULT_MOD_DEPTH_RANGE,
    DEFAULT_NOISE_LEVEL,
    DEFAULT_RELEASE,
    DEFAULT_REVERB_MIX,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_VOICES,
    GeneratorParams,
    parse_params,
)

_LOGGER = logging.getLogger("procsynth.config")

DEFAULT_FILENAME_ROOT = "ambient"


def v4_uuid() -> str:
    return str(uuid.uuid4())


def generate_filename(root: str, extension: str = "wav") -> str:
    """Unique output name: ``<uuid4>_<root in snake case>.<extension>``."""
    prefix = root.replace(" ", "_").lower()
    return f"{v4_uuid()}_{prefix}.{extension}"


class JsonConfig(BaseModel):
    """On-disk JSON configuration; ranges are ``[min, max]`` arrays."""

    output: str | None = None
    duration: float = DEFAULT_DURATION
    sample_rate: int = DEFAULT_SAMPLE_RATE
    voices: int = DEFAULT_VOICES
    base_freq: float = DEFAULT_BASE_FREQ
    lfo_rate_range: tuple[float, float] = DEFAULT_LFO_RATE_RANGE
    noise_level: float = DEFAULT_NOISE_LEVEL
    mod_depth_range: tuple[float, float] = DEFAULT_MOD_DEPTH_RANGE
    attack: float = DEFAULT_ATTACK
    release: float = DEFAULT_RELEASE
    reverb_mix: float = DEFAULT_REVERB_MIX

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    @classmethod
    def from_file(cls, path: str | Path) -> "JsonConfig":
        """Load configuration from a JSON file."""
        source = Path(path)
        try:
            content = source.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigFileError(f"cannot read config {source}: {exc}") from exc
        try:
            config = cls.model_validate_json(content)
        except ValidationError as exc:
            _LOGGER.warning("Invalid config file %s: %s", source, exc)
            raise ConfigFileError(f"invalid config {source}: {exc}") from exc
        _LOGGER.debug("Loaded config from %s", source)
        return config

    def to_file(self, path: str | Path) -> Path:
        """Save configuration as pretty-printed JSON."""
        target = Path(path)
        try:
            target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        except OSError as exc:
            raise ConfigFileError(f"cannot write config {target}: {exc}") from exc
        return target

    @classmethod
    def create_default_file(cls, path: str | Path) -> Path:
        return cls().to_file(path)

    def to_params(self) -> GeneratorParams:
        return parse_params(self.model_dump(exclude={"output"}))

    def output_path(self) -> str:
        # A UUID prefix keeps repeated renders of one config from overwriting each other.
        if self.output:
            return f"{v4_uuid()}_{self.output}"
        return generate_filename(DEFAULT_FILENAME_ROOT)
