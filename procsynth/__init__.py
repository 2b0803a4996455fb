from __future__ import annotations

from .audio import dequantize_pcm16, interleave, quantize_pcm16, read_wav, write_wav
from .config import JsonConfig, generate_filename
from .envelope import envelope, envelope_curve
from .errors import (
    ConfigFileError,
    InvalidParameterError,
    PipelineStateError,
    ProcSynthError,
    SampleBufferError,
)
from .generator import Generator, render
from .logging_utils import configure_logging as _configure_logging
from .noise import FilterState, burst_env, filtered_noise, granular_noise
from .params import GeneratorParams, parse_params, parse_range
from .reverb import FeedbackDelay, apply_reverb
from .voice import Voice, build_voices

__all__ = [
    "ConfigFileError",
    "FeedbackDelay",
    "FilterState",
    "Generator",
    "GeneratorParams",
    "InvalidParameterError",
    "JsonConfig",
    "PipelineStateError",
    "ProcSynthError",
    "SampleBufferError",
    "Voice",
    "apply_reverb",
    "build_voices",
    "burst_env",
    "dequantize_pcm16",
    "envelope",
    "envelope_curve",
    "filtered_noise",
    "generate_filename",
    "granular_noise",
    "interleave",
    "parse_params",
    "parse_range",
    "quantize_pcm16",
    "read_wav",
    "render",
    "write_wav",
]

__version__ = "0.1.0"

_configure_logging()
del _configure_logging
