from __future__ import annotations


class ProcSynthError(Exception):
    """Base error for the procsynth library."""


class InvalidParameterError(ProcSynthError):
    """Raised when generator parameters fail validation."""


class ConfigFileError(ProcSynthError):
    """Raised when a JSON config file cannot be read, parsed or written."""


class PipelineStateError(ProcSynthError):
    """Raised when generation phases are run out of order."""


class SampleBufferError(ProcSynthError):
    """Raised when a sample buffer is not an (N, 2) real-valued array."""
