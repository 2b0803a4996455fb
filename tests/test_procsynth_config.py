from __future__ import annotations

import json
import re
from pathlib import Path

import pytest
from pydantic import ValidationError

from procsynth.config import JsonConfig, generate_filename
from procsynth.errors import ConfigFileError, InvalidParameterError

_UUID = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"


def test_default_json_config() -> None:
    config = JsonConfig()
    assert config.output is None
    assert config.duration == 60.0
    assert config.sample_rate == 44100
    assert config.voices == 4
    assert config.base_freq == 330.0
    assert config.lfo_rate_range == (0.05, 0.2)
    assert config.noise_level == 0.005
    assert config.mod_depth_range == (0.5, 1.0)
    assert config.attack == 5.0
    assert config.release == 10.0
    assert config.reverb_mix == 0.3


def test_json_config_conversion() -> None:
    config = JsonConfig(
        output="test_json.wav",
        duration=45.0,
        sample_rate=48000,
        voices=8,
        base_freq=440.0,
        lfo_rate_range=(0.1, 0.3),
        noise_level=0.02,
        mod_depth_range=(0.3, 0.8),
        attack=3.0,
        release=5.0,
        reverb_mix=0.4,
    )
    params = config.to_params()

    assert params.duration == 45.0
    assert params.sample_rate == 48000
    assert params.voices == 8
    assert params.base_freq == 440.0
    assert params.lfo_rate_range == (0.1, 0.3)
    assert params.noise_level == 0.02
    assert params.mod_depth_range == (0.3, 0.8)
    assert params.attack == 3.0
    assert params.release == 5.0
    assert params.reverb_mix == 0.4


def test_ranges_serialize_as_arrays(tmp_path: Path) -> None:
    path = JsonConfig.create_default_file(tmp_path / "config.json")
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["lfo_rate_range"] == [0.05, 0.2]
    assert payload["mod_depth_range"] == [0.5, 1.0]
    assert payload["output"] is None


def test_file_round_trip(tmp_path: Path) -> None:
    original = JsonConfig(output="drift.wav", duration=30.0, voices=6)
    original.to_file(tmp_path / "drift.json")
    assert JsonConfig.from_file(tmp_path / "drift.json") == original


def test_partial_file_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "partial.json"
    path.write_text(json.dumps({"duration": 12.0, "lfo_rate_range": [0.01, 0.02]}))
    config = JsonConfig.from_file(path)
    assert config.duration == 12.0
    assert config.lfo_rate_range == (0.01, 0.02)
    assert config.voices == 4


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigFileError):
        JsonConfig.from_file(tmp_path / "nope.json")


def test_malformed_file_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(ConfigFileError):
        JsonConfig.from_file(path)


def test_non_finite_values_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "infinite.json"
    path.write_text('{"duration": Infinity}')
    with pytest.raises(ConfigFileError):
        JsonConfig.from_file(path)
    with pytest.raises(ValidationError):
        JsonConfig.model_validate({"base_freq": float("inf")})


def test_out_of_range_values_fail_at_conversion() -> None:
    config = JsonConfig(reverb_mix=2.0)
    with pytest.raises(InvalidParameterError):
        config.to_params()


def test_generate_filename() -> None:
    filename = generate_filename("test ambient")
    assert re.fullmatch(_UUID + r"_test_ambient\.wav", filename)


def test_output_path_prefixes_uuid() -> None:
    assert re.fullmatch(_UUID + r"_drift\.wav", JsonConfig(output="drift.wav").output_path())
    assert re.fullmatch(_UUID + r"_ambient\.wav", JsonConfig().output_path())
