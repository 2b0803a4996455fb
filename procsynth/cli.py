from __future__ import annotations

import argparse
import logging
import os

import numpy as np
from rich.console import Console

from .audio import write_wav
from .config import DEFAULT_FILENAME_ROOT, JsonConfig, generate_filename
from .generator import Generator
from .logging_utils import DEBUG_ENV, LOG_LEVELS, configure_logging, log_exception
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
    format_range,
    parse_params,
    parse_range,
)
from .progress import ProgressBar, render_error

_LOGGER = logging.getLogger("procsynth.cli")
_CONSOLE = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procsynth",
        description="Ambient WAV generator: detuned voices, noise textures and a delay reverb.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Load parameters from a JSON file (overrides the other parameter flags).",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=None,
        help="Output WAV file (a unique name is generated when omitted).",
    )
    parser.add_argument("-d", "--duration", type=float, default=DEFAULT_DURATION, help="Seconds.")
    parser.add_argument(
        "-r", "--sample-rate", type=int, default=DEFAULT_SAMPLE_RATE, help="Sample rate (Hz)."
    )
    parser.add_argument(
        "-v", "--voices", type=int, default=DEFAULT_VOICES, help="Number of oscillator voices."
    )
    parser.add_argument(
        "--base-freq",
        type=float,
        default=DEFAULT_BASE_FREQ,
        help="Base frequency (Hz); each voice is detuned by a random 0.8-1.2 ratio.",
    )
    parser.add_argument(
        "--lfo-rate-range",
        type=str,
        default=format_range(DEFAULT_LFO_RATE_RANGE),
        help="LFO rate range in Hz, as min:max.",
    )
    parser.add_argument(
        "--noise-level", type=float, default=DEFAULT_NOISE_LEVEL, help="Noise level (0.0-1.0)."
    )
    parser.add_argument(
        "--mod-depth-range",
        type=str,
        default=format_range(DEFAULT_MOD_DEPTH_RANGE),
        help="LFO modulation depth range (0.0-1.0), as min:max.",
    )
    parser.add_argument("--attack", type=float, default=DEFAULT_ATTACK, help="Fade-in seconds.")
    parser.add_argument("--release", type=float, default=DEFAULT_RELEASE, help="Fade-out seconds.")
    parser.add_argument(
        "--reverb-mix", type=float, default=DEFAULT_REVERB_MIX, help="Dry/wet balance (0.0-1.0)."
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed the random source for a reproducible render."
    )
    parser.add_argument(
        "--init-config",
        type=str,
        default=None,
        metavar="PATH",
        help="Write a default JSON config to PATH and exit.",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help=f"Console log level (default: info, or debug when {DEBUG_ENV} is set).",
    )
    return parser


def resolve_run(args: argparse.Namespace) -> tuple[GeneratorParams, str]:
    """Turn parsed arguments into validated parameters and an output path."""

    if args.config:
        config = JsonConfig.from_file(args.config)
        return config.to_params(), config.output_path()

    params = parse_params(
        {
            "duration": args.duration,
            "sample_rate": args.sample_rate,
            "voices": args.voices,
            "base_freq": args.base_freq,
            "lfo_rate_range": parse_range(args.lfo_rate_range, *DEFAULT_LFO_RATE_RANGE),
            "mod_depth_range": parse_range(args.mod_depth_range, *DEFAULT_MOD_DEPTH_RANGE),
            "noise_level": args.noise_level,
            "attack": args.attack,
            "release": args.release,
            "reverb_mix": args.reverb_mix,
        }
    )
    output = args.output or generate_filename(DEFAULT_FILENAME_ROOT)
    return params, output


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    params: GeneratorParams | None = None
    output: str | None = None
    try:
        if args.init_config:
            path = JsonConfig.create_default_file(args.init_config)
            _CONSOLE.print(f"Wrote default config to {path}")
            return 0

        params, output = resolve_run(args)
        _LOGGER.debug(
            "Rendering %d voice(s) for %.1fs into %s", params.voices, params.duration, output
        )
        generator = Generator(params, rng=np.random.default_rng(args.seed))
        with ProgressBar("Rendering", total=generator.num_samples) as bar:
            samples = generator.run(progress=lambda done, total: bar.update(done, total))
        path = write_wav(output, samples, sample_rate=params.sample_rate)
        _CONSOLE.print(f"Generated '{path}' with {samples.shape[0]} samples.")
        return 0
    except Exception as exc:
        debug = bool(os.environ.get(DEBUG_ENV))
        _LOGGER.warning("procsynth CLI failed: %s", exc, exc_info=debug)
        log_exception("procsynth CLI", exc, params=params, output=output)
        render_error("procsynth CLI", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
