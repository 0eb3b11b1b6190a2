#!/usr/bin/env python3
"""
bandmeter - Spectral band meter

Plays a synthetic test tone through an AudioMeter at a fixed frame rate and
prints every delivered band array.
"""

import argparse
import cProfile
import sys
from pathlib import Path

import numpy as np

from audio_meter import AudioMeter
from config import ConfigError, MeterConfig
from config_persistence import load_config
from logging_utils import get_log_level, log_event, set_log_level
from spectrum_source import SampleBufferSource


def build_config(args: argparse.Namespace) -> MeterConfig:
    """Start from the JSON config (if any) and apply command-line overrides."""
    config = load_config(Path(args.config)) if args.config else MeterConfig()
    overrides = {
        'band_count': args.bands,
        'resolution': args.resolution,
        'sample_rate': args.sample_rate,
        'max_enhance': args.max_enhance,
        'update_interval': args.interval,
        'log_level': args.log_level,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)
    return config


def run_meter(config: MeterConfig, tone_hz: float, seconds: float, fps: float) -> int:
    try:
        meter = AudioMeter(config)
    except ConfigError as e:
        log_event("ERROR", "Run", "Invalid configuration", error=e)
        return 2
    source = SampleBufferSource.from_tone(tone_hz, seconds, sample_rate=config.sample_rate)
    meter.source = source
    log_event("INFO", "Run", "Playing test tone", tone_hz=tone_hz,
              seconds=f"{source.duration:.2f}", log_level=get_log_level())

    frame_delta = 1.0 / fps
    deliveries = 0

    def on_update(values: np.ndarray) -> None:
        nonlocal deliveries
        deliveries += 1
        print(" ".join(f"{v:8.3f}" for v in values), flush=True)

    meter.start(on_update)
    while source.is_playing:
        meter.update(frame_delta)
        source.advance(frame_delta)
    meter.stop()

    log_event("INFO", "Run", "Finished", deliveries=deliveries, tone_hz=tone_hz)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the bandmeter on a test tone")
    parser.add_argument("--bands", type=int, help="Number of output bands")
    parser.add_argument("--resolution", type=int, help="Spectrum bins per frame (power of two)")
    parser.add_argument("--sample-rate", type=float, help="Sample rate in Hz")
    parser.add_argument("--max-enhance", type=float, help="Enhancement scale for the band ramp")
    parser.add_argument("--interval", type=float, help="Seconds between deliveries")
    parser.add_argument("--tone", type=float, default=440.0, help="Test tone frequency in Hz (default: 440)")
    parser.add_argument("--seconds", type=float, default=2.0, help="Test tone length (default: 2)")
    parser.add_argument("--fps", type=float, default=60.0, help="Simulated frame rate (default: 60)")
    parser.add_argument("--config", help="Path to a JSON config file")
    parser.add_argument("--log-level", help="DEBUG/INFO/WARNING/ERROR")
    parser.add_argument(
        "--profile",
        action="store_true",
        help="Enable cProfile and save stats to --profile-out",
    )
    parser.add_argument(
        "--profile-out",
        default="profile.prof",
        help="Path to save cProfile stats (default: profile.prof)",
    )
    args = parser.parse_args()

    if args.fps <= 0:
        parser.error("--fps must be positive")

    config = build_config(args)
    set_log_level(config.log_level)

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        exit_code = run_meter(config, args.tone, args.seconds, args.fps)
        profiler.disable()
        profiler.dump_stats(args.profile_out)
    else:
        exit_code = run_meter(config, args.tone, args.seconds, args.fps)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
