"""
bandmeter - Audio Meter
Samples a playback source's magnitude spectrum on a fixed cadence, folds it
into a few high-frequency-weighted bands and hands them to a callback.
Driven by the caller's frame loop: nothing here runs in the background.
"""

import math
import time
from enum import IntEnum
from typing import Callable, Optional

import numpy as np

from aggregator import aggregate
from band_table import BandTable, build_band_table
from config import MeterConfig, validate_config
from enhancer import enhance
from logging_utils import log_event
from spectrum_source import PlaybackSource


class MeterState(IntEnum):
    IDLE = 0
    SAMPLING = 1


class AudioMeter:
    """
    Tick-driven band meter.
    start() -> advance()/update() once per frame -> stop()
    """

    def __init__(self, config: MeterConfig, source: Optional[PlaybackSource] = None):
        # Raises ConfigError before any state exists
        self.table: BandTable = build_band_table(config)
        self.config = config
        self.source = source

        self.state = MeterState.IDLE
        self.on_update: Optional[Callable[[np.ndarray], None]] = None
        self.elapsed = 0.0            # Seconds accumulated since the last delivery

        self._reset_session_stats()

    @property
    def is_sampling(self) -> bool:
        return self.state == MeterState.SAMPLING

    def reconfigure(self, config: MeterConfig) -> None:
        """Swap in a new config and rebuild the cached band table.
        On ConfigError the current config and table are kept."""
        table = build_band_table(config)
        self.config = config
        self.table = table
        self.elapsed = 0.0
        log_event("INFO", "AudioMeter", "Reconfigured",
                  bands=config.band_count, resolution=config.resolution)

    def start(self, on_update: Callable[[np.ndarray], None]) -> None:
        """Register the callback, start the source and begin sampling"""
        self.on_update = on_update
        self.elapsed = 0.0
        self._reset_session_stats()
        if self.source is None:
            log_event("WARNING", "AudioMeter", "No playback source attached, meter will stay silent")
        else:
            self.source.play()
        self.state = MeterState.SAMPLING
        log_event("INFO", "AudioMeter", "Started",
                  bands=self.config.band_count, interval=self.config.update_interval)

    def stop(self) -> None:
        """Stop the source and sampling"""
        if self.source is not None:
            self.source.stop()
        was_sampling = self.is_sampling
        self.state = MeterState.IDLE
        self.on_update = None
        self.elapsed = 0.0
        if was_sampling:
            self._log_session_summary()
            log_event("INFO", "AudioMeter", "Stopped")

    def advance(self, delta_time: float, is_playing: bool,
                spectrum_provider: Callable[[], object]) -> Optional[np.ndarray]:
        """Account for delta_time seconds of frame time.

        When playing and more than update_interval has accumulated, pulls one
        spectrum from spectrum_provider, delivers the enhanced bands to the
        callback and returns them. At most one delivery per call.
        """
        if not math.isfinite(delta_time) or delta_time < 0:
            raise ValueError(f"delta_time must be finite and non-negative, got {delta_time}")
        if not self.is_sampling or not is_playing:
            return None

        self._session_tick_count += 1
        self.elapsed += delta_time
        if not self.config.update_interval < self.elapsed:
            return None

        self.elapsed = 0.0
        values = self.sample(spectrum_provider())
        self._update_session_stats(values)
        if self.on_update is not None:
            self.on_update(values)
        return values

    def update(self, delta_time: float) -> Optional[np.ndarray]:
        """Per-frame hook reading play state and spectrum from the attached source."""
        source = self.source
        if source is None:
            return None
        resolution = self.config.resolution
        return self.advance(
            delta_time,
            source.is_playing,
            lambda: source.get_spectrum_data(resolution),
        )

    def sample(self, spectrum) -> np.ndarray:
        """Aggregate and enhance one spectrum frame without touching the cadence."""
        raw = aggregate(spectrum, self.table)
        return enhance(raw, self.config.max_enhance)

    # ------------------------------------------------------------------
    # Session stats
    # ------------------------------------------------------------------
    def _reset_session_stats(self) -> None:
        self._session_started_at = time.time()
        self._session_tick_count = 0
        self._session_delivery_count = 0
        self._session_peak_min = None
        self._session_peak_max = None
        self._session_peak_sum = 0.0

    def _update_session_stats(self, values: np.ndarray) -> None:
        peak = float(np.max(values)) if len(values) else 0.0
        self._session_delivery_count += 1
        self._session_peak_sum += peak
        if self._session_peak_min is None or peak < self._session_peak_min:
            self._session_peak_min = peak
        if self._session_peak_max is None or peak > self._session_peak_max:
            self._session_peak_max = peak

    def _log_session_summary(self) -> None:
        if self._session_delivery_count <= 0:
            return

        elapsed_s = max(0.0, time.time() - self._session_started_at)
        peak_min = float(self._session_peak_min or 0.0)
        peak_max = float(self._session_peak_max or 0.0)
        peak_mean = self._session_peak_sum / self._session_delivery_count

        log_event(
            "INFO",
            "AudioMeter",
            "Session summary",
            ticks=self._session_tick_count,
            deliveries=self._session_delivery_count,
            seconds=f"{elapsed_s:.1f}",
            peak_min=f"{peak_min:.4f}",
            peak_max=f"{peak_max:.4f}",
            peak_mean=f"{peak_mean:.4f}",
        )


def create(band_count: int, resolution: int = 256, sample_rate: float = 44100.0,
           max_enhance: float = 100.0, update_interval: float = 0.05, *,
           max_hz: Optional[float] = None,
           source: Optional[PlaybackSource] = None) -> AudioMeter:
    """Build a meter from plain arguments. Raises ConfigError on bad values."""
    config = validate_config(MeterConfig(
        band_count=band_count,
        resolution=resolution,
        sample_rate=sample_rate,
        max_enhance=max_enhance,
        update_interval=update_interval,
        max_hz=max_hz,
    ))
    return AudioMeter(config, source=source)
