"""
bandmeter - Playback sources
The meter only needs something that can play, stop, report whether it is
playing and hand out a magnitude spectrum. SampleBufferSource does that for a
mono sample buffer held in memory.
"""

from typing import Protocol, runtime_checkable

import numpy as np

from logging_utils import log_event


@runtime_checkable
class PlaybackSource(Protocol):
    """External audio collaborator driven by AudioMeter"""

    @property
    def is_playing(self) -> bool: ...

    def play(self) -> None: ...

    def stop(self) -> None: ...

    def get_spectrum_data(self, resolution: int) -> np.ndarray: ...


class SampleBufferSource:
    """Plays a mono float buffer by moving a playhead and exposes its spectrum."""

    def __init__(self, samples, sample_rate: float, loop: bool = False):
        data = np.asarray(samples, dtype=np.float64)
        if data.ndim != 1:
            raise ValueError(f"expected mono samples, got shape {data.shape}")
        if not sample_rate > 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        self.samples = data
        self.sample_rate = float(sample_rate)
        self.loop = loop
        self.position = 0.0          # Playhead in samples, fractional steps carried forward
        self._playing = False

    @classmethod
    def from_tone(cls, frequency: float, seconds: float, sample_rate: float = 44100.0,
                  amplitude: float = 0.5, loop: bool = False) -> "SampleBufferSource":
        """Build a source playing a pure sine tone."""
        count = max(1, int(round(seconds * sample_rate)))
        t = np.arange(count, dtype=np.float64) / sample_rate
        return cls(amplitude * np.sin(2.0 * np.pi * frequency * t), sample_rate, loop=loop)

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def duration(self) -> float:
        return len(self.samples) / self.sample_rate

    def play(self) -> None:
        if len(self.samples) == 0:
            log_event("WARNING", "Source", "Empty sample buffer, nothing to play")
            return
        if self.position >= len(self.samples):
            self.position = 0.0
        self._playing = True

    def stop(self) -> None:
        self._playing = False
        self.position = 0.0

    def advance(self, delta_time: float) -> None:
        """Move the playhead by delta_time seconds while playing."""
        if not self._playing:
            return
        self.position += delta_time * self.sample_rate
        if self.position < len(self.samples):
            return
        if self.loop:
            self.position %= len(self.samples)
        else:
            self.position = float(len(self.samples))
            self._playing = False
            log_event("INFO", "Source", "Reached end of buffer")

    def get_spectrum_data(self, resolution: int) -> np.ndarray:
        """Magnitude spectrum (rectangular window) of the 2 * resolution samples at the playhead.
        Returns the first `resolution` bins, zero-padded past the end of the buffer."""
        window = 2 * resolution
        start = int(self.position)
        frame = self.samples[start:start + window]
        if len(frame) < window:
            frame = np.pad(frame, (0, window - len(frame)))
        magnitudes = np.abs(np.fft.rfft(frame)) / window
        return magnitudes[:resolution]
