"""
Band table: FFT bin frequencies, equal-width band boundaries and the
precomputed bin -> band assignment used by the aggregator.
"""

from dataclasses import dataclass

import numpy as np

from config import MeterConfig, validate_config

# Marks a bin that falls on a band edge or past the last band
UNASSIGNED = -1


@dataclass(frozen=True)
class BandBoundary:
    """Open frequency interval (from_hz, to_hz) covered by one band"""
    from_hz: float
    to_hz: float

    def contains(self, freq: float) -> bool:
        return self.from_hz < freq < self.to_hz


@dataclass(frozen=True, eq=False)
class BandTable:
    """Immutable lookup tables derived from one MeterConfig"""
    bin_freqs: np.ndarray           # Center frequency of each bin (Hz), length = resolution
    bands: tuple[BandBoundary, ...]  # Contiguous boundaries, length = band_count
    delta_hz: float                 # Width of each band (Hz)
    bin_bands: np.ndarray           # Band index per bin, UNASSIGNED when dropped

    @property
    def band_count(self) -> int:
        return len(self.bands)

    @property
    def resolution(self) -> int:
        return len(self.bin_freqs)

    def __eq__(self, other) -> bool:
        if not isinstance(other, BandTable):
            return NotImplemented
        return (
            self.bands == other.bands
            and self.delta_hz == other.delta_hz
            and np.array_equal(self.bin_freqs, other.bin_freqs)
            and np.array_equal(self.bin_bands, other.bin_bands)
        )


def bin_frequencies(resolution: int, sample_rate: float) -> np.ndarray:
    """freq[i] = (sample_rate / resolution) * (i + 1)"""
    delta_freq = sample_rate / resolution
    return delta_freq * np.arange(1, resolution + 1, dtype=np.float64)


def band_edges(band_count: int, delta_hz: float) -> np.ndarray:
    """band_count + 1 ascending edges; band b spans edges[b]..edges[b + 1]."""
    return delta_hz * np.arange(band_count + 1, dtype=np.float64)


def assign_bins(bin_freqs: np.ndarray, edges: np.ndarray) -> np.ndarray:
    """Index of the band strictly containing each frequency, else UNASSIGNED."""
    band_count = len(edges) - 1
    idx = np.searchsorted(edges, bin_freqs, side='right') - 1
    in_range = (idx >= 0) & (idx < band_count)
    safe = np.clip(idx, 0, band_count - 1)
    inside = in_range & (bin_freqs > edges[safe]) & (bin_freqs < edges[safe + 1])
    return np.where(inside, idx, UNASSIGNED).astype(np.intp)


def build_band_table(config: MeterConfig) -> BandTable:
    """Build the bin/band tables for a config. Raises ConfigError if invalid."""
    validate_config(config)

    freqs = bin_frequencies(config.resolution, float(config.sample_rate))
    delta_hz = config.delta_hz
    edges = band_edges(config.band_count, delta_hz)

    bands = tuple(
        BandBoundary(from_hz=float(edges[i]), to_hz=float(edges[i + 1]))
        for i in range(config.band_count)
    )
    bin_bands = assign_bins(freqs, edges)

    # Callers must not mutate cached tables
    freqs.setflags(write=False)
    bin_bands.setflags(write=False)
    return BandTable(bin_freqs=freqs, bands=bands, delta_hz=delta_hz, bin_bands=bin_bands)
