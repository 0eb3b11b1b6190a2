import numpy as np

from band_table import BandTable


class SpectrumShapeError(ValueError):
    """Raised when a spectrum frame does not match the table resolution."""


def aggregate(spectrum, table: BandTable) -> np.ndarray:
    """Sum bin magnitudes into their bands (raw, un-enhanced).

    Each bin contributes to the single band that strictly contains its
    frequency. Bins on a band edge or above the last band are dropped, so
    bands with no contributing bins stay at 0.
    """
    frame = np.asarray(spectrum, dtype=np.float64)
    if frame.ndim != 1 or len(frame) != table.resolution:
        raise SpectrumShapeError(
            f"expected a 1-D spectrum of {table.resolution} bins, got shape {frame.shape}"
        )

    assigned = table.bin_bands >= 0
    return np.bincount(
        table.bin_bands[assigned],
        weights=frame[assigned],
        minlength=table.band_count,
    ).astype(np.float64)
