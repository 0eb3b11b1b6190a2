import numpy as np

from config import ConfigError


def enhancement_weights(band_count: int, max_enhance: float) -> np.ndarray:
    """Per-band weights delta_enhance * (i + 1), delta_enhance = max_enhance / (band_count - 1)."""
    if band_count < 2:
        raise ConfigError(f"enhancement needs at least 2 bands, got {band_count}")
    delta_enhance = max_enhance / (band_count - 1)
    return delta_enhance * np.arange(1, band_count + 1, dtype=np.float64)


def enhance(raw, max_enhance: float) -> np.ndarray:
    """Weight raw band values so higher bands are emphasized."""
    values = np.asarray(raw, dtype=np.float64)
    return values * enhancement_weights(len(values), max_enhance)
