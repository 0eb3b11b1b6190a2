# bandmeter Configuration
# Meter parameters, validation and schema migration

from dataclasses import dataclass, fields
from numbers import Integral

from logging_utils import log_event


CURRENT_CONFIG_VERSION = 1


class ConfigError(ValueError):
    """Raised when a meter configuration cannot be used."""


@dataclass
class MeterConfig:
    """Band meter parameters"""
    version: int = CURRENT_CONFIG_VERSION  # Schema version for persisted configs
    band_count: int = 10              # Number of output bands (2-20 is typical)
    resolution: int = 256             # FFT bins per frame, power of two
    sample_rate: float = 44100.0      # Output sample rate of the analyzed audio (Hz)
    max_enhance: float = 100.0        # Enhancement scale, step per band = max_enhance / (band_count - 1)
    update_interval: float = 0.05     # Seconds between band deliveries
    max_hz: float | None = None       # Upper edge of the band range (None = sample_rate)
    log_level: str = "INFO"           # Logging level (DEBUG/INFO/WARNING/ERROR)

    @property
    def band_range_hz(self) -> float:
        """Frequency covered by all bands together."""
        return float(self.sample_rate if self.max_hz is None else self.max_hz)

    @property
    def delta_hz(self) -> float:
        """Width of one band in Hz."""
        return self.band_range_hz / self.band_count

    @property
    def delta_enhance(self) -> float:
        """Enhancement step between neighbouring bands."""
        return self.max_enhance / (self.band_count - 1)


def _is_power_of_two(value: int) -> bool:
    return value > 0 and (value & (value - 1)) == 0


def validate_config(config: MeterConfig) -> MeterConfig:
    """Check a config before any table is built.
    Returns the same config so calls can be chained; raises ConfigError."""
    if isinstance(config.band_count, bool) or not isinstance(config.band_count, Integral):
        raise ConfigError(f"band_count must be an integer, got {config.band_count!r}")
    if config.band_count <= 0:
        raise ConfigError(f"band_count must be positive, got {config.band_count}")
    if config.band_count == 1:
        # enhancement step is max_enhance / (band_count - 1)
        raise ConfigError("band_count must be at least 2 for the enhancement ramp")

    if isinstance(config.resolution, bool) or not isinstance(config.resolution, Integral):
        raise ConfigError(f"resolution must be an integer, got {config.resolution!r}")
    if config.resolution <= 0:
        raise ConfigError(f"resolution must be positive, got {config.resolution}")
    if not _is_power_of_two(config.resolution):
        raise ConfigError(f"resolution must be a power of two, got {config.resolution}")

    if not config.sample_rate > 0:
        raise ConfigError(f"sample_rate must be positive, got {config.sample_rate}")
    if not config.max_enhance > 0:
        raise ConfigError(f"max_enhance must be positive, got {config.max_enhance}")
    if not config.update_interval > 0:
        raise ConfigError(f"update_interval must be positive, got {config.update_interval}")
    if config.max_hz is not None and not config.max_hz > 0:
        raise ConfigError(f"max_hz must be positive when set, got {config.max_hz}")
    return config


def apply_dict_to_dataclass(target, data) -> None:
    """Apply values from a dict onto a dataclass instance.
    Unknown keys and properties are ignored."""
    if not isinstance(data, dict):
        return

    known = {f.name for f in fields(target)}
    for key, value in data.items():
        if key not in known:
            log_event("DEBUG", "Config", "Ignoring unknown key", key=key)
            continue
        setattr(target, key, value)


def migrate_config(config: MeterConfig, data: dict | None, loaded_version) -> None:
    """Upgrade older config layouts to the current schema and bump version.
    `data` is the raw dict the config was loaded from, if any."""
    try:
        version = int(loaded_version) if loaded_version is not None else 0
    except (TypeError, ValueError):
        version = 0

    if version < 1:
        # v0 files named the band count `value_count`
        legacy_count = (data or {}).get('value_count')
        if legacy_count is not None and 'band_count' not in (data or {}):
            config.band_count = legacy_count
        # v0 stored "unset" as 0
        if config.max_hz in (0, 0.0):
            config.max_hz = None

    if getattr(config, 'log_level', None) in (None, ""):
        config.log_level = "INFO"

    config.version = CURRENT_CONFIG_VERSION
