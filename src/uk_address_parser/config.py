"""Runtime configuration for the address parser."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class ParserConfig:
    """Grid and search-window settings shared by the pipeline and the store."""

    # Grid pin granularity (degrees per bucket)
    pin_lat: float = 0.01
    pin_long: float = 0.01

    # Settlement search window when the postcode has no quality indicator
    default_lat_fuzz: float = 0.2
    default_long_fuzz: float = 0.4

    # Quality indicator -> window size in degrees
    quality_fuzz_divisor: float = 60.0

    # Gazetteer JSON used by the CLI and HTTP service
    gazetteer_path: str | None = None

    def window_fuzz(self, quality_indicator: int | None) -> tuple[float, float]:
        """Return (lat_fuzz, long_fuzz) for a postcode quality indicator."""
        if quality_indicator is None:
            return self.default_lat_fuzz, self.default_long_fuzz
        fuzz = quality_indicator / self.quality_fuzz_divisor
        return fuzz, fuzz

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> "ParserConfig":
        """Build config from environment variables (and a .env file if present)."""
        load_dotenv(dotenv_path)
        return cls(
            pin_lat=_float_env("PIN_LAT", cls.pin_lat),
            pin_long=_float_env("PIN_LONG", cls.pin_long),
            gazetteer_path=os.getenv("GAZETTEER_PATH") or None,
        )
