from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional

import pandas as pd

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"
TIMESTAMP_FORMAT = f"{DATE_FORMAT} {TIME_FORMAT}"

# Axis label formats handed to the renderer (Qt-style tokens)
HOURLY_AXIS_FORMAT = "HH:mm\ndd.MM"
DAILY_AXIS_FORMAT = "dd.MM.yyyy"
CLOCK_AXIS_FORMAT = "HH:mm"

KELVIN_OFFSET = 273.15


class SamplingFrequency(Enum):
    """Sampling frequency offered for historical statistics."""

    HOURLY = "1h"
    THREE_HOURLY = "3h"
    SIX_HOURLY = "6h"
    TWELVE_HOURLY = "12h"
    DAILY = "1d"

    @property
    def stride(self) -> int:
        """Number of hourly source entries between two samples."""
        return _STRIDES[self]

    @property
    def axis_format(self) -> str:
        if self is SamplingFrequency.DAILY:
            return DAILY_AXIS_FORMAT
        return HOURLY_AXIS_FORMAT

    @classmethod
    def label_format_for(cls, value: Any) -> str:
        """Axis label format for a raw frequency value.

        Only the known sub-daily frequencies get clock labels; daily and
        unknown values are labelled by date.
        """
        if isinstance(value, cls):
            return value.axis_format
        try:
            return cls(value).axis_format
        except ValueError:
            return DAILY_AXIS_FORMAT

    @classmethod
    def parse(cls, value: Any) -> "SamplingFrequency":
        """Resolve a frequency value, falling back to hourly for unknown input."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.HOURLY


_STRIDES = {
    SamplingFrequency.HOURLY: 1,
    SamplingFrequency.THREE_HOURLY: 3,
    SamplingFrequency.SIX_HOURLY: 6,
    SamplingFrequency.TWELVE_HOURLY: 12,
    SamplingFrequency.DAILY: 24,
}


class SeriesPoint(NamedTuple):
    timestamp: int  # ms since epoch
    value: float


def as_number(value: Any) -> float:
    """Return a JSON number as float; anything else counts as 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def kelvin_to_celsius(kelvin: float) -> float:
    return kelvin - KELVIN_OFFSET


def parse_timestamp(text: Any, fmt: str = TIMESTAMP_FORMAT) -> pd.Timestamp:
    """Parse a provider timestamp, returning NaT when it does not match fmt."""
    if not isinstance(text, str):
        return pd.NaT
    return pd.to_datetime(text, format=fmt, errors="coerce")


def to_epoch_ms(timestamp: pd.Timestamp) -> int:
    """Milliseconds since epoch, reading naive wall-clock timestamps as UTC."""
    return int(pd.Timestamp(timestamp).value // 1_000_000)


@dataclass(frozen=True)
class WeatherObservation:
    """One timestamped weather reading."""

    timestamp: pd.Timestamp
    temperature: float
    pressure: float
    humidity: float
    windspeed: float

    @property
    def has_valid_timestamp(self) -> bool:
        return not pd.isna(self.timestamp)

    @property
    def epoch_ms(self) -> Optional[int]:
        if not self.has_valid_timestamp:
            return None
        return to_epoch_ms(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the observation to a JSON-serializable record."""
        return {
            "timestamp": self.timestamp.isoformat() if self.has_valid_timestamp else None,
            "temperature": self.temperature,
            "pressure": self.pressure,
            "humidity": self.humidity,
            "windspeed": self.windspeed,
        }

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "WeatherObservation":
        """Rebuild an observation from a record produced by to_dict."""
        raw_timestamp = record.get("timestamp")
        if isinstance(raw_timestamp, str):
            timestamp = pd.to_datetime(raw_timestamp, errors="coerce")
        else:
            timestamp = pd.NaT
        return cls(
            timestamp=timestamp,
            temperature=as_number(record.get("temperature")),
            pressure=as_number(record.get("pressure")),
            humidity=as_number(record.get("humidity")),
            windspeed=as_number(record.get("windspeed")),
        )


@dataclass(frozen=True)
class CurrentConditions:
    """Current conditions for a city, temperatures in Celsius."""

    temperature: float
    feels_like: float
    humidity: float
    pressure: float
    windspeed: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "temperature": self.temperature,
            "feels_like": self.feels_like,
            "humidity": self.humidity,
            "pressure": self.pressure,
            "windspeed": self.windspeed,
        }
