"""Parsers turning provider JSON payloads into weather observations.

Every parser here is forgiving: malformed documents produce empty results,
missing numbers become 0 and unparseable timestamps become NaT. Callers
check for emptiness and timestamp validity before charting.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

from .models import (
    CurrentConditions,
    SamplingFrequency,
    SeriesPoint,
    WeatherObservation,
    as_number,
    kelvin_to_celsius,
    parse_timestamp,
)

logger = logging.getLogger(__name__)

Payload = Union[Dict[str, Any], str, bytes, None]

QUANTITIES = ("temperature", "pressure", "humidity", "windspeed")


def _as_document(payload: Payload) -> Optional[Dict[str, Any]]:
    """Decode raw JSON text if needed and return the top-level object."""
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            payload = json.loads(payload)
        except ValueError:
            logger.warning("Ignoring payload that is not valid JSON")
            return None
    if not isinstance(payload, dict):
        return None
    return payload


def _as_object(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_array(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_visual_crossing(
    payload: Payload, frequency: Union[SamplingFrequency, str]
) -> List[WeatherObservation]:
    """Parse a Visual Crossing timeline document.

    Args:
        payload: Decoded JSON object (or raw JSON text) with a "days" array
        frequency: Sampling frequency; every stride-th hour of each day is kept

    Returns:
        Observations in source order. Days without "hours" are skipped.
    """
    document = _as_document(payload)
    if document is None:
        return []

    stride = SamplingFrequency.parse(frequency).stride
    observations = []

    for day in _as_array(document.get("days")):
        day = _as_object(day)
        if "hours" not in day:
            continue

        date_text = _as_text(day.get("datetime"))
        hours = _as_array(day["hours"])

        for hour in hours[::stride]:
            hour = _as_object(hour)
            observations.append(
                WeatherObservation(
                    timestamp=parse_timestamp(f"{date_text} {_as_text(hour.get('datetime'))}"),
                    temperature=as_number(hour.get("temp")),
                    pressure=as_number(hour.get("pressure")),
                    humidity=as_number(hour.get("humidity")),
                    windspeed=as_number(hour.get("windspeed")),
                )
            )

    return observations


def parse_current_conditions(payload: Payload) -> Optional[CurrentConditions]:
    """Parse an OpenWeatherMap current weather object.

    Temperatures arrive in Kelvin and are converted to Celsius.
    """
    document = _as_document(payload)
    if document is None:
        return None

    main = _as_object(document.get("main"))
    wind = _as_object(document.get("wind"))

    return CurrentConditions(
        temperature=kelvin_to_celsius(as_number(main.get("temp"))),
        feels_like=kelvin_to_celsius(as_number(main.get("feels_like"))),
        humidity=as_number(main.get("humidity")),
        pressure=as_number(main.get("pressure")),
        windspeed=as_number(wind.get("speed")),
    )


def parse_forecast(payload: Payload) -> List[WeatherObservation]:
    """Parse an OpenWeatherMap forecast document (the "list" array)."""
    document = _as_document(payload)
    if document is None:
        return []

    observations = []
    for entry in _as_array(document.get("list")):
        entry = _as_object(entry)
        main = _as_object(entry.get("main"))
        wind = _as_object(entry.get("wind"))
        observations.append(
            WeatherObservation(
                timestamp=parse_timestamp(entry.get("dt_txt")),
                temperature=kelvin_to_celsius(as_number(main.get("temp"))),
                pressure=as_number(main.get("pressure")),
                humidity=as_number(main.get("humidity")),
                windspeed=as_number(wind.get("speed")),
            )
        )

    return observations


def observations_to_series(
    observations: List[WeatherObservation],
) -> Dict[str, List[SeriesPoint]]:
    """Split observations into one point series per measured quantity.

    Observations with an invalid timestamp are dropped.
    """
    series: Dict[str, List[SeriesPoint]] = {name: [] for name in QUANTITIES}
    dropped = 0

    for observation in observations:
        if not observation.has_valid_timestamp:
            dropped += 1
            continue
        ms = observation.epoch_ms
        for name in QUANTITIES:
            series[name].append(SeriesPoint(ms, getattr(observation, name)))

    if dropped:
        logger.debug("Dropped %d observations with invalid timestamps", dropped)

    return series
