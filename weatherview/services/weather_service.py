import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Union

from weatherview.api.weather_client import (
    OpenWeatherClient,
    VisualCrossingClient,
    build_default_clients,
)
from weatherview.core.models import (
    CurrentConditions,
    SamplingFrequency,
    WeatherObservation,
)
from weatherview.core.parsers import (
    parse_current_conditions,
    parse_forecast,
    parse_visual_crossing,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentReport:
    """Result of a current weather lookup: conditions plus the next 24 hours."""

    city: str
    conditions: CurrentConditions
    forecast: List[WeatherObservation] = field(default_factory=list)


class WeatherService:
    """Fetches provider documents and turns them into observations."""

    def __init__(
        self,
        openweather: Optional[OpenWeatherClient] = None,
        visual_crossing: Optional[VisualCrossingClient] = None,
    ):
        if openweather is None or visual_crossing is None:
            default_openweather, default_visual_crossing = build_default_clients()
            openweather = openweather or default_openweather
            visual_crossing = visual_crossing or default_visual_crossing

        self.openweather = openweather
        self.visual_crossing = visual_crossing

    def fetch_current_report(self, city: str) -> Optional[CurrentReport]:
        """Fetch current conditions, then the forecast, for a city.

        Args:
            city: City name

        Returns:
            CurrentReport, or None if the city is blank or its current
            conditions cannot be fetched. A failed forecast leaves the
            report's forecast empty.
        """
        city = (city or "").strip()
        if not city:
            return None

        current_doc = self.openweather.get_current(city)
        conditions = parse_current_conditions(current_doc)
        if conditions is None:
            logger.warning("No current conditions", extra={"city": city})
            return None

        forecast_doc = self.openweather.get_forecast(city)
        forecast = parse_forecast(forecast_doc)

        logger.info(
            "Fetched current report",
            extra={"city": city, "record_count": len(forecast)},
        )
        return CurrentReport(city=city, conditions=conditions, forecast=forecast)

    def fetch_history(
        self,
        city: str,
        start_date: date,
        end_date: date,
        frequency: Union[SamplingFrequency, str],
    ) -> List[WeatherObservation]:
        """Fetch hourly history for a period and subsample it.

        Args:
            city: City name
            start_date: First day of the period
            end_date: Last day of the period
            frequency: Sampling frequency

        Returns:
            Observations in time order; empty when nothing could be fetched
        """
        city = (city or "").strip()
        frequency = SamplingFrequency.parse(frequency)

        if not city or start_date > end_date:
            return []

        timeline_doc = self.visual_crossing.get_timeline(city, start_date, end_date)
        if timeline_doc is None:
            return []

        observations = parse_visual_crossing(timeline_doc, frequency)
        logger.info(
            "Fetched history",
            extra={
                "city": city,
                "frequency": frequency.value,
                "record_count": len(observations),
            },
        )
        return observations
