import logging
import sys
import threading
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import eel

from weatherview.core.charts import (
    ChartSpec,
    build_forecast_bar_chart,
    build_forecast_charts,
    build_quantity_charts,
)
from weatherview.core.colors import color_for
from weatherview.core.models import SamplingFrequency, WeatherObservation
from weatherview.logging_config import configure_logging
from weatherview.services.weather_service import WeatherService

logger = logging.getLogger(__name__)

CURRENT_CHANNEL = "current"
STDDEV_CHANNEL = "stddev"
AVERAGE_CHANNEL = "average"


def _stale_response() -> Dict:
    return {"success": False, "stale": True}


def serialize_charts(charts: Sequence[ChartSpec]) -> List[Dict]:
    """Turn bar or line chart specs into dicts for the front end."""
    return [chart.to_dict() for chart in charts]


def format_conditions(conditions) -> str:
    """One-line summary of current conditions for the header label."""
    return (
        f"{int(conditions.temperature)}°C, feels like {int(conditions.feels_like)}°C  |  "
        f"Humidity: {int(conditions.humidity)}%  |  "
        f"Pressure: {int(conditions.pressure)} hPa  |  "
        f"Wind: {conditions.windspeed:g} m/s"
    )


class WeatherApp:
    """Main application class for the weather charts window."""

    def __init__(self, service: Optional[WeatherService] = None):
        self.service = service or WeatherService()
        self._lock = threading.Lock()
        self._generations: Dict[str, int] = {}

    def _start_request(self, channel: str) -> int:
        """Register a new request on a channel, superseding earlier ones."""
        with self._lock:
            generation = self._generations.get(channel, 0) + 1
            self._generations[channel] = generation
            return generation

    def _is_stale(self, channel: str, generation: int) -> bool:
        with self._lock:
            return self._generations.get(channel) != generation

    def setup_eel(self):
        """Initialize Eel with web folder."""
        web_folder = Path(__file__).parent.parent / "web"
        eel.init(str(web_folder))

        # Register Python functions that can be called from JavaScript
        eel.expose(self.get_current_weather)
        eel.expose(self.get_forecast_charts)
        eel.expose(self.get_statistics)

    def get_current_weather(self, city: str):
        """Get current conditions and the 24-hour forecast bar chart.

        Args:
            city: City name

        Returns:
            Dictionary with success status, conditions, background color,
            bar chart spec and the forecast records to pass back to
            get_forecast_charts
        """
        try:
            city = (city or "").strip()
            if not city:
                return {"success": False, "error": "Enter a city name"}

            generation = self._start_request(CURRENT_CHANNEL)
            logger.info("Fetching current weather", extra={"city": city})

            report = self.service.fetch_current_report(city)

            if self._is_stale(CURRENT_CHANNEL, generation):
                logger.info("Discarding superseded result", extra={"city": city})
                return _stale_response()

            if report is None:
                return {"success": False, "error": "City not found"}

            conditions = report.conditions
            bar_chart = (
                build_forecast_bar_chart(report.forecast).to_dict()
                if report.forecast
                else None
            )

            return {
                "success": True,
                "city": report.city,
                "conditions": conditions.to_dict(),
                "summary": format_conditions(conditions),
                "background": color_for(conditions.temperature).hex,
                "bar_chart": bar_chart,
                "forecast": [observation.to_dict() for observation in report.forecast],
            }

        except Exception as e:
            logger.exception("Error fetching current weather")
            return {"success": False, "error": str(e)}

    def get_forecast_charts(self, city: str, forecast: List[Dict]):
        """Build the four quantity charts for a forecast.

        Args:
            city: City name, used in the window title
            forecast: Forecast records returned by get_current_weather

        Returns:
            Dictionary with success status and four line chart specs
        """
        try:
            observations = [WeatherObservation.from_dict(record) for record in forecast or []]
            if not observations:
                return {"success": False, "error": "Search for a city first"}

            charts = build_forecast_charts(observations)
            return {
                "success": True,
                "title": f"Weather charts for the day: {city}",
                "charts": serialize_charts(charts),
            }

        except Exception as e:
            logger.exception("Error building forecast charts")
            return {"success": False, "error": str(e)}

    def get_statistics(
        self,
        city: str,
        start_date: str,
        end_date: str,
        frequency: str,
        show_deviation: bool,
    ):
        """Get statistics charts for a city over a period.

        Args:
            city: City name
            start_date: First day, yyyy-mm-dd
            end_date: Last day, yyyy-mm-dd
            frequency: One of 1h, 3h, 6h, 12h, 1d
            show_deviation: Whether to draw the +σ/−σ bands

        Returns:
            Dictionary with success status and four line chart specs
        """
        try:
            city = (city or "").strip()
            if not city:
                return {"success": False, "error": "Enter a city name"}

            try:
                start = date.fromisoformat(start_date)
                end = date.fromisoformat(end_date)
            except (TypeError, ValueError):
                return {"success": False, "error": "Invalid date"}

            sampling = SamplingFrequency.parse(frequency)
            channel = STDDEV_CHANNEL if show_deviation else AVERAGE_CHANNEL
            generation = self._start_request(channel)

            logger.info(
                "Fetching statistics",
                extra={"city": city, "frequency": sampling.value},
            )
            observations = self.service.fetch_history(city, start, end, sampling)

            if self._is_stale(channel, generation):
                logger.info("Discarding superseded result", extra={"city": city})
                return _stale_response()

            if not any(observation.has_valid_timestamp for observation in observations):
                return {"success": False, "error": "No data to display"}

            charts = build_quantity_charts(observations, bool(show_deviation), frequency)
            return {
                "success": True,
                "charts": serialize_charts(charts),
                "record_count": len(observations),
            }

        except Exception as e:
            logger.exception("Error fetching statistics")
            return {"success": False, "error": str(e)}

    def run(self, debug: bool = False, port: int = 8000):
        """Start the Eel application.

        Args:
            debug: Whether to run in debug mode
            port: Port to run the application on
        """
        self.setup_eel()

        logger.info("Starting weather window on http://localhost:%d", port)
        if debug:
            logger.debug("Debug logging enabled")

        try:
            eel.start("index.html", size=(1200, 720), port=port)
        except (SystemExit, MemoryError, KeyboardInterrupt):
            logger.info("Application closed")


def parse_args(argv: List[str]) -> Tuple[bool, int]:
    """Read the --debug and --port=N flags.

    Returns:
        Tuple of (debug, port)
    """
    # Check for debug flag
    debug = "--debug" in argv

    # Check for custom port
    port = 8000
    for arg in argv:
        if arg.startswith("--port="):
            try:
                port = int(arg.split("=")[1])
            except ValueError:
                print("Invalid port number, using default 8000")

    return debug, port


def main():
    """Main entry point for the application."""
    debug, port = parse_args(sys.argv)
    configure_logging("DEBUG" if debug else None)

    app = WeatherApp()
    app.run(debug=debug, port=port)


if __name__ == "__main__":
    main()
