import logging
import time
from datetime import date
from typing import Dict, Optional
from urllib.parse import quote

import requests

from weatherview.config import get_settings

logger = logging.getLogger(__name__)


class _RateLimitedClient:
    """Shared request plumbing: rate limiting, timeouts and error logging."""

    def __init__(
        self,
        api_key: str,
        max_requests_per_second: float = 2.0,
        timeout: float = 30.0,
    ):
        """Initialize the client with rate limiting.

        Args:
            api_key: Static API key sent with every request
            max_requests_per_second: Maximum requests per second to avoid hitting rate limits
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.max_requests_per_second = max_requests_per_second
        self.timeout = timeout
        self.last_request_time = 0.0

    def _rate_limit(self):
        """Simple rate limiting to avoid overwhelming the API."""
        current_time = time.time()
        time_since_last_request = current_time - self.last_request_time
        min_interval = 1.0 / self.max_requests_per_second

        if time_since_last_request < min_interval:
            sleep_time = min_interval - time_since_last_request
            time.sleep(sleep_time)

        self.last_request_time = time.time()

    def _get_json(self, url: str, params: Dict) -> Optional[Dict]:
        """GET a URL and decode the JSON body.

        Returns:
            Decoded JSON or None if the request or decoding fails
        """
        self._rate_limit()

        try:
            response = requests.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error("Error fetching weather data: %s", e, extra={"url": url})
            return None


class OpenWeatherClient(_RateLimitedClient):
    """Client for the OpenWeatherMap current weather and forecast APIs."""

    CURRENT_URL = "https://api.openweathermap.org/data/2.5/weather"
    FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"

    # 9 three-hour steps cover the next 24 hours
    FORECAST_COUNT = 9

    def get_current(self, city: str) -> Optional[Dict]:
        """Fetch current conditions for a city.

        Args:
            city: City name as typed by the user

        Returns:
            Current weather document (temperatures in Kelvin) or None if request fails
        """
        params = {"q": city, "appid": self.api_key}
        return self._get_json(self.CURRENT_URL, params)

    def get_forecast(self, city: str, count: int = FORECAST_COUNT) -> Optional[Dict]:
        """Fetch the 3-hourly forecast for a city.

        Args:
            city: City name as typed by the user
            count: Number of forecast steps to request

        Returns:
            Forecast document with a "list" array or None if request fails
        """
        params = {"q": city, "appid": self.api_key, "cnt": count}
        return self._get_json(self.FORECAST_URL, params)


class VisualCrossingClient(_RateLimitedClient):
    """Client for the Visual Crossing timeline API."""

    BASE_URL = (
        "https://weather.visualcrossing.com/VisualCrossingWebServices/"
        "rest/services/timeline"
    )

    def get_timeline(self, city: str, start_date: date, end_date: date) -> Optional[Dict]:
        """Fetch hourly weather history for a city.

        Args:
            city: City name as typed by the user
            start_date: First day of the period
            end_date: Last day of the period

        Returns:
            Timeline document with a "days" array or None if request fails
        """
        url = "/".join(
            [
                self.BASE_URL,
                quote(city, safe=""),
                start_date.isoformat(),
                end_date.isoformat(),
            ]
        )
        params = {"unitGroup": "metric", "key": self.api_key}
        return self._get_json(url, params)


def build_default_clients():
    """Create both clients from the environment settings."""
    settings = get_settings()
    openweather = OpenWeatherClient(
        settings.openweather_api_key,
        max_requests_per_second=settings.max_requests_per_second,
        timeout=settings.request_timeout,
    )
    visual_crossing = VisualCrossingClient(
        settings.visualcrossing_api_key,
        max_requests_per_second=settings.max_requests_per_second,
        timeout=settings.request_timeout,
    )
    return openweather, visual_crossing
