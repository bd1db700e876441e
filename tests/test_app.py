from datetime import date, datetime
from typing import List, Optional

import pandas as pd
import pytest

from weatherview.core.models import CurrentConditions, WeatherObservation
from weatherview.services.weather_service import CurrentReport
from weatherview.ui import app as app_module
from weatherview.ui.app import (
    AVERAGE_CHANNEL,
    CURRENT_CHANNEL,
    WeatherApp,
    format_conditions,
)


def _observation(hour: int, temperature: float) -> WeatherObservation:
    return WeatherObservation(
        timestamp=pd.Timestamp(datetime(2024, 3, 1, hour)),
        temperature=temperature,
        pressure=1000.0 + hour,
        humidity=50.0 + hour,
        windspeed=1.0 + hour,
    )


FORECAST = [_observation(hour, 10.0 + hour) for hour in (0, 3, 6)]
CONDITIONS = CurrentConditions(
    temperature=27.4, feels_like=28.9, humidity=40.0, pressure=1012.0, windspeed=3.5
)


class StubService:
    def __init__(
        self,
        report: Optional[CurrentReport] = None,
        history: Optional[List[WeatherObservation]] = None,
    ) -> None:
        self.report = report
        self.history = history or []
        self.history_calls: List[tuple] = []
        self.on_fetch = None

    def fetch_current_report(self, city: str):
        if self.on_fetch:
            self.on_fetch()
        return self.report

    def fetch_history(self, city, start_date, end_date, frequency):
        self.history_calls.append((city, start_date, end_date, frequency))
        if self.on_fetch:
            self.on_fetch()
        return self.history


def test_current_weather_success() -> None:
    report = CurrentReport(city="Sochi", conditions=CONDITIONS, forecast=FORECAST)
    app = WeatherApp(StubService(report=report))

    result = app.get_current_weather(" Sochi ")

    assert result["success"] is True
    assert result["city"] == "Sochi"
    assert result["background"] == "#B22222"
    assert result["summary"].startswith("27°C, feels like 28°C")
    assert result["bar_chart"]["kind"] == "bar"
    assert result["bar_chart"]["axes"]["x"]["categories"] == ["00:00", "03:00", "06:00"]
    assert result["forecast"][0] == {
        "timestamp": "2024-03-01T00:00:00",
        "temperature": 10.0,
        "pressure": 1000.0,
        "humidity": 50.0,
        "windspeed": 1.0,
    }


def test_current_weather_errors() -> None:
    app = WeatherApp(StubService(report=None))

    assert app.get_current_weather("") == {"success": False, "error": "Enter a city name"}
    assert app.get_current_weather("Atlantis") == {"success": False, "error": "City not found"}


def test_current_weather_without_forecast_has_no_bar_chart() -> None:
    report = CurrentReport(city="Sochi", conditions=CONDITIONS, forecast=[])
    result = WeatherApp(StubService(report=report)).get_current_weather("Sochi")

    assert result["success"] is True
    assert result["bar_chart"] is None
    assert result["forecast"] == []


def test_superseded_current_request_is_marked_stale() -> None:
    report = CurrentReport(city="Sochi", conditions=CONDITIONS, forecast=FORECAST)
    service = StubService(report=report)
    app = WeatherApp(service)
    service.on_fetch = lambda: app._start_request(CURRENT_CHANNEL)

    assert app.get_current_weather("Sochi") == {"success": False, "stale": True}


def test_forecast_charts_from_returned_records() -> None:
    report = CurrentReport(city="Sochi", conditions=CONDITIONS, forecast=FORECAST)
    app = WeatherApp(StubService(report=report))
    current = app.get_current_weather("Sochi")

    result = app.get_forecast_charts(current["city"], current["forecast"])

    assert result["success"] is True
    assert result["title"] == "Weather charts for the day: Sochi"
    assert [chart["title"] for chart in result["charts"]] == [
        "Temperature",
        "Pressure",
        "Humidity",
        "Wind speed",
    ]
    assert all(chart["axes"]["x"]["format"] == "HH:mm" for chart in result["charts"])
    assert result["charts"][0]["series"][0]["points"][0][1] == 10.0


def test_forecast_charts_need_a_forecast() -> None:
    app = WeatherApp(StubService())

    assert app.get_forecast_charts("Sochi", []) == {
        "success": False,
        "error": "Search for a city first",
    }


def test_statistics_with_deviation() -> None:
    service = StubService(history=FORECAST)
    app = WeatherApp(service)

    result = app.get_statistics("Sochi", "2024-03-01", "2024-03-02", "3h", True)

    assert result["success"] is True
    assert result["record_count"] == 3
    names = [series["name"] for series in result["charts"][0]["series"]]
    assert names == ["Temperature", "Mean", "+σ", "−σ"]
    assert result["charts"][0]["axes"]["x"]["format"] == "HH:mm\ndd.MM"
    city, start, end, frequency = service.history_calls[0]
    assert (city, start, end, frequency.value) == ("Sochi", date(2024, 3, 1), date(2024, 3, 2), "3h")


def test_statistics_means_only() -> None:
    app = WeatherApp(StubService(history=FORECAST))

    result = app.get_statistics("Sochi", "2024-03-01", "2024-03-02", "1d", False)

    names = [series["name"] for series in result["charts"][0]["series"]]
    assert names == ["Temperature", "Mean"]
    assert result["charts"][0]["axes"]["x"]["format"] == "dd.MM.yyyy"


@pytest.mark.parametrize(
    "args, error",
    [
        (("", "2024-03-01", "2024-03-02", "1h", True), "Enter a city name"),
        (("Sochi", "yesterday", "2024-03-02", "1h", True), "Invalid date"),
        (("Sochi", None, "2024-03-02", "1h", True), "Invalid date"),
        (("Sochi", "2024-03-01", "2024-03-02", "1h", True), "No data to display"),
    ],
)
def test_statistics_errors(args, error) -> None:
    app = WeatherApp(StubService(history=[]))

    assert app.get_statistics(*args) == {"success": False, "error": error}


def test_superseded_statistics_request_is_marked_stale() -> None:
    service = StubService(history=FORECAST)
    app = WeatherApp(service)
    service.on_fetch = lambda: app._start_request(AVERAGE_CHANNEL)

    result = app.get_statistics("Sochi", "2024-03-01", "2024-03-02", "1h", False)

    assert result == {"success": False, "stale": True}
    # the deviation tab is an independent channel
    assert app.get_statistics("Sochi", "2024-03-01", "2024-03-02", "1h", True)["success"] is True


def test_unexpected_error_is_reported() -> None:
    class BrokenService(StubService):
        def fetch_current_report(self, city: str):
            raise RuntimeError("boom")

    result = WeatherApp(BrokenService()).get_current_weather("Sochi")

    assert result == {"success": False, "error": "boom"}


def test_format_conditions_truncates_like_label() -> None:
    text = format_conditions(
        CurrentConditions(temperature=-3.7, feels_like=-8.2, humidity=81.0, pressure=1020.0, windspeed=4.0)
    )

    assert text == "-3°C, feels like -8°C  |  Humidity: 81%  |  Pressure: 1020 hPa  |  Wind: 4 m/s"


def test_statistics_with_only_invalid_timestamps_has_no_data() -> None:
    invalid = [
        WeatherObservation(timestamp=pd.NaT, temperature=1.0, pressure=2.0, humidity=3.0, windspeed=4.0),
        WeatherObservation(timestamp=pd.NaT, temperature=5.0, pressure=6.0, humidity=7.0, windspeed=8.0),
    ]
    app = WeatherApp(StubService(history=invalid))

    result = app.get_statistics("Sochi", "2024-03-01", "2024-03-02", "1h", True)

    assert result == {"success": False, "error": "No data to display"}


def test_statistics_unknown_frequency_samples_hourly_with_date_labels() -> None:
    service = StubService(history=FORECAST)
    app = WeatherApp(service)

    result = app.get_statistics("Sochi", "2024-03-01", "2024-03-02", "weekly", False)

    assert result["success"] is True
    assert all(chart["axes"]["x"]["format"] == "dd.MM.yyyy" for chart in result["charts"])
    assert service.history_calls[0][3].stride == 1


@pytest.mark.parametrize(
    "argv, expected",
    [
        (["main.py"], (False, 8000)),
        (["main.py", "--debug"], (True, 8000)),
        (["main.py", "--port=9001", "--debug"], (True, 9001)),
        (["main.py", "--port=abc"], (False, 8000)),
    ],
)
def test_parse_args(argv, expected) -> None:
    assert app_module.parse_args(argv) == expected


@pytest.mark.parametrize("argv, level", [(["main.py", "--debug"], "DEBUG"), (["main.py"], None)])
def test_main_configures_logging_from_debug_flag(monkeypatch, argv, level) -> None:
    levels: List[Optional[str]] = []
    runs: List[tuple] = []

    class StubApp:
        def run(self, debug: bool = False, port: int = 8000) -> None:
            runs.append((debug, port))

    monkeypatch.setattr(app_module.sys, "argv", argv)
    monkeypatch.setattr(app_module, "configure_logging", levels.append)
    monkeypatch.setattr(app_module, "WeatherApp", StubApp)

    app_module.main()

    assert levels == [level]
    assert runs == [(level == "DEBUG", 8000)]
