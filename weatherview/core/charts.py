"""Renderer-agnostic chart specs.

Chart specs fully describe the series and axes of a chart. The front end
draws them; nothing here knows about a drawing toolkit. A chart spec is
either a BarChartSpec or a LineChartSpec, told apart by its ``kind``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from .colors import color_for
from .models import (
    CLOCK_AXIS_FORMAT,
    SamplingFrequency,
    SeriesPoint,
    WeatherObservation,
)
from .parsers import observations_to_series
from .statistics import compute_band

MEAN_COLOR = "#FF0000"
DEVIATION_COLOR = "#A0A0A4"
MEAN_NAME = "Mean"
UPPER_NAME = "+σ"
LOWER_NAME = "−σ"

BAR_PADDING = 5
MAX_TICKS = 10

FORECAST_TITLE = "Temperature for the next 24 hours"
TIME_AXIS_TITLE = "Time"

# (series key, chart name, line color)
QUANTITY_CHARTS = (
    ("temperature", "Temperature", "#0000FF"),
    ("pressure", "Pressure", "#008000"),
    ("humidity", "Humidity", "#808000"),
    ("windspeed", "Wind speed", "#FF00FF"),
)


@dataclass(frozen=True)
class BarEntry:
    label: str
    value: float
    color: str


@dataclass(frozen=True)
class CategoryAxis:
    categories: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "category", "categories": list(self.categories)}


@dataclass(frozen=True)
class ValueAxis:
    """Numeric axis; a missing minimum/maximum means the renderer auto-ranges."""

    minimum: Optional[float] = None
    maximum: Optional[float] = None

    @property
    def auto_range(self) -> bool:
        return self.minimum is None or self.maximum is None

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "value", "min": self.minimum, "max": self.maximum}


@dataclass(frozen=True)
class DateTimeAxis:
    label_format: str
    title: str = TIME_AXIS_TITLE
    start: Optional[int] = None
    end: Optional[int] = None
    tick_count: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "datetime",
            "format": self.label_format,
            "title": self.title,
            "min": self.start,
            "max": self.end,
            "tick_count": self.tick_count,
        }


@dataclass(frozen=True)
class LineSeries:
    name: str
    color: str
    points: List[SeriesPoint]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "color": self.color,
            "points": [[int(ts), float(value)] for ts, value in self.points],
        }


@dataclass(frozen=True)
class BarChartSpec:
    title: str
    series_name: str
    values: List[float]
    colors: List[str]
    x_axis: CategoryAxis
    y_axis: ValueAxis
    kind: str = field(default="bar", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "title": self.title,
            "series": [
                {
                    "name": self.series_name,
                    "values": [float(v) for v in self.values],
                    "colors": list(self.colors),
                }
            ],
            "axes": {"x": self.x_axis.to_dict(), "y": self.y_axis.to_dict()},
        }


@dataclass(frozen=True)
class LineChartSpec:
    title: str
    series: List[LineSeries]
    x_axis: DateTimeAxis
    y_axis: ValueAxis
    mean: Optional[float] = None
    stddev: Optional[float] = None
    legend_visible: bool = True
    kind: str = field(default="line", init=False)

    def series_named(self, name: str) -> Optional[LineSeries]:
        for series in self.series:
            if series.name == name:
                return series
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "title": self.title,
            "series": [series.to_dict() for series in self.series],
            "axes": {"x": self.x_axis.to_dict(), "y": self.y_axis.to_dict()},
            "legend_visible": self.legend_visible,
            "mean": self.mean,
            "stddev": self.stddev,
        }


ChartSpec = Union[BarChartSpec, LineChartSpec]


def build_bar_chart(
    bars: Sequence[BarEntry],
    title: str = FORECAST_TITLE,
    series_name: str = "Temperature",
) -> BarChartSpec:
    """Build a bar chart with one colored bar per entry.

    Args:
        bars: Bars in display order
        title: Chart title
        series_name: Name of the bar set

    Returns:
        BarChartSpec whose value axis spans [min - 5, max + 5]. Without bars
        the value axis is left to auto-range.
    """
    values = [bar.value for bar in bars]

    if values:
        y_axis = ValueAxis(min(values) - BAR_PADDING, max(values) + BAR_PADDING)
    else:
        y_axis = ValueAxis()

    return BarChartSpec(
        title=title,
        series_name=series_name,
        values=values,
        colors=[bar.color for bar in bars],
        x_axis=CategoryAxis([bar.label for bar in bars]),
        y_axis=y_axis,
    )


def build_forecast_bar_chart(observations: Sequence[WeatherObservation]) -> BarChartSpec:
    """Bar chart of forecast temperatures labelled by clock time."""
    bars = []
    for observation in observations:
        label = (
            observation.timestamp.strftime("%H:%M")
            if observation.has_valid_timestamp
            else ""
        )
        bars.append(
            BarEntry(
                label=label,
                value=observation.temperature,
                color=color_for(observation.temperature).hex,
            )
        )
    return build_bar_chart(bars)


def build_line_chart(
    points: Sequence[SeriesPoint],
    name: str,
    color: str,
    show_deviation: bool,
    frequency: Union[SamplingFrequency, str],
    axis_format: Optional[str] = None,
) -> LineChartSpec:
    """Build a line chart with a mean line and optional deviation bands.

    Args:
        points: (ms since epoch, value) pairs in time order
        name: Chart title and name of the base series
        color: Color of the base series
        show_deviation: Add "+σ" and "−σ" series when the stddev is positive
        frequency: Sampling frequency, selects the time axis label format
        axis_format: Label format overriding the frequency's one

    Returns:
        LineChartSpec
    """
    points = list(points)
    label_format = axis_format or SamplingFrequency.label_format_for(frequency)

    series = [LineSeries(name, color, points)]

    if not points:
        return LineChartSpec(
            title=name,
            series=series,
            x_axis=DateTimeAxis(label_format),
            y_axis=ValueAxis(),
        )

    band = compute_band(points)
    series.append(LineSeries(MEAN_NAME, MEAN_COLOR, band.mean_line))

    if show_deviation and band.stddev > 0:
        series.append(LineSeries(UPPER_NAME, DEVIATION_COLOR, band.upper))
        series.append(LineSeries(LOWER_NAME, DEVIATION_COLOR, band.lower))

    x_axis = DateTimeAxis(
        label_format,
        start=points[0].timestamp,
        end=points[-1].timestamp,
        tick_count=min(MAX_TICKS, len(points)),
    )

    return LineChartSpec(
        title=name,
        series=series,
        x_axis=x_axis,
        y_axis=ValueAxis(),
        mean=band.mean,
        stddev=band.stddev,
    )


def build_quantity_charts(
    observations: Sequence[WeatherObservation],
    show_deviation: bool,
    frequency: Union[SamplingFrequency, str],
    axis_format: Optional[str] = None,
) -> List[LineChartSpec]:
    """Build the temperature, pressure, humidity and wind speed charts."""
    series = observations_to_series(list(observations))
    return [
        build_line_chart(
            series[key], name, color, show_deviation, frequency, axis_format
        )
        for key, name, color in QUANTITY_CHARTS
    ]


def build_forecast_charts(observations: Sequence[WeatherObservation]) -> List[LineChartSpec]:
    """Quantity charts for a 3-hourly forecast, labelled by clock time only."""
    return build_quantity_charts(
        observations,
        show_deviation=False,
        frequency=SamplingFrequency.THREE_HOURLY,
        axis_format=CLOCK_AXIS_FORMAT,
    )
