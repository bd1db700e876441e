from dataclasses import dataclass, field
from typing import List, Sequence

import pandas as pd

from .models import SeriesPoint


@dataclass(frozen=True)
class StatisticalBand:
    """Mean, population standard deviation and deviation bands of a series.

    The bands follow each raw value (value +/- stddev) rather than the mean line.
    """

    mean: float
    stddev: float
    mean_line: List[SeriesPoint] = field(default_factory=list)
    upper: List[SeriesPoint] = field(default_factory=list)
    lower: List[SeriesPoint] = field(default_factory=list)


def compute_band(points: Sequence[SeriesPoint]) -> StatisticalBand:
    """Compute the statistical band of a point series.

    Args:
        points: (timestamp, value) pairs

    Returns:
        StatisticalBand. An empty series gives mean 0, stddev 0 and empty lines.
    """
    if not points:
        return StatisticalBand(mean=0.0, stddev=0.0)

    timestamps = [point.timestamp for point in points]
    values = pd.Series([point.value for point in points], dtype="float64")

    mean = float(values.mean())
    stddev = float(values.std(ddof=0))

    return StatisticalBand(
        mean=mean,
        stddev=stddev,
        mean_line=[SeriesPoint(ts, mean) for ts in timestamps],
        upper=[SeriesPoint(ts, float(v)) for ts, v in zip(timestamps, values + stddev)],
        lower=[SeriesPoint(ts, float(v)) for ts, v in zip(timestamps, values - stddev)],
    )
