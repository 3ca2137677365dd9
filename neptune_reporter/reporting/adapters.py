"""Pure transformations from metric samples to channel points and chart groupings."""

from __future__ import annotations

from decimal import Decimal
from numbers import Real
from typing import List, Tuple

from .samples import (
    AdapterOutput,
    ChannelPoint,
    ChartSpec,
    CounterSample,
    GaugeSample,
    MeterSample,
    SnapshotSample,
    TimerSample,
)

COUNTER_PREFIX = "counter_"
GAUGE_PREFIX = "gauge_"
METER_PREFIX = "meter_"
TIMER_PREFIX = "timer_"

# Orden fijo de los canales del gráfico de distribución.
DISTRIBUTION_SUFFIXES = (
    "_p75",
    "_p95",
    "_p98",
    "_p99",
    "_p999",
    "_max",
    "_min",
    "_mean",
    "_median",
    "_stdDev",
)
RATE_SUFFIXES = ("_15M", "_5M", "_1M", "_mean")


def channel_name(prefix: str, metric_name: str, suffix: str = "") -> str:
    """Build the channel name for ``metric_name``; equal inputs always give equal names."""

    return f"{prefix}{metric_name}{suffix}"


def is_numeric(value: object) -> bool:
    return isinstance(value, (Real, Decimal)) and not isinstance(value, bool)


def point_value(value: object) -> float:
    """Convert a sample field to a channel value.

    Raises ``TypeError`` for non-numeric fields and ``OverflowError`` for
    integers that do not fit in a float.
    """

    if not is_numeric(value):
        raise TypeError(f"valor no numérico: {value!r}")
    return float(value)


def adapt_counter(
    metric_name: str, sample: CounterSample, timestamp: float, prefix: str = COUNTER_PREFIX
) -> AdapterOutput:
    name = channel_name(prefix, metric_name)
    return AdapterOutput(
        metric_name=metric_name,
        kind="counter",
        points=(ChannelPoint(name, timestamp, point_value(sample.count)),),
        charts=(ChartSpec(name, (name,)),),
    )


def adapt_gauge(
    metric_name: str, sample: GaugeSample, timestamp: float, prefix: str = GAUGE_PREFIX
) -> AdapterOutput:
    """Gauges with non-numeric values yield an empty output."""

    if not is_numeric(sample.value):
        return AdapterOutput(metric_name=metric_name, kind="gauge")
    name = channel_name(prefix, metric_name)
    return AdapterOutput(
        metric_name=metric_name,
        kind="gauge",
        points=(ChannelPoint(name, timestamp, point_value(sample.value)),),
        charts=(ChartSpec(name, (name,)),),
    )


def adapt_meter(
    metric_name: str,
    sample: MeterSample,
    timestamp: float,
    prefix: str = METER_PREFIX,
    kind: str = "meter",
) -> AdapterOutput:
    base = channel_name(prefix, metric_name)
    values: List[Tuple[str, object]] = [
        ("_count", sample.count),
        ("_15M", sample.fifteen_minute_rate),
        ("_5M", sample.five_minute_rate),
        ("_1M", sample.one_minute_rate),
        ("_mean", sample.mean_rate),
    ]
    points = tuple(ChannelPoint(base + suffix, timestamp, point_value(value)) for suffix, value in values)
    charts = (
        ChartSpec(base + "_count", (base + "_count",)),
        ChartSpec(base + "_rates", tuple(base + suffix for suffix in RATE_SUFFIXES)),
    )
    return AdapterOutput(metric_name=metric_name, kind=kind, points=points, charts=charts)


def adapt_snapshot(
    metric_name: str,
    snapshot: SnapshotSample,
    timestamp: float,
    prefix: str = TIMER_PREFIX,
) -> AdapterOutput:
    base = channel_name(prefix, metric_name)
    values = {
        "_p75": snapshot.p75,
        "_p95": snapshot.p95,
        "_p98": snapshot.p98,
        "_p99": snapshot.p99,
        "_p999": snapshot.p999,
        "_max": snapshot.max,
        "_min": snapshot.min,
        "_mean": snapshot.mean,
        "_median": snapshot.median,
        "_stdDev": snapshot.std_dev,
    }
    points = tuple(
        ChannelPoint(base + suffix, timestamp, point_value(values[suffix])) for suffix in DISTRIBUTION_SUFFIXES
    )
    chart = ChartSpec(base + "_distribution", tuple(base + suffix for suffix in DISTRIBUTION_SUFFIXES))
    return AdapterOutput(metric_name=metric_name, kind="timer_snapshot", points=points, charts=(chart,))


def adapt_timer(
    metric_name: str, sample: TimerSample, timestamp: float, prefix: str = TIMER_PREFIX
) -> Tuple[AdapterOutput, AdapterOutput]:
    """Return the rate aspect followed by the snapshot aspect of a timer."""

    return (
        adapt_meter(metric_name, sample.rate, timestamp, prefix=prefix, kind="timer_rate"),
        adapt_snapshot(metric_name, sample.snapshot, timestamp, prefix=prefix),
    )
