"""Adaptación de métricas en proceso a canales y gráficos remotos."""

from .base import Channel, Chart, Job
from .cycle import CycleReport, MetricResult, ReportingCycle
from .errors import RemoteAppendFailure, RemoteCreationFailure, ReporterError
from .metrics_registry import Counter, Gauge, MetricRegistry
from .registry import ChannelRegistry, ChartRegistry
from .samples import (
    CounterSample,
    GaugeSample,
    MeterSample,
    RegistrySnapshot,
    SnapshotSample,
    TimerSample,
)
from .scheduler import ScheduledReporter
from .stats import ReporterMetrics

__all__ = [
    "Channel",
    "ChannelRegistry",
    "Chart",
    "ChartRegistry",
    "Counter",
    "CounterSample",
    "CycleReport",
    "Gauge",
    "GaugeSample",
    "Job",
    "MeterSample",
    "MetricRegistry",
    "MetricResult",
    "RegistrySnapshot",
    "RemoteAppendFailure",
    "RemoteCreationFailure",
    "ReporterError",
    "ReporterMetrics",
    "ReportingCycle",
    "ScheduledReporter",
    "SnapshotSample",
    "TimerSample",
]
