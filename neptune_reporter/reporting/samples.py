"""Muestras inmutables de métricas y salidas de los adaptadores."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Tuple


@dataclass(frozen=True)
class CounterSample:
    count: int


@dataclass(frozen=True)
class GaugeSample:
    """Valor de un gauge; puede no ser numérico."""

    value: Any


@dataclass(frozen=True)
class MeterSample:
    count: int
    one_minute_rate: float
    five_minute_rate: float
    fifteen_minute_rate: float
    mean_rate: float


@dataclass(frozen=True)
class SnapshotSample:
    """Resumen estadístico de un timer en el instante de muestreo."""

    median: float
    p75: float
    p95: float
    p98: float
    p99: float
    p999: float
    min: float
    max: float
    mean: float
    std_dev: float


@dataclass(frozen=True)
class TimerSample:
    rate: MeterSample
    snapshot: SnapshotSample


def _frozen(data: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class RegistrySnapshot:
    """Lectura consistente de todas las métricas registradas en un ciclo."""

    counters: Mapping[str, CounterSample] = field(default_factory=dict)
    gauges: Mapping[str, GaugeSample] = field(default_factory=dict)
    meters: Mapping[str, MeterSample] = field(default_factory=dict)
    timers: Mapping[str, TimerSample] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "counters", _frozen(self.counters))
        object.__setattr__(self, "gauges", _frozen(self.gauges))
        object.__setattr__(self, "meters", _frozen(self.meters))
        object.__setattr__(self, "timers", _frozen(self.timers))

    @staticmethod
    def sorted_items(metrics: Mapping[str, Any]) -> Iterator[Tuple[str, Any]]:
        for name in sorted(metrics):
            yield name, metrics[name]

    def is_empty(self) -> bool:
        return not (self.counters or self.gauges or self.meters or self.timers)


@dataclass(frozen=True)
class ChannelPoint:
    """Punto (x, y) destinado a un canal numérico."""

    channel_name: str
    x: float
    y: float


@dataclass(frozen=True)
class ChartSpec:
    """Agrupación de canales en un gráfico; el orden de los canales es fijo."""

    name: str
    channel_names: Tuple[str, ...]


@dataclass(frozen=True)
class AdapterOutput:
    metric_name: str
    kind: str
    points: Tuple[ChannelPoint, ...] = ()
    charts: Tuple[ChartSpec, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.points and not self.charts
