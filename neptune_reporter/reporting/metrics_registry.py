"""In-process registry of counters, gauges, meters and timers.

Counters and gauges are simple enough to live here. Meters and timers are
supplied by the instrumented code: any object with a ``sample()`` method that
returns a :class:`MeterSample` or :class:`TimerSample` can be registered.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Protocol, Union, runtime_checkable

from .samples import CounterSample, GaugeSample, MeterSample, RegistrySnapshot, TimerSample

logger = logging.getLogger(__name__)


class Counter:
    def __init__(self) -> None:
        self._count = 0
        self._lock = threading.Lock()

    def inc(self, n: int = 1) -> None:
        with self._lock:
            self._count += n

    def dec(self, n: int = 1) -> None:
        with self._lock:
            self._count -= n

    @property
    def count(self) -> int:
        return self._count

    def sample(self) -> CounterSample:
        return CounterSample(count=self._count)


class Gauge:
    def __init__(self, fn: Callable[[], Any]) -> None:
        self._fn = fn

    def sample(self) -> GaugeSample:
        return GaugeSample(value=self._fn())


@runtime_checkable
class MeterLike(Protocol):
    def sample(self) -> MeterSample:  # pragma: no cover - Protocol signature
        """Return the current meter values."""


@runtime_checkable
class TimerLike(Protocol):
    def sample(self) -> TimerSample:  # pragma: no cover - Protocol signature
        """Return the current rate and distribution of the timer."""


Metric = Union[Counter, Gauge, MeterLike, TimerLike]


class MetricRegistry:
    """Named metrics read into a :class:`RegistrySnapshot` once per cycle."""

    def __init__(self) -> None:
        self._metrics: Dict[str, Metric] = {}
        self._lock = threading.Lock()

    def counter(self, name: str) -> Counter:
        with self._lock:
            existing = self._metrics.get(name)
            if existing is None:
                existing = self._metrics[name] = Counter()
            if not isinstance(existing, Counter):
                raise ValueError(f"'{name}' ya está registrado como {type(existing).__name__}")
            return existing

    def gauge(self, name: str, fn: Callable[[], Any]) -> Gauge:
        return self.register(name, Gauge(fn))

    def register(self, name: str, metric: Metric) -> Any:
        if not hasattr(metric, "sample"):
            raise TypeError(f"'{name}' no expone sample()")
        with self._lock:
            if name in self._metrics:
                raise ValueError(f"'{name}' ya está registrado")
            self._metrics[name] = metric
        return metric

    def remove(self, name: str) -> bool:
        with self._lock:
            return self._metrics.pop(name, None) is not None

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._metrics)

    def snapshot(self) -> RegistrySnapshot:
        counters: Dict[str, CounterSample] = {}
        gauges: Dict[str, GaugeSample] = {}
        meters: Dict[str, MeterSample] = {}
        timers: Dict[str, TimerSample] = {}
        with self._lock:
            items = list(self._metrics.items())
        for name, metric in items:
            try:
                sample = metric.sample()
            except Exception as exc:
                logger.warning("Metric %s could not be sampled: %s", name, exc)
                continue
            if isinstance(sample, CounterSample):
                counters[name] = sample
            elif isinstance(sample, GaugeSample):
                gauges[name] = sample
            elif isinstance(sample, TimerSample):
                timers[name] = sample
            elif isinstance(sample, MeterSample):
                meters[name] = sample
            else:
                logger.info("Metric %s returned unsupported sample %s; ignored.", name, type(sample).__name__)
        return RegistrySnapshot(counters=counters, gauges=gauges, meters=meters, timers=timers)
