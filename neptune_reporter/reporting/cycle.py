"""Reporting cycle: turns a registry snapshot into channel and chart operations."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

from .adapters import (
    COUNTER_PREFIX,
    GAUGE_PREFIX,
    METER_PREFIX,
    TIMER_PREFIX,
    adapt_counter,
    adapt_gauge,
    adapt_meter,
    adapt_snapshot,
)
from .base import Channel
from .errors import RemoteAppendFailure, RemoteCreationFailure
from .registry import ChannelRegistry, ChartRegistry
from .samples import AdapterOutput, RegistrySnapshot
from .stats import ReporterMetrics

logger = logging.getLogger(__name__)

IDLE = "idle"
REPORTING = "reporting"

OK = "ok"
UNSUPPORTED = "unsupported"
CREATION_FAILURE = "creation_failure"
APPEND_FAILURE = "append_failure"


@dataclass(frozen=True)
class MetricResult:
    """Outcome of publishing one adapter output."""

    metric_name: str
    kind: str
    status: str
    points_sent: int = 0
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status in {CREATION_FAILURE, APPEND_FAILURE}


@dataclass(frozen=True)
class CycleReport:
    """Aggregate of a single reporting cycle."""

    timestamp: Optional[float]
    results: Tuple[MetricResult, ...] = ()
    skipped: bool = False
    duration_s: float = 0.0

    @property
    def points_sent(self) -> int:
        return sum(result.points_sent for result in self.results)

    @property
    def failures(self) -> List[MetricResult]:
        return [result for result in self.results if result.failed]

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    def count(self, status: str) -> int:
        return sum(1 for result in self.results if result.status == status)

    def summary(self) -> Dict[str, object]:
        return {
            "timestamp": self.timestamp,
            "skipped": self.skipped,
            "duration_s": round(self.duration_s, 6),
            "metrics": len(self.results),
            "points_sent": self.points_sent,
            "unsupported": self.count(UNSUPPORTED),
            "creation_failures": self.count(CREATION_FAILURE),
            "append_failures": self.count(APPEND_FAILURE),
        }


class ReportingCycle:
    """Publish registry snapshots through the channel and chart registries.

    Only one cycle runs at a time; a call to :meth:`report` that arrives while
    another is in progress returns immediately with ``skipped=True``.
    """

    def __init__(
        self,
        channels: ChannelRegistry,
        charts: ChartRegistry,
        *,
        clock: Callable[[], float] = time.monotonic,
        metrics: Optional[ReporterMetrics] = None,
        meter_prefix: str = METER_PREFIX,
        timer_prefix: str = TIMER_PREFIX,
    ) -> None:
        self.channels = channels
        self.charts = charts
        self._clock = clock
        self._metrics = metrics
        self.meter_prefix = meter_prefix
        self.timer_prefix = timer_prefix
        self._busy = threading.Lock()
        self.state = IDLE

    def report(self, snapshot: RegistrySnapshot) -> CycleReport:
        if not self._busy.acquire(blocking=False):
            logger.warning("Reporting cycle already in progress; skipping this tick.")
            if self._metrics is not None:
                self._metrics.increment("cycles_skipped")
            return CycleReport(timestamp=None, skipped=True)

        started = time.monotonic()
        try:
            self.state = REPORTING
            timestamp = self._clock()
            results = tuple(self._publish(output) for output in self._adapt(snapshot, timestamp))
        finally:
            self.state = IDLE
            self._busy.release()

        report = CycleReport(timestamp=timestamp, results=results, duration_s=time.monotonic() - started)
        if report.failure_count:
            logger.warning(
                "Reporting cycle finished with %d failed metrics out of %d.",
                report.failure_count,
                len(results),
            )
        if self._metrics is not None:
            self._metrics.record_cycle(
                points_sent=report.points_sent,
                creation_failures=report.count(CREATION_FAILURE),
                append_failures=report.count(APPEND_FAILURE),
                unsupported=report.count(UNSUPPORTED),
            )
        return report

    def _adapt(
        self, snapshot: RegistrySnapshot, timestamp: float
    ) -> Iterator[Union[AdapterOutput, MetricResult]]:
        for name, sample in snapshot.sorted_items(snapshot.counters):
            yield self._guarded(name, "counter", lambda: adapt_counter(name, sample, timestamp, prefix=COUNTER_PREFIX))
        for name, sample in snapshot.sorted_items(snapshot.gauges):
            yield self._guarded(name, "gauge", lambda: adapt_gauge(name, sample, timestamp, prefix=GAUGE_PREFIX))
        for name, sample in snapshot.sorted_items(snapshot.meters):
            yield self._guarded(name, "meter", lambda: adapt_meter(name, sample, timestamp, prefix=self.meter_prefix))
        for name, sample in snapshot.sorted_items(snapshot.timers):
            yield self._guarded(
                name,
                "timer_rate",
                lambda: adapt_meter(name, sample.rate, timestamp, prefix=self.timer_prefix, kind="timer_rate"),
            )
            yield self._guarded(
                name,
                "timer_snapshot",
                lambda: adapt_snapshot(name, sample.snapshot, timestamp, prefix=self.timer_prefix),
            )

    @staticmethod
    def _guarded(
        metric_name: str, kind: str, adapt: Callable[[], AdapterOutput]
    ) -> Union[AdapterOutput, MetricResult]:
        # Los lambdas se evalúan de inmediato, dentro de la misma iteración.
        try:
            return adapt()
        except (AttributeError, TypeError, ValueError, OverflowError) as exc:
            logger.warning("Skipping %s %s: malformed sample (%s).", kind, metric_name, exc)
            return MetricResult(metric_name, kind, UNSUPPORTED, error=str(exc))

    def _publish(self, output: Union[AdapterOutput, MetricResult]) -> MetricResult:
        if isinstance(output, MetricResult):
            return output
        if output.is_empty:
            logger.debug("Skipping %s %s: value is not numeric.", output.kind, output.metric_name)
            return MetricResult(output.metric_name, output.kind, UNSUPPORTED)

        resolved: Dict[str, Channel] = {}
        sent = 0
        try:
            for point in output.points:
                channel = resolved.get(point.channel_name)
                if channel is None:
                    channel = resolved[point.channel_name] = self.channels.get_or_create(point.channel_name)
                channel.send(point.x, point.y)
                sent += 1
            for spec in output.charts:
                members = [
                    resolved.get(name) or self.channels.get_or_create(name) for name in spec.channel_names
                ]
                self.charts.get_or_create(spec.name, members)
        except RemoteCreationFailure as exc:
            logger.error("Could not create remote resource for %s %s: %s", output.kind, output.metric_name, exc)
            return MetricResult(output.metric_name, output.kind, CREATION_FAILURE, sent, str(exc))
        except RemoteAppendFailure as exc:
            logger.error("Could not send value for %s %s: %s", output.kind, output.metric_name, exc)
            return MetricResult(output.metric_name, output.kind, APPEND_FAILURE, sent, str(exc))
        return MetricResult(output.metric_name, output.kind, OK, sent)
