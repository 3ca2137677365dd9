import json
import logging
import threading
import time
from typing import Dict


class ReporterMetrics:
    """Thread-safe accumulator for reporter operational counters."""

    COUNTERS = (
        "cycles_completed",
        "cycles_skipped",
        "channels_created",
        "charts_created",
        "points_sent",
        "creation_failures",
        "append_failures",
        "unsupported_samples",
    )

    def __init__(self, log_interval_s: float = 60.0, logger: logging.Logger | None = None) -> None:
        self.log_interval_s = max(0.0, float(log_interval_s))
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._start_time = time.time()
        self._last_log_time = self._start_time
        self._counters: Dict[str, int] = {key: 0 for key in self.COUNTERS}
        self._last_snapshot = self._counters.copy()

    def increment(self, name: str, count: int = 1) -> None:
        if count <= 0:
            return
        with self._lock:
            if name not in self._counters:
                raise KeyError(f"Unknown reporter counter: {name}")
            self._counters[name] += count

    def record_cycle(self, points_sent: int, creation_failures: int, append_failures: int, unsupported: int) -> None:
        with self._lock:
            self._counters["cycles_completed"] += 1
            self._counters["points_sent"] += max(0, points_sent)
            self._counters["creation_failures"] += max(0, creation_failures)
            self._counters["append_failures"] += max(0, append_failures)
            self._counters["unsupported_samples"] += max(0, unsupported)
        self.maybe_log()

    def counters(self) -> Dict[str, int]:
        with self._lock:
            return self._counters.copy()

    def maybe_log(self, force: bool = False) -> None:
        now = time.time()
        with self._lock:
            interval = now - self._last_log_time
            if not force and self.log_interval_s > 0.0 and interval < self.log_interval_s:
                return

            payload = self._build_payload(now, interval)
            self._last_log_time = now
            self._last_snapshot = self._counters.copy()

        self._logger.info("reporter_metrics %s", json.dumps(payload, sort_keys=True))

    def _build_payload(self, now: float, interval: float) -> Dict[str, object]:
        delta = {
            key: self._counters[key] - self._last_snapshot.get(key, 0)
            for key in self._counters
        }
        return {
            "type": "reporter_metrics",
            "uptime_s": round(now - self._start_time, 3),
            "interval_s": round(interval, 3),
            "counters": self._counters.copy(),
            "delta": delta,
        }
