"""Background thread that runs the reporting cycle on a fixed period."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from .cycle import CycleReport, ReportingCycle
from .samples import RegistrySnapshot

logger = logging.getLogger(__name__)


class ScheduledReporter:
    """Invoke ``cycle.report(snapshot_source())`` every ``period_s`` seconds.

    Cycles run one after another on a single worker thread, so a slow remote
    call delays the next tick instead of overlapping it.
    """

    def __init__(
        self,
        cycle: ReportingCycle,
        snapshot_source: Callable[[], RegistrySnapshot],
        *,
        period_s: float = 10.0,
        heartbeat: Optional[Callable[[], None]] = None,
        ping_every_cycles: int = 5,
    ) -> None:
        if period_s <= 0:
            raise ValueError("period_s debe ser > 0")
        self.cycle = cycle
        self._snapshot_source = snapshot_source
        self.period_s = float(period_s)
        self._heartbeat = heartbeat
        self.ping_every_cycles = max(1, int(ping_every_cycles))
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._cycles_run = 0
        self.last_report: Optional[CycleReport] = None

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._worker, name="neptune-reporter", daemon=True)
        self._thread.start()
        logger.info("Scheduled reporter started (period=%.2fs)", self.period_s)

    def stop(self, timeout: float = 10.0, *, flush: bool = True) -> None:
        """Stop the worker; with ``flush`` a final cycle publishes the latest values."""

        self._stop_event.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("Timeout waiting for the reporter thread to finish")
        self._thread = None
        if flush:
            self.report_now()
        logger.info("Scheduled reporter stopped after %d cycles", self._cycles_run)

    def report_now(self) -> Optional[CycleReport]:
        """Run one cycle in the calling thread; errors are logged, never raised."""

        try:
            report = self.cycle.report(self._snapshot_source())
        except Exception:
            logger.exception("Reporting cycle failed")
            return None
        if not report.skipped:
            self._cycles_run += 1
            self.last_report = report
            self._maybe_heartbeat()
        return report

    def _maybe_heartbeat(self) -> None:
        if self._heartbeat is None or self._cycles_run % self.ping_every_cycles:
            return
        try:
            self._heartbeat()
        except Exception as exc:
            logger.warning("Heartbeat failed: %s", exc)

    def _worker(self) -> None:
        next_tick = time.monotonic() + self.period_s
        while not self._stop_event.wait(max(0.0, next_tick - time.monotonic())):
            self.report_now()
            next_tick += self.period_s
            now = time.monotonic()
            if next_tick < now:
                missed = int((now - next_tick) // self.period_s) + 1
                logger.warning("Reporting cycle overran its period; skipping %d tick(s).", missed)
                next_tick += missed * self.period_s
