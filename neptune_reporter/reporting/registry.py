"""Get-or-create caches of remote channels and charts for one reporting session."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Generic, List, Optional, Sequence, TypeVar

from .base import Channel, Chart, Job
from .stats import ReporterMetrics

logger = logging.getLogger(__name__)

H = TypeVar("H")


class _KeyedCache(Generic[H]):
    """Name-keyed cache whose creation step runs at most once per key."""

    def __init__(self) -> None:
        self._items: Dict[str, H] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _key_lock(self, name: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.Lock()
            return lock

    def _get_or_create(self, name: str, factory: Callable[[], H]) -> H:
        existing = self._items.get(name)
        if existing is not None:
            return existing
        with self._key_lock(name):
            existing = self._items.get(name)
            if existing is not None:
                return existing
            # Si factory falla no se guarda nada; el siguiente ciclo reintenta.
            created = factory()
            with self._guard:
                self._items[name] = created
            return created

    def _replace(self, name: str, factory: Callable[[], H]) -> H:
        with self._key_lock(name):
            created = factory()
            with self._guard:
                self._items[name] = created
            return created

    def get(self, name: str) -> Optional[H]:
        return self._items.get(name)

    def names(self) -> List[str]:
        with self._guard:
            return sorted(self._items)

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __len__(self) -> int:
        return len(self._items)


class ChannelRegistry(_KeyedCache[Channel]):
    """Map channel names to remote numeric channels, creating each one once."""

    def __init__(self, job: Job, *, metrics: Optional[ReporterMetrics] = None) -> None:
        super().__init__()
        self._job = job
        self._metrics = metrics

    def get_or_create(self, name: str) -> Channel:
        return self._get_or_create(name, lambda: self._create(name))

    def _create(self, name: str) -> Channel:
        channel = self._job.create_numeric_channel(name)
        logger.debug("Created numeric channel %s", name)
        if self._metrics is not None:
            self._metrics.increment("channels_created")
        return channel


class ChartRegistry(_KeyedCache[Chart]):
    """Map chart names to remote charts.

    Chart membership is fixed when the chart is first created: a later
    ``get_or_create`` with a different channel list returns the cached chart
    untouched. Use :meth:`redefine` to replace a chart explicitly.
    """

    def __init__(self, job: Job, *, metrics: Optional[ReporterMetrics] = None) -> None:
        super().__init__()
        self._job = job
        self._metrics = metrics

    def get_or_create(self, name: str, channels: Sequence[Channel]) -> Chart:
        return self._get_or_create(name, lambda: self._create(name, channels))

    def redefine(self, name: str, channels: Sequence[Channel]) -> Chart:
        logger.warning(
            "Redefining chart %s with %d channels; the previous remote chart is left in place.",
            name,
            len(channels),
        )
        return self._replace(name, lambda: self._create(name, channels))

    def _create(self, name: str, channels: Sequence[Channel]) -> Chart:
        chart = self._job.create_chart(name, tuple(channels))
        logger.debug("Created chart %s with %d channels", name, len(channels))
        if self._metrics is not None:
            self._metrics.increment("charts_created")
        return chart
