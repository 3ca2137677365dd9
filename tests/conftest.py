from __future__ import annotations

from typing import Dict, List, Sequence, Set, Tuple

import pytest

from neptune_reporter.reporting import RemoteAppendFailure, RemoteCreationFailure


class FakeChannel:
    def __init__(self, name: str, fail_send: bool = False) -> None:
        self.name = name
        self.points: List[Tuple[float, float]] = []
        self._fail_send = fail_send

    def send(self, x: float, y: float) -> None:
        if self._fail_send:
            raise RemoteAppendFailure(self.name, "HTTP 500")
        self.points.append((x, y))


class FakeChart:
    def __init__(self, name: str, channels: Sequence[FakeChannel]) -> None:
        self.name = name
        self.channels = tuple(channels)


class FakeJob:
    """Records every creation call; optional names fail on creation or send."""

    def __init__(self) -> None:
        self.channels: Dict[str, FakeChannel] = {}
        self.charts: Dict[str, FakeChart] = {}
        self.channel_calls: List[str] = []
        self.chart_calls: List[str] = []
        self.fail_create: Set[str] = set()
        self.fail_send: Set[str] = set()

    def create_numeric_channel(self, name: str) -> FakeChannel:
        self.channel_calls.append(name)
        if name in self.fail_create:
            raise RemoteCreationFailure(name, "HTTP 400")
        channel = FakeChannel(name, fail_send=name in self.fail_send)
        self.channels[name] = channel
        return channel

    def create_chart(self, name: str, channels: Sequence[FakeChannel]) -> FakeChart:
        self.chart_calls.append(name)
        if name in self.fail_create:
            raise RemoteCreationFailure(name, "HTTP 400")
        chart = FakeChart(name, channels)
        self.charts[name] = chart
        return chart


class StepClock:
    def __init__(self, start: float = 100.0, step: float = 1.5) -> None:
        self.value = start
        self.step = step

    def __call__(self) -> float:
        current = self.value
        self.value += self.step
        return current


@pytest.fixture()
def fake_job() -> FakeJob:
    return FakeJob()


@pytest.fixture()
def clock() -> StepClock:
    return StepClock()
