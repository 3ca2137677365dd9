"""Handles remotos de canales y gráficos respaldados por :class:`NeptuneService`."""

from __future__ import annotations

from typing import Sequence, Tuple

from neptune_reporter.reporting.errors import RemoteAppendFailure, RemoteCreationFailure

from .client import NeptuneApiError, NeptuneService


class NumericChannel:
    """Remote numeric time series owned by a job."""

    def __init__(self, service: NeptuneService, job_id: str, channel_id: str, name: str) -> None:
        self._service = service
        self.job_id = job_id
        self.id = channel_id
        self.name = name

    def send(self, x: float, y: float) -> None:
        try:
            self._service.send_channel_value(self.job_id, self.id, float(x), float(y))
        except NeptuneApiError as exc:
            raise RemoteAppendFailure(self.name, str(exc)) from exc

    def __repr__(self) -> str:
        return f"NumericChannel(name={self.name!r}, id={self.id!r})"


class Chart:
    """Remote chart; its channel set is fixed at creation."""

    def __init__(self, chart_id: str, name: str, channels: Sequence[NumericChannel]) -> None:
        self.id = chart_id
        self.name = name
        self.channels: Tuple[NumericChannel, ...] = tuple(channels)

    def __repr__(self) -> str:
        return f"Chart(name={self.name!r}, channels={[c.name for c in self.channels]!r})"


class NeptuneJob:
    """Implementation of the ``Job`` contract for a job running on the backend."""

    def __init__(self, service: NeptuneService, job_id: str) -> None:
        self.service = service
        self.job_id = job_id

    def create_numeric_channel(self, name: str) -> NumericChannel:
        try:
            channel_id = self.service.create_channel(self.job_id, name, channel_type="numeric")
        except NeptuneApiError as exc:
            raise RemoteCreationFailure(name, str(exc)) from exc
        return NumericChannel(self.service, self.job_id, channel_id, name)

    def create_chart(self, name: str, channels: Sequence[NumericChannel]) -> Chart:
        series = [{"label": channel.name, "channelId": channel.id} for channel in channels]
        try:
            chart_id = self.service.create_chart(self.job_id, name, series)
        except NeptuneApiError as exc:
            raise RemoteCreationFailure(name, str(exc)) from exc
        return Chart(chart_id, name, channels)
