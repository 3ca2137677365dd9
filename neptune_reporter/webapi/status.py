"""Endpoints exposing the state of the running reporter."""

from __future__ import annotations

import logging
from threading import Lock
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from neptune_reporter.reporting import ScheduledReporter

from .auth import require_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reporter", tags=["reporter"])

_lock = Lock()
_state = {"reporter": None}  # type: ignore[var-annotated]


def attach_reporter(reporter: ScheduledReporter) -> None:
    with _lock:
        _state["reporter"] = reporter
    logger.debug("Reporter attached to the status API")


def detach_reporter(reporter: Optional[ScheduledReporter] = None) -> None:
    with _lock:
        if reporter is None or _state["reporter"] is reporter:
            _state["reporter"] = None


def _current_reporter() -> ScheduledReporter:
    with _lock:
        reporter = _state["reporter"]
    if reporter is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="No hay reporter activo")
    return reporter


class MetricFailure(BaseModel):
    metric: str
    kind: str
    status: str
    error: Optional[str] = None


class CycleSummary(BaseModel):
    timestamp: Optional[float] = Field(None, description="Lectura del reloj monotónico del ciclo")
    duration_s: float
    metrics: int
    points_sent: int
    unsupported: int
    creation_failures: int
    append_failures: int
    failures: List[MetricFailure] = Field(default_factory=list)


class ReporterStatus(BaseModel):
    running: bool
    period_s: float
    state: str
    last_cycle: Optional[CycleSummary] = None


class RemoteResources(BaseModel):
    channels: List[str] = Field(default_factory=list, description="Canales numéricos creados")
    charts: List[str] = Field(default_factory=list, description="Gráficos creados")


@router.get("/status", response_model=ReporterStatus)
async def reporter_status(_: None = Depends(require_token)) -> ReporterStatus:
    """Return whether the reporter runs and the outcome of its last cycle."""

    reporter = _current_reporter()
    last = reporter.last_report
    summary = None
    if last is not None:
        data = last.summary()
        summary = CycleSummary(
            timestamp=data["timestamp"],
            duration_s=data["duration_s"],
            metrics=data["metrics"],
            points_sent=data["points_sent"],
            unsupported=data["unsupported"],
            creation_failures=data["creation_failures"],
            append_failures=data["append_failures"],
            failures=[
                MetricFailure(metric=r.metric_name, kind=r.kind, status=r.status, error=r.error)
                for r in last.failures
            ],
        )
    return ReporterStatus(
        running=reporter.is_running,
        period_s=reporter.period_s,
        state=reporter.cycle.state,
        last_cycle=summary,
    )


@router.get("/channels", response_model=RemoteResources)
async def reporter_channels(_: None = Depends(require_token)) -> RemoteResources:
    """List the channels and charts created during this session."""

    reporter = _current_reporter()
    return RemoteResources(
        channels=reporter.cycle.channels.names(),
        charts=reporter.cycle.charts.names(),
    )


__all__ = ["attach_reporter", "detach_reporter", "router"]
