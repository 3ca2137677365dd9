"""Typed configuration models implemented with dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

PROTOCOL_PREFIX = "https://"


def _as_str(value: Any, field_name: str, *, optional: bool = False) -> Optional[str]:
    if value is None:
        if optional:
            return None
        raise ValueError(f"'{field_name}' es obligatorio")
    text = str(value).strip()
    if not text and not optional:
        raise ValueError(f"'{field_name}' no puede estar vacío")
    return text or None


def _as_int(value: Any, field_name: str) -> int:
    if value is None:
        raise ValueError(f"'{field_name}' es obligatorio")
    try:
        result = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{field_name}' debe ser un entero válido") from exc
    return result


def _as_float(value: Any, field_name: str) -> float:
    if value is None:
        raise ValueError(f"'{field_name}' es obligatorio")
    try:
        result = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"'{field_name}' debe ser numérico") from exc
    return result


def _as_bool(value: Any, default: bool = True) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "si", "sí"}:
        return True
    if text in {"0", "false", "no"}:
        return False
    return default


def _strip_protocol(host: str) -> str:
    if host.startswith(PROTOCOL_PREFIX):
        return host[len(PROTOCOL_PREFIX):]
    return host


@dataclass
class NeptuneSettings:
    host: str
    user: str
    password: str
    timeout_s: float = 5.0
    verify_ssl: bool = True

    @property
    def base_url(self) -> str:
        return f"{PROTOCOL_PREFIX}{self.host.rstrip('/')}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NeptuneSettings":
        host = _strip_protocol(_as_str(data.get("host"), "neptune.host"))
        if not host:
            raise ValueError("'neptune.host' no puede estar vacío")
        user = _as_str(data.get("user"), "neptune.user")
        password = _as_str(data.get("password"), "neptune.password")
        timeout_raw = data.get("timeout_s")
        timeout_s = 5.0 if timeout_raw in (None, "") else _as_float(timeout_raw, "neptune.timeout_s")
        if timeout_s <= 0:
            raise ValueError("neptune.timeout_s debe ser > 0")
        verify_ssl = _as_bool(data.get("verify_ssl"), True)
        return cls(host=host, user=user, password=password, timeout_s=timeout_s, verify_ssl=verify_ssl)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "user": self.user,
            "password": self.password,
            "timeout_s": self.timeout_s,
            "verify_ssl": self.verify_ssl,
        }


@dataclass
class ExperimentSettings:
    name: str
    description: Optional[str] = None
    project: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ExperimentSettings":
        data = data or {}
        name = _as_str(data.get("name"), "experiment.name")
        description = _as_str(data.get("description"), "experiment.description", optional=True)
        project = _as_str(data.get("project"), "experiment.project", optional=True)
        return cls(name=name, description=description, project=project)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "project": self.project}


@dataclass
class ReporterSettings:
    period_s: float = 10.0
    meter_prefix: str = "meter_"
    timer_prefix: str = "timer_"
    ping_every_cycles: int = 5
    metrics_log_interval_s: float = 60.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ReporterSettings":
        if not data:
            return cls()
        period_raw = data.get("period_s")
        period_s = 10.0 if period_raw in (None, "") else _as_float(period_raw, "reporter.period_s")
        if period_s <= 0:
            raise ValueError("reporter.period_s debe ser > 0")
        meter_prefix = _as_str(data.get("meter_prefix", "meter_"), "reporter.meter_prefix")
        timer_prefix = _as_str(data.get("timer_prefix", "timer_"), "reporter.timer_prefix")
        if meter_prefix == timer_prefix:
            raise ValueError("reporter.meter_prefix y reporter.timer_prefix deben ser distintos")
        ping_every = _as_int(data.get("ping_every_cycles", 5), "reporter.ping_every_cycles")
        if ping_every < 1:
            raise ValueError("reporter.ping_every_cycles debe ser >= 1")
        log_interval = _as_float(data.get("metrics_log_interval_s", 60.0), "reporter.metrics_log_interval_s")
        if log_interval < 0:
            raise ValueError("reporter.metrics_log_interval_s debe ser >= 0")
        return cls(
            period_s=period_s,
            meter_prefix=meter_prefix,
            timer_prefix=timer_prefix,
            ping_every_cycles=ping_every,
            metrics_log_interval_s=log_interval,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period_s": self.period_s,
            "meter_prefix": self.meter_prefix,
            "timer_prefix": self.timer_prefix,
            "ping_every_cycles": self.ping_every_cycles,
            "metrics_log_interval_s": self.metrics_log_interval_s,
        }


@dataclass
class ReporterConfig:
    neptune: NeptuneSettings
    experiment: ExperimentSettings
    reporter: ReporterSettings = field(default_factory=ReporterSettings)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ReporterConfig":
        neptune_payload = data.get("neptune")
        if not isinstance(neptune_payload, Mapping):
            raise ValueError("El bloque 'neptune' es obligatorio")
        experiment_payload = data.get("experiment")
        if experiment_payload is not None and not isinstance(experiment_payload, Mapping):
            raise ValueError("El bloque 'experiment' debe ser un mapeo")
        return cls(
            neptune=NeptuneSettings.from_mapping(neptune_payload),
            experiment=ExperimentSettings.from_mapping(experiment_payload),
            reporter=ReporterSettings.from_mapping(data.get("reporter")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "neptune": self.neptune.to_dict(),
            "experiment": self.experiment.to_dict(),
            "reporter": self.reporter.to_dict(),
        }
