"""Cliente HTTP mínimo para la API REST del backend de experimentos."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Mapping, Optional, Sequence, TYPE_CHECKING

import requests

if TYPE_CHECKING:  # pragma: no cover - hints only
    from neptune_reporter.config.schema import NeptuneSettings


logger = logging.getLogger(__name__)

UNSUPPORTED = "unsupported"


class NeptuneApiError(RuntimeError):
    """A request to the backend failed or returned a non-2xx status."""

    def __init__(self, operation: str, status_code: Optional[int] = None, body: str = "", reason: str = "") -> None:
        detail = reason or (f"HTTP {status_code}" if status_code is not None else "request failed")
        message = f"{operation} failed ({detail})"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        self.body = body


class NeptuneService:
    """Thin CRUD client over HTTP with basic auth. Nothing is retried."""

    def __init__(
        self,
        settings: "NeptuneSettings",
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings
        self.base_url = settings.base_url
        self.timeout = settings.timeout_s
        self.session = session or requests.Session()
        self.session.auth = (settings.user, settings.password)
        self.session.verify = settings.verify_ssl

    # Ciclo de vida del experimento -------------------------------------------
    def create_experiment(self, name: str, description: str, project: str) -> str:
        payload = build_queued_experiment_params(name, description, project)
        body = self._post("create_experiment", "/experiments", payload)
        try:
            return str(body["bestJob"]["id"])
        except (KeyError, TypeError) as exc:
            raise NeptuneApiError("create_experiment", reason="response without bestJob.id") from exc

    def mark_job_executing(self, job_id: str) -> None:
        self._post("mark_job_executing", f"/jobs/{job_id}/markExecuting", build_executing_job_params())

    def mark_job_completed(self, job_id: str, state: str = "succeeded", traceback: str = "") -> None:
        payload = {"state": state, "traceback": traceback}
        self._post("mark_job_completed", f"/jobs/{job_id}/markCompleted", payload)

    def send_ping(self, job_id: str) -> None:
        self._post("send_ping", f"/jobs/{job_id}/ping")

    # Canales y gráficos ------------------------------------------------------
    def create_channel(self, job_id: str, name: str, channel_type: str = "numeric") -> str:
        payload = {"name": name, "channelType": channel_type, "isHistoryPersisted": True}
        body = self._post("create_channel", f"/jobs/{job_id}/channels", payload)
        return self._extract_id("create_channel", body)

    def send_channel_value(self, job_id: str, channel_id: str, x: float, y: float) -> None:
        payload = {"x": x, "y": {"numericValue": y}}
        self._post("send_channel_value", f"/jobs/{job_id}/channels/{channel_id}/values", payload)

    def create_chart(self, job_id: str, name: str, series: Sequence[Mapping[str, str]]) -> str:
        payload = {"name": name, "series": [dict(item) for item in series]}
        body = self._post("create_chart", f"/jobs/{job_id}/charts", payload)
        return self._extract_id("create_chart", body)

    def close(self) -> None:
        self.session.close()

    # Lógica interna ----------------------------------------------------------
    def _post(self, operation: str, path: str, payload: Optional[Mapping[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            reason = f"{type(exc).__name__}: {exc}"
            logger.error("Neptune %s raised %s", operation, reason)
            raise NeptuneApiError(operation, reason=reason) from exc

        if response.status_code >= 300:
            body = self._extract_body(response)
            logger.error(
                "Neptune %s failed (HTTP %s). url=%s body=%s",
                operation,
                response.status_code,
                url,
                body,
            )
            raise NeptuneApiError(operation, response.status_code, body)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    @staticmethod
    def _extract_id(operation: str, body: Any) -> str:
        if isinstance(body, Mapping) and body.get("id") is not None:
            return str(body["id"])
        raise NeptuneApiError(operation, reason="response without id")

    @staticmethod
    def _extract_body(response: requests.Response, limit: int = 512) -> str:
        body = response.text or ""
        if len(body) <= limit:
            return body
        return f"{body[:limit]}... [truncated {len(body) - limit} chars]"


def build_queued_experiment_params(name: str, description: str, project: str) -> Dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "project": project,
        "tags": [],
        "parameters": [],
        "parameterValues": [],
        "properties": [],
        "requirements": [f"run-key-{uuid.uuid4()}"],
        "dumpDirLocation": UNSUPPORTED,
        "dumpDirRoot": UNSUPPORTED,
        "sourceCodeLocation": UNSUPPORTED,
        "dockerImage": UNSUPPORTED,
        "enqueueCommand": UNSUPPORTED,
        "gridSearchParameters": None,
        "metric": None,
    }


def build_executing_job_params() -> Dict[str, Any]:
    return {
        "dumpDirLocation": UNSUPPORTED,
        "sourceCodeLocation": UNSUPPORTED,
        "stdoutLogLocation": UNSUPPORTED,
        "stderrLogLocation": UNSUPPORTED,
        "runCommand": UNSUPPORTED,
        "dockerImage": UNSUPPORTED,
        "parameterValues": [],
    }
