"""Bootstrap of the remote experiment whose job receives the reported metrics."""

from __future__ import annotations

import atexit
import logging
from typing import Optional

from neptune_reporter.config.schema import ReporterConfig

from .client import NeptuneApiError, NeptuneService
from .job import NeptuneJob

logger = logging.getLogger(__name__)


class ReporterSession:
    """Experiment created for the lifetime of the process.

    ``close`` marks the job as completed exactly once; it is also registered
    with :mod:`atexit` so an interpreter shutdown completes the job.
    """

    def __init__(self, service: NeptuneService, job_id: str, *, register_atexit: bool = True) -> None:
        self.service = service
        self.job_id = job_id
        self.job = NeptuneJob(service, job_id)
        self._closed = False
        self._atexit_registered = register_atexit
        if register_atexit:
            atexit.register(self.close)

    @classmethod
    def start(
        cls,
        config: ReporterConfig,
        *,
        service: Optional[NeptuneService] = None,
        register_atexit: bool = True,
    ) -> "ReporterSession":
        client = service or NeptuneService(config.neptune)
        experiment = config.experiment
        try:
            job_id = client.create_experiment(
                experiment.name,
                experiment.description or experiment.name,
                experiment.project or experiment.name,
            )
            logger.info("Experimento creado: job_id=%s", job_id)
            client.mark_job_executing(job_id)
        except NeptuneApiError:
            logger.exception("No se pudo iniciar el experimento %s", experiment.name)
            client.close()
            raise
        return cls(client, job_id, register_atexit=register_atexit)

    def ping(self) -> None:
        try:
            self.service.send_ping(self.job_id)
        except NeptuneApiError as exc:
            logger.warning("Ping del job %s falló: %s", self.job_id, exc)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self, state: str = "succeeded") -> None:
        if self._closed:
            return
        self._closed = True
        if self._atexit_registered:
            atexit.unregister(self.close)
            self._atexit_registered = False
        logger.info("Marcando job %s como completado (state=%s)", self.job_id, state)
        try:
            self.service.mark_job_completed(self.job_id, state=state)
        except NeptuneApiError as exc:
            logger.error("No se pudo marcar el job %s como completado: %s", self.job_id, exc)
        finally:
            self.service.close()
