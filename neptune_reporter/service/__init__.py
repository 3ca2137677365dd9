"""Cliente del backend de experimentos y arranque de la sesión."""

from .client import NeptuneApiError, NeptuneService
from .job import Chart, NeptuneJob, NumericChannel
from .session import ReporterSession

__all__ = [
    "Chart",
    "NeptuneApiError",
    "NeptuneJob",
    "NeptuneService",
    "NumericChannel",
    "ReporterSession",
]
