"""Configuration schemas and loading helpers for the reporter."""

from .schema import ExperimentSettings, NeptuneSettings, ReporterConfig, ReporterSettings
from .store import CONFIG_PATH_ENV, load_reporter_config, reporter_config_from_env

__all__ = [
    "CONFIG_PATH_ENV",
    "ExperimentSettings",
    "NeptuneSettings",
    "ReporterConfig",
    "ReporterSettings",
    "load_reporter_config",
    "reporter_config_from_env",
]
