"""Helpers to load and validate the reporter configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from .schema import ReporterConfig

CONFIG_DIR = Path(__file__).resolve().parent

CONFIG_PATH_ENV = "REPORTER_CONFIG"

REQUIRED_ENV = ("NEPTUNE_HOST", "NEPTUNE_USER", "NEPTUNE_PASSWORD")


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at {path}, found {type(data).__name__}")
    return data


def load_reporter_config(path: Optional[Path] = None) -> ReporterConfig:
    """Read and validate the reporter configuration from reporter.yaml."""

    cfg_path = path or CONFIG_DIR / "reporter.yaml"
    return ReporterConfig.from_mapping(_read_yaml(cfg_path))


def reporter_config_from_env(env: Mapping[str, Any], *, default_name: str = "neptune-reporter") -> ReporterConfig:
    """Create the reporter configuration from environment variables."""

    missing = [name for name in REQUIRED_ENV if not env.get(name)]
    if missing:
        raise ValueError(
            "Faltan configuraciones obligatorias: %s. Defínalas en .env o expórtelas en su shell."
            % ", ".join(missing)
        )

    name = env.get("NEPTUNE_EXPERIMENT_NAME") or default_name
    payload = {
        "neptune": {
            "host": env.get("NEPTUNE_HOST"),
            "user": env.get("NEPTUNE_USER"),
            "password": env.get("NEPTUNE_PASSWORD"),
            "timeout_s": env.get("NEPTUNE_TIMEOUT_S"),
            "verify_ssl": env.get("NEPTUNE_VERIFY_SSL"),
        },
        "experiment": {
            "name": name,
            "description": env.get("NEPTUNE_EXPERIMENT_DESCRIPTION") or name,
            "project": env.get("NEPTUNE_PROJECT") or name,
        },
        "reporter": {
            "period_s": env.get("REPORTER_PERIOD_S"),
            "ping_every_cycles": env.get("REPORTER_PING_EVERY_CYCLES", 5),
        },
    }
    return ReporterConfig.from_mapping(payload)
