import logging
import os
import threading
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from neptune_reporter.config import CONFIG_PATH_ENV, ReporterConfig, load_reporter_config, reporter_config_from_env
from neptune_reporter.config.schema import ReporterSettings
from neptune_reporter.reporting import (
    ChannelRegistry,
    ChartRegistry,
    Job,
    MetricRegistry,
    ReporterMetrics,
    ReportingCycle,
    ScheduledReporter,
)
from neptune_reporter.service import ReporterSession
from neptune_reporter.webapi import attach_reporter, detach_reporter

__all__ = ["build_reporter", "default_registry", "main", "start_reporting", "stop_reporting"]


logger = logging.getLogger(__name__)

default_registry = MetricRegistry()


def _running_under_systemd() -> bool:
    return any(os.getenv(var) for var in ("INVOCATION_ID", "SYSTEMD_EXEC_PID", "JOURNAL_STREAM"))


def _load_config(env: Optional[Mapping[str, str]] = None) -> ReporterConfig:
    """Load the YAML file named by $REPORTER_CONFIG, or build the config from env."""

    if env is None:
        if not _running_under_systemd():
            load_dotenv(Path.cwd() / ".env", override=False)
        env = os.environ
    config_path = env.get(CONFIG_PATH_ENV)
    if config_path:
        logger.info("Loading reporter configuration from %s", config_path)
        return load_reporter_config(Path(config_path))
    return reporter_config_from_env(env)


def build_reporter(
    job: Job,
    registry: MetricRegistry,
    settings: ReporterSettings,
    *,
    session: Optional[ReporterSession] = None,
) -> ScheduledReporter:
    """Wire fresh channel/chart registries and a reporting cycle around ``job``."""

    metrics = ReporterMetrics(log_interval_s=settings.metrics_log_interval_s)
    cycle = ReportingCycle(
        ChannelRegistry(job, metrics=metrics),
        ChartRegistry(job, metrics=metrics),
        metrics=metrics,
        meter_prefix=settings.meter_prefix,
        timer_prefix=settings.timer_prefix,
    )
    return ScheduledReporter(
        cycle,
        registry.snapshot,
        period_s=settings.period_s,
        heartbeat=session.ping if session is not None else None,
        ping_every_cycles=settings.ping_every_cycles,
    )


def start_reporting(
    config: ReporterConfig | None = None,
    registry: MetricRegistry | None = None,
) -> Tuple[ReporterSession, ScheduledReporter]:
    """Create the remote experiment and start publishing ``registry`` periodically."""

    reporter_cfg = config or _load_config()
    session = ReporterSession.start(reporter_cfg)
    reporter = build_reporter(session.job, registry or default_registry, reporter_cfg.reporter, session=session)
    attach_reporter(reporter)
    reporter.start()
    return session, reporter


def stop_reporting(session: ReporterSession, reporter: ScheduledReporter) -> None:
    detach_reporter(reporter)
    try:
        reporter.stop()
    finally:
        session.close()


def main(
    config: ReporterConfig | None = None,
    registry: MetricRegistry | None = None,
    *,
    stop_event: Optional[threading.Event] = None,
):
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    session, reporter = start_reporting(config, registry)
    waiter = stop_event or threading.Event()
    try:
        while not waiter.wait(1.0):
            pass
    except KeyboardInterrupt:
        logger.info("Reporter interrumpido por el usuario.")
    finally:
        stop_reporting(session, reporter)


if __name__ == "__main__":
    main()
