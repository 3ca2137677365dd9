"""Run the reporter together with its status API under uvicorn."""

from __future__ import annotations

import logging
import os

import uvicorn

from neptune_reporter.run import start_reporting, stop_reporting

from . import app


def main() -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    host = os.environ.get("REPORTER_WEBAPI_HOST", "127.0.0.1")
    port = int(os.environ.get("REPORTER_WEBAPI_PORT", "8000"))
    session, reporter = start_reporting()
    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level=os.environ.get("REPORTER_WEBAPI_LOG_LEVEL", "info"),
        )
    finally:
        stop_reporting(session, reporter)


if __name__ == "__main__":
    main()
