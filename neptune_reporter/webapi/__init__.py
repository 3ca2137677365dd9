"""FastAPI application exposing the reporter status."""

from __future__ import annotations

from fastapi import FastAPI

from .status import attach_reporter, detach_reporter
from .status import router as status_router

app = FastAPI(title="Neptune Metrics Reporter API", version="1.0.0")

app.include_router(status_router)


__all__ = ["app", "attach_reporter", "detach_reporter"]
