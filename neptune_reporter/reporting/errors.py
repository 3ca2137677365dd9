"""Errores del reporter."""

from __future__ import annotations


class ReporterError(RuntimeError):
    """Base class for failures talking to the tracking backend."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(f"{name}: {message}")
        self.name = name


class RemoteCreationFailure(ReporterError):
    """Creating a channel or chart on the backend failed."""


class RemoteAppendFailure(ReporterError):
    """Sending a point to an existing channel failed."""
