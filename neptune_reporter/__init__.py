"""Periodic publisher of in-process metrics to an experiment-tracking backend."""

__all__ = [
    "config",
    "reporting",
    "run",
    "service",
    "webapi",
]
