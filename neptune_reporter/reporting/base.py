"""Contratos mínimos del backend de seguimiento de experimentos."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class Channel(Protocol):
    """Serie temporal numérica remota."""

    name: str

    def send(self, x: float, y: float) -> None:
        """Añade el punto (x, y) al final de la serie."""


@runtime_checkable
class Chart(Protocol):
    """Vista remota que agrupa un conjunto fijo de canales."""

    name: str
    channels: Sequence[Channel]


@runtime_checkable
class Job(Protocol):
    """Handle del job remoto; no deduplica recursos por sí mismo."""

    def create_numeric_channel(self, name: str) -> Channel:
        """Crea un canal numérico nuevo en el backend."""

    def create_chart(self, name: str, channels: Sequence[Channel]) -> Chart:
        """Crea un gráfico que referencia ``channels`` en ese orden."""
