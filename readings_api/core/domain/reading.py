"""Modelo de dominio para lecturas de métricas."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

VOLTAGE = "Voltage"
CURRENT = "Current"
POWER = "Power"


def to_utc_datetime(timestamp: int) -> datetime:
    """Unix epoch seconds -> aware UTC datetime.

    Raises OverflowError, OSError or ValueError if the timestamp is not a
    representable calendar date.
    """
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def format_utc(dt: datetime) -> str:
    """ISO-8601 UTC with milliseconds and a trailing Z."""
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class ParsedReading:
    """Lectura validada desde una línea de ingesta, lista para persistir."""

    timestamp: int
    metric_name: str
    metric_value: float
    line_number: int = 0

    def to_row(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "metric_name": self.metric_name,
            "metric_value": float(self.metric_value),
        }


@dataclass(frozen=True)
class StoredReading:
    """Fila de la tabla readings."""

    timestamp: int
    metric_name: str
    metric_value: float

    @property
    def time(self) -> datetime:
        return to_utc_datetime(self.timestamp)

    @property
    def day_key(self) -> str:
        return self.time.strftime("%Y-%m-%d")
