"""Persistence infrastructure for readings."""

from .readings_storage import ReadingStorage
from .schema import ensure_readings_schema

__all__ = [
    "ReadingStorage",
    "ensure_readings_schema",
]
