"""Ingesta de lecturas: validación y escritura por lotes."""

from .validation import ReadingValidator
from .writer import ingest_batch

__all__ = [
    "ReadingValidator",
    "ingest_batch",
]
