"""Modelos y errores de dominio."""

from .errors import (
    ReadingsError,
    IngestValidationError,
    MalformedLine,
    UnknownMetric,
    InvalidValue,
    InvalidTimestamp,
    QueryParameterError,
    MissingRangeParameter,
    InvalidRange,
    StorageError,
)
from .reading import (
    CURRENT,
    POWER,
    VOLTAGE,
    ParsedReading,
    StoredReading,
    format_utc,
    to_utc_datetime,
)

__all__ = [
    "ReadingsError",
    "IngestValidationError",
    "MalformedLine",
    "UnknownMetric",
    "InvalidValue",
    "InvalidTimestamp",
    "QueryParameterError",
    "MissingRangeParameter",
    "InvalidRange",
    "StorageError",
    "CURRENT",
    "POWER",
    "VOLTAGE",
    "ParsedReading",
    "StoredReading",
    "format_utc",
    "to_utc_datetime",
]
