"""Errores de dominio del servicio de lecturas.

Cada error conoce el código HTTP con el que se expone; el mensaje (str(exc))
es lo que ve el cliente salvo en StorageError, que nunca se expone.
"""

from __future__ import annotations

from typing import Optional


class ReadingsError(Exception):
    """Base de todos los errores del servicio."""

    status_code = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class IngestValidationError(ReadingsError):
    """A line of an ingestion batch failed validation; the batch is rejected."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)


class MalformedLine(IngestValidationError):
    pass


class UnknownMetric(IngestValidationError):
    def __init__(self, name: str, line_number: Optional[int] = None):
        self.name = name
        super().__init__(f"Invalid metric name: {name}", line_number)


class InvalidValue(IngestValidationError):
    def __init__(self, raw_value: str, line_number: Optional[int] = None):
        self.raw_value = raw_value
        super().__init__(f"Invalid value data format: {raw_value}", line_number)


class InvalidTimestamp(IngestValidationError):
    def __init__(self, raw_timestamp: str, line_number: Optional[int] = None):
        self.raw_timestamp = raw_timestamp
        super().__init__(f"Invalid timestamp date: {raw_timestamp}", line_number)


class QueryParameterError(ReadingsError):
    """Invalid or missing query range parameters."""


class MissingRangeParameter(QueryParameterError):
    def __init__(self, message: str = "from and to query parameters are required"):
        super().__init__(message)


class InvalidRange(QueryParameterError):
    def __init__(self, parameter: str, raw_value: str):
        self.parameter = parameter
        self.raw_value = raw_value
        super().__init__(f"Invalid date format for '{parameter}': {raw_value}")


class StorageError(ReadingsError):
    """Falla del almacenamiento. El detalle solo va a los logs."""

    status_code = 500
