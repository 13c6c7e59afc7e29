"""Validación de lotes de ingesta en texto plano.

Formato por línea: ``<timestamp> <metric_name> <value>`` separados por
espacios. El timestamp está en segundos Unix (UTC).

Orden de validación por línea:
1. exactamente 3 tokens          -> MalformedLine
2. métrica en la lista permitida -> UnknownMetric
3. valor float finito            -> InvalidValue
4. timestamp entero y fecha real -> InvalidTimestamp
"""

from __future__ import annotations

import math
from typing import Iterable, List

from ..core.domain.errors import InvalidTimestamp, InvalidValue, MalformedLine, UnknownMetric
from ..core.domain.reading import ParsedReading, to_utc_datetime


class ReadingValidator:
    """Valida líneas de ingesta contra una lista de métricas permitidas."""

    def __init__(self, allowed_metrics: Iterable[str]):
        self._allowed_metrics = frozenset(allowed_metrics)
        if not self._allowed_metrics:
            raise ValueError("allowed_metrics must not be empty")

    @property
    def allowed_metrics(self) -> frozenset:
        return self._allowed_metrics

    def parse_line(self, line: str, line_number: int = 0) -> ParsedReading:
        parts = line.split()
        if len(parts) != 3:
            raise MalformedLine(
                "Malformed data: expected '<timestamp> <metric_name> <value>'",
                line_number or None,
            )

        timestamp_str, name, value_str = parts

        if name not in self._allowed_metrics:
            raise UnknownMetric(name, line_number or None)

        value = _parse_finite_float(value_str)
        if value is None:
            raise InvalidValue(value_str, line_number or None)

        timestamp = _parse_timestamp(timestamp_str)
        if timestamp is None:
            raise InvalidTimestamp(timestamp_str, line_number or None)

        return ParsedReading(
            timestamp=timestamp,
            metric_name=name,
            metric_value=value,
            line_number=line_number,
        )

    def parse_batch(self, payload: str) -> List[ParsedReading]:
        """Valida TODAS las líneas antes de devolver nada.

        La primera línea inválida aborta el lote completo. Las líneas en
        blanco se ignoran (p.ej. el salto de línea final).
        """
        readings: List[ParsedReading] = []
        for line_number, raw_line in enumerate(payload.split("\n"), start=1):
            line = raw_line.strip()
            if not line:
                continue
            readings.append(self.parse_line(line, line_number))

        if not readings:
            raise MalformedLine("Malformed data: empty payload")

        return readings


def _is_plain_ascii_number(raw: str) -> bool:
    # int()/float() also accept "1_000" and non-ASCII digits
    return raw.isascii() and "_" not in raw


def _parse_finite_float(raw: str) -> float | None:
    if not _is_plain_ascii_number(raw):
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _parse_timestamp(raw: str) -> int | None:
    if not _is_plain_ascii_number(raw):
        return None
    try:
        timestamp = int(raw, 10)
    except ValueError:
        return None
    try:
        to_utc_datetime(timestamp)
    except (OverflowError, OSError, ValueError):
        return None
    return timestamp
