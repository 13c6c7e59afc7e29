"""Módulo de queries para consultas a BD.

Contiene la agregación diaria de potencia sobre un rango de fechas.
"""

from .daily_power import (
    aggregate_daily_power,
    parse_range_bound,
    query_daily_power,
)

__all__ = [
    "aggregate_daily_power",
    "parse_range_bound",
    "query_daily_power",
]
