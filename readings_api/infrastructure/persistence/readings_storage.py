"""Almacenamiento de lecturas sobre SQLAlchemy.

El engine (pool de conexiones) lo crea la raíz de la aplicación y se inyecta
aquí; este módulo no mantiene ningún singleton.
"""

from __future__ import annotations

import logging
from typing import Iterable, List

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ...core.domain.errors import StorageError
from ...core.domain.reading import ParsedReading, StoredReading

logger = logging.getLogger(__name__)

_INSERT_READING = text(
    """
    INSERT INTO readings (timestamp, metric_name, metric_value)
    VALUES (:timestamp, :metric_name, :metric_value)
    """
)

_SELECT_RANGE = text(
    """
    SELECT timestamp, metric_name, metric_value
    FROM readings
    WHERE timestamp >= :from_ts AND timestamp <= :to_ts
    ORDER BY timestamp
    """
)


class ReadingStorage:
    """Acceso a la tabla readings.

    Todas las fallas de SQLAlchemy se registran con detalle completo y se
    relanzan como StorageError.
    """

    def __init__(self, engine: Engine):
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def insert_reading(self, timestamp: int, name: str, value: float) -> None:
        """Inserta una sola lectura en su propia transacción."""
        self.insert_readings(
            [ParsedReading(timestamp=int(timestamp), metric_name=name, metric_value=float(value))]
        )

    def insert_readings(self, readings: Iterable[ParsedReading]) -> int:
        """Inserta un lote completo en UNA transacción.

        Un INSERT por lectura; si cualquiera falla se hace rollback del lote.

        Returns:
            Cantidad de filas insertadas
        """
        inserted = 0
        try:
            with self._engine.begin() as conn:
                for reading in readings:
                    conn.execute(_INSERT_READING, reading.to_row())
                    inserted += 1
        except SQLAlchemyError as e:
            logger.exception(
                "[DB] Batch insert failed after %d rows, rolled back err=%s",
                inserted,
                type(e).__name__,
            )
            raise StorageError("Failed to insert readings") from e

        logger.debug("[DB] Inserted %d readings", inserted)
        return inserted

    def query_readings(self, from_ts: int, to_ts: int) -> List[StoredReading]:
        """Lecturas con from_ts <= timestamp <= to_ts (segundos), ordenadas por timestamp."""
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    _SELECT_RANGE,
                    {"from_ts": int(from_ts), "to_ts": int(to_ts)},
                ).mappings().all()
        except SQLAlchemyError as e:
            logger.exception(
                "[DB] Range query failed from=%s to=%s err=%s",
                from_ts,
                to_ts,
                type(e).__name__,
            )
            raise StorageError("Failed to query readings") from e

        return [
            StoredReading(
                timestamp=int(row["timestamp"]),
                metric_name=str(row["metric_name"]),
                metric_value=float(row["metric_value"]),
            )
            for row in rows
        ]

    def ping(self) -> None:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.exception("[DB] Ping failed err=%s", type(e).__name__)
            raise StorageError("Database not reachable") from e

    def close(self) -> None:
        logger.info("[DB] Disposing connection pool")
        self._engine.dispose()
