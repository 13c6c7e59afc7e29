"""Escritura de lotes de ingesta: validar todo, luego persistir todo."""

from __future__ import annotations

import logging

from ..core.domain.errors import IngestValidationError
from ..infrastructure.persistence.readings_storage import ReadingStorage
from .validation import ReadingValidator

logger = logging.getLogger(__name__)


def ingest_batch(storage: ReadingStorage, validator: ReadingValidator, payload: str) -> int:
    """Valida el payload completo y, solo si todo es válido, lo persiste.

    Raises:
        IngestValidationError: primera línea inválida; no se escribe nada
        StorageError: falla de BD; el lote se revierte (una transacción)

    Returns:
        Cantidad de lecturas escritas
    """
    try:
        readings = validator.parse_batch(payload)
    except IngestValidationError as e:
        logger.warning("[Ingest] Batch rejected: %s", e)
        raise

    inserted = storage.insert_readings(readings)
    logger.info("[Ingest] Batch stored readings=%d", inserted)
    return inserted
