"""Endpoints /data: ingesta en texto plano y consulta por rango."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..infrastructure.persistence.readings_storage import ReadingStorage
from ..ingest.validation import ReadingValidator
from ..ingest.writer import ingest_batch
from ..queries.daily_power import query_daily_power
from ..schemas import ErrorResponse, IngestResult, ReadingOut
from .dependencies import get_storage, get_validator, read_text_body

logger = logging.getLogger(__name__)

router = APIRouter(tags=["data"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/data", response_model=IngestResult, responses=_ERROR_RESPONSES)
def post_data(
    payload: str = Depends(read_text_body),
    storage: ReadingStorage = Depends(get_storage),
    validator: ReadingValidator = Depends(get_validator),
) -> IngestResult:
    """Ingesta de lecturas ``<timestamp> <metric_name> <value>``, una por línea.

    Todo o nada: si una línea es inválida no se escribe ninguna.
    """
    ingest_batch(storage, validator, payload)
    return IngestResult(success=True)


@router.get("/data", response_model=List[ReadingOut], responses=_ERROR_RESPONSES)
def get_data(
    from_: Optional[str] = Query(default=None, alias="from"),
    to: Optional[str] = Query(default=None),
    storage: ReadingStorage = Depends(get_storage),
) -> List[ReadingOut]:
    """Lecturas en [from, to] más la potencia promedio de cada día UTC."""
    return query_daily_power(storage, from_, to)
