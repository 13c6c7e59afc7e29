"""Health and readiness endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..core.domain.errors import StorageError
from ..infrastructure.persistence.readings_storage import ReadingStorage
from .dependencies import get_storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    """Liveness probe: ok while the process is running."""
    return {"status": "ok"}


@router.get("/ready")
def ready(storage: ReadingStorage = Depends(get_storage)):
    """Readiness probe: checks DB connectivity through the storage."""
    try:
        storage.ping()
    except StorageError:
        # Detail already logged by the storage; not exposed to the client
        logger.warning("Readiness check failed")
        raise HTTPException(status_code=503, detail="not ready")
    return {"status": "ready"}
