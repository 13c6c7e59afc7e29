from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from readings_common.config import Settings, get_settings
from readings_common.db import create_db_engine

from .core.domain.errors import ReadingsError, StorageError
from .endpoints import data_router, health_router
from .infrastructure.persistence import ReadingStorage, ensure_readings_schema
from .ingest.validation import ReadingValidator

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "X-DNS-Prefetch-Control": "off",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}


def _error_body(message: str) -> dict:
    return {"success": False, "message": message}


async def readings_error_handler(request: Request, exc: ReadingsError):
    logger.info("%s %s rejected status=%s: %s", request.method, request.url.path, exc.status_code, exc)
    return JSONResponse(status_code=exc.status_code, content=_error_body(str(exc)))


async def storage_error_handler(request: Request, exc: StorageError):
    # Detalle completo solo en logs, nunca al cliente.
    logger.error(
        "Storage error on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return JSONResponse(status_code=500, content=_error_body("Server error"))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("400 ValidationError on %s %s errors=%s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content=_error_body("Invalid request"))


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=_error_body("Server error"))


async def security_headers_middleware(request: Request, call_next):
    # Errors not handled by the app would otherwise leave without headers.
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        response = JSONResponse(status_code=500, content=_error_body("Server error"))
    for header, value in SECURITY_HEADERS.items():
        response.headers.setdefault(header, value)
    return response


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[ReadingStorage] = None,
) -> FastAPI:
    """Raíz de la aplicación: dueña del storage (pool de conexiones).

    Si no se inyecta un storage, el engine se crea al arrancar y se libera
    al apagar. En ambos casos el storage se cierra en el shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.storage = storage or ReadingStorage(create_db_engine(settings))
        try:
            if settings.db_ensure_schema:
                ensure_readings_schema(app.state.storage.engine)
            logger.info("Readings API ready allowed_metrics=%s", sorted(settings.allowed_metrics))
            yield
        finally:
            app.state.storage.close()

    app = FastAPI(title="Power Readings Service", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.validator = ReadingValidator(settings.allowed_metrics)

    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(ReadingsError, readings_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.middleware("http")(security_headers_middleware)

    app.include_router(health_router)
    app.include_router(data_router)

    return app


app = create_app()
