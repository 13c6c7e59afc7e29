"""Dependencias FastAPI compartidas por los endpoints.

El storage y el validador los construye create_app() y viven en app.state.
"""

from __future__ import annotations

from fastapi import Request

from ..infrastructure.persistence.readings_storage import ReadingStorage
from ..ingest.validation import ReadingValidator


def get_storage(request: Request) -> ReadingStorage:
    return request.app.state.storage


def get_validator(request: Request) -> ReadingValidator:
    return request.app.state.validator


async def read_text_body(request: Request) -> str:
    body = await request.body()
    return body.decode("utf-8", errors="replace")
