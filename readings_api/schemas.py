from __future__ import annotations

from pydantic import BaseModel, Field


class ReadingOut(BaseModel):
    time: str = Field(..., description="ISO-8601 UTC, e.g. 2023-11-14T22:13:20.000Z")
    name: str
    value: float


class IngestResult(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
