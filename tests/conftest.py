"""Fixtures compartidos.

La BD de tests es SQLite en memoria (StaticPool: una sola conexión compartida
entre el thread del test y el threadpool de FastAPI). Todo el SQL del
servicio es portable, así que sustituye a PostgreSQL.
"""

from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from readings_api.infrastructure.persistence import ReadingStorage, ensure_readings_schema
from readings_api.ingest.validation import ReadingValidator
from readings_api.main import create_app
from readings_common.config import Settings


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def settings() -> Settings:
    """Settings por defecto, sin leer el entorno."""
    return Settings()


@pytest.fixture
def engine() -> Iterator[Engine]:
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    ensure_readings_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def storage(engine) -> ReadingStorage:
    return ReadingStorage(engine)


@pytest.fixture
def validator() -> ReadingValidator:
    return ReadingValidator(["Voltage", "Current"])


@pytest.fixture
def client(settings, storage) -> Iterator[TestClient]:
    app = create_app(settings, storage=storage)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def count_rows(engine):
    """Cuenta filas en readings."""

    def _count() -> int:
        with engine.connect() as conn:
            return int(conn.execute(text("SELECT COUNT(*) FROM readings")).scalar_one())

    return _count
