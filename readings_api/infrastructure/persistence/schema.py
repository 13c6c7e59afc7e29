"""Bootstrap del esquema de la tabla readings.

Solo crea lo que falta en una base vacía (CREATE ... IF NOT EXISTS).
No es una herramienta de migraciones.
"""

from __future__ import annotations

import logging
import pathlib

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

SCHEMA_FILE = pathlib.Path(__file__).parent / "schema.sql"


def ensure_readings_schema(engine: Engine) -> None:
    """Ensure the readings table and its index exist. Safe to call multiple times."""
    logger.info("[DB] Ensuring readings schema exists")

    sql_content = SCHEMA_FILE.read_text()
    statements = [s.strip() for s in sql_content.split(";") if s.strip()]

    try:
        with engine.begin() as conn:
            for statement in statements:
                conn.execute(text(statement))
        logger.info("[DB] Schema check completed")
    except Exception as e:
        logger.exception("[DB] Schema creation failed: %s", e)
        raise
