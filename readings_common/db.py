from __future__ import annotations

import logging
from typing import Any, Dict

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine

from .config import Settings


logger = logging.getLogger(__name__)


def build_sqlalchemy_url(settings: Settings) -> str | URL:
    if settings.database_url:
        return settings.database_url

    # URL.create quotes special characters in the password.
    return URL.create(
        "postgresql+psycopg2",
        username=settings.db_user,
        password=settings.db_password or None,
        host=settings.db_host,
        port=settings.db_port,
        database=settings.db_name,
    )


def create_db_engine(settings: Settings, **engine_kwargs: Any) -> Engine:
    url = build_sqlalchemy_url(settings)

    # Connection parameters only, never the password.
    if settings.database_url:
        logger.info("[DB] Creating engine from DATABASE_URL")
    else:
        logger.info(
            "[DB] Creating engine host=%s port=%s db=%s user=%s",
            settings.db_host,
            settings.db_port,
            settings.db_name,
            settings.db_user,
        )

    options: Dict[str, Any] = {"pool_pre_ping": True, "pool_recycle": 300}
    options.update(engine_kwargs)
    engine = create_engine(url, **options)

    # Connectivity probe: shows in the logs whether the service reaches the DB.
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("[DB] Connection test OK")
    except Exception:
        logger.exception("[DB] Connection test FAILED")

    return engine
