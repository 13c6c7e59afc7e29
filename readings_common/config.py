from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv


DEFAULT_ALLOWED_METRICS: Tuple[str, ...] = ("Voltage", "Current")


def _default_env_file() -> str:
    return str(Path.cwd() / ".env")


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _split_metrics(value: str) -> Tuple[str, ...]:
    return tuple(m.strip() for m in value.split(",") if m.strip())


@dataclass(frozen=True)
class Settings:
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "readings"

    # Full SQLAlchemy URL; takes precedence over the db_* fields when set.
    database_url: Optional[str] = None
    db_ensure_schema: bool = False

    host: str = "0.0.0.0"
    port: int = 3000

    allowed_metrics: Tuple[str, ...] = DEFAULT_ALLOWED_METRICS
    log_level: str = "INFO"


def get_settings() -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = os.getenv("READINGS_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    db_host = os.getenv("DB_HOST", "localhost")
    db_port = int(os.getenv("DB_PORT", "5432"))
    db_user = os.getenv("DB_USER", "postgres")
    # DB_PASS is the historical name; DB_PASSWORD is accepted as well.
    db_password = os.getenv("DB_PASS", os.getenv("DB_PASSWORD", ""))
    db_name = os.getenv("DB_NAME", "readings")

    allowed_metrics = _split_metrics(os.getenv("ALLOWED_METRICS", ""))

    return Settings(
        db_host=db_host,
        db_port=db_port,
        db_user=db_user,
        db_password=db_password,
        db_name=db_name,
        database_url=os.getenv("DATABASE_URL") or None,
        db_ensure_schema=_env_flag("DB_ENSURE_SCHEMA"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        allowed_metrics=allowed_metrics or DEFAULT_ALLOWED_METRICS,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
