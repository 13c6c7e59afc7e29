"""Shared configuration and database helpers."""

from .config import Settings, get_settings
from .db import build_sqlalchemy_url, create_db_engine

__all__ = [
    "Settings",
    "get_settings",
    "build_sqlalchemy_url",
    "create_db_engine",
]
