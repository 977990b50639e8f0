"""
Database handle, declarative base and retry helpers shared across the application.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeMeta, declarative_base

Base: DeclarativeMeta = declarative_base()

from .engine import Database, with_db_retry  # noqa: E402

__all__ = [
    "Base",
    "Database",
    "with_db_retry",
]
