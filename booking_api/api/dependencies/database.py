# booking_api/api/dependencies/database.py
"""
Database dependencies.

The ``Database`` handle lives on ``app.state``; each request gets its own
session, committed on success and rolled back on error.
"""

from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from ...database import Database


def get_database(request: Request) -> Database:
    database: Database = request.app.state.database
    return database


def get_db(request: Request) -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    db = get_database(request).session()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
