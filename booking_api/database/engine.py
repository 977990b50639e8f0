"""Engine construction and the process-wide ``Database`` handle."""

from __future__ import annotations

from datetime import datetime
import logging
import random
import time
from typing import Any, Callable, Optional, TypeVar

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker

from ..core.config import Settings
from ..core.exceptions import RepositoryException

logger = logging.getLogger(__name__)

T = TypeVar("T")

_RETRYABLE_ERROR_SNIPPETS = (
    "server closed the connection",
    "ssl connection has been closed unexpectedly",
    "connection reset by peer",
)


def _build_engine_kwargs(db_url: str, settings: Settings) -> dict[str, Any]:
    """Pool settings for PostgreSQL; SQLite only gets thread-sharing and a busy timeout."""
    if make_url(db_url).get_backend_name() == "sqlite":
        return {
            "connect_args": {"check_same_thread": False, "timeout": 30},
            "echo": settings.db_echo,
        }
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": settings.db_pool_recycle,
        "pool_pre_ping": True,
        "echo": settings.db_echo,
    }


def _install_pool_logging(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def receive_connect(dbapi_connection: Any, connection_record: Any) -> None:
        connection_record.info["connect_time"] = datetime.now()
        if engine.dialect.name == "sqlite":
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
        logger.debug("Database connection established")

    @event.listens_for(engine, "checkout")
    def receive_checkout(
        dbapi_connection: Any, connection_record: Any, connection_proxy: Any
    ) -> None:
        logger.debug("Connection checked out from pool")

    @event.listens_for(engine, "checkin")
    def receive_checkin(dbapi_connection: Any, connection_record: Any) -> None:
        logger.debug("Connection returned to pool")


class Database:
    """
    Owns the engine and session factory for one process.

    Built by the application factory, stored on ``app.state`` and disposed
    when the application shuts down. Request handlers receive sessions from
    it through the ``get_db`` dependency.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
        )

    @classmethod
    def from_url(cls, db_url: str, settings: Settings) -> "Database":
        engine = create_engine(db_url, **_build_engine_kwargs(db_url, settings))
        _install_pool_logging(engine)
        return cls(engine)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls.from_url(settings.get_database_url(), settings)

    def session(self) -> Session:
        return self.session_factory()

    def ping(self) -> bool:
        """Run ``SELECT 1``; False when the database cannot be reached."""

        def _select_one() -> bool:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True

        try:
            return with_db_retry("ping", _select_one)
        except OperationalError as exc:
            logger.error("Database ping failed: %s", exc)
            return False

    def list_tables(self) -> list[str]:
        return sorted(inspect(self.engine).get_table_names())

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database engine disposed")


def _is_retryable_db_error(exc: Exception) -> bool:
    if isinstance(exc, RepositoryException):
        exc = exc.__cause__ or exc
    if not isinstance(exc, OperationalError):
        return False
    message = str(exc).lower()
    return any(snippet in message for snippet in _RETRYABLE_ERROR_SNIPPETS)


def _retry_delay(attempt: int) -> float:
    base = 0.1 * (2 ** (attempt - 1))
    return base + random.uniform(0, 0.05 * attempt)


def with_db_retry(
    op_name: str,
    func: Callable[[], T],
    *,
    max_attempts: int = 3,
    sleep: Optional[Callable[[float], None]] = None,
) -> T:
    """
    Execute a read-only DB operation, retrying transient disconnects.
    """
    pause = sleep or time.sleep
    attempt = 1
    while True:
        try:
            return func()
        except (OperationalError, RepositoryException) as exc:
            if attempt >= max_attempts or not _is_retryable_db_error(exc):
                raise

            delay = _retry_delay(attempt)
            logger.warning(
                "Transient DB failure detected, retrying",
                extra={
                    "event": "db_retry",
                    "op": op_name,
                    "attempt": attempt,
                    "delay": delay,
                    "error": str(exc),
                },
            )
            pause(delay)
            attempt += 1
