"""SQLite engine construction and schema bootstrap.

The service holds a single engine for the whole process. It is built once at
startup; a database that cannot be opened is a fatal error for the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, create_engine

from backend.db.schema import TransactionRow
from shared.errors import StorageError


logger = logging.getLogger(__name__)

DATABASE_INIT_FAILED_MESSAGE = "Database initialization failed."


@dataclass(slots=True)
class DatabaseSettings:
    url: str
    timeout_seconds: float = 5.0
    echo: bool = False


def create_database_engine(settings: DatabaseSettings) -> Engine:
    """Create the shared engine; connections may be used from any request thread."""

    connect_args: dict[str, object] = {}
    if settings.url.startswith("sqlite"):
        connect_args = {
            "check_same_thread": False,
            "timeout": settings.timeout_seconds,
        }
    return create_engine(settings.url, echo=settings.echo, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    """Create the transactions table when missing and verify the connection.

    An existing table is left untouched.
    """

    try:
        SQLModel.metadata.create_all(engine, tables=[TransactionRow.__table__])
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.exception("database_init_failed url=%s", engine.url.render_as_string(hide_password=True))
        raise StorageError(DATABASE_INIT_FAILED_MESSAGE) from exc

    logger.info("database_initialized url=%s", engine.url.render_as_string(hide_password=True))
