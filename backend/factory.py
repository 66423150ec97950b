"""Composition root for backend services."""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from backend.db.sqlite_engine import (
    DATABASE_INIT_FAILED_MESSAGE,
    DatabaseSettings,
    create_database_engine,
    init_db,
)
from backend.repositories.transactions_repository import SqlTransactionsRepository
from backend.services.transaction_service import TransactionService
from shared import config
from shared.errors import StorageError


def database_settings_from_env() -> DatabaseSettings:
    return DatabaseSettings(
        url=config.database_url(),
        timeout_seconds=config.database_timeout_seconds(),
        echo=config.database_echo(),
    )


def build_transaction_service(settings: DatabaseSettings | None = None) -> TransactionService:
    """Build the transaction store over a ready database.

    Raises StorageError when the database cannot be opened or initialized.
    """

    settings = settings or database_settings_from_env()
    try:
        engine = create_database_engine(settings)
    except SQLAlchemyError as exc:
        raise StorageError(DATABASE_INIT_FAILED_MESSAGE) from exc

    init_db(engine)
    return TransactionService(repository=SqlTransactionsRepository(engine))
