"""Transactions repository over the SQLite `transactions` table."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Protocol

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from backend.db.schema import TransactionRow
from shared.errors import StorageError
from shared.models import Transaction, TransactionStatus, TransactionType


logger = logging.getLogger(__name__)

CREATE_FAILED_MESSAGE = "Error creating transaction."
LIST_FAILED_MESSAGE = "Error retrieving transactions."
GET_FAILED_MESSAGE = "Error retrieving transaction."
UPDATE_FAILED_MESSAGE = "Error updating transaction."


class TransactionsRepository(Protocol):
    def insert(self, *, amount: Any, transaction_type: TransactionType, user: Any) -> int:
        """Insert a PENDING transaction and return its assigned id."""

    def list_by_user(self, user: str) -> list[Transaction]:
        """Return every transaction owned by `user` in storage order."""

    def get(self, transaction_id: int) -> Transaction | None:
        """Return one transaction or None when the id is unknown."""

    def update_status(self, transaction_id: int, status: TransactionStatus) -> Transaction | None:
        """Overwrite the status column and return the re-read record, None when the id is unknown."""


class SqlTransactionsRepository:
    """SQLModel repository; every driver failure is reported as StorageError."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @staticmethod
    def _to_transaction(row: TransactionRow) -> Transaction:
        timestamp = row.timestamp
        # CURRENT_TIMESTAMP is stored as naive UTC text.
        if isinstance(timestamp, datetime) and timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)

        if row.transaction_id is None:
            raise ValueError("Missing required field 'transaction_id'")

        return Transaction(
            transaction_id=row.transaction_id,
            amount=row.amount,
            transaction_type=TransactionType(row.transaction_type),
            status=TransactionStatus(row.status),
            timestamp=timestamp,
        )

    @classmethod
    def _read_row(cls, row: TransactionRow, failure_message: str) -> Transaction:
        try:
            return cls._to_transaction(row)
        except ValueError as exc:
            logger.exception("transactions_row_unreadable transaction_id=%s", row.transaction_id)
            raise StorageError(failure_message) from exc

    def insert(self, *, amount: Any, transaction_type: TransactionType, user: Any) -> int:
        try:
            with Session(self._engine) as session:
                row = TransactionRow(
                    amount=amount,
                    transaction_type=transaction_type.value,
                    user=user,
                    status=TransactionStatus.PENDING.value,
                )
                session.add(row)
                session.commit()
                session.refresh(row)
                transaction_id = row.transaction_id
        except SQLAlchemyError as exc:
            logger.exception("transactions_insert_failed transaction_type=%s", transaction_type.value)
            raise StorageError(CREATE_FAILED_MESSAGE) from exc

        if transaction_id is None:
            raise StorageError(CREATE_FAILED_MESSAGE)
        return transaction_id

    def list_by_user(self, user: str) -> list[Transaction]:
        try:
            with Session(self._engine) as session:
                statement = (
                    select(TransactionRow)
                    .where(TransactionRow.user == user)
                    .order_by(TransactionRow.transaction_id)
                )
                rows = list(session.exec(statement).all())
        except (SQLAlchemyError, ValueError) as exc:
            logger.exception("transactions_list_failed")
            raise StorageError(LIST_FAILED_MESSAGE) from exc

        return [self._read_row(row, LIST_FAILED_MESSAGE) for row in rows]

    def get(self, transaction_id: int) -> Transaction | None:
        try:
            with Session(self._engine) as session:
                row = session.get(TransactionRow, transaction_id)
        except (SQLAlchemyError, ValueError) as exc:
            logger.exception("transactions_get_failed transaction_id=%s", transaction_id)
            raise StorageError(GET_FAILED_MESSAGE) from exc

        if row is None:
            return None
        return self._read_row(row, GET_FAILED_MESSAGE)

    def update_status(self, transaction_id: int, status: TransactionStatus) -> Transaction | None:
        try:
            with Session(self._engine) as session:
                row = session.get(TransactionRow, transaction_id)
                if row is None:
                    return None
                row.status = status.value
                session.add(row)
                session.commit()
                # Re-read after the write; a concurrent update may already be visible.
                session.refresh(row)
        except (SQLAlchemyError, ValueError) as exc:
            logger.exception("transactions_update_status_failed transaction_id=%s", transaction_id)
            raise StorageError(UPDATE_FAILED_MESSAGE) from exc

        return self._read_row(row, UPDATE_FAILED_MESSAGE)

    def count(self) -> int:
        """Return the number of stored transactions."""

        try:
            with Session(self._engine) as session:
                return session.exec(select(func.count()).select_from(TransactionRow)).one()
        except SQLAlchemyError as exc:
            logger.exception("transactions_count_failed")
            raise StorageError(LIST_FAILED_MESSAGE) from exc
