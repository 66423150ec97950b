"""Transaction store: lifecycle rules over the transactions repository.

A transaction is created PENDING and may later be moved to COMPLETED or
FAILED. Only the status column ever changes after creation. Re-updating a
transaction that is already COMPLETED or FAILED is allowed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from backend.repositories.transactions_repository import TransactionsRepository
from shared.errors import NotFoundError, ValidationError
from shared.models import (
    CreatedTransaction,
    Transaction,
    TransactionStatus,
    TransactionType,
)


logger = logging.getLogger(__name__)

USER_REQUIRED_MESSAGE = "User ID is required."
TRANSACTION_NOT_FOUND_MESSAGE = "Transaction not found."

_MIN_ROW_ID = -(2**63)
_MAX_ROW_ID = 2**63 - 1


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_transaction_id(value: int | str) -> int | None:
    """Return the integer id named by `value`, None when it cannot match a row."""

    if isinstance(value, int):
        parsed = value
    else:
        try:
            parsed = int(value)
        except ValueError:
            return None
    # Ids are SQLite INTEGERs; anything wider cannot be stored.
    if not _MIN_ROW_ID <= parsed <= _MAX_ROW_ID:
        return None
    return parsed


class TransactionService:
    """Create, list, fetch and update the status of transactions."""

    def __init__(
        self,
        repository: TransactionsRepository,
        *,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._repository = repository
        self._clock = clock

    def create_transaction(
        self,
        *,
        amount: Any,
        transaction_type: object,
        user: Any,
    ) -> CreatedTransaction:
        """Persist a new PENDING transaction.

        Amount and user are stored as given. The returned timestamp is taken
        from the application clock when the response is built, not read back
        from the stored row.
        """

        parsed_type = TransactionType.parse(transaction_type)
        transaction_id = self._repository.insert(
            amount=amount,
            transaction_type=parsed_type,
            user=user,
        )
        logger.info(
            "transaction_created transaction_id=%s transaction_type=%s",
            transaction_id,
            parsed_type.value,
        )
        return CreatedTransaction(
            transaction_id=transaction_id,
            amount=amount,
            transaction_type=parsed_type,
            status=TransactionStatus.PENDING,
            user=user,
            timestamp=self._clock(),
        )

    def list_transactions(self, user: str | None) -> list[Transaction]:
        """Return all transactions owned by `user`."""

        if not user:
            raise ValidationError(USER_REQUIRED_MESSAGE)
        logger.debug("transactions_list_requested user=%s", user)
        return self._repository.list_by_user(user)

    def update_transaction_status(self, transaction_id: int | str, status: object) -> Transaction:
        """Move a transaction to COMPLETED or FAILED and return the stored record.

        The status is checked before the id is looked up.
        """

        target_status = TransactionStatus.parse_update_target(status)
        parsed_id = _parse_transaction_id(transaction_id)
        transaction = None
        if parsed_id is not None:
            transaction = self._repository.update_status(parsed_id, target_status)
        if transaction is None:
            raise NotFoundError(TRANSACTION_NOT_FOUND_MESSAGE)
        logger.info(
            "transaction_status_updated transaction_id=%s status=%s",
            transaction_id,
            target_status.value,
        )
        return transaction

    def get_transaction(self, transaction_id: int | str) -> Transaction:
        parsed_id = _parse_transaction_id(transaction_id)
        transaction = None if parsed_id is None else self._repository.get(parsed_id)
        if transaction is None:
            raise NotFoundError(TRANSACTION_NOT_FOUND_MESSAGE)
        return transaction
