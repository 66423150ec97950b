"""Pydantic contracts shared across backend and server."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, PlainSerializer

from shared.errors import ValidationError


INVALID_TRANSACTION_TYPE_MESSAGE = "Invalid transaction_type."
INVALID_STATUS_MESSAGE = "Invalid status value."


class TransactionType(str, Enum):
    """Kind of money movement recorded by a transaction."""

    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"

    @classmethod
    def parse(cls, value: object) -> TransactionType:
        """Return the member matching the exact wire string."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise ValidationError(INVALID_TRANSACTION_TYPE_MESSAGE)


class TransactionStatus(str, Enum):
    """Lifecycle status. PENDING is only ever set at creation."""

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @classmethod
    def parse_update_target(cls, value: object) -> TransactionStatus:
        """Return the target status of an update; PENDING is not a valid target."""

        if isinstance(value, str):
            try:
                status = cls(value)
            except ValueError:
                status = None
        elif isinstance(value, cls):
            status = value
        else:
            status = None

        if status not in UPDATE_TARGET_STATUSES:
            raise ValidationError(INVALID_STATUS_MESSAGE)
        return status


UPDATE_TARGET_STATUSES: frozenset[TransactionStatus] = frozenset(
    {TransactionStatus.COMPLETED, TransactionStatus.FAILED}
)


def _amount_to_json(value: Any) -> Any:
    if isinstance(value, Decimal):
        if value.is_finite() and value == value.to_integral_value():
            return int(value)
        return float(value)
    return value


# Amounts are stored without validation: numbers come back as INTEGER or REAL,
# anything SQLite could not coerce comes back as the text that was sent.
Amount = Annotated[
    Union[int, float, Decimal, str],
    PlainSerializer(_amount_to_json, return_type=Any, when_used="json"),
]


class Transaction(BaseModel):
    """Transaction record as returned by list, get and status update."""

    model_config = ConfigDict(extra="forbid")

    transaction_id: int
    amount: Amount
    transaction_type: TransactionType
    status: TransactionStatus
    timestamp: datetime | None = None


class CreatedTransaction(Transaction):
    """Create response, the only representation echoing the owning user."""

    user: Any


class TransactionsListResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    transactions: list[Transaction]


class ErrorResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    error: str
