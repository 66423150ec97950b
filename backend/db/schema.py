"""SQLModel table definition for the `transactions` table.

Column names, affinities and defaults match the table created by earlier
deployments so existing `database.db` files are read as-is.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import Column, DateTime, Integer, Text, text
from sqlalchemy.types import UserDefinedType
from sqlmodel import Field, SQLModel

from shared.models import TransactionStatus


class StoredNumeric(UserDefinedType):
    """NUMERIC column that hands values to SQLite and back unchanged.

    SQLite's NUMERIC affinity turns numeric text into INTEGER or REAL and
    keeps any other text as TEXT, so no conversion happens on either side.
    """

    cache_ok = True

    def get_col_spec(self, **kw: Any) -> str:
        return "NUMERIC"

    def bind_processor(self, dialect):
        def process(value):
            # sqlite3 has no adapter for Decimal.
            if isinstance(value, Decimal):
                return str(value)
            return value

        return process


class TransactionRow(SQLModel, table=True):
    """One persisted transaction."""

    __tablename__ = "transactions"
    __table_args__ = {"sqlite_autoincrement": True}

    transaction_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True),
    )
    amount: Any = Field(sa_column=Column(StoredNumeric(), nullable=False))
    transaction_type: str = Field(sa_column=Column(Text, nullable=False))
    user: Any = Field(sa_column=Column(Text, nullable=False))
    status: str = Field(
        default=TransactionStatus.PENDING.value,
        sa_column=Column(Text, nullable=False, server_default=TransactionStatus.PENDING.value),
    )
    timestamp: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime, server_default=text("CURRENT_TIMESTAMP")),
    )
