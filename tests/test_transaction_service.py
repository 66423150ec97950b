"""Unit tests for the transaction store lifecycle rules."""

from __future__ import annotations

from decimal import Decimal

import pytest

from backend.services.transaction_service import TransactionService
from shared.errors import NotFoundError, StorageError, ValidationError
from shared.models import CreatedTransaction, TransactionStatus, TransactionType
from tests.fakes import FIXED_NOW, FakeTransactionsRepository, fixed_clock


def _build_service() -> tuple[TransactionService, FakeTransactionsRepository]:
    repository = FakeTransactionsRepository()
    return TransactionService(repository=repository, clock=fixed_clock), repository


def test_create_transaction_returns_pending_record_with_user() -> None:
    service, repository = _build_service()

    created = service.create_transaction(amount=Decimal("100.50"), transaction_type="DEPOSIT", user="alice")

    assert isinstance(created, CreatedTransaction)
    assert created.transaction_id == 1
    assert created.amount == Decimal("100.50")
    assert created.transaction_type == TransactionType.DEPOSIT
    assert created.status == TransactionStatus.PENDING
    assert created.user == "alice"
    assert created.timestamp == FIXED_NOW
    assert repository.calls == [("insert", (Decimal("100.50"), TransactionType.DEPOSIT, "alice"))]


@pytest.mark.parametrize("transaction_type", ["deposit", "TRANSFER", "", None, 1, "PENDING"])
def test_create_transaction_rejects_unknown_type_without_write(transaction_type: object) -> None:
    service, repository = _build_service()

    with pytest.raises(ValidationError) as exc_info:
        service.create_transaction(amount=Decimal("10"), transaction_type=transaction_type, user="alice")

    assert exc_info.value.message == "Invalid transaction_type."
    assert repository.calls == []
    assert repository.rows == {}


def test_create_transaction_accepts_negative_amount_and_empty_user() -> None:
    service, _ = _build_service()

    created = service.create_transaction(amount=Decimal("-5"), transaction_type="WITHDRAWAL", user="")

    assert created.amount == Decimal("-5")
    assert created.user == ""
    assert created.transaction_type == TransactionType.WITHDRAWAL


def test_list_transactions_returns_only_matching_user() -> None:
    service, _ = _build_service()
    alice = service.create_transaction(amount=Decimal("1"), transaction_type="DEPOSIT", user="alice")
    service.create_transaction(amount=Decimal("2"), transaction_type="DEPOSIT", user="bob")

    transactions = service.list_transactions("alice")

    assert [transaction.transaction_id for transaction in transactions] == [alice.transaction_id]


def test_list_transactions_returns_empty_list_for_unknown_user() -> None:
    service, _ = _build_service()

    assert service.list_transactions("nobody") == []


@pytest.mark.parametrize("user", [None, ""])
def test_list_transactions_requires_user(user: str | None) -> None:
    service, repository = _build_service()

    with pytest.raises(ValidationError) as exc_info:
        service.list_transactions(user)

    assert exc_info.value.message == "User ID is required."
    assert repository.calls == []


def test_update_status_changes_only_status() -> None:
    service, _ = _build_service()
    created = service.create_transaction(amount=Decimal("7.25"), transaction_type="WITHDRAWAL", user="alice")

    updated = service.update_transaction_status(created.transaction_id, "COMPLETED")

    assert updated.status == TransactionStatus.COMPLETED
    assert updated.amount == Decimal("7.25")
    assert updated.transaction_type == TransactionType.WITHDRAWAL
    fetched = service.get_transaction(created.transaction_id)
    assert fetched.status == TransactionStatus.COMPLETED


@pytest.mark.parametrize("status", ["PENDING", "completed", "CANCELLED", None, 3])
def test_update_status_rejects_invalid_target_without_write(status: object) -> None:
    service, repository = _build_service()
    created = service.create_transaction(amount=Decimal("1"), transaction_type="DEPOSIT", user="alice")
    repository.calls.clear()

    with pytest.raises(ValidationError) as exc_info:
        service.update_transaction_status(created.transaction_id, status)

    assert exc_info.value.message == "Invalid status value."
    assert repository.calls == []
    assert repository.rows[created.transaction_id]["status"] == TransactionStatus.PENDING


def test_update_status_unknown_id_raises_not_found() -> None:
    service, _ = _build_service()

    with pytest.raises(NotFoundError) as exc_info:
        service.update_transaction_status(999, "COMPLETED")

    assert exc_info.value.message == "Transaction not found."


def test_update_status_allows_reupdating_a_final_status() -> None:
    service, _ = _build_service()
    created = service.create_transaction(amount=Decimal("1"), transaction_type="DEPOSIT", user="alice")
    service.update_transaction_status(created.transaction_id, "COMPLETED")

    updated = service.update_transaction_status(created.transaction_id, "FAILED")

    assert updated.status == TransactionStatus.FAILED


def test_get_transaction_unknown_id_raises_not_found() -> None:
    service, _ = _build_service()

    with pytest.raises(NotFoundError):
        service.get_transaction(42)


def test_storage_errors_propagate_unchanged() -> None:
    service, repository = _build_service()
    repository.fail_with = StorageError("Error retrieving transactions.")

    with pytest.raises(StorageError) as exc_info:
        service.list_transactions("alice")

    assert exc_info.value.message == "Error retrieving transactions."


@pytest.mark.parametrize("transaction_id", ["abc", "", "2.0", str(2**63)])
def test_ids_that_cannot_name_a_row_are_not_found_without_lookup(transaction_id: str) -> None:
    service, repository = _build_service()
    service.create_transaction(amount=Decimal("1"), transaction_type="DEPOSIT", user="alice")
    repository.calls.clear()

    with pytest.raises(NotFoundError):
        service.get_transaction(transaction_id)
    with pytest.raises(NotFoundError):
        service.update_transaction_status(transaction_id, "COMPLETED")

    assert repository.calls == []


def test_numeric_path_ids_are_looked_up_as_integers() -> None:
    service, repository = _build_service()
    created = service.create_transaction(amount=Decimal("1"), transaction_type="DEPOSIT", user="alice")

    fetched = service.get_transaction(str(created.transaction_id))

    assert fetched.transaction_id == created.transaction_id
    assert repository.calls[-1] == ("get", created.transaction_id)


def test_update_status_validates_status_before_id() -> None:
    service, repository = _build_service()

    with pytest.raises(ValidationError):
        service.update_transaction_status("abc", "PENDING")

    assert repository.calls == []


def test_create_transaction_echoes_raw_amount_and_user() -> None:
    service, repository = _build_service()

    created = service.create_transaction(amount="abc", transaction_type="DEPOSIT", user=7)

    assert created.amount == "abc"
    assert created.user == 7
    assert repository.calls == [("insert", ("abc", TransactionType.DEPOSIT, 7))]
