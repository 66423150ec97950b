"""FastAPI entrypoint for the transaction ledger HTTP endpoints."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from backend.factory import build_transaction_service
from backend.services.transaction_service import TransactionService
from shared import config as _config
from shared.errors import LedgerError
from shared.models import CreatedTransaction, ErrorResponse, Transaction, TransactionsListResult


logger = logging.getLogger(__name__)

INVALID_REQUEST_MESSAGE = "Invalid request."
INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class TransactionCreatePayload(BaseModel):
    # Raw JSON values; only the transaction type is checked, by the store.
    amount: Any = None
    transaction_type: Any = None
    user: Any = None


class TransactionStatusPayload(BaseModel):
    status: Any = None


@lru_cache(maxsize=1)
def get_transaction_service() -> TransactionService:
    """Create and cache the transaction store once per process."""

    service = build_transaction_service()
    logger.info("using_transaction_service=%s.%s", service.__class__.__module__, service.__class__.__name__)
    return service


app = FastAPI(title="Transaction Ledger API")

ALLOW_ORIGINS = _config.cors_allow_origins()


@app.middleware("http")
async def log_http_requests(request: Request, call_next):
    """Log incoming requests, HTTP status codes and unexpected errors."""

    logger.info("http_request_received method=%s path=%s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "http_request_failed method=%s path=%s",
            request.method,
            request.url.path,
        )
        raise

    logger.info(
        "http_response_sent method=%s path=%s status_code=%s",
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger.info("cors_allow_origins=%s", ALLOW_ORIGINS)


@app.exception_handler(LedgerError)
async def handle_ledger_error(request: Request, exc: LedgerError) -> JSONResponse:
    """Map store errors to their HTTP status with a short JSON body."""

    log = logger.warning if exc.status_code >= 500 else logger.info
    log(
        "ledger_error method=%s path=%s error_type=%s status_code=%s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=ErrorResponse(error=exc.message).model_dump())


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed requests with 400 instead of FastAPI's default 422."""

    logger.info(
        "request_validation_failed method=%s path=%s errors=%s",
        request.method,
        request.url.path,
        exc.errors(),
    )
    return JSONResponse(status_code=400, content=ErrorResponse(error=INVALID_REQUEST_MESSAGE).model_dump())


@app.exception_handler(Exception)
async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for unhandled exceptions."""

    logger.exception(
        "unhandled_exception method=%s path=%s exception_type=%s message=%s",
        request.method,
        request.url.path,
        type(exc).__name__,
        str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content=ErrorResponse(error=INTERNAL_ERROR_MESSAGE).model_dump())


@app.get("/health")
def health() -> dict[str, str]:
    """Healthcheck endpoint."""

    return {"status": "ok"}


@app.post("/api/transactions/", status_code=201, response_model=CreatedTransaction)
def create_transaction(payload: TransactionCreatePayload) -> CreatedTransaction:
    return get_transaction_service().create_transaction(
        amount=payload.amount,
        transaction_type=payload.transaction_type,
        user=payload.user,
    )


@app.get("/api/transactions/", response_model=TransactionsListResult)
def list_transactions(user_id: str | None = None) -> TransactionsListResult:
    transactions = get_transaction_service().list_transactions(user_id)
    return TransactionsListResult(transactions=transactions)


@app.put("/api/transactions/{transaction_id}/", response_model=Transaction)
def update_transaction_status(
    transaction_id: str,
    payload: TransactionStatusPayload | None = None,
) -> Transaction:
    status = payload.status if payload is not None else None
    return get_transaction_service().update_transaction_status(transaction_id, status)


@app.get("/api/transactions/{transaction_id}/", response_model=Transaction)
def get_transaction(transaction_id: str) -> Transaction:
    return get_transaction_service().get_transaction(transaction_id)
