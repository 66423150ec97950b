"""Configuration helpers for environment variables."""

from __future__ import annotations

import os
import logging

from dotenv import load_dotenv


logger = logging.getLogger(__name__)


_TRUE_VALUES = {"1", "true"}
_DEFAULT_DATABASE_PATH = "database.db"
_DEFAULT_DATABASE_TIMEOUT_SECONDS = 5.0
_DEFAULT_PORT = 3000
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _should_load_dotenv() -> bool:
    """Return whether local dotenv loading should run."""
    app_env = os.getenv("APP_ENV", "dev").strip().lower()
    return app_env in {"dev", "local"}


if _should_load_dotenv():
    load_dotenv()


def get_env(name: str, default: str | None = None) -> str | None:
    """Return a raw environment value or default."""
    return os.getenv(name, default)


def app_env() -> str:
    """Return the current application environment."""
    return (get_env("APP_ENV", "dev") or "dev").strip() or "dev"


def database_path() -> str:
    """Return the SQLite database file path."""
    raw_value = (get_env("DATABASE_PATH", "") or "").strip()
    return raw_value or _DEFAULT_DATABASE_PATH


def database_url() -> str:
    """Return the SQLAlchemy database URL, derived from the path when unset."""
    raw_value = (get_env("DATABASE_URL", "") or "").strip()
    if raw_value:
        return raw_value
    return f"sqlite:///{database_path()}"


def database_timeout_seconds() -> float:
    """Return how long a statement waits on a locked database."""
    raw_value = (get_env("DATABASE_TIMEOUT_SECONDS", "") or "").strip()
    if not raw_value:
        return _DEFAULT_DATABASE_TIMEOUT_SECONDS
    try:
        value = float(raw_value)
    except ValueError:
        logger.warning("database_timeout_seconds_invalid value=%s", raw_value)
        return _DEFAULT_DATABASE_TIMEOUT_SECONDS
    if value <= 0:
        logger.warning("database_timeout_seconds_invalid value=%s", raw_value)
        return _DEFAULT_DATABASE_TIMEOUT_SECONDS
    return value


def database_echo() -> bool:
    """Return whether SQL statements should be echoed to the log."""
    raw_value = get_env("DATABASE_ECHO", "") or ""
    return raw_value.strip().lower() in _TRUE_VALUES


def server_host() -> str:
    """Return the interface the HTTP server binds to."""
    return (get_env("HOST", "0.0.0.0") or "0.0.0.0").strip() or "0.0.0.0"


def server_port() -> int:
    """Return the HTTP listen port."""
    raw_value = (get_env("PORT", "") or "").strip()
    if not raw_value:
        return _DEFAULT_PORT
    try:
        port = int(raw_value)
    except ValueError:
        logger.warning("server_port_invalid value=%s", raw_value)
        return _DEFAULT_PORT
    if not 0 < port < 65536:
        logger.warning("server_port_invalid value=%s", raw_value)
        return _DEFAULT_PORT
    return port


def cors_allow_origins() -> list[str]:
    """Return CORS allowed origins; every origin is allowed when unset."""
    raw_origins = get_env("CORS_ALLOW_ORIGINS", "") or ""
    parsed_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

    if parsed_origins:
        return parsed_origins

    return ["*"]


def log_level() -> str:
    """Return the root log level name."""
    raw_value = (get_env("LOG_LEVEL", "INFO") or "INFO").strip().upper()
    if raw_value not in _LOG_LEVELS:
        return "INFO"
    return raw_value
