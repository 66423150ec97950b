"""Process entrypoint: open the database, then serve the HTTP API."""

from __future__ import annotations

import logging
import sys

import uvicorn

from shared import config
from shared.errors import StorageError


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging() -> None:
    logging.basicConfig(level=config.log_level(), format=LOG_FORMAT, datefmt=LOG_DATEFMT)


def main() -> None:
    """Start the service; exit with status 1 if the database cannot be opened."""

    configure_logging()

    from server import api

    try:
        api.get_transaction_service()
    except StorageError as exc:
        logger.critical("DB Error: %s", exc.message, exc_info=exc.__cause__)
        sys.exit(1)

    host = config.server_host()
    port = config.server_port()
    logger.info("Server is Running at http://%s:%s/", "localhost" if host == "0.0.0.0" else host, port)
    uvicorn.run(api.app, host=host, port=port, log_level=config.log_level().lower())


if __name__ == "__main__":
    main()
