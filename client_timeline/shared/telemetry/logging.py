"""Logging configuration for the client timeline"""
import logging
import sys

from client_timeline.infrastructure.config.settings import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

PACKAGE_LOGGER = "client_timeline"


def setup_logging(settings: Settings | None = None) -> None:
    """
    Send records to stdout at DEBUG (debug mode) or INFO.

    SQL statement logging follows ``database_echo`` so the engine's echo flag
    and the logger level never disagree.
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[logging.StreamHandler(sys.stdout)])
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
