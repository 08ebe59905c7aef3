import logging
import os

from boutique.core.config import settings

LOG_NAME = os.getenv("APP_LOGGER_NAME", "boutique")

# 2026-01-19T10:00:00.123 - sale_service.py - record_sale - INFO - ...
LOG_FORMAT = "%(asctime)s.%(msecs)03d - %(filename)s - %(funcName)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def level_from_name(name, default=logging.INFO) -> int:
    return getattr(logging, str(name).upper(), default)


def build_logger(name: str = LOG_NAME) -> logging.Logger:
    """Shared service logger; writes to stderr until a file handler is added."""
    log = logging.getLogger(name)
    log.setLevel(level_from_name(settings.LOG_LEVEL))

    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
               for h in log.handlers):
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        log.addHandler(console)

    # Uvicorn and pytest configure the root logger; keep lines single
    log.propagate = False
    return log


logger = build_logger()
