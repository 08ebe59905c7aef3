# boutique/common/logger.py

import logging
from logging.handlers import RotatingFileHandler
import os

from boutique.logger_config import DATE_FORMAT, LOG_FORMAT, level_from_name, logger


def setup_logger(log_file=None, level="INFO"):
    logger.setLevel(level_from_name(level))

    if not log_file:
        return logger

    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    # Attach once even if the app factory runs several times
    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) and handler.baseFilename == os.path.abspath(log_file):
            return logger

    file_handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3)
    file_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    file_handler.setLevel(logging.INFO)

    logger.addHandler(file_handler)
    return logger
