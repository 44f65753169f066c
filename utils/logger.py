import logging
import os
from logging.handlers import RotatingFileHandler

import config


def setup_api_logger(log_path: str | None = None) -> logging.Logger:
    """Setup and return the application-wide API logger.

    Creates a rotating file handler at `log_path` (defaults to <LOG_DIR>/api.log).
    """
    if log_path is None:
        os.makedirs(config.LOG_DIR, exist_ok=True)
        log_path = os.path.join(config.LOG_DIR, 'api.log')

    logger = logging.getLogger('journeystack.api')
    logger.setLevel(config.LOG_LEVEL)

    # avoid adding multiple handlers if called multiple times
    if not logger.handlers:
        handler = RotatingFileHandler(log_path, maxBytes=5 * 1024 * 1024, backupCount=5, encoding='utf-8')
        formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
