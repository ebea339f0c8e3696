import os
import logging
from logging.handlers import RotatingFileHandler

from order_hub.config import settings

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(settings.LOG_LEVEL.upper())

    if not logger.handlers:
        fmt = logging.Formatter(_FORMAT)

        stream = logging.StreamHandler()
        stream.setFormatter(fmt)
        logger.addHandler(stream)

        if settings.LOG_FILE:
            log_dir = os.path.dirname(settings.LOG_FILE)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handler = RotatingFileHandler(
                settings.LOG_FILE,
                maxBytes=5 * 1024 * 1024,   # 5 MB
                backupCount=5
            )
            handler.setFormatter(fmt)
            logger.addHandler(handler)

    return logger
