# core/logging_config.py
import logging

from core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "blueprint"


def setup_logger(level: str = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)

    # Avoid duplicate handlers in dev reload
    if logger.handlers:
        return logger

    logger.setLevel((level or settings.LOG_LEVEL).upper())

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)

    # Requests are already logged per mutation; keep the scheduler quiet
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

    return logger


logger = setup_logger()
