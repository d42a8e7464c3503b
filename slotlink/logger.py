import logging
import sys

from slotlink.settings import settings


logging_formatter = logging.Formatter("[%(asctime)s] [%(levelname)s] %(name)s: %(message)s")

_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(logging_formatter)


def get_logger(name: str) -> logging.Logger:
    logger: logging.Logger = logging.getLogger(name)
    if _handler not in logger.handlers:
        logger.addHandler(_handler)
    logger.setLevel(settings.log_level)
    logger.propagate = False
    return logger
