# src/ledger_gateway/utils/logger.py
import logging
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """Return a gateway logger.

    Records propagate to the root logger once LogConfig has configured it;
    until then the logger gets its own stream handler so that library use
    (tests, the `status` command) still prints warnings.
    """
    logger = logging.getLogger(name)

    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    if level is not None:
        logger.setLevel(level)
    elif not logger.level:
        logger.setLevel(logging.INFO)

    return logger
