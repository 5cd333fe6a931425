# File: src/ledger_gateway/monitoring/logging_config.py

import logging
import logging.handlers
import os
from datetime import datetime

from ..utils.logger import LOG_FORMAT

class LogConfig:
    def __init__(
        self,
        log_dir: str = "logs",
        level: str = "INFO",
        max_size: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5
    ):
        self.log_dir = log_dir
        self.level = logging.getLevelName(level.upper()) if isinstance(level, str) else level
        self.max_size = max_size
        self.backup_count = backup_count

        os.makedirs(log_dir, exist_ok=True)

    @property
    def log_file(self) -> str:
        return os.path.join(
            self.log_dir,
            f'ledger_gateway_{datetime.now().strftime("%Y%m%d")}.log'
        )

    def setup_logging(self) -> logging.Logger:
        file_handler = logging.handlers.RotatingFileHandler(
            self.log_file,
            maxBytes=self.max_size,
            backupCount=self.backup_count
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(logging.DEBUG)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
        )
        console_handler.setLevel(self.level)

        root_logger = logging.getLogger()
        root_logger.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)
        root_logger.addHandler(console_handler)

        # Loggers created before this point carry their own stream handler
        gateway_logger = logging.getLogger("ledger_gateway")
        for name, logger in logging.Logger.manager.loggerDict.items():
            if name.startswith("ledger_gateway") and isinstance(logger, logging.Logger):
                logger.handlers.clear()
        return gateway_logger
