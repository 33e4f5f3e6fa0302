import logging
import sys
from typing import Optional

from schoolgrades.config.settings import settings


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConsoleHandler(logging.StreamHandler):
    def __init__(self) -> None:
        super().__init__(sys.stdout)
        self.setFormatter(logging.Formatter(LOG_FORMAT))


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger for the application.
    """
    logger = logging.getLogger()
    logger.setLevel(level or settings.log_level)

    if not any(isinstance(h, ConsoleHandler) for h in logger.handlers):
        logger.addHandler(ConsoleHandler())

    # grpc/google clients are chatty at DEBUG
    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logger
