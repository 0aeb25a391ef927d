# shop_service/logging_config.py
import logging
import sys

from shop_service.config import settings

# Every module logs through a child of this logger
log = logging.getLogger("shop_service")


def setup_logging(level: str = None):
    """Configures the service logger."""
    log.setLevel((level or settings.LOG_LEVEL).upper())
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - [%(levelname)-7s] - %(message)s"
        ))
        log.addHandler(handler)
    log.info("Logging configured successfully")
