"""Logger module for the order listener."""

from logging_utils.config import setup_service_logger

from . import config

logger = setup_service_logger(
    config.SERVICE_NAME,
    log_level=config.LOG_LEVEL,
    log_file=config.LOG_FILE,
    serialize=config.LOG_SERIALIZE,
)

__all__ = ["logger"]
