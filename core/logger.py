"""
Service Logger Setup

Configures stdlib logging for a microservice from LoggingConfig.

Usage:
    from core.logger import setup_service_logger

    logger = setup_service_logger("campaign_service")
    logger.info("Service started")
"""

import logging
import sys
from typing import Optional

from core.config.logging_config import LoggingConfig

_configured = False


def setup_service_logger(
    service_name: str,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Configure root handlers once and return the service logger.

    Args:
        service_name: Logger name for the service
        config: Optional LoggingConfig (defaults to environment)

    Returns:
        Logger for the service
    """
    global _configured

    config = config or LoggingConfig.from_env()
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    if not _configured:
        handlers = []
        if config.enable_console:
            handlers.append(logging.StreamHandler(sys.stdout))
        if config.log_file:
            handlers.append(logging.FileHandler(config.log_file))

        logging.basicConfig(
            level=level,
            format=config.log_format,
            handlers=handlers or None,
        )
        # APScheduler logs every job submission at INFO
        logging.getLogger("apscheduler").setLevel(logging.WARNING)
        _configured = True

    logger = logging.getLogger(service_name)
    logger.setLevel(level)
    return logger


__all__ = ["setup_service_logger"]
