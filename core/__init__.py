#!/usr/bin/env python3
"""
Core Module for Microservices Architecture

Shared infrastructure for the campaign microservices.

COMPONENTS:
    - config/: dataclass configuration loaded from environment (.env per ENV)
    - logger.py: service logger setup
    - postgres_client.py: asyncpg-backed PostgreSQL client
    - nats_client.py: NATS event bus

USAGE:
    from core.config import get_settings
    from core.logger import setup_service_logger

    settings = get_settings()
    logger = setup_service_logger(settings.service_name, settings.logging)
"""

__version__ = "2.0.0"
