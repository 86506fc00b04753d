"""
Component Test Mocks

Shared mock implementations for component testing.
These mocks replace real I/O dependencies (PostgreSQL, NATS, the
campaign repository).
"""

from .db_mock import MockAsyncPostgresClient
from .nats_mock import MockEventBus
from .campaign_repository_mock import MockCampaignRepository

__all__ = [
    'MockAsyncPostgresClient',
    'MockEventBus',
    'MockCampaignRepository',
]
