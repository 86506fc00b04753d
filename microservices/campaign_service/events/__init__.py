"""
Campaign Service Events

Event models and publisher for campaign service.
"""

from .models import (
    CampaignEventType,
    CampaignStreamConfig,
    CampaignStatusChangedEventData,
    CampaignExtendedEventData,
    LifecycleJobCompletedEventData,
    CampaignErrorEventData,
)
from .publishers import CampaignEventPublisher

__all__ = [
    # Event Types
    "CampaignEventType",
    "CampaignStreamConfig",
    # Event Data Models
    "CampaignStatusChangedEventData",
    "CampaignExtendedEventData",
    "LifecycleJobCompletedEventData",
    "CampaignErrorEventData",
    # Publisher
    "CampaignEventPublisher",
]
