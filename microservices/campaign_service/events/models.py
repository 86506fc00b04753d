"""
Campaign Event Data Models

Event type definitions and data structures for campaign service events.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Event Type Definitions
# =============================================================================


class CampaignEventType(str, Enum):
    """
    Events published by campaign_service.

    These are the authoritative event types for this service.
    Other services should reference these when subscribing.
    """
    # Campaign lifecycle events
    STATUS_CHANGED = "campaign.status_changed"
    EXTENDED = "campaign.extended"

    # Scheduler events
    LIFECYCLE_JOB_COMPLETED = "campaign.lifecycle_job.completed"

    # Error events
    ERROR = "campaign.error"


class CampaignStreamConfig:
    """Stream configuration for campaign_service"""
    STREAM_NAME = "campaign-stream"
    SUBJECTS = ["campaign.>"]
    MAX_MESSAGES = 100000


# =============================================================================
# Event Data Models - Published Events
# =============================================================================


class CampaignStatusChangedEventData(BaseModel):
    """campaign.status_changed event data"""
    campaign_id: str = Field(..., description="Campaign ID")
    old_status: str = Field(..., description="Status before the transition")
    new_status: str = Field(..., description="Status after the transition")
    reason: str = Field(..., description="Transition reason code")
    changed_by: str = Field("system", description="Admin user ID or 'system' for the scheduler")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


class CampaignExtendedEventData(BaseModel):
    """campaign.extended event data"""
    campaign_id: str = Field(..., description="Campaign ID")
    extension_days: int = Field(..., description="Days added to the fundraising window")
    new_end_date: date = Field(..., description="Fundraising end date after extension")
    extended_by: str = Field(..., description="User who requested the extension")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


class LifecycleJobCompletedEventData(BaseModel):
    """campaign.lifecycle_job.completed event data"""
    job_name: str = Field(..., description="Lifecycle job name")
    total_processed: int = Field(..., description="Campaigns processed")
    success_count: int = Field(..., description="Successful transitions")
    failure_count: int = Field(..., description="Failed transitions")
    execution_time_ms: int = Field(..., description="Run duration in milliseconds")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")


class CampaignErrorEventData(BaseModel):
    """campaign.error event data"""
    operation: str = Field(..., description="Operation that failed")
    error_type: str = Field(..., description="Exception class name")
    message: str = Field(..., description="Error message")
    context: Dict[str, Any] = Field(default_factory=dict, description="Triage context")
    timestamp: Optional[datetime] = Field(None, description="Event timestamp")
