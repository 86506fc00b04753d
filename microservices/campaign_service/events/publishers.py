"""
Campaign Event Publishers

Publishes events to NATS JetStream. Also serves as the error sink for
lifecycle jobs: captured errors are logged and published as
campaign.error events.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from ..models import JobExecutionResult, StatusTransitionResult
from .models import (
    CampaignEventType,
    CampaignStatusChangedEventData,
    CampaignExtendedEventData,
    LifecycleJobCompletedEventData,
    CampaignErrorEventData,
)

logger = logging.getLogger(__name__)


class CampaignEventPublisher:
    """Publisher for campaign service events"""

    def __init__(self, nats_client=None):
        self.nats_client = nats_client
        self.source = "campaign_service"

    async def publish(
        self,
        event_type: CampaignEventType,
        data: Dict[str, Any],
    ) -> bool:
        """
        Publish an event to NATS.

        Args:
            event_type: The event type enum
            data: Event data payload

        Returns:
            True if published successfully, False otherwise
        """
        if not self.nats_client:
            logger.debug(f"NATS client not configured, skipping publish: {event_type.value}")
            return False

        try:
            event = {
                "event_type": event_type.value,
                "source": self.source,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "data": data,
            }

            await self.nats_client.publish(event_type.value, event)
            logger.debug(f"Published event: {event_type.value}")
            return True

        except Exception as e:
            logger.error(f"Failed to publish event {event_type.value}: {e}")
            return False

    # ====================
    # Campaign Lifecycle Events
    # ====================

    async def publish_status_changed(
        self,
        result: StatusTransitionResult,
        changed_by: Optional[str] = None,
    ) -> bool:
        """Publish campaign.status_changed event"""
        data = CampaignStatusChangedEventData(
            campaign_id=result.campaign_id,
            old_status=result.old_status.value,
            new_status=result.new_status.value,
            reason=result.reason,
            changed_by=changed_by or "system",
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(CampaignEventType.STATUS_CHANGED, data.model_dump(mode="json"))

    async def publish_campaign_extended(
        self,
        campaign_id: str,
        extension_days: int,
        new_end_date: date,
        extended_by: str,
    ) -> bool:
        """Publish campaign.extended event"""
        data = CampaignExtendedEventData(
            campaign_id=campaign_id,
            extension_days=extension_days,
            new_end_date=new_end_date,
            extended_by=extended_by,
            timestamp=datetime.now(timezone.utc),
        )
        return await self.publish(CampaignEventType.EXTENDED, data.model_dump(mode="json"))

    async def publish_job_completed(self, result: JobExecutionResult) -> bool:
        """Publish campaign.lifecycle_job.completed event"""
        data = LifecycleJobCompletedEventData(
            job_name=result.job_name,
            total_processed=result.total_processed,
            success_count=result.success_count,
            failure_count=result.failure_count,
            execution_time_ms=result.execution_time_ms,
            timestamp=result.timestamp,
        )
        return await self.publish(
            CampaignEventType.LIFECYCLE_JOB_COMPLETED, data.model_dump(mode="json")
        )

    # ====================
    # Error Capture
    # ====================

    async def capture_error(self, error: Exception, context: Dict[str, Any]) -> None:
        """Log an error and publish it as campaign.error for alerting"""
        operation = context.get("operation", "unknown")
        logger.error(f"[{operation}] {type(error).__name__}: {error}")

        data = CampaignErrorEventData(
            operation=operation,
            error_type=type(error).__name__,
            message=str(error),
            context={k: v for k, v in context.items() if k != "operation"},
            timestamp=datetime.now(timezone.utc),
        )
        await self.publish(CampaignEventType.ERROR, data.model_dump(mode="json"))
