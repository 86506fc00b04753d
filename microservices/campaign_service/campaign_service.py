"""
Campaign Service Business Logic

Explicit status actions (approve, reject, cancel, change status) and the
one-time fundraising extension. Time and amount driven transitions live
in lifecycle_jobs.
"""

import logging
from typing import Optional

from .clock import LifecycleClock
from .events.publishers import CampaignEventPublisher
from .models import Campaign, CampaignStatus, TransitionReason
from .protocols import (
    CampaignExtensionError,
    CampaignNotFoundError,
    CampaignPermissionError,
    CampaignRepositoryProtocol,
    CampaignValidationError,
    StaleCampaignStateError,
)
from .status_transitions import validate_transition
from .transition_executor import TransitionExecutor

logger = logging.getLogger(__name__)


class CampaignService:
    """Campaign service business logic layer"""

    # Extension rules
    MAX_EXTENSIONS = 1
    EXTENSION_WINDOW_DAYS = 7
    MIN_EXTENSION_DAYS = 1
    MAX_EXTENSION_DAYS = 30

    # Statuses that require a reason when set by an admin
    REASON_REQUIRED = {CampaignStatus.REJECTED, CampaignStatus.CANCELLED}

    ADMIN_REASONS = {
        CampaignStatus.APPROVED: TransitionReason.ADMIN_APPROVED,
        CampaignStatus.REJECTED: TransitionReason.ADMIN_REJECTED,
        CampaignStatus.CANCELLED: TransitionReason.ADMIN_CANCELLED,
    }

    def __init__(
        self,
        repository: CampaignRepositoryProtocol,
        executor: Optional[TransitionExecutor] = None,
        clock: Optional[LifecycleClock] = None,
        event_publisher: Optional[CampaignEventPublisher] = None,
    ):
        self.repository = repository
        self.clock = clock or LifecycleClock()
        self.event_publisher = event_publisher
        self.executor = executor or TransitionExecutor(
            repository, clock=self.clock, event_publisher=event_publisher
        )

    async def get_campaign(self, campaign_id: str) -> Campaign:
        """Get campaign or raise CampaignNotFoundError"""
        campaign = await self.repository.get_campaign(campaign_id)
        if not campaign:
            raise CampaignNotFoundError(f"Campaign not found: {campaign_id}")
        return campaign

    # ====================
    # Admin status actions
    # ====================

    async def change_status(
        self,
        campaign_id: str,
        new_status: CampaignStatus,
        reason: Optional[str] = None,
        changed_by: Optional[str] = None,
    ) -> Campaign:
        """
        Move a campaign to `new_status` on behalf of an admin.

        Rejecting or cancelling requires a reason. Approving a campaign
        whose start date is today or earlier activates it directly.

        Raises:
            CampaignNotFoundError: unknown campaign
            CampaignValidationError: missing reason or illegal transition
            StaleCampaignStateError: status changed while the request ran
        """
        campaign = await self.get_campaign(campaign_id)

        if new_status in self.REASON_REQUIRED and not (reason and reason.strip()):
            raise CampaignValidationError(
                f"A reason is required to set status {new_status.value}",
                field="reason",
            )

        validate_transition(campaign.status, new_status)

        updated, result = await self.executor.apply(
            campaign,
            new_status,
            self.ADMIN_REASONS.get(new_status, TransitionReason.ADMIN_STATUS_CHANGE),
            status_note=reason,
            changed_by=changed_by,
        )

        logger.info(
            f"Campaign {campaign_id} status changed by {changed_by or 'unknown'}: "
            f"{result.old_status.value} -> {result.new_status.value}"
        )
        return updated

    async def approve_campaign(
        self, campaign_id: str, changed_by: Optional[str] = None, reason: Optional[str] = None
    ) -> Campaign:
        return await self.change_status(campaign_id, CampaignStatus.APPROVED, reason, changed_by)

    async def reject_campaign(
        self, campaign_id: str, reason: Optional[str], changed_by: Optional[str] = None
    ) -> Campaign:
        return await self.change_status(campaign_id, CampaignStatus.REJECTED, reason, changed_by)

    async def cancel_campaign(
        self, campaign_id: str, reason: Optional[str], changed_by: Optional[str] = None
    ) -> Campaign:
        return await self.change_status(campaign_id, CampaignStatus.CANCELLED, reason, changed_by)

    # ====================
    # Fundraising extension
    # ====================

    async def extend_campaign(
        self,
        campaign_id: str,
        extension_days: int,
        requested_by: str,
    ) -> Campaign:
        """
        Extend the fundraising end date once.

        Only the creator may extend, only while ACTIVE, only within the
        last 7 days before the end date, and by 1 to 30 days.
        """
        campaign = await self.get_campaign(campaign_id)

        if campaign.created_by != requested_by:
            raise CampaignPermissionError("Only the campaign creator can extend the campaign")

        if campaign.status != CampaignStatus.ACTIVE:
            raise CampaignExtensionError(
                f"Only active campaigns can be extended (current status: {campaign.status.value})",
                current_status=campaign.status,
            )

        if campaign.extension_count >= self.MAX_EXTENSIONS:
            raise CampaignExtensionError(
                "Campaign has already been extended", current_status=campaign.status
            )

        if not self.MIN_EXTENSION_DAYS <= extension_days <= self.MAX_EXTENSION_DAYS:
            raise CampaignExtensionError(
                f"Extension must be between {self.MIN_EXTENSION_DAYS} and "
                f"{self.MAX_EXTENSION_DAYS} days",
                current_status=campaign.status,
            )

        days_to_end = self.clock.days_until(campaign.fundraising_end_date)
        if days_to_end < 0:
            raise CampaignExtensionError(
                "Campaign fundraising period has already ended",
                current_status=campaign.status,
            )
        if days_to_end > self.EXTENSION_WINDOW_DAYS:
            raise CampaignExtensionError(
                f"Campaign can only be extended within {self.EXTENSION_WINDOW_DAYS} days "
                f"of its end date ({days_to_end} days remaining)",
                current_status=campaign.status,
            )

        new_end_date = self.clock.shift(campaign.fundraising_end_date, extension_days)
        try:
            # Only applies while extension_count is still the value read above
            updated = await self.repository.update_campaign(
                campaign_id,
                {
                    "fundraising_end_date": new_end_date,
                    "extension_count": campaign.extension_count + 1,
                    "extension_days": extension_days,
                },
                expected_status=CampaignStatus.ACTIVE,
                expected_extension_count=campaign.extension_count,
            )
        except StaleCampaignStateError as e:
            current = await self.repository.get_campaign(campaign_id)
            if current and current.extension_count != campaign.extension_count:
                raise CampaignExtensionError(
                    "Campaign has already been extended", current_status=current.status
                ) from e
            raise

        logger.info(
            f"Campaign {campaign_id} extended by {extension_days} days, "
            f"new end date {new_end_date.isoformat()}"
        )

        if self.event_publisher:
            await self.event_publisher.publish_campaign_extended(
                campaign_id=campaign_id,
                extension_days=extension_days,
                new_end_date=new_end_date,
                extended_by=requested_by,
            )

        return updated


__all__ = ["CampaignService"]
