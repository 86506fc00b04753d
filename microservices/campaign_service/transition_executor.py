"""
Campaign Transition Executor

Applies one status transition to one campaign: re-validates it against
the transition table, derives the audit fields, persists with a
conditional update and reports a StatusTransitionResult.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from .clock import LifecycleClock
from .events.publishers import CampaignEventPublisher
from .models import (
    Campaign,
    CampaignStatus,
    StatusTransitionResult,
    TransitionReason,
)
from .protocols import (
    CampaignRepositoryProtocol,
    CampaignValidationError,
    StaleCampaignStateError,
)
from .status_transitions import validate_transition

logger = logging.getLogger(__name__)


def _reason_value(reason) -> str:
    return reason.value if isinstance(reason, TransitionReason) else str(reason)


class TransitionExecutor:
    """Single-campaign status transitions"""

    def __init__(
        self,
        repository: CampaignRepositoryProtocol,
        clock: Optional[LifecycleClock] = None,
        event_publisher: Optional[CampaignEventPublisher] = None,
    ):
        self.repository = repository
        self.clock = clock or LifecycleClock()
        self.event_publisher = event_publisher

    # ====================
    # Core transition
    # ====================

    def plan(
        self,
        campaign: Campaign,
        target_status: CampaignStatus,
        reason,
    ) -> Tuple[CampaignStatus, str]:
        """
        Resolve the status actually written and its reason.

        Approving a campaign whose start date is today or earlier goes
        straight to ACTIVE; both hops must be legal.
        """
        validate_transition(campaign.status, target_status)

        if (
            target_status == CampaignStatus.APPROVED
            and campaign.fundraising_start_date <= self.clock.today()
        ):
            validate_transition(CampaignStatus.APPROVED, CampaignStatus.ACTIVE)
            return CampaignStatus.ACTIVE, TransitionReason.START_DATE_REACHED.value

        return target_status, _reason_value(reason)

    def derive_updates(
        self,
        campaign: Campaign,
        new_status: CampaignStatus,
        reason: str,
        status_note: Optional[str] = None,
    ) -> Dict[str, Any]:
        now = self.clock.utcnow()
        updates: Dict[str, Any] = {
            "status": new_status,
            "previous_status": campaign.status,
            "status_reason": status_note or reason,
            "changed_status_at": now,
        }
        if new_status == CampaignStatus.COMPLETED:
            updates["completed_at"] = now
        elif new_status == CampaignStatus.CANCELLED:
            updates["cancelled_at"] = now
        return updates

    async def apply(
        self,
        campaign: Campaign,
        target_status: CampaignStatus,
        reason,
        status_note: Optional[str] = None,
        changed_by: Optional[str] = None,
    ) -> Tuple[Campaign, StatusTransitionResult]:
        """
        Apply a transition, raising on any failure.

        Raises:
            InvalidStatusTransitionError: transition not in the table
            StaleCampaignStateError: status changed since `campaign` was read
            CampaignNotFoundError: campaign no longer exists
        """
        new_status, applied_reason = self.plan(campaign, target_status, reason)
        updates = self.derive_updates(campaign, new_status, applied_reason, status_note)

        updated = await self.repository.update_campaign(
            campaign.campaign_id,
            updates,
            expected_status=campaign.status,
        )

        result = StatusTransitionResult(
            campaign_id=campaign.campaign_id,
            old_status=campaign.status,
            new_status=new_status,
            reason=applied_reason,
            success=True,
        )
        logger.info(
            f"Campaign {campaign.campaign_id}: {campaign.status.value} -> "
            f"{new_status.value} ({applied_reason})"
        )

        if self.event_publisher:
            await self.event_publisher.publish_status_changed(result, changed_by=changed_by)

        return updated, result

    async def execute(
        self,
        campaign: Campaign,
        target_status: CampaignStatus,
        reason,
        failure_reason=None,
    ) -> StatusTransitionResult:
        """
        Apply a transition and report the outcome. Never raises.

        Validation failures are reported as INVALID_STATUS_TRANSITION,
        lost conditional updates as STATUS_CHANGED_CONCURRENTLY, anything
        else as `failure_reason` (default TRANSITION_FAILED).
        """
        try:
            _, result = await self.apply(campaign, target_status, reason)
            return result
        except CampaignValidationError as e:
            failed_reason = TransitionReason.INVALID_STATUS_TRANSITION
            error = e
        except StaleCampaignStateError as e:
            failed_reason = TransitionReason.STATUS_CHANGED_CONCURRENTLY
            error = e
        except Exception as e:
            failed_reason = failure_reason or TransitionReason.TRANSITION_FAILED
            error = e

        logger.warning(
            f"Transition failed for campaign {campaign.campaign_id} "
            f"({campaign.status.value} -> {target_status.value}): {error}"
        )
        return self.failed_result(campaign, failed_reason, str(error))

    @staticmethod
    def failed_result(campaign: Campaign, reason, error: str) -> StatusTransitionResult:
        return StatusTransitionResult(
            campaign_id=campaign.campaign_id,
            old_status=campaign.status,
            new_status=campaign.status,
            reason=_reason_value(reason),
            success=False,
            error=error,
        )

    # ====================
    # Sweep processors
    # ====================

    async def activate(self, campaign: Campaign) -> StatusTransitionResult:
        """APPROVED -> ACTIVE once the start date is reached"""
        return await self.execute(
            campaign,
            CampaignStatus.ACTIVE,
            TransitionReason.START_DATE_REACHED,
            failure_reason=TransitionReason.ACTIVATION_FAILED,
        )

    async def complete(self, campaign: Campaign) -> StatusTransitionResult:
        """ACTIVE -> PROCESSING when the target is met or the window closed"""
        reason = (
            TransitionReason.TARGET_AMOUNT_REACHED
            if campaign.target_reached
            else TransitionReason.END_DATE_REACHED
        )
        return await self.execute(
            campaign,
            CampaignStatus.PROCESSING,
            reason,
            failure_reason=TransitionReason.COMPLETION_FAILED,
        )

    async def expire(self, campaign: Campaign) -> StatusTransitionResult:
        """PENDING -> REJECTED, APPROVED -> CANCELLED after the end date"""
        if campaign.status == CampaignStatus.PENDING:
            target, reason = CampaignStatus.REJECTED, TransitionReason.PENDING_EXPIRED
        elif campaign.status == CampaignStatus.APPROVED:
            target, reason = CampaignStatus.CANCELLED, TransitionReason.APPROVED_EXPIRED
        else:
            return self.failed_result(
                campaign,
                TransitionReason.INVALID_STATUS_FOR_EXPIRATION,
                f"Campaign {campaign.campaign_id} in status {campaign.status.value} cannot expire",
            )

        return await self.execute(
            campaign,
            target,
            reason,
            failure_reason=TransitionReason.EXPIRATION_HANDLING_FAILED,
        )


__all__ = ["TransitionExecutor"]
