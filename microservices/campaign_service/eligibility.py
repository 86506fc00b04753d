"""
Campaign Eligibility

Finds the campaigns each lifecycle sweep should transition. The status
filter runs in the repository; date and amount predicates run here in
the lifecycle timezone.
"""

import logging
from typing import Callable, List, Optional

from .clock import LifecycleClock
from .models import Campaign, CampaignStatus
from .protocols import CampaignRepositoryProtocol

logger = logging.getLogger(__name__)


EXPIRABLE_STATUSES = [CampaignStatus.PENDING, CampaignStatus.APPROVED]


class EligibilityFinder:
    """Candidate lookup for activation, completion and expiration sweeps"""

    def __init__(
        self,
        repository: CampaignRepositoryProtocol,
        clock: Optional[LifecycleClock] = None,
        max_items: int = 1000,
    ):
        self.repository = repository
        self.clock = clock or LifecycleClock()
        self.max_items = max_items

    # ====================
    # Predicates
    # ====================

    def is_activation_eligible(self, campaign: Campaign) -> bool:
        """APPROVED and the start date (midnight) is today or earlier"""
        if campaign.status != CampaignStatus.APPROVED:
            return False
        start = self.clock.start_of_day(campaign.fundraising_start_date)
        today = self.clock.start_of_day(self.clock.today())
        return start <= today

    def is_completion_eligible(self, campaign: Campaign) -> bool:
        """ACTIVE and either the target is met or the end date (end of day) has passed"""
        if campaign.status != CampaignStatus.ACTIVE:
            return False
        if campaign.received_amount >= campaign.target_amount:
            return True
        return self.clock.end_of_day(campaign.fundraising_end_date) <= self.clock.now()

    def is_expiration_eligible(self, campaign: Campaign) -> bool:
        """PENDING or APPROVED and the end date (end of day) has passed"""
        if campaign.status not in EXPIRABLE_STATUSES:
            return False
        return self.clock.end_of_day(campaign.fundraising_end_date) <= self.clock.now()

    # ====================
    # Finders
    # ====================

    async def find_activation_candidates(self) -> List[Campaign]:
        return await self._find(
            "activation",
            [CampaignStatus.APPROVED],
            "fundraising_start_date",
            self.is_activation_eligible,
        )

    async def find_completion_candidates(self) -> List[Campaign]:
        return await self._find(
            "completion",
            [CampaignStatus.ACTIVE],
            "fundraising_end_date",
            self.is_completion_eligible,
        )

    async def find_expiration_candidates(self) -> List[Campaign]:
        return await self._find(
            "expiration",
            EXPIRABLE_STATUSES,
            "fundraising_end_date",
            self.is_expiration_eligible,
        )

    async def _find(
        self,
        sweep: str,
        statuses: List[CampaignStatus],
        order_by: str,
        predicate: Callable[[Campaign], bool],
    ) -> List[Campaign]:
        """
        Page through `statuses` in deadline order until `max_items` campaigns
        pass `predicate` or the rows run out. The cap applies to eligible
        campaigns, so ineligible rows never crowd out eligible ones.
        """
        eligible: List[Campaign] = []
        offset = 0

        while True:
            # Query failures propagate: the sweep cannot run without a candidate set
            page = await self.repository.find_many(
                status=statuses,
                limit=self.max_items,
                order_by=order_by,
                offset=offset,
            )
            offset += len(page)
            eligible.extend(c for c in page if predicate(c))

            if len(eligible) >= self.max_items:
                if len(eligible) > self.max_items or len(page) == self.max_items:
                    logger.warning(
                        f"{sweep} candidates hit the cap of {self.max_items}; "
                        f"remaining campaigns are deferred to the next run"
                    )
                eligible = eligible[: self.max_items]
                break
            if len(page) < self.max_items:
                break

        logger.info(f"Found {len(eligible)} campaigns eligible for {sweep} ({offset} scanned)")
        return eligible


__all__ = ["EligibilityFinder", "EXPIRABLE_STATUSES"]
