"""
Campaign Batch Runner

Runs a per-campaign processor over a candidate list in fixed-size
batches. Items within a batch run concurrently, batches run one after
another with a pause in between. One item's failure never aborts the
batch.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from core.config.lifecycle_config import CampaignLifecycleConfig

from .models import Campaign, StatusTransitionResult
from .transition_executor import TransitionExecutor

logger = logging.getLogger(__name__)

CampaignProcessor = Callable[[Campaign], Awaitable[StatusTransitionResult]]


@dataclass
class BatchConfig:
    """Batch sizing and pacing"""
    batch_size: int = 20
    inter_batch_delay: float = 0.05  # seconds
    item_stagger: float = 0.01  # seconds, multiplied by the item index
    max_items: int = 1000

    @classmethod
    def from_lifecycle_config(cls, config: CampaignLifecycleConfig) -> "BatchConfig":
        return cls(
            batch_size=config.batch_size,
            inter_batch_delay=config.batch_delay_seconds,
            item_stagger=config.item_stagger_seconds,
            max_items=config.max_items,
        )


class BatchRunner:
    """Bounded-concurrency batch processing with per-item failure isolation"""

    def __init__(self, config: Optional[BatchConfig] = None):
        self.config = config or BatchConfig()
        if self.config.batch_size < 1:
            raise ValueError("batch_size must be at least 1")

    async def run(
        self,
        candidates: List[Campaign],
        processor: CampaignProcessor,
        operation: str,
    ) -> List[StatusTransitionResult]:
        """
        Process candidates and return one result per processed campaign.

        Candidates beyond `max_items` are left for the next run, so
        len(results) == min(len(candidates), max_items).

        Args:
            candidates: Campaigns to process
            processor: Coroutine producing a StatusTransitionResult per campaign
            operation: Upper-case operation label used in failure reasons
        """
        if not candidates:
            return []

        max_items = self.config.max_items
        if len(candidates) > max_items:
            logger.warning(
                f"{operation}: {len(candidates)} candidates exceed limit {max_items}, "
                f"deferring {len(candidates) - max_items} to the next run"
            )
            candidates = candidates[:max_items]

        batch_size = self.config.batch_size
        batches = [
            candidates[i:i + batch_size]
            for i in range(0, len(candidates), batch_size)
        ]

        results: List[StatusTransitionResult] = []
        for number, batch in enumerate(batches, start=1):
            logger.debug(f"{operation}: batch {number}/{len(batches)} ({len(batch)} campaigns)")
            results.extend(await self._run_batch(batch, processor, operation))

            if number < len(batches) and self.config.inter_batch_delay > 0:
                await asyncio.sleep(self.config.inter_batch_delay)

        return results

    async def _run_batch(
        self,
        batch: List[Campaign],
        processor: CampaignProcessor,
        operation: str,
    ) -> List[StatusTransitionResult]:
        async def process(index: int, campaign: Campaign) -> StatusTransitionResult:
            if index and self.config.item_stagger > 0:
                await asyncio.sleep(index * self.config.item_stagger)
            try:
                return await processor(campaign)
            except Exception as e:
                logger.error(f"{operation}: error processing campaign {campaign.campaign_id}: {e}")
                return TransitionExecutor.failed_result(
                    campaign, f"{operation}_PROCESSING_ERROR", str(e)
                )

        settled = await asyncio.gather(
            *(process(index, campaign) for index, campaign in enumerate(batch)),
            return_exceptions=True,
        )

        results = []
        for campaign, outcome in zip(batch, settled):
            if isinstance(outcome, StatusTransitionResult):
                results.append(outcome)
            else:
                results.append(
                    TransitionExecutor.failed_result(
                        campaign, f"{operation}_TASK_FAILED", repr(outcome)
                    )
                )
        return results


__all__ = ["BatchConfig", "BatchRunner", "CampaignProcessor"]
