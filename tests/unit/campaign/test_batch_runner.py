"""
Unit Tests for BatchRunner

Tests chunking, per-item failure isolation and the processing cap.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config.lifecycle_config import CampaignLifecycleConfig
from microservices.campaign_service.batch_runner import BatchConfig, BatchRunner
from microservices.campaign_service.models import CampaignStatus, StatusTransitionResult
from tests.contracts.campaign.data_contract import CampaignTestDataFactory

pytestmark = pytest.mark.unit


async def succeed(campaign):
    return StatusTransitionResult(
        campaign_id=campaign.campaign_id,
        old_status=campaign.status,
        new_status=CampaignStatus.ACTIVE,
        reason="START_DATE_REACHED",
        success=True,
    )


class TestBatchConfig:

    def test_from_lifecycle_config(self):
        config = CampaignLifecycleConfig(batch_size=5, batch_delay_ms=200, item_stagger_ms=20, max_items=50)
        batch = BatchConfig.from_lifecycle_config(config)
        assert batch.batch_size == 5
        assert batch.inter_batch_delay == 0.2
        assert batch.item_stagger == 0.02
        assert batch.max_items == 50

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            BatchRunner(BatchConfig(batch_size=0))


class TestBatchRunner:
    """Batch processing"""

    @pytest.mark.asyncio
    async def test_empty_candidates(self, batch_runner):
        processor = AsyncMock()
        assert await batch_runner.run([], processor, "ACTIVATION") == []
        processor.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_one_result_per_candidate(self, batch_runner):
        """45 candidates in batches of 20 yield 45 results in order"""
        campaigns = CampaignTestDataFactory.make_campaigns(45, status=CampaignStatus.APPROVED)

        results = await batch_runner.run(campaigns, succeed, "ACTIVATION")

        assert len(results) == 45
        assert [r.campaign_id for r in results] == [c.campaign_id for c in campaigns]
        assert all(r.success for r in results)

    @pytest.mark.asyncio
    async def test_cap_defers_excess(self):
        """Only max_items candidates are processed per run"""
        runner = BatchRunner(BatchConfig(batch_size=4, inter_batch_delay=0, item_stagger=0, max_items=10))
        campaigns = CampaignTestDataFactory.make_campaigns(25, status=CampaignStatus.APPROVED)

        results = await runner.run(campaigns, succeed, "ACTIVATION")

        assert len(results) == 10
        assert [r.campaign_id for r in results] == [c.campaign_id for c in campaigns[:10]]

    @pytest.mark.asyncio
    async def test_failure_isolated(self, batch_runner):
        """One raising processor does not affect its neighbours"""
        campaigns = CampaignTestDataFactory.make_campaigns(5, status=CampaignStatus.APPROVED)
        broken = campaigns[2].campaign_id

        async def processor(campaign):
            if campaign.campaign_id == broken:
                raise RuntimeError("boom")
            return await succeed(campaign)

        results = await batch_runner.run(campaigns, processor, "ACTIVATION")

        assert len(results) == 5
        failed = [r for r in results if not r.success]
        assert len(failed) == 1
        assert failed[0].campaign_id == broken
        assert failed[0].reason == "ACTIVATION_PROCESSING_ERROR"
        assert failed[0].error == "boom"
        assert failed[0].new_status == failed[0].old_status == CampaignStatus.APPROVED

    @pytest.mark.asyncio
    async def test_non_result_outcome(self, batch_runner):
        """A processor returning something other than a result counts as a failed task"""
        campaigns = CampaignTestDataFactory.make_campaigns(2, status=CampaignStatus.ACTIVE)

        async def processor(campaign):
            return None

        results = await batch_runner.run(campaigns, processor, "COMPLETION")

        assert [r.reason for r in results] == ["COMPLETION_TASK_FAILED"] * 2
        assert not any(r.success for r in results)

    @pytest.mark.asyncio
    async def test_batches_run_sequentially(self):
        """Items within a batch overlap, batches do not"""
        runner = BatchRunner(BatchConfig(batch_size=3, inter_batch_delay=0, item_stagger=0))
        campaigns = CampaignTestDataFactory.make_campaigns(7, status=CampaignStatus.APPROVED)
        index = {c.campaign_id: i for i, c in enumerate(campaigns)}
        in_flight = set()
        overlaps = []

        async def processor(campaign):
            in_flight.add(index[campaign.campaign_id])
            await asyncio.sleep(0.01)
            overlaps.append(set(in_flight))
            in_flight.discard(index[campaign.campaign_id])
            return await succeed(campaign)

        await runner.run(campaigns, processor, "ACTIVATION")

        for seen in overlaps:
            batches = {i // 3 for i in seen}
            assert len(batches) == 1
        assert max(len(seen) for seen in overlaps) > 1

    @pytest.mark.asyncio
    async def test_inter_batch_delay(self):
        """The pause runs between batches only"""
        runner = BatchRunner(BatchConfig(batch_size=2, inter_batch_delay=0.5, item_stagger=0))
        campaigns = CampaignTestDataFactory.make_campaigns(5, status=CampaignStatus.APPROVED)

        with patch(
            "microservices.campaign_service.batch_runner.asyncio.sleep",
            new_callable=AsyncMock,
        ) as sleep:
            results = await runner.run(campaigns, succeed, "ACTIVATION")

        assert len(results) == 5
        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.5)
