"""
Unit Tests for the NATS Event Bus

Tests subject matching against stream subjects and JSON encoding. No
server connection is made.
"""

import json
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from core.config import InfraConfig
from core.nats_client import DecimalEncoder, NATSEventBus, subject_matches
from microservices.campaign_service.models import CampaignStatus

pytestmark = pytest.mark.unit


class TestSubjectMatching:
    """`*` and `>` wildcards"""

    @pytest.mark.parametrize(
        "pattern, subject, expected",
        [
            ("campaign.status_changed", "campaign.status_changed", True),
            ("campaign.status_changed", "campaign.extended", False),
            ("campaign.>", "campaign.status_changed", True),
            ("campaign.>", "campaign.jobs.completed", True),
            ("campaign.>", "campaign", False),
            ("campaign.*", "campaign.extended", True),
            ("campaign.*", "campaign.jobs.completed", False),
            ("campaign.*.completed", "campaign.jobs.completed", True),
            ("campaign.*.completed", "campaign.jobs.failed", False),
            ("*.error", "campaign.error", True),
            ("campaign.*", "campaign", False),
        ],
    )
    def test_subject_matches(self, pattern, subject, expected):
        assert subject_matches(pattern, subject) is expected


class TestPublishRouting:
    """JetStream for covered subjects, core NATS otherwise"""

    @pytest.fixture
    def bus(self):
        bus = NATSEventBus("campaign_service", config=InfraConfig(nats_enabled=True))
        bus._nc = MagicMock(is_connected=True, publish=AsyncMock())
        bus._js = MagicMock(publish=AsyncMock(return_value=MagicMock(stream="CAMPAIGN_EVENTS", seq=1)))
        return bus

    @pytest.mark.asyncio
    async def test_single_token_wildcard_uses_jetstream(self, bus):
        # Given a stream declared with a `*` subject
        bus._stream_subjects = ["campaign.*"]

        # When
        published = await bus.publish("campaign.extended", {"campaign_id": "cmp_1"})

        # Then
        assert published is True
        bus._js.publish.assert_awaited_once()
        bus._nc.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_uncovered_subject_uses_core_nats(self, bus):
        bus._stream_subjects = ["campaign.*"]

        await bus.publish("campaign.jobs.completed", {"job_name": "ACTIVATE_APPROVED_CAMPAIGNS"})

        bus._nc.publish.assert_awaited_once()
        bus._js.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_connected(self):
        bus = NATSEventBus("campaign_service", config=InfraConfig(nats_enabled=True))
        assert await bus.publish("campaign.extended", {}) is False


class TestDecimalEncoder:

    def test_encodes_domain_types(self):
        payload = {"amount": Decimal("100"), "day": date(2025, 6, 15), "status": CampaignStatus.ACTIVE}
        assert json.loads(json.dumps(payload, cls=DecimalEncoder)) == {
            "amount": "100",
            "day": "2025-06-15",
            "status": "active",
        }
