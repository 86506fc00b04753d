"""
Component Tests for CampaignRepository Class

Tests the SQL issued by the data access layer with a mock database.
"""

from decimal import Decimal

import pytest

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config.infra_config import InfraConfig
from microservices.campaign_service.campaign_repository import CampaignRepository
from microservices.campaign_service.models import CampaignStatus
from microservices.campaign_service.protocols import (
    CampaignNotFoundError,
    StaleCampaignStateError,
)
from tests.contracts.campaign.data_contract import CampaignTestDataFactory

pytestmark = pytest.mark.component


def campaign_row(campaign, **overrides):
    """Row as returned by asyncpg: text status, NUMERIC amounts"""
    row = campaign.model_dump()
    row["status"] = campaign.status.value
    row["previous_status"] = campaign.previous_status.value if campaign.previous_status else None
    row["target_amount"] = Decimal(campaign.target_amount)
    row["received_amount"] = Decimal(campaign.received_amount)
    row.update(overrides)
    return row


@pytest.fixture
def campaign_repository(mock_db):
    return CampaignRepository(config=InfraConfig(), db=mock_db)


class TestRepositoryLifecycle:

    @pytest.mark.asyncio
    async def test_initialize_and_close(self, campaign_repository, mock_db):
        await campaign_repository.initialize()
        assert mock_db.connected
        await campaign_repository.close()
        assert not mock_db.connected

    @pytest.mark.asyncio
    async def test_health_check_error_is_unhealthy(self, campaign_repository, mock_db):
        mock_db.set_error(ConnectionError("refused"))
        assert await campaign_repository.health_check() is False

    @pytest.mark.asyncio
    async def test_health_check_reports_database_state(self, campaign_repository, mock_db):
        assert await campaign_repository.health_check() is True
        mock_db.set_healthy(False)
        assert await campaign_repository.health_check() is False


class TestQueries:

    @pytest.mark.asyncio
    async def test_get_campaign_maps_row(self, campaign_repository, mock_db):
        campaign = CampaignTestDataFactory.make_active_campaign(target_amount=5_000_000, received_amount=120_000)
        mock_db.set_row_response(campaign_row(campaign))

        found = await campaign_repository.get_campaign(campaign.campaign_id)

        assert found.campaign_id == campaign.campaign_id
        assert found.status == CampaignStatus.ACTIVE
        assert found.target_amount == 5_000_000
        assert isinstance(found.received_amount, int)
        _, query, params = mock_db.get_last_query()
        assert "WHERE campaign_id = $1" in query
        mock_db.assert_query_executed("FROM campaign.campaigns", method="query_row")
        assert params == [campaign.campaign_id]

    @pytest.mark.asyncio
    async def test_get_missing_campaign(self, campaign_repository):
        assert await campaign_repository.get_campaign("cmp_missing") is None

    @pytest.mark.asyncio
    async def test_find_many(self, campaign_repository, mock_db):
        campaign = CampaignTestDataFactory.make_expired_pending_campaign()
        mock_db.set_rows_response([campaign_row(campaign)])

        found = await campaign_repository.find_many(
            status=[CampaignStatus.PENDING, CampaignStatus.APPROVED],
            limit=1000,
            order_by="fundraising_end_date",
        )

        assert [c.campaign_id for c in found] == [campaign.campaign_id]
        _, query, params = mock_db.get_last_query()
        assert "status = ANY($1::text[])" in query
        assert "ORDER BY fundraising_end_date ASC, created_at ASC" in query
        assert "LIMIT $2 OFFSET $3" in query
        assert params == [["pending", "approved"], 1000, 0]

    @pytest.mark.asyncio
    async def test_find_many_rejects_unknown_order(self, campaign_repository, mock_db):
        with pytest.raises(ValueError):
            await campaign_repository.find_many([CampaignStatus.ACTIVE], 10, order_by="title; DROP TABLE")
        assert mock_db.queries == []


class TestConditionalUpdate:
    """UPDATE ... WHERE status = expected"""

    @pytest.mark.asyncio
    async def test_update_with_expected_status(self, campaign_repository, mock_db):
        campaign = CampaignTestDataFactory.make_approved_campaign()
        mock_db.set_row_response(campaign_row(campaign, status="active", previous_status="approved"))

        updated = await campaign_repository.update_campaign(
            campaign.campaign_id,
            {"status": CampaignStatus.ACTIVE, "previous_status": CampaignStatus.APPROVED},
            expected_status=CampaignStatus.APPROVED,
        )

        assert updated.status == CampaignStatus.ACTIVE
        assert updated.previous_status == CampaignStatus.APPROVED

        _, query, params = mock_db.get_last_query()
        assert "UPDATE campaign.campaigns" in query
        assert "status = $1" in query
        assert "previous_status = $2" in query
        assert "updated_at = $3" in query
        assert "WHERE campaign_id = $4 AND status = $5" in query
        assert "RETURNING *" in query
        assert params[0] == "active"
        assert params[1] == "approved"
        assert params[3] == campaign.campaign_id
        assert params[4] == "approved"

    @pytest.mark.asyncio
    async def test_update_without_expected_status(self, campaign_repository, mock_db):
        campaign = CampaignTestDataFactory.make_active_campaign()
        mock_db.set_row_response(campaign_row(campaign, extension_count=1))

        await campaign_repository.update_campaign(campaign.campaign_id, {"extension_count": 1})

        _, query, _ = mock_db.get_last_query()
        assert "AND status" not in query

    @pytest.mark.asyncio
    async def test_stale_status(self, campaign_repository, mock_db):
        """No row updated and the campaign exists: someone else moved it"""
        campaign = CampaignTestDataFactory.make_approved_campaign()
        mock_db.queue_row_responses(None, campaign_row(campaign, status="cancelled"))

        with pytest.raises(StaleCampaignStateError) as exc_info:
            await campaign_repository.update_campaign(
                campaign.campaign_id,
                {"status": CampaignStatus.ACTIVE},
                expected_status=CampaignStatus.APPROVED,
            )

        assert exc_info.value.expected_status == CampaignStatus.APPROVED
        assert exc_info.value.actual_status == CampaignStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_update_with_expected_extension_count(self, campaign_repository, mock_db):
        campaign = CampaignTestDataFactory.make_active_campaign(end_offset_days=5)
        mock_db.set_row_response(campaign_row(campaign, extension_count=1))

        await campaign_repository.update_campaign(
            campaign.campaign_id,
            {"extension_count": 1},
            expected_status=CampaignStatus.ACTIVE,
            expected_extension_count=0,
        )

        _, query, params = mock_db.get_last_query()
        assert "WHERE campaign_id = $3 AND status = $4 AND extension_count = $5" in query
        assert params[3:] == ["active", 0]

    @pytest.mark.asyncio
    async def test_extended_concurrently(self, campaign_repository, mock_db):
        """Status unchanged but the count moved: another extension won"""
        campaign = CampaignTestDataFactory.make_active_campaign(end_offset_days=5)
        mock_db.queue_row_responses(None, campaign_row(campaign, extension_count=1))

        with pytest.raises(StaleCampaignStateError, match="extended concurrently"):
            await campaign_repository.update_campaign(
                campaign.campaign_id,
                {"extension_count": 1},
                expected_status=CampaignStatus.ACTIVE,
                expected_extension_count=0,
            )

    @pytest.mark.asyncio
    async def test_missing_campaign(self, campaign_repository, mock_db):
        mock_db.queue_row_responses(None, None)

        with pytest.raises(CampaignNotFoundError):
            await campaign_repository.update_campaign(
                "cmp_missing", {"status": CampaignStatus.ACTIVE}, expected_status=CampaignStatus.APPROVED
            )

    @pytest.mark.asyncio
    async def test_unknown_column_rejected(self, campaign_repository, mock_db):
        with pytest.raises(ValueError):
            await campaign_repository.update_campaign("cmp_1", {"received_amount": 10})
        assert mock_db.queries == []

    @pytest.mark.asyncio
    async def test_database_error_propagates(self, campaign_repository, mock_db):
        mock_db.set_error(ConnectionError("connection reset"))
        with pytest.raises(ConnectionError):
            await campaign_repository.update_campaign("cmp_1", {"status": CampaignStatus.ACTIVE})
