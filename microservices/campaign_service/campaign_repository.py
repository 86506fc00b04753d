"""
Campaign Service Data Repository

Data access layer - PostgreSQL (Async)
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.config.infra_config import InfraConfig
from core.postgres_client import AsyncPostgresClient

from .models import Campaign, CampaignStatus
from .protocols import CampaignNotFoundError, StaleCampaignStateError

logger = logging.getLogger(__name__)


class CampaignRepository:
    """Campaign service data repository - PostgreSQL (Async)"""

    # Columns find_many may sort by
    ORDERABLE_COLUMNS = {"fundraising_start_date", "fundraising_end_date", "created_at"}

    # Columns update_campaign may write
    UPDATABLE_COLUMNS = {
        "status",
        "previous_status",
        "status_reason",
        "changed_status_at",
        "completed_at",
        "cancelled_at",
        "fundraising_end_date",
        "extension_count",
        "extension_days",
    }

    def __init__(
        self,
        config: Optional[InfraConfig] = None,
        db: Optional[AsyncPostgresClient] = None,
    ):
        self.config = config or InfraConfig.from_env()
        self.db = db or AsyncPostgresClient(self.config)
        self.schema = "campaign"
        self.campaigns_table = "campaigns"

    async def initialize(self):
        """Initialize database connection"""
        await self.db.connect()
        logger.info("Campaign repository initialized with PostgreSQL")

    async def close(self):
        """Close database connection"""
        await self.db.close()
        logger.info("Campaign repository database connection closed")

    async def health_check(self) -> bool:
        """Check repository health"""
        try:
            return await self.db.health_check()
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False

    # ====================
    # Queries
    # ====================

    async def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        """Get campaign by ID"""
        try:
            query = f'''
                SELECT * FROM {self.schema}.{self.campaigns_table}
                WHERE campaign_id = $1
            '''
            row = await self.db.query_row(query, params=[campaign_id])
            return self._row_to_campaign(row) if row else None

        except Exception as e:
            logger.error(f"Error getting campaign {campaign_id}: {e}")
            raise

    async def find_many(
        self,
        status: List[CampaignStatus],
        limit: int,
        order_by: Optional[str] = None,
        offset: int = 0,
    ) -> List[Campaign]:
        """Find campaigns in any of the given statuses, oldest deadline first"""
        if order_by and order_by not in self.ORDERABLE_COLUMNS:
            raise ValueError(f"Cannot order campaigns by {order_by}")

        try:
            order_clause = f"{order_by} ASC, created_at ASC" if order_by else "created_at ASC"
            query = f'''
                SELECT * FROM {self.schema}.{self.campaigns_table}
                WHERE status = ANY($1::text[])
                ORDER BY {order_clause}
                LIMIT $2 OFFSET $3
            '''
            rows = await self.db.query(query, params=[[s.value for s in status], limit, offset])
            return [self._row_to_campaign(row) for row in rows]

        except Exception as e:
            logger.error(f"Error finding campaigns with status {[s.value for s in status]}: {e}")
            raise

    # ====================
    # Updates
    # ====================

    async def update_campaign(
        self,
        campaign_id: str,
        updates: Dict[str, Any],
        expected_status: Optional[CampaignStatus] = None,
        expected_extension_count: Optional[int] = None,
    ) -> Campaign:
        """
        Update campaign fields.

        With `expected_status` the UPDATE carries `AND status = $n`, so a
        campaign moved by someone else in the meantime is left untouched
        and StaleCampaignStateError is raised. `expected_extension_count`
        adds `AND extension_count = $n` the same way.
        """
        unknown = set(updates) - self.UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Cannot update campaign columns: {sorted(unknown)}")

        set_clauses = []
        params: List[Any] = []

        for key, value in updates.items():
            params.append(value.value if isinstance(value, CampaignStatus) else value)
            set_clauses.append(f"{key} = ${len(params)}")

        params.append(datetime.now(timezone.utc))
        set_clauses.append(f"updated_at = ${len(params)}")

        params.append(campaign_id)
        where = f"campaign_id = ${len(params)}"

        if expected_status is not None:
            params.append(expected_status.value)
            where += f" AND status = ${len(params)}"

        if expected_extension_count is not None:
            params.append(expected_extension_count)
            where += f" AND extension_count = ${len(params)}"

        query = f'''
            UPDATE {self.schema}.{self.campaigns_table}
            SET {", ".join(set_clauses)}
            WHERE {where}
            RETURNING *
        '''

        try:
            row = await self.db.query_row(query, params=params)
        except Exception as e:
            logger.error(f"Error updating campaign {campaign_id}: {e}")
            raise

        if row:
            return self._row_to_campaign(row)

        current = await self.get_campaign(campaign_id)
        if current is None:
            raise CampaignNotFoundError(f"Campaign not found: {campaign_id}")
        if expected_status is not None and current.status != expected_status:
            raise StaleCampaignStateError(campaign_id, expected_status, current.status)
        if expected_extension_count is not None and current.extension_count != expected_extension_count:
            raise StaleCampaignStateError(
                campaign_id,
                current.status,
                current.status,
                message=f"Campaign {campaign_id} was extended concurrently",
            )
        if expected_status is not None or expected_extension_count is not None:
            raise StaleCampaignStateError(campaign_id, expected_status or current.status, current.status)
        raise CampaignNotFoundError(f"Campaign not found: {campaign_id}")

    # ====================
    # Row mapping
    # ====================

    def _row_to_campaign(self, row: Dict[str, Any]) -> Campaign:
        """Convert database row to Campaign model"""
        previous_status = row.get("previous_status")

        # Use model_construct to skip validation of stored rows
        return Campaign.model_construct(
            campaign_id=row.get("campaign_id"),
            title=row.get("title"),
            created_by=row.get("created_by"),
            organization_id=row.get("organization_id"),
            status=CampaignStatus(row.get("status")),
            fundraising_start_date=row.get("fundraising_start_date"),
            fundraising_end_date=row.get("fundraising_end_date"),
            # NUMERIC columns arrive as Decimal; amounts are whole units
            target_amount=int(row.get("target_amount") or 0),
            received_amount=int(row.get("received_amount") or 0),
            extension_count=row.get("extension_count") or 0,
            extension_days=row.get("extension_days") or 0,
            status_reason=row.get("status_reason"),
            previous_status=CampaignStatus(previous_status) if previous_status else None,
            changed_status_at=row.get("changed_status_at"),
            completed_at=row.get("completed_at"),
            cancelled_at=row.get("cancelled_at"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


__all__ = ["CampaignRepository"]
