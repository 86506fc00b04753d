"""
PostgreSQL Client

Async PostgreSQL client on an asyncpg connection pool.
Provides the query/query_row access pattern used by repositories.

Usage:
    from core.postgres_client import AsyncPostgresClient

    db = AsyncPostgresClient(config.infrastructure)
    await db.connect()
    rows = await db.query("SELECT * FROM campaign.campaigns WHERE status = $1", ["active"])
"""

import logging
from typing import Any, Dict, List, Optional

import asyncpg

from core.config.infra_config import InfraConfig

logger = logging.getLogger(__name__)


class AsyncPostgresClient:
    """
    PostgreSQL client backed by an asyncpg pool.

    Rows are returned as plain dicts so repositories stay driver-agnostic.
    """

    def __init__(self, config: Optional[InfraConfig] = None, database: Optional[str] = None):
        """
        Initialize PostgreSQL client.

        Args:
            config: InfraConfig with connection settings (defaults to environment)
            database: Optional database name override
        """
        self.config = config or InfraConfig.from_env()
        self.database = database or self.config.postgres_db
        self._pool: Optional[asyncpg.Pool] = None

    async def connect(self) -> None:
        """Create the connection pool"""
        if self._pool:
            return
        self._pool = await asyncpg.create_pool(
            host=self.config.postgres_host,
            port=self.config.postgres_port,
            user=self.config.postgres_user,
            password=self.config.postgres_password,
            database=self.database,
            min_size=self.config.postgres_min_pool,
            max_size=self.config.postgres_max_pool,
            timeout=self.config.postgres_timeout,
        )
        logger.info(
            f"PostgreSQL pool created: {self.config.postgres_host}:"
            f"{self.config.postgres_port}/{self.database}"
        )

    @property
    def pool(self) -> asyncpg.Pool:
        if not self._pool:
            raise RuntimeError("PostgreSQL client not connected. Call connect() first.")
        return self._pool

    async def health_check(self) -> bool:
        """Check database health"""
        try:
            async with self.pool.acquire() as conn:
                return await conn.fetchval("SELECT 1") == 1
        except Exception as e:
            logger.error(f"PostgreSQL health check failed: {e}")
            return False

    async def query(self, sql: str, params: Optional[List[Any]] = None) -> List[Dict[str, Any]]:
        """Execute query and return results"""
        async with self.pool.acquire() as conn:
            rows = await conn.fetch(sql, *(params or []))
        return [dict(row) for row in rows]

    async def query_row(self, sql: str, params: Optional[List[Any]] = None) -> Optional[Dict[str, Any]]:
        """Execute query and return single row"""
        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(sql, *(params or []))
        return dict(row) if row else None

    async def close(self):
        """Close connection pool"""
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("PostgreSQL pool closed")


__all__ = ["AsyncPostgresClient"]
