"""
Campaign Service Factory

Factory for creating campaign service instances with proper dependency injection.
"""

import logging
from typing import Optional

from core.config import CampaignConfig, get_settings
from core.nats_client import NATSEventBus

from .batch_runner import BatchConfig, BatchRunner
from .campaign_repository import CampaignRepository
from .campaign_service import CampaignService
from .clock import LifecycleClock
from .eligibility import EligibilityFinder
from .events.models import CampaignStreamConfig
from .events.publishers import CampaignEventPublisher
from .job_guard import JobGuard
from .lifecycle_jobs import CampaignLifecycleJobs
from .scheduler import LifecycleScheduler
from .transition_executor import TransitionExecutor

logger = logging.getLogger(__name__)


class CampaignServiceFactory:
    """Factory for creating campaign service components"""

    def __init__(self, config: Optional[CampaignConfig] = None):
        self.config = config or get_settings()
        self._repository: Optional[CampaignRepository] = None
        self._service: Optional[CampaignService] = None
        self._nats_client: Optional[NATSEventBus] = None
        self._event_publisher: Optional[CampaignEventPublisher] = None
        self._guard: Optional[JobGuard] = None
        self._lifecycle_jobs: Optional[CampaignLifecycleJobs] = None
        self._scheduler: Optional[LifecycleScheduler] = None

    async def initialize(self) -> None:
        """Initialize all components"""
        logger.info("Initializing Campaign Service components...")
        lifecycle = self.config.lifecycle

        # Initialize repository
        self._repository = CampaignRepository(self.config.infrastructure)
        await self._repository.initialize()

        # Initialize NATS client
        if self.config.infrastructure.nats_enabled:
            try:
                self._nats_client = NATSEventBus(
                    service_name=self.config.service_name,
                    config=self.config.infrastructure,
                )
                await self._nats_client.connect()
                await self._nats_client.ensure_stream(
                    CampaignStreamConfig.STREAM_NAME,
                    CampaignStreamConfig.SUBJECTS,
                    max_msgs=CampaignStreamConfig.MAX_MESSAGES,
                )
                logger.info("NATS client connected")
            except Exception as e:
                logger.warning(f"NATS client initialization failed: {e}")
                self._nats_client = None

        # Publisher logs captured errors even without NATS
        self._event_publisher = CampaignEventPublisher(self._nats_client)

        # Lifecycle engine
        clock = LifecycleClock(lifecycle.timezone)
        executor = TransitionExecutor(
            self._repository, clock=clock, event_publisher=self._event_publisher
        )
        self._guard = JobGuard(
            reporter=self._event_publisher,
            failure_report_limit=lifecycle.failure_report_limit,
            failure_log_limit=lifecycle.failure_log_limit,
            shutdown_grace_seconds=lifecycle.shutdown_grace_seconds,
        )
        self._lifecycle_jobs = CampaignLifecycleJobs(
            finder=EligibilityFinder(self._repository, clock=clock, max_items=lifecycle.max_items),
            executor=executor,
            batch_runner=BatchRunner(BatchConfig.from_lifecycle_config(lifecycle)),
            guard=self._guard,
            config=lifecycle,
            reporter=self._event_publisher,
            event_publisher=self._event_publisher,
        )
        self._scheduler = LifecycleScheduler(self._lifecycle_jobs, lifecycle)

        # Initialize main service
        self._service = CampaignService(
            repository=self._repository,
            executor=executor,
            clock=clock,
            event_publisher=self._event_publisher,
        )

        logger.info("Campaign Service components initialized")

    async def close(self) -> None:
        """Close all components"""
        logger.info("Closing Campaign Service components...")

        if self._scheduler:
            self._scheduler.shutdown()

        if self._guard:
            await self._guard.shutdown()

        if self._nats_client:
            await self._nats_client.close()

        if self._repository:
            await self._repository.close()

        logger.info("Campaign Service components closed")

    @property
    def repository(self) -> CampaignRepository:
        """Get campaign repository"""
        if not self._repository:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._repository

    @property
    def service(self) -> CampaignService:
        """Get campaign service"""
        if not self._service:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._service

    @property
    def lifecycle_jobs(self) -> CampaignLifecycleJobs:
        """Get lifecycle jobs"""
        if not self._lifecycle_jobs:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._lifecycle_jobs

    @property
    def scheduler(self) -> LifecycleScheduler:
        """Get lifecycle scheduler"""
        if not self._scheduler:
            raise RuntimeError("Factory not initialized. Call initialize() first.")
        return self._scheduler

    @property
    def nats_client(self) -> Optional[NATSEventBus]:
        """Get NATS client"""
        return self._nats_client

    @property
    def event_publisher(self) -> Optional[CampaignEventPublisher]:
        """Get event publisher"""
        return self._event_publisher


# Global factory instance
_factory: Optional[CampaignServiceFactory] = None


async def get_factory() -> CampaignServiceFactory:
    """Get or create factory instance"""
    global _factory
    if _factory is None:
        _factory = CampaignServiceFactory()
        await _factory.initialize()
    return _factory


async def close_factory() -> None:
    """Close factory instance"""
    global _factory
    if _factory:
        await _factory.close()
        _factory = None


__all__ = [
    "CampaignServiceFactory",
    "get_factory",
    "close_factory",
]
