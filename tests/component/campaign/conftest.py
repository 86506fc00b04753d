"""
Component Test Fixtures for Campaign Service

Wires the real lifecycle engine (finder, executor, batch runner, job
guard, jobs, admin service) to an in-memory repository and a mock
event bus, on the reference clock.
"""

import pytest
from types import SimpleNamespace
from unittest.mock import patch
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from core.config.lifecycle_config import CampaignLifecycleConfig
from microservices.campaign_service.batch_runner import BatchConfig, BatchRunner
from microservices.campaign_service.campaign_service import CampaignService
from microservices.campaign_service.eligibility import EligibilityFinder
from microservices.campaign_service.events.publishers import CampaignEventPublisher
from microservices.campaign_service.job_guard import JobGuard
from microservices.campaign_service.lifecycle_jobs import CampaignLifecycleJobs
from microservices.campaign_service.transition_executor import TransitionExecutor
from tests.component.mocks import MockCampaignRepository
from tests.contracts.campaign.data_contract import make_reference_clock


# ====================
# Fixtures
# ====================


@pytest.fixture
def repository():
    return MockCampaignRepository()


@pytest.fixture
def clock():
    return make_reference_clock()


@pytest.fixture
def event_publisher(mock_event_bus):
    return CampaignEventPublisher(mock_event_bus)


@pytest.fixture
def lifecycle_config():
    """Lifecycle settings without pacing delays"""
    return CampaignLifecycleConfig(batch_size=20, batch_delay_ms=0, item_stagger_ms=0, job_timeout_seconds=5)


@pytest.fixture
def executor(repository, clock, event_publisher):
    return TransitionExecutor(repository, clock=clock, event_publisher=event_publisher)


@pytest.fixture
def finder(repository, clock, lifecycle_config):
    return EligibilityFinder(repository, clock=clock, max_items=lifecycle_config.max_items)


@pytest.fixture
def guard(event_publisher):
    return JobGuard(reporter=event_publisher, shutdown_grace_seconds=1)


@pytest.fixture
def lifecycle_jobs(finder, executor, guard, lifecycle_config, event_publisher):
    return CampaignLifecycleJobs(
        finder=finder,
        executor=executor,
        batch_runner=BatchRunner(BatchConfig.from_lifecycle_config(lifecycle_config)),
        guard=guard,
        config=lifecycle_config,
        reporter=event_publisher,
        event_publisher=event_publisher,
    )


@pytest.fixture
def campaign_service(repository, executor, clock, event_publisher):
    return CampaignService(
        repository=repository,
        executor=executor,
        clock=clock,
        event_publisher=event_publisher,
    )


# ====================
# API Client
# ====================


class StubServiceFactory:
    """Stands in for CampaignServiceFactory without real connections"""

    def __init__(self, repository, service, lifecycle_jobs):
        self.repository = repository
        self.service = service
        self.lifecycle_jobs = lifecycle_jobs
        self.nats_client = None
        self.scheduler = SimpleNamespace(running=False)


@pytest.fixture
def service_factory(repository, campaign_service, lifecycle_jobs):
    return StubServiceFactory(repository, campaign_service, lifecycle_jobs)


@pytest.fixture
def client(service_factory):
    """FastAPI test client; the lifespan is not run so no real connections are made"""
    from fastapi.testclient import TestClient

    with patch("microservices.campaign_service.main.factory", service_factory):
        from microservices.campaign_service.main import app

        yield TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def admin_headers():
    return {"X-User-ID": "usr_admin", "X-User-Role": "admin"}
