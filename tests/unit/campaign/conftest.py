"""
Unit Test Fixtures for Campaign Service

Provides the reference clock and lightweight stubs for unit testing.
Uses CampaignTestDataFactory from the data contract.
"""

import pytest
from unittest.mock import AsyncMock

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../../.."))

from tests.contracts.campaign.data_contract import make_reference_clock
from microservices.campaign_service.batch_runner import BatchConfig, BatchRunner
from microservices.campaign_service.eligibility import EligibilityFinder
from microservices.campaign_service.job_guard import JobGuard


@pytest.fixture
def clock():
    """Clock frozen just after the midnight run"""
    return make_reference_clock()


@pytest.fixture
def stub_repository():
    """Repository stub; unit tests never reach persistence"""
    repository = AsyncMock()
    repository.find_many = AsyncMock(return_value=[])
    return repository


@pytest.fixture
def finder(stub_repository, clock):
    """Eligibility finder on the reference clock"""
    return EligibilityFinder(stub_repository, clock=clock, max_items=1000)


@pytest.fixture
def fast_batch_config():
    """Batch config without pacing delays"""
    return BatchConfig(batch_size=20, inter_batch_delay=0, item_stagger=0, max_items=1000)


@pytest.fixture
def batch_runner(fast_batch_config):
    return BatchRunner(fast_batch_config)


@pytest.fixture
def reporter():
    """Error sink capturing reported errors"""
    sink = AsyncMock()
    sink.capture_error = AsyncMock()
    return sink


@pytest.fixture
def guard(reporter):
    return JobGuard(reporter=reporter, failure_report_limit=10, failure_log_limit=5, shutdown_grace_seconds=1)
