"""
Root conftest.py - Global fixtures and configuration for all test layers.

Test Layers:
    - component/  : Component tests (mocked repository / event bus, HTTP app)
    - unit/       : Unit tests (pure functions, no I/O)
    - contracts/  : Data contracts and test data factories
"""
import os
import sys

import pytest

# Set testing environment BEFORE any service imports
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("NATS_ENABLED", "false")
os.environ.setdefault("CAMPAIGN_SCHEDULER_ENABLED", "false")

# Add project root to path
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from tests.contracts.campaign.data_contract import CampaignTestDataFactory


@pytest.fixture
def factory() -> CampaignTestDataFactory:
    """Provide campaign test data factory"""
    return CampaignTestDataFactory()
