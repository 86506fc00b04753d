#!/usr/bin/env python3
"""Campaign lifecycle scheduler configuration

Cron schedules, timezone and batch sizing for the status sweeps.
"""
import os
from dataclasses import dataclass

def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class CampaignLifecycleConfig:
    """Campaign lifecycle job settings"""

    # ===========================================
    # Schedules (crontab, evaluated in `timezone`)
    # ===========================================
    timezone: str = "Asia/Ho_Chi_Minh"
    activation_cron: str = "0 0 * * *"
    completion_cron: str = "0 0 * * *"
    expiration_cron: str = "0 0 * * *"
    scheduler_enabled: bool = True

    # ===========================================
    # Batching
    # ===========================================
    batch_size: int = 20
    batch_delay_ms: int = 50
    item_stagger_ms: int = 10
    max_items: int = 1000

    # ===========================================
    # Job guard
    # ===========================================
    job_timeout_seconds: int = 300
    shutdown_grace_seconds: int = 30
    failure_report_limit: int = 10
    failure_log_limit: int = 5

    @property
    def batch_delay_seconds(self) -> float:
        return self.batch_delay_ms / 1000

    @property
    def item_stagger_seconds(self) -> float:
        return self.item_stagger_ms / 1000

    @classmethod
    def from_env(cls) -> 'CampaignLifecycleConfig':
        """Load lifecycle config from environment"""
        return cls(
            timezone=os.getenv("CAMPAIGN_JOB_TIMEZONE", "Asia/Ho_Chi_Minh"),
            activation_cron=os.getenv("CAMPAIGN_ACTIVATION_CRON", "0 0 * * *"),
            completion_cron=os.getenv("CAMPAIGN_COMPLETION_CRON", "0 0 * * *"),
            expiration_cron=os.getenv("CAMPAIGN_EXPIRATION_CRON", "0 0 * * *"),
            scheduler_enabled=_bool(os.getenv("CAMPAIGN_SCHEDULER_ENABLED", "true")),
            batch_size=_int(os.getenv("CAMPAIGN_BATCH_SIZE", "20"), 20),
            batch_delay_ms=_int(os.getenv("CAMPAIGN_BATCH_DELAY_MS", "50"), 50),
            item_stagger_ms=_int(os.getenv("CAMPAIGN_ITEM_STAGGER_MS", "10"), 10),
            max_items=_int(os.getenv("CAMPAIGN_MAX_ITEMS", "1000"), 1000),
            job_timeout_seconds=_int(os.getenv("CAMPAIGN_JOB_TIMEOUT_SECONDS", "300"), 300),
            shutdown_grace_seconds=_int(os.getenv("CAMPAIGN_SHUTDOWN_GRACE_SECONDS", "30"), 30),
            failure_report_limit=_int(os.getenv("CAMPAIGN_FAILURE_REPORT_LIMIT", "10"), 10),
            failure_log_limit=_int(os.getenv("CAMPAIGN_FAILURE_LOG_LIMIT", "5"), 5),
        )
