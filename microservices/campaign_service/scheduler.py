"""
Campaign Lifecycle Scheduler

Registers the lifecycle sweeps as daily cron jobs on APScheduler,
evaluated in the configured timezone.
"""

import logging
from typing import Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from core.config.lifecycle_config import CampaignLifecycleConfig

from .lifecycle_jobs import JOB_NAMES, CampaignLifecycleJobs
from .models import JobType

logger = logging.getLogger(__name__)


JOB_IDS: Dict[JobType, str] = {
    JobType.ACTIVATION: "campaign_activation_job",
    JobType.COMPLETION: "campaign_completion_job",
    JobType.EXPIRATION: "campaign_expiration_job",
}


class LifecycleScheduler:
    """Cron wiring for CampaignLifecycleJobs"""

    def __init__(
        self,
        jobs: CampaignLifecycleJobs,
        config: Optional[CampaignLifecycleConfig] = None,
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self.jobs = jobs
        self.config = config or CampaignLifecycleConfig()
        self.scheduler = scheduler or AsyncIOScheduler(timezone=self.config.timezone)
        self._registered = False

    def cron_expressions(self) -> Dict[JobType, str]:
        return {
            JobType.ACTIVATION: self.config.activation_cron,
            JobType.COMPLETION: self.config.completion_cron,
            JobType.EXPIRATION: self.config.expiration_cron,
        }

    def register_jobs(self) -> None:
        """Add the three sweeps to the scheduler (idempotent)"""
        if self._registered:
            return

        handlers = {
            JobType.ACTIVATION: self.jobs.handle_activation,
            JobType.COMPLETION: self.jobs.handle_completion,
            JobType.EXPIRATION: self.jobs.handle_expiration,
        }

        for job_type, expression in self.cron_expressions().items():
            self.scheduler.add_job(
                handlers[job_type],
                CronTrigger.from_crontab(expression, timezone=self.config.timezone),
                id=JOB_IDS[job_type],
                name=JOB_NAMES[job_type],
                replace_existing=True,
                max_instances=1,
                coalesce=True,
                misfire_grace_time=3600,
            )
            logger.info(f"Scheduled {JOB_NAMES[job_type]}: '{expression}' ({self.config.timezone})")

        self._registered = True

    def start(self) -> None:
        if self.scheduler.running:
            logger.warning("Lifecycle scheduler already running")
            return
        if not self._registered:
            self.register_jobs()
        self.scheduler.start()
        logger.info("✅ Campaign lifecycle scheduler started")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Campaign lifecycle scheduler stopped")

    @property
    def running(self) -> bool:
        return self.scheduler.running


__all__ = ["LifecycleScheduler", "JOB_IDS"]
