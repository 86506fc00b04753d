"""
Campaign Lifecycle Jobs

The three scheduled status sweeps (activation, completion, expiration)
and the manual "run all" trigger.

Each sweep: find eligible campaigns -> batch them through the transition
executor -> JobExecutionResult. Scheduled entry points run the sweep
through the JobGuard.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, List, Optional

from core.config.lifecycle_config import CampaignLifecycleConfig

from .batch_runner import BatchRunner, CampaignProcessor
from .eligibility import EligibilityFinder
from .events.publishers import CampaignEventPublisher
from .job_guard import JobGuard
from .models import (
    Campaign,
    CampaignJobsExecutionSummary,
    JobExecutionResult,
    JobOutcome,
    JobsSummary,
    JobStatus,
    JobType,
)
from .protocols import JobReporterProtocol, LifecycleJobError
from .transition_executor import TransitionExecutor

logger = logging.getLogger(__name__)


JOB_NAMES: Dict[JobType, str] = {
    JobType.ACTIVATION: "Campaign Activation",
    JobType.COMPLETION: "Campaign Completion",
    JobType.EXPIRATION: "Campaign Expiration",
}


class CampaignLifecycleJobs:
    """Scheduled and manual campaign status sweeps"""

    def __init__(
        self,
        finder: EligibilityFinder,
        executor: TransitionExecutor,
        batch_runner: BatchRunner,
        guard: JobGuard,
        config: Optional[CampaignLifecycleConfig] = None,
        reporter: Optional[JobReporterProtocol] = None,
        event_publisher: Optional[CampaignEventPublisher] = None,
    ):
        self.finder = finder
        self.executor = executor
        self.batch_runner = batch_runner
        self.guard = guard
        self.config = config or CampaignLifecycleConfig()
        self.reporter = reporter
        self.event_publisher = event_publisher

        self._bodies: Dict[JobType, Callable[[], Awaitable[JobExecutionResult]]] = {
            JobType.ACTIVATION: self.activate_approved_campaigns,
            JobType.COMPLETION: self.complete_active_campaigns,
            JobType.EXPIRATION: self.handle_expired_campaigns,
        }

    # ====================
    # Sweeps
    # ====================

    async def activate_approved_campaigns(self) -> JobExecutionResult:
        """APPROVED campaigns whose start date has come -> ACTIVE"""
        return await self._sweep(
            "ACTIVATE_APPROVED_CAMPAIGNS",
            "ACTIVATION",
            self.finder.find_activation_candidates,
            self.executor.activate,
        )

    async def complete_active_campaigns(self) -> JobExecutionResult:
        """ACTIVE campaigns that met their target or ran out of time -> PROCESSING"""
        return await self._sweep(
            "COMPLETE_ACTIVE_CAMPAIGNS",
            "COMPLETION",
            self.finder.find_completion_candidates,
            self.executor.complete,
        )

    async def handle_expired_campaigns(self) -> JobExecutionResult:
        """PENDING / APPROVED campaigns past their end date -> REJECTED / CANCELLED"""
        return await self._sweep(
            "HANDLE_EXPIRED_CAMPAIGNS",
            "EXPIRATION",
            self.finder.find_expiration_candidates,
            self.executor.expire,
        )

    async def _sweep(
        self,
        job_name: str,
        operation: str,
        find: Callable[[], Awaitable[List[Campaign]]],
        processor: CampaignProcessor,
    ) -> JobExecutionResult:
        started = time.monotonic()

        candidates = await find()
        if not candidates:
            logger.info(f"{job_name}: no eligible campaigns")
            return JobExecutionResult.from_results(job_name, [], started)

        results = await self.batch_runner.run(candidates, processor, operation)
        result = JobExecutionResult.from_results(job_name, results, started)

        logger.info(
            f"{job_name}: {result.success_count} success, "
            f"{result.failure_count} failed in {result.execution_time_ms}ms"
        )
        if result.total_processed and self.event_publisher:
            await self.event_publisher.publish_job_completed(result)
        return result

    # ====================
    # Guarded entry points (cron)
    # ====================

    async def run_job(self, job_type: JobType) -> JobOutcome:
        return await self.guard.run_guarded(
            job_type,
            JOB_NAMES[job_type],
            self._bodies[job_type],
            timeout=self.config.job_timeout_seconds,
        )

    async def handle_activation(self) -> JobOutcome:
        return await self.run_job(JobType.ACTIVATION)

    async def handle_completion(self) -> JobOutcome:
        return await self.run_job(JobType.COMPLETION)

    async def handle_expiration(self) -> JobOutcome:
        return await self.run_job(JobType.EXPIRATION)

    # ====================
    # Manual trigger
    # ====================

    async def run_all_jobs(self) -> CampaignJobsExecutionSummary:
        """Run all three sweeps concurrently and summarize, settling every job"""
        started = time.monotonic()
        job_types = [JobType.ACTIVATION, JobType.COMPLETION, JobType.EXPIRATION]

        settled = await asyncio.gather(
            *(self.run_job(job_type) for job_type in job_types),
            return_exceptions=True,
        )

        outcomes: List[JobOutcome] = []
        for job_type, outcome in zip(job_types, settled):
            if isinstance(outcome, JobOutcome):
                outcomes.append(outcome)
            else:
                outcomes.append(JobOutcome(job_type=job_type, status=JobStatus.ERROR, error=str(outcome)))

        completed = [o.result for o in outcomes if o.status == JobStatus.SUCCESS and o.result]
        failed = [o for o in outcomes if o.status == JobStatus.ERROR]

        summary = JobsSummary(
            total_jobs=len(job_types),
            successful_jobs=len(completed),
            failed_jobs=len(failed),
            skipped_jobs=sum(1 for o in outcomes if o.status == JobStatus.SKIPPED),
            total_campaigns_processed=sum(r.total_processed for r in completed),
            total_successes=sum(r.success_count for r in completed),
            total_failures=sum(r.failure_count for r in completed),
            execution_time_ms=int((time.monotonic() - started) * 1000),
        )

        logger.info(
            f"All campaign jobs finished: {summary.successful_jobs}/{summary.total_jobs} jobs succeeded, "
            f"{summary.total_campaigns_processed} campaigns processed in {summary.execution_time_ms}ms"
        )

        if failed:
            logger.error(f"{len(failed)} campaign job(s) failed: {[o.job_type.value for o in failed]}")
            await self._report_failed_jobs(failed, summary)

        return CampaignJobsExecutionSummary(results=outcomes, summary=summary)

    async def _report_failed_jobs(self, failed: List[JobOutcome], summary: JobsSummary) -> None:
        if not self.reporter:
            return
        try:
            await self.reporter.capture_error(
                LifecycleJobError(f"{len(failed)} of {summary.total_jobs} campaign jobs failed"),
                {
                    "operation": "run-all-campaign-jobs",
                    "failed_jobs": {o.job_type.value: o.error for o in failed},
                    "summary": summary.model_dump(mode="json"),
                },
            )
        except Exception as e:
            logger.warning(f"Failed to report campaign job failures: {e}")


__all__ = ["CampaignLifecycleJobs", "JOB_NAMES"]
