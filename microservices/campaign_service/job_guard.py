"""
Lifecycle Job Guard

Wraps a lifecycle job body with:
- per-job reentrancy guard (a second trigger while running is skipped)
- maximum-duration timeout
- result logging and error reporting
- graceful shutdown that waits for running jobs
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Optional

from .models import JobExecutionResult, JobOutcome, JobStatus, JobType
from .protocols import JobReporterProtocol, JobTimeoutError, LifecycleJobError

logger = logging.getLogger(__name__)

JobBody = Callable[[], Awaitable[JobExecutionResult]]


def operation_name(job_name: str) -> str:
    """'Campaign Activation' -> 'campaign-activation'"""
    return "-".join(job_name.lower().split())


class JobGuard:
    """Runs lifecycle jobs one-at-a-time per job type"""

    def __init__(
        self,
        reporter: Optional[JobReporterProtocol] = None,
        failure_report_limit: int = 10,
        failure_log_limit: int = 5,
        shutdown_grace_seconds: float = 30,
    ):
        self.reporter = reporter
        self.failure_report_limit = failure_report_limit
        self.failure_log_limit = failure_log_limit
        self.shutdown_grace_seconds = shutdown_grace_seconds
        self._locks: Dict[JobType, asyncio.Lock] = {}
        self._shutting_down = False

    def _lock(self, job_type: JobType) -> asyncio.Lock:
        if job_type not in self._locks:
            self._locks[job_type] = asyncio.Lock()
        return self._locks[job_type]

    def is_running(self, job_type: JobType) -> bool:
        return self._lock(job_type).locked()

    @property
    def active_jobs(self):
        return [job_type for job_type, lock in self._locks.items() if lock.locked()]

    @property
    def is_shutting_down(self) -> bool:
        return self._shutting_down

    async def run_guarded(
        self,
        job_type: JobType,
        job_name: str,
        body: JobBody,
        timeout: float,
    ) -> JobOutcome:
        """
        Run `body` unless the same job is already running.

        Returns a SKIPPED outcome (and never calls `body`) when the job is
        already running or the guard is shutting down. Job-level failures
        and timeouts are reported and returned as ERROR outcomes.
        """
        if self._shutting_down:
            logger.warning(f"{job_name} not started: service is shutting down")
            return JobOutcome(job_type=job_type, status=JobStatus.SKIPPED, error="Service is shutting down")

        lock = self._lock(job_type)
        if lock.locked():
            logger.info(f"{job_name} is already running, skipping this trigger")
            return JobOutcome(job_type=job_type, status=JobStatus.SKIPPED)

        async with lock:
            started = time.monotonic()
            try:
                result = await asyncio.wait_for(body(), timeout=timeout)
            except asyncio.TimeoutError:
                error = JobTimeoutError(f"{job_name} timed out after {timeout}s", job_name=job_name)
                logger.error(str(error))
                await self._report(error, {"operation": operation_name(job_name)})
                return JobOutcome(job_type=job_type, status=JobStatus.ERROR, error=str(error))
            except Exception as e:
                elapsed_ms = int((time.monotonic() - started) * 1000)
                logger.error(f"{job_name} failed after {elapsed_ms}ms: {e}", exc_info=True)
                await self._report(e, {"operation": operation_name(job_name)})
                return JobOutcome(job_type=job_type, status=JobStatus.ERROR, error=str(e))

        await self._log_result(job_name, result)
        return JobOutcome(job_type=job_type, status=JobStatus.SUCCESS, result=result)

    async def _log_result(self, job_name: str, result: JobExecutionResult) -> None:
        logger.info(
            f"{job_name} completed: {result.success_count}/{result.total_processed} "
            f"campaigns processed in {result.execution_time_ms}ms"
        )
        if not result.failure_count:
            return

        failures = result.failures
        logger.warning(f"{job_name} had {result.failure_count} failures")
        for failure in failures[: self.failure_log_limit]:
            logger.warning(f"  {failure.campaign_id}: {failure.reason} {failure.error or ''}")

        await self._report(
            LifecycleJobError(f"{job_name} had {result.failure_count} failures", job_name=job_name),
            {
                "operation": operation_name(job_name),
                "failure_count": result.failure_count,
                "total_processed": result.total_processed,
                "failures": [
                    f.model_dump(mode="json") for f in failures[: self.failure_report_limit]
                ],
            },
        )

    async def _report(self, error: Exception, context: Dict) -> None:
        if not self.reporter:
            return
        try:
            await self.reporter.capture_error(error, context)
        except Exception as e:
            logger.warning(f"Failed to report {type(error).__name__}: {e}")

    async def shutdown(self) -> None:
        """Refuse new runs and wait for running jobs up to the grace period"""
        self._shutting_down = True
        deadline = time.monotonic() + self.shutdown_grace_seconds

        if self.active_jobs:
            logger.info(f"Waiting for {len(self.active_jobs)} lifecycle job(s) to finish")
        while self.active_jobs and time.monotonic() < deadline:
            await asyncio.sleep(0.1)

        if self.active_jobs:
            logger.warning(
                f"Shutdown grace period elapsed with jobs still running: "
                f"{[j.value for j in self.active_jobs]}"
            )
        else:
            logger.info("All lifecycle jobs finished")


__all__ = ["JobGuard", "JobBody", "operation_name"]
