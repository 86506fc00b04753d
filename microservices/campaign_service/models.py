"""
Campaign Service Data Models

Canonical data structures for the campaign lifecycle service:
campaign view, transition/job results, request and health models.
"""

import time
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# ENUMS
# =============================================================================

class CampaignStatus(str, Enum):
    """Campaign lifecycle status"""
    PENDING = "pending"
    APPROVED = "approved"
    ACTIVE = "active"
    PROCESSING = "processing"  # Fundraising closed, awaiting disbursement
    COMPLETED = "completed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class TransitionReason(str, Enum):
    """Machine-readable cause recorded with a status transition"""
    # Scheduler transitions
    START_DATE_REACHED = "START_DATE_REACHED"
    TARGET_AMOUNT_REACHED = "TARGET_AMOUNT_REACHED"
    END_DATE_REACHED = "END_DATE_REACHED"
    PENDING_EXPIRED = "PENDING_EXPIRED"
    APPROVED_EXPIRED = "APPROVED_EXPIRED"

    # Admin transitions
    ADMIN_APPROVED = "ADMIN_APPROVED"
    ADMIN_REJECTED = "ADMIN_REJECTED"
    ADMIN_CANCELLED = "ADMIN_CANCELLED"
    ADMIN_STATUS_CHANGE = "ADMIN_STATUS_CHANGE"

    # Failures
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    STATUS_CHANGED_CONCURRENTLY = "STATUS_CHANGED_CONCURRENTLY"
    INVALID_STATUS_FOR_EXPIRATION = "INVALID_STATUS_FOR_EXPIRATION"
    ACTIVATION_FAILED = "ACTIVATION_FAILED"
    COMPLETION_FAILED = "COMPLETION_FAILED"
    EXPIRATION_HANDLING_FAILED = "EXPIRATION_HANDLING_FAILED"
    TRANSITION_FAILED = "TRANSITION_FAILED"


class JobType(str, Enum):
    """Scheduled lifecycle sweep"""
    ACTIVATION = "activation"
    COMPLETION = "completion"
    EXPIRATION = "expiration"


class JobStatus(str, Enum):
    """Outcome of one guarded job invocation"""
    SUCCESS = "success"
    ERROR = "error"
    SKIPPED = "skipped"


# =============================================================================
# CORE MODELS
# =============================================================================

class Campaign(BaseModel):
    """Fundraising campaign as seen by the lifecycle engine"""
    campaign_id: str = Field(..., description="Campaign ID")
    title: str = Field(..., min_length=1, max_length=255)
    created_by: str = Field(..., description="Creator user ID")
    organization_id: Optional[str] = None
    status: CampaignStatus = CampaignStatus.PENDING

    fundraising_start_date: date
    fundraising_end_date: date

    # Whole currency units, never floating point
    target_amount: int = Field(..., ge=0)
    received_amount: int = Field(0, ge=0)

    extension_count: int = Field(0, ge=0, le=1)
    extension_days: int = Field(0, ge=0)

    status_reason: Optional[str] = None
    previous_status: Optional[CampaignStatus] = None
    changed_status_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("target_amount", "received_amount", mode="before")
    @classmethod
    def reject_fractional_amounts(cls, v):
        if isinstance(v, float):
            raise ValueError("amounts must be integers, not floating point")
        return v

    @model_validator(mode="after")
    def check_fundraising_window(self):
        if self.fundraising_end_date < self.fundraising_start_date:
            raise ValueError("fundraising_end_date must not be before fundraising_start_date")
        return self

    @property
    def target_reached(self) -> bool:
        return self.received_amount >= self.target_amount


class StatusTransitionResult(BaseModel):
    """Outcome of one transition attempt on one campaign"""
    campaign_id: str
    old_status: CampaignStatus
    new_status: CampaignStatus
    reason: str
    success: bool
    error: Optional[str] = None


class JobExecutionResult(BaseModel):
    """Summary of one lifecycle sweep"""
    job_name: str
    total_processed: int = 0
    success_count: int = 0
    failure_count: int = 0
    results: List[StatusTransitionResult] = Field(default_factory=list)
    execution_time_ms: int = 0
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def check_counts(self):
        if not (
            self.success_count + self.failure_count
            == self.total_processed
            == len(self.results)
        ):
            raise ValueError(
                f"inconsistent counts: {self.success_count} + {self.failure_count} "
                f"!= {self.total_processed} != {len(self.results)}"
            )
        return self

    @property
    def failures(self) -> List[StatusTransitionResult]:
        return [r for r in self.results if not r.success]

    @classmethod
    def from_results(
        cls,
        job_name: str,
        results: List[StatusTransitionResult],
        started: float,
    ) -> "JobExecutionResult":
        """Build a result from item results; `started` is a time.monotonic() reading"""
        success_count = sum(1 for r in results if r.success)
        return cls(
            job_name=job_name,
            total_processed=len(results),
            success_count=success_count,
            failure_count=len(results) - success_count,
            results=list(results),
            execution_time_ms=int((time.monotonic() - started) * 1000),
        )


class JobOutcome(BaseModel):
    """Result of a guarded job invocation"""
    job_type: JobType
    status: JobStatus
    result: Optional[JobExecutionResult] = None
    error: Optional[str] = None


class JobsSummary(BaseModel):
    """Aggregate counts for a manual run of all lifecycle jobs"""
    total_jobs: int
    successful_jobs: int
    failed_jobs: int
    skipped_jobs: int = 0
    total_campaigns_processed: int
    total_successes: int
    total_failures: int
    execution_time_ms: int
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CampaignJobsExecutionSummary(BaseModel):
    """Manual trigger response: per-job outcomes plus aggregate summary"""
    results: List[JobOutcome]
    summary: JobsSummary

    def outcome(self, job_type: JobType) -> Optional[JobOutcome]:
        for item in self.results:
            if item.job_type == job_type:
                return item
        return None


# =============================================================================
# REQUEST / RESPONSE MODELS
# =============================================================================

class StatusChangeRequest(BaseModel):
    """Admin request to move a campaign to another status"""
    status: CampaignStatus
    reason: Optional[str] = Field(None, max_length=500)


class StatusReasonRequest(BaseModel):
    """Admin request carrying an optional free-text reason"""
    reason: Optional[str] = Field(None, max_length=500)


class ExtendCampaignRequest(BaseModel):
    """Creator request to extend the fundraising window once"""
    extension_days: int = Field(..., ge=1, le=30)


class CampaignResponse(BaseModel):
    """Single campaign response"""
    campaign: Campaign
    message: Optional[str] = None


# =============================================================================
# SERVICE MODELS
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    service: str
    port: int
    version: str
    dependencies: Dict[str, str] = Field(default_factory=dict)


class ReadinessResponse(BaseModel):
    """Readiness check response"""
    ready: bool
    checks: Dict[str, bool] = Field(default_factory=dict)
    details: Dict[str, str] = Field(default_factory=dict)


class LivenessResponse(BaseModel):
    """Liveness check response"""
    alive: bool
    uptime_seconds: float


class ErrorResponse(BaseModel):
    """Standard error response"""
    detail: str
    error_code: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)


__all__ = [
    # Enums
    "CampaignStatus",
    "TransitionReason",
    "JobType",
    "JobStatus",
    # Core Models
    "Campaign",
    "StatusTransitionResult",
    "JobExecutionResult",
    "JobOutcome",
    "JobsSummary",
    "CampaignJobsExecutionSummary",
    # Request/Response
    "StatusChangeRequest",
    "StatusReasonRequest",
    "ExtendCampaignRequest",
    "CampaignResponse",
    # Service Models
    "HealthResponse",
    "ReadinessResponse",
    "LivenessResponse",
    "ErrorResponse",
]
