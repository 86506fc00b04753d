"""
Campaign Service Protocols

Defines interfaces for dependency injection and testing.
Following the protocol-based architecture pattern.
"""

from typing import Any, Dict, List, Optional, Protocol

from .models import Campaign, CampaignStatus


# ====================
# Repository Protocol
# ====================


class CampaignRepositoryProtocol(Protocol):
    """Protocol for campaign data repository"""

    async def initialize(self) -> None:
        """Initialize repository connection"""
        ...

    async def close(self) -> None:
        """Close repository connection"""
        ...

    async def health_check(self) -> bool:
        """Check repository health"""
        ...

    async def get_campaign(self, campaign_id: str) -> Optional[Campaign]:
        """Get campaign by ID"""
        ...

    async def find_many(
        self,
        status: List[CampaignStatus],
        limit: int,
        order_by: Optional[str] = None,
        offset: int = 0,
    ) -> List[Campaign]:
        """
        Find campaigns in any of the given statuses.

        Results are ordered ascending by `order_by` when given and never
        exceed `limit`. The first `offset` matches are skipped.
        """
        ...

    async def update_campaign(
        self,
        campaign_id: str,
        updates: Dict[str, Any],
        expected_status: Optional[CampaignStatus] = None,
        expected_extension_count: Optional[int] = None,
    ) -> Campaign:
        """
        Update campaign fields.

        When `expected_status` (or `expected_extension_count`) is given the
        write only applies if the stored value still equals it; otherwise
        StaleCampaignStateError is raised.
        Raises CampaignNotFoundError when the campaign does not exist.
        """
        ...


# ====================
# Event / Reporting Protocols
# ====================


class EventBusProtocol(Protocol):
    """Protocol for event bus"""

    async def publish(self, subject: str, data: Dict[str, Any]) -> bool:
        """Publish an event payload on a subject"""
        ...

    async def close(self) -> None:
        """Close event bus connection"""
        ...


class JobReporterProtocol(Protocol):
    """Protocol for the error/alerting sink used by lifecycle jobs"""

    async def capture_error(self, error: Exception, context: Dict[str, Any]) -> None:
        """Capture an error with triage context"""
        ...


# ====================
# Custom Exceptions
# ====================


class CampaignServiceError(Exception):
    """Base exception for campaign service errors"""
    pass


class CampaignNotFoundError(CampaignServiceError):
    """Raised when campaign is not found"""
    pass


class CampaignValidationError(CampaignServiceError):
    """Raised when campaign validation fails"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidStatusTransitionError(CampaignValidationError):
    """Raised when a status transition is not in the transition table"""

    def __init__(self, current_status: CampaignStatus, requested_status: CampaignStatus):
        super().__init__(
            f"Invalid status transition from {current_status.value} to {requested_status.value}",
            field="status",
        )
        self.current_status = current_status
        self.requested_status = requested_status


class CampaignExtensionError(CampaignValidationError):
    """Raised when a fundraising extension is not allowed"""

    def __init__(self, message: str, current_status: Optional[CampaignStatus] = None):
        super().__init__(message, field="extension_days")
        self.current_status = current_status


class StaleCampaignStateError(CampaignServiceError):
    """Raised when a conditional update finds the campaign already changed"""

    def __init__(
        self,
        campaign_id: str,
        expected_status: CampaignStatus,
        actual_status: Optional[CampaignStatus] = None,
        message: Optional[str] = None,
    ):
        actual = actual_status.value if actual_status else "unknown"
        super().__init__(
            message
            or f"Campaign {campaign_id} status changed concurrently: "
            f"expected {expected_status.value}, found {actual}"
        )
        self.campaign_id = campaign_id
        self.expected_status = expected_status
        self.actual_status = actual_status


class CampaignPermissionError(CampaignServiceError):
    """Raised when the caller may not act on the campaign"""
    pass


class LifecycleJobError(CampaignServiceError):
    """Raised or reported when a lifecycle job fails"""

    def __init__(self, message: str, job_name: Optional[str] = None):
        super().__init__(message)
        self.job_name = job_name


class JobTimeoutError(LifecycleJobError):
    """Raised when a lifecycle job exceeds its maximum duration"""
    pass


__all__ = [
    "CampaignRepositoryProtocol",
    "EventBusProtocol",
    "JobReporterProtocol",
    "CampaignServiceError",
    "CampaignNotFoundError",
    "CampaignValidationError",
    "InvalidStatusTransitionError",
    "CampaignExtensionError",
    "StaleCampaignStateError",
    "CampaignPermissionError",
    "LifecycleJobError",
    "JobTimeoutError",
]
