"""
Campaign Service Main Application

FastAPI application for the campaign lifecycle service: health checks,
admin status actions, fundraising extension and the manual lifecycle
job trigger. The cron scheduler starts with the application.
Port: 8251
"""

import logging
import os
import sys
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Depends, Request, status
from fastapi.responses import JSONResponse

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from core.config import get_settings
from core.logger import setup_service_logger

from .models import (
    CampaignJobsExecutionSummary,
    CampaignResponse,
    ErrorResponse,
    ExtendCampaignRequest,
    HealthResponse,
    ReadinessResponse,
    LivenessResponse,
    StatusChangeRequest,
    StatusReasonRequest,
)
from .factory import CampaignServiceFactory
from .routes_registry import SERVICE_METADATA
from .protocols import (
    CampaignNotFoundError,
    CampaignPermissionError,
    CampaignValidationError,
    InvalidStatusTransitionError,
    StaleCampaignStateError,
)

config = get_settings()
logger = setup_service_logger(config.service_name, config.logging)

# Service configuration
SERVICE_NAME = SERVICE_METADATA["service_name"]
SERVICE_PORT = config.service_port
SERVICE_VERSION = SERVICE_METADATA["version"]

# Track startup time for uptime calculation
startup_time = time.time()

# Global factory instance
factory: Optional[CampaignServiceFactory] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    global factory

    logger.info(f"Starting {SERVICE_NAME} on port {SERVICE_PORT}")

    # Initialize factory
    factory = CampaignServiceFactory(config)
    await factory.initialize()

    # Start lifecycle scheduler
    if config.lifecycle.scheduler_enabled:
        try:
            factory.scheduler.start()
        except Exception as e:
            logger.error(f"❌ Failed to start lifecycle scheduler: {e}")
    else:
        logger.info("Lifecycle scheduler disabled by configuration")

    yield

    # Cleanup
    logger.info(f"Shutting down {SERVICE_NAME}")
    await factory.close()


# Create FastAPI application
app = FastAPI(
    title="Campaign Service",
    description="Donation campaign lifecycle service: status transitions, scheduled sweeps and extensions",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)


# ====================
# Exception Handlers
# ====================


def error_response(status_code: int, detail: str, error_code: Optional[str] = None, **context) -> JSONResponse:
    """Render an ErrorResponse body"""
    body = ErrorResponse(detail=detail, error_code=error_code, context=context)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(CampaignNotFoundError)
async def campaign_not_found_handler(request: Request, exc: CampaignNotFoundError):
    return error_response(status.HTTP_404_NOT_FOUND, str(exc), "CAMPAIGN_NOT_FOUND")


@app.exception_handler(StaleCampaignStateError)
async def stale_state_handler(request: Request, exc: StaleCampaignStateError):
    return error_response(status.HTTP_409_CONFLICT, str(exc), "STATUS_CHANGED_CONCURRENTLY")


@app.exception_handler(InvalidStatusTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidStatusTransitionError):
    return error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        "INVALID_STATUS_TRANSITION",
        current_status=exc.current_status.value,
        requested_status=exc.requested_status.value,
    )


@app.exception_handler(CampaignValidationError)
async def validation_error_handler(request: Request, exc: CampaignValidationError):
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc), "VALIDATION_ERROR", field=exc.field
    )


@app.exception_handler(CampaignPermissionError)
async def permission_error_handler(request: Request, exc: CampaignPermissionError):
    return error_response(status.HTTP_403_FORBIDDEN, str(exc), "PERMISSION_DENIED")


# ====================
# Dependencies
# ====================


def get_factory_instance() -> CampaignServiceFactory:
    """Get initialized factory"""
    if not factory:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return factory


def get_service(factory: CampaignServiceFactory = Depends(get_factory_instance)):
    """Get campaign service from factory"""
    return factory.service


def get_lifecycle_jobs(factory: CampaignServiceFactory = Depends(get_factory_instance)):
    """Get lifecycle jobs from factory"""
    return factory.lifecycle_jobs


def get_auth_context(request: Request) -> dict:
    """Extract auth context from request headers"""
    return {
        "user_id": request.headers.get("X-User-ID", "system"),
        "organization_id": request.headers.get("X-Organization-ID"),
        "role": request.headers.get("X-User-Role", "user"),
    }


def require_admin(auth: dict = Depends(get_auth_context)) -> dict:
    """Reject callers without the admin role"""
    if auth["role"] != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required",
        )
    return auth


# ====================
# Health Endpoints
# ====================


@app.get("/api/v1/campaigns/health")
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    dependencies = {}

    if factory:
        try:
            db_healthy = await factory.repository.health_check()
            dependencies["postgres"] = "healthy" if db_healthy else "unhealthy"
        except Exception:
            dependencies["postgres"] = "unhealthy"

        if factory.nats_client:
            dependencies["nats"] = "healthy" if factory.nats_client.is_connected else "unhealthy"
        else:
            dependencies["nats"] = "not_configured"

        try:
            dependencies["scheduler"] = "healthy" if factory.scheduler.running else "not_running"
        except RuntimeError:
            dependencies["scheduler"] = "not_configured"

    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        port=SERVICE_PORT,
        version=SERVICE_VERSION,
        dependencies=dependencies,
    )


@app.get("/health/ready", response_model=ReadinessResponse, tags=["Health"])
async def readiness_check():
    """Readiness check endpoint"""
    checks = {}
    details = {}

    if factory:
        try:
            db_healthy = await factory.repository.health_check()
            checks["database"] = db_healthy
            details["database"] = "Connected" if db_healthy else "Connection failed"
        except Exception as e:
            checks["database"] = False
            details["database"] = str(e)

        if factory.nats_client:
            checks["nats"] = factory.nats_client.is_connected
            details["nats"] = "Connected" if factory.nats_client.is_connected else "Disconnected"
        else:
            checks["nats"] = True  # Optional
            details["nats"] = "Not configured (optional)"
    else:
        checks["factory"] = False
        details["factory"] = "Factory not initialized"

    ready = all(checks.get(k, False) for k in ["database"])

    return ReadinessResponse(
        ready=ready,
        checks=checks,
        details=details,
    )


@app.get("/health/live", response_model=LivenessResponse, tags=["Health"])
async def liveness_check():
    """Liveness check endpoint"""
    return LivenessResponse(
        alive=True,
        uptime_seconds=time.time() - startup_time,
    )


# ====================
# Admin Status Endpoints
# ====================


@app.put(
    "/api/v1/campaigns/{campaign_id}/status",
    response_model=CampaignResponse,
    tags=["Admin"],
)
async def change_campaign_status(
    campaign_id: str,
    request: StatusChangeRequest,
    service=Depends(get_service),
    auth: dict = Depends(require_admin),
):
    """Move a campaign to another status (admin only)"""
    campaign = await service.change_status(
        campaign_id,
        request.status,
        reason=request.reason,
        changed_by=auth["user_id"],
    )
    return CampaignResponse(campaign=campaign, message=f"Campaign status changed to {campaign.status.value}")


@app.post(
    "/api/v1/campaigns/{campaign_id}/approve",
    response_model=CampaignResponse,
    tags=["Admin"],
)
async def approve_campaign(
    campaign_id: str,
    request: Optional[StatusReasonRequest] = None,
    service=Depends(get_service),
    auth: dict = Depends(require_admin),
):
    """Approve a pending campaign; activates it when the start date has come"""
    campaign = await service.approve_campaign(
        campaign_id,
        changed_by=auth["user_id"],
        reason=request.reason if request else None,
    )
    return CampaignResponse(campaign=campaign, message=f"Campaign {campaign.status.value}")


@app.post(
    "/api/v1/campaigns/{campaign_id}/reject",
    response_model=CampaignResponse,
    tags=["Admin"],
)
async def reject_campaign(
    campaign_id: str,
    request: StatusReasonRequest,
    service=Depends(get_service),
    auth: dict = Depends(require_admin),
):
    """Reject a pending campaign (reason required)"""
    campaign = await service.reject_campaign(campaign_id, request.reason, changed_by=auth["user_id"])
    return CampaignResponse(campaign=campaign, message="Campaign rejected")


@app.post(
    "/api/v1/campaigns/{campaign_id}/cancel",
    response_model=CampaignResponse,
    tags=["Admin"],
)
async def cancel_campaign(
    campaign_id: str,
    request: StatusReasonRequest,
    service=Depends(get_service),
    auth: dict = Depends(require_admin),
):
    """Cancel a campaign (reason required)"""
    campaign = await service.cancel_campaign(campaign_id, request.reason, changed_by=auth["user_id"])
    return CampaignResponse(campaign=campaign, message="Campaign cancelled")


@app.post(
    "/api/v1/campaigns/admin/lifecycle-jobs/run",
    response_model=CampaignJobsExecutionSummary,
    tags=["Admin"],
)
async def run_lifecycle_jobs(
    jobs=Depends(get_lifecycle_jobs),
    auth: dict = Depends(require_admin),
):
    """Run activation, completion and expiration sweeps now (admin only)"""
    logger.info(f"Manual lifecycle job run requested by {auth['user_id']}")
    return await jobs.run_all_jobs()


# ====================
# Campaign Endpoints
# ====================


@app.post(
    "/api/v1/campaigns/{campaign_id}/extend",
    response_model=CampaignResponse,
    tags=["Campaigns"],
)
async def extend_campaign(
    campaign_id: str,
    request: ExtendCampaignRequest,
    service=Depends(get_service),
    auth: dict = Depends(get_auth_context),
):
    """Extend the fundraising end date once (campaign creator only)"""
    campaign = await service.extend_campaign(
        campaign_id,
        request.extension_days,
        requested_by=auth["user_id"],
    )
    return CampaignResponse(
        campaign=campaign,
        message=f"Campaign extended until {campaign.fundraising_end_date.isoformat()}",
    )


# ====================
# Main Entry Point
# ====================


def main():
    """Run the service"""
    import uvicorn

    uvicorn.run(
        "microservices.campaign_service.main:app",
        host=config.service_host,
        port=SERVICE_PORT,
        log_level="info",
    )


if __name__ == "__main__":
    main()
