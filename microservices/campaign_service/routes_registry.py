"""
Campaign Service Routes Registry

Defines service metadata and routes exposed by the service.
"""

SERVICE_METADATA = {
    "service_name": "campaign_service",
    "version": "1.0.0",
    "tags": ['campaign', 'donation', 'lifecycle', 'v1'],
    "capabilities": ['campaign_status_lifecycle', 'campaign_extension', 'lifecycle_jobs'],
}

ROUTES = [
    {"path": "/health", "methods": ["GET"], "description": "Health check"},
    {"path": "/health/ready", "methods": ["GET"], "description": "Readiness check"},
    {"path": "/health/live", "methods": ["GET"], "description": "Liveness check"},
    {"path": "/api/v1/campaigns/health", "methods": ["GET"], "description": "Service health check (API v1)"},
    {"path": "/api/v1/campaigns/{campaign_id}/status", "methods": ["PUT"], "description": "Change campaign status (admin)"},
    {"path": "/api/v1/campaigns/{campaign_id}/approve", "methods": ["POST"], "description": "Approve campaign (admin)"},
    {"path": "/api/v1/campaigns/{campaign_id}/reject", "methods": ["POST"], "description": "Reject campaign (admin)"},
    {"path": "/api/v1/campaigns/{campaign_id}/cancel", "methods": ["POST"], "description": "Cancel campaign (admin)"},
    {"path": "/api/v1/campaigns/{campaign_id}/extend", "methods": ["POST"], "description": "Extend fundraising window"},
    {"path": "/api/v1/campaigns/admin/lifecycle-jobs/run", "methods": ["POST"], "description": "Run lifecycle jobs now (admin)"},
]


def get_route_metadata():
    """Get route metadata for service registration"""
    return {
        "route_count": str(len(ROUTES)),
        "routes": ",".join([r["path"] for r in ROUTES]),
        "api_version": "v1",
        "base_path": "/api/v1/campaigns",
    }


__all__ = ["SERVICE_METADATA", "ROUTES", "get_route_metadata"]
